# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from zipd_lib import __version__, cli
from zipd_lib.core.config import CFG


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_cli_without_command_prints_help():
    result = CliRunner().invoke(cli, [])

    assert result.exit_code == 0
    for command in ("submit", "sweep", "serve"):
        assert command in result.stdout


def test_cli_short_help_option():
    result = CliRunner().invoke(cli, ["-h"])

    assert result.exit_code == 0
    assert "Usage" in result.stdout


def test_serve_starts_sweeper_and_server_and_cleans_up(tmp_path, monkeypatch):
    monkeypatch.setattr(CFG.paths, "output_root", str(tmp_path / "output"))
    server = MagicMock()
    server.serve_forever.side_effect = KeyboardInterrupt
    sweeper = MagicMock()
    orchestrator = MagicMock()

    with (
        patch("zipd_lib.serve.cli.ZipdServer", return_value=server) as mock_server,
        patch("zipd_lib.serve.cli.PeriodicSweeper", return_value=sweeper) as mock_sweeper,
        patch("zipd_lib.serve.cli.Orchestrator.fromConfig", return_value=orchestrator),
    ):
        result = CliRunner().invoke(cli, ["serve", "--host", "127.0.0.1", "--port", "9999"])

    assert result.exit_code == 0
    assert (tmp_path / "output").is_dir()
    mock_sweeper.assert_called_once_with(
        tmp_path / "output", CFG.retention.max_age, CFG.retention.interval
    )
    assert mock_server.call_args.args[0] == ("127.0.0.1", 9999)
    sweeper.start.assert_called_once()
    sweeper.stop.assert_called_once()
    server.server_close.assert_called_once()
    orchestrator.shutdown.assert_called_once_with(wait=True)


def test_serve_bind_failure(tmp_path, monkeypatch):
    monkeypatch.setattr(CFG.paths, "output_root", str(tmp_path / "output"))

    with (
        patch("zipd_lib.serve.cli.ZipdServer", side_effect=OSError("Address already in use")),
        patch("zipd_lib.serve.cli.Orchestrator.fromConfig", return_value=MagicMock()),
    ):
        result = CliRunner().invoke(cli, ["serve", "--port", "9999"])

    assert result.exit_code == CFG.exit_codes.unexpected_error

# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import json
import uuid
import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from zipd_lib.core.config import CFG
from zipd_lib.submit.cli import submit
from zipd_lib.submit.orchestrator import Orchestrator


@pytest.fixture
def configured_dirs(tmp_path, monkeypatch) -> dict[str, Path]:
    storage = tmp_path / "storage"
    storage.mkdir()
    (storage / "a").write_bytes(b"alpha")
    (storage / "b").write_bytes(b"bravo")
    temp = tmp_path / "tmp"
    temp.mkdir()
    output = tmp_path / "output"

    monkeypatch.setattr(CFG.paths, "storage_root", str(storage))
    monkeypatch.setattr(CFG.paths, "output_root", str(output))
    monkeypatch.setattr(CFG.paths, "temp_dir", str(temp))

    return {"storage": storage, "temp": temp, "output": output}


def _published_id(output: str) -> str:
    job_id = output.strip().splitlines()[-1]
    uuid.UUID(job_id)
    return job_id


def test_submit_cli_members_from_options(configured_dirs):
    result = CliRunner().invoke(
        submit, ["-m", "a", "txt", "Alpha", "--member", "b", "md", "Bravo"]
    )

    assert result.exit_code == 0
    job_id = _published_id(result.stdout)
    with zipfile.ZipFile(configured_dirs["output"] / f"{job_id}.zip") as archive:
        assert archive.namelist() == ["Alpha.txt", "Bravo.md"]
        assert archive.read("Bravo.md") == b"bravo"

    assert list(configured_dirs["temp"].iterdir()) == []


def test_submit_cli_members_from_request_file(configured_dirs, tmp_path):
    request = tmp_path / "request.json"
    request.write_text(
        json.dumps(
            {
                "filenames": [
                    {"name": "b", "ext": "txt", "alias": "second"},
                    {"name": "missing", "ext": "txt", "alias": "ghost"},
                    {"name": "a", "ext": "txt", "alias": "first"},
                ]
            }
        )
    )

    result = CliRunner().invoke(submit, ["--request", str(request)])

    assert result.exit_code == 0
    job_id = _published_id(result.stdout)
    with zipfile.ZipFile(configured_dirs["output"] / f"{job_id}.zip") as archive:
        assert archive.namelist() == ["second.txt", "first.txt"]


def test_submit_cli_without_members_publishes_empty_archive(configured_dirs):
    result = CliRunner().invoke(submit, [])

    assert result.exit_code == 0
    job_id = _published_id(result.stdout)
    with zipfile.ZipFile(configured_dirs["output"] / f"{job_id}.zip") as archive:
        assert archive.namelist() == []


def test_submit_cli_invalid_request_file(configured_dirs, tmp_path):
    request = tmp_path / "request.json"
    request.write_text("{not json")

    result = CliRunner().invoke(submit, ["--request", str(request)])

    assert result.exit_code == CFG.exit_codes.default
    assert not configured_dirs["output"].exists()


def test_submit_cli_reports_unpublished_archive(configured_dirs):
    with patch.object(Orchestrator, "run", return_value=None):
        result = CliRunner().invoke(submit, ["-m", "a", "txt", "a"])

    assert result.exit_code == CFG.exit_codes.default

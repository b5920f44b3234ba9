# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
import time
from datetime import timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from zipd_lib.sweep.sweeper import Sweeper, sweep

DAY = 24 * 3600
WINDOW = timedelta(days=7)


def _make_file(path: Path, age_seconds: float) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")
    mtime = time.time() - age_seconds
    os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def output_root(tmp_path) -> Path:
    root = tmp_path / "output"
    root.mkdir()
    return root


def test_sweep_deletes_files_older_than_window(output_root):
    old = _make_file(output_root / "old.zip", 8 * DAY)
    young = _make_file(output_root / "young.zip", 6 * DAY)

    report = Sweeper(output_root, WINDOW).sweep()

    assert not old.exists()
    assert young.exists()
    assert report.deleted == [old]
    assert report.failed == []
    assert report.examined == 2


def test_sweep_never_deletes_files_younger_than_window(output_root):
    files = [_make_file(output_root / f"{i}.zip", i * DAY) for i in range(7)]

    for _ in range(3):
        Sweeper(output_root, WINDOW).sweep()

    assert all(f.exists() for f in files)


def test_sweep_walks_subdirectories_and_keeps_directories(output_root):
    old = _make_file(output_root / "a" / "b" / "old.zip", 30 * DAY)
    young = _make_file(output_root / "a" / "young.zip", 0)

    sweep(output_root, WINDOW)

    assert not old.exists()
    assert young.exists()
    # directories are not pruned even when empty
    assert (output_root / "a" / "b").is_dir()


def test_sweep_removes_stray_staging_files(output_root):
    stray = _make_file(output_root / ".abc.zip.part", 10 * DAY)

    sweep(output_root, WINDOW)

    assert not stray.exists()


def test_sweep_is_idempotent(output_root):
    _make_file(output_root / "old.zip", 8 * DAY)
    _make_file(output_root / "young.zip", 1 * DAY)

    sweep(output_root, WINDOW)
    survivors = sorted(output_root.rglob("*"))
    second = sweep(output_root, WINDOW)

    assert sorted(output_root.rglob("*")) == survivors
    assert second.deleted == []


def test_sweep_missing_root_is_not_an_error(tmp_path):
    report = sweep(tmp_path / "missing", WINDOW)

    assert report.deleted == []
    assert report.examined == 0


def test_sweep_deletion_failure_does_not_stop_sweep(output_root):
    first = _make_file(output_root / "a.zip", 8 * DAY)
    second = _make_file(output_root / "b.zip", 8 * DAY)
    real_unlink = Path.unlink

    def flaky_unlink(self, *args, **kwargs):
        if self.name == "a.zip":
            raise PermissionError("file in use")
        return real_unlink(self, *args, **kwargs)

    with (
        patch.object(Path, "unlink", flaky_unlink),
        patch("zipd_lib.sweep.sweeper.logger.error") as mock_error,
    ):
        report = sweep(output_root, WINDOW)

    assert first.exists()
    assert not second.exists()
    assert report.deleted == [second]
    assert [path for path, _ in report.failed] == [first]
    mock_error.assert_called_once()


def test_sweep_file_vanishing_concurrently_is_not_a_failure(output_root):
    _make_file(output_root / "old.zip", 8 * DAY)

    with patch.object(Path, "unlink", side_effect=FileNotFoundError("gone")):
        report = sweep(output_root, WINDOW)

    assert report.deleted == []
    assert report.failed == []


def test_sweep_walk_error_is_logged(output_root):
    def broken_walk(top, onerror=None):
        onerror(PermissionError(f"cannot list '{top}'"))
        return iter(())

    with (
        patch("zipd_lib.sweep.sweeper.os.walk", side_effect=broken_walk),
        patch("zipd_lib.sweep.sweeper.logger.error") as mock_error,
    ):
        report = sweep(output_root, WINDOW)

    assert report.examined == 0
    assert "Error walking the directory" in mock_error.call_args.args[0]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_sweep_ignores_symlinks(output_root, tmp_path):
    target = _make_file(tmp_path / "elsewhere" / "keep.zip", 30 * DAY)
    link = output_root / "link.zip"
    link.symlink_to(target)
    os.utime(link, (time.time() - 30 * DAY,) * 2, follow_symlinks=False)

    report = sweep(output_root, WINDOW)

    assert link.is_symlink()
    assert target.exists()
    assert report.examined == 0

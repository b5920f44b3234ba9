# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import threading
from datetime import timedelta
from unittest.mock import patch

import pytest

from zipd_lib.core.error import ZipdError
from zipd_lib.sweep.scheduler import PeriodicSweeper
from zipd_lib.sweep.sweeper import Sweeper


def _counting_sweep(target: int):
    """Return a fake sweep method and an event set after `target` calls."""
    done = threading.Event()
    calls = []

    def fake_sweep(_self):
        calls.append(1)
        if len(calls) >= target:
            done.set()

    return fake_sweep, done, calls


def test_periodic_sweeper_runs_repeatedly(tmp_path):
    fake_sweep, done, calls = _counting_sweep(3)
    sweeper = PeriodicSweeper(tmp_path, timedelta(days=7), timedelta(milliseconds=10))

    with patch.object(Sweeper, "sweep", fake_sweep):
        sweeper.start()
        assert done.wait(5)
        sweeper.stop(timeout=5)

    assert len(calls) >= 3
    assert not sweeper.is_running


def test_periodic_sweeper_waits_one_interval_before_first_sweep(tmp_path):
    fake_sweep, done, calls = _counting_sweep(1)
    sweeper = PeriodicSweeper(tmp_path, timedelta(days=7), timedelta(hours=24))

    with patch.object(Sweeper, "sweep", fake_sweep):
        sweeper.start()
        assert sweeper.is_running
        sweeper.stop(timeout=5)

    assert calls == []
    assert not sweeper.is_running


def test_periodic_sweeper_survives_failing_sweep(tmp_path):
    calls = []
    done = threading.Event()

    def failing_sweep(_self):
        calls.append(1)
        if len(calls) >= 2:
            done.set()
        raise RuntimeError("boom")

    sweeper = PeriodicSweeper(tmp_path, timedelta(days=7), timedelta(milliseconds=10))

    with (
        patch.object(Sweeper, "sweep", failing_sweep),
        patch("zipd_lib.sweep.scheduler.logger.critical") as mock_critical,
    ):
        sweeper.start()
        assert done.wait(5)
        sweeper.stop(timeout=5)

    assert mock_critical.call_count >= 2


def test_periodic_sweeper_cannot_start_twice(tmp_path):
    sweeper = PeriodicSweeper(tmp_path, timedelta(days=7), timedelta(hours=24))
    sweeper.start()

    try:
        with pytest.raises(ZipdError, match="already been started"):
            sweeper.start()
    finally:
        sweeper.stop(timeout=5)


def test_periodic_sweeper_stop_before_start_is_harmless(tmp_path):
    sweeper = PeriodicSweeper(tmp_path, timedelta(days=7), timedelta(hours=24))
    sweeper.stop()

    assert not sweeper.is_running

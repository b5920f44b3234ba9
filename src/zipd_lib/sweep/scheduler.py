# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import threading
from datetime import timedelta
from pathlib import Path

from zipd_lib.core.common import format_duration
from zipd_lib.core.error import ZipdError
from zipd_lib.core.logger import get_logger

from .sweeper import Sweeper

logger = get_logger(__name__, show_time=True)


class PeriodicSweeper:
    """
    Runs a sweep of the output root at a fixed interval on a background thread.

    The first sweep happens one full interval after `start` is called.
    A sweep that fails is logged and does not stop subsequent sweeps.
    """

    def __init__(self, root: Path, max_age: timedelta, interval: timedelta):
        """
        Initialize the PeriodicSweeper.

        Args:
            root (Path): Directory tree to sweep.
            max_age (timedelta): Retention window passed to every sweep.
            interval (timedelta): Time between two consecutive sweeps.
        """
        self._sweeper = Sweeper(root, max_age)
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """
        Start the background thread.

        Raises:
            ZipdError: If the sweeper has already been started.
        """
        if self._thread is not None:
            raise ZipdError("Periodic sweeper has already been started.")

        self._thread = threading.Thread(
            target=self._worker, name="zipd-sweeper", daemon=True
        )
        self._thread.start()
        logger.info(f"Scheduled cleaning every {format_duration(self._interval)}.")

    def stop(self, timeout: float | None = None) -> None:
        """
        Stop the background thread, waiting for a sweep in progress to finish.

        Args:
            timeout (float | None): Maximum number of seconds to wait. Waits indefinitely if `None`.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)

    def _worker(self) -> None:
        """Sweep once per interval until stopped."""
        while not self._stop_event.wait(self._interval.total_seconds()):
            logger.debug("Running scheduled cleaning.")
            try:
                self._sweeper.sweep()
            except Exception as e:
                logger.critical(e, exc_info=True, stack_info=True)

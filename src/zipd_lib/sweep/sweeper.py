# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
import stat
import time
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from zipd_lib.core.common import format_duration
from zipd_lib.core.logger import get_logger
from zipd_lib.core.repeater import Repeater

logger = get_logger(__name__, show_time=True)


@dataclass
class SweepReport:
    """Outcome of a single sweep."""

    # Files that were deleted.
    deleted: list[Path] = field(default_factory=list)
    # Files that should have been deleted but could not be, with the error.
    failed: list[tuple[Path, OSError]] = field(default_factory=list)
    # Number of regular files that were examined.
    examined: int = 0


class Sweeper:
    """
    Deletes files that have outlived the retention window from a directory tree.
    """

    def __init__(self, root: Path, max_age: timedelta):
        """
        Initialize the Sweeper.

        Args:
            root (Path): Directory tree to sweep.
            max_age (timedelta): Files last modified longer ago than this are deleted.
        """
        self._root = root
        self._max_age = max_age

    def sweep(self) -> SweepReport:
        """
        Delete every regular file under the root that is older than the retention window.

        A file is deleted only if its age is strictly greater than the retention
        window. Directories are never removed, even if they end up empty. Failures
        to read a subtree or to delete a file are logged and the sweep continues
        with the remaining files.

        Returns:
            SweepReport: Deleted files and files that could not be deleted.
        """
        logger.info(
            f"Cleaning files older than {format_duration(self._max_age)} from '{self._root}'."
        )
        report = SweepReport()

        if not self._root.is_dir():
            logger.warning(f"Directory '{self._root}' does not exist. Nothing to clean.")
            return report

        now = time.time()
        max_age = self._max_age.total_seconds()
        expired = []
        for path, mtime in self._collectFiles():
            report.examined += 1
            if now - mtime > max_age:
                expired.append(path)

        logger.debug(f"Files to delete: {expired}.")

        repeater = Repeater(expired, Sweeper._deleteFile, report)
        repeater.onException(OSError, _log_failed_deletion)
        repeater.run()
        report.failed = [
            (expired[i], e)
            for i, e in repeater.encountered_errors.items()
            if isinstance(e, OSError)
        ]

        logger.info(
            f"Removed {len(report.deleted)} file{'' if len(report.deleted) == 1 else 's'}."
        )
        return report

    def _collectFiles(self):
        """
        Yield every regular file under the root together with its modification time.

        Symbolic links are neither followed nor reported.
        """
        for dirpath, _, filenames in os.walk(self._root, onerror=_log_walk_error):
            for filename in filenames:
                path = Path(dirpath) / filename
                try:
                    info = path.lstat()
                except OSError as e:
                    logger.warning(f"Could not inspect file '{path}': {e}.")
                    continue

                if stat.S_ISREG(info.st_mode):
                    yield path, info.st_mtime

    @staticmethod
    def _deleteFile(path: Path, report: SweepReport) -> None:
        """
        Delete a single file.

        Raises:
            OSError: If the file cannot be removed.
        """
        logger.info(f"Deleting file '{path}'.")
        try:
            path.unlink()
        except FileNotFoundError:
            # removed by someone else in the meantime
            logger.debug(f"File '{path}' is already gone.")
            return
        report.deleted.append(path)


def sweep(root: Path, max_age: timedelta) -> SweepReport:
    """
    Sweep `root` once, deleting all files older than `max_age`.
    """
    return Sweeper(root, max_age).sweep()


def _log_failed_deletion(exception: BaseException, _metadata: Repeater) -> None:
    """
    Report a file that could not be deleted.
    """
    logger.error(f"Failed to delete file: {exception}.")


def _log_walk_error(exception: OSError) -> None:
    """
    Report a subtree that could not be read.
    """
    logger.error(f"Error walking the directory: {exception}.")

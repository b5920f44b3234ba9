# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
import shutil
from pathlib import Path

from zipd_lib.core.common import format_size
from zipd_lib.core.config import CFG
from zipd_lib.core.error import PublishError
from zipd_lib.core.logger import get_logger

logger = get_logger(__name__, show_time=True)


class Publisher:
    """
    Makes finished archives visible in the output root under their request identifier.
    """

    def __init__(self, output_root: Path):
        """
        Initialize the Publisher.

        Args:
            output_root (Path): Directory in which archives are published.
        """
        self._output_root = output_root

    @property
    def output_root(self) -> Path:
        return self._output_root

    def destination(self, job_id: str) -> Path:
        """Return the path under which the archive of the specified job is published."""
        return self._output_root / f"{job_id}{CFG.publisher.archive_suffix}"

    def publish(self, temp_path: Path, job_id: str) -> Path:
        """
        Publish a temporary archive under the specified identifier.

        The archive is first copied to a hidden staging file in the output root,
        flushed to disk, and then renamed to its final name. The rename replaces
        the destination atomically on POSIX systems and on Windows, so readers
        either see the complete archive or nothing. On filesystems without an
        atomic rename, an interrupted publish may still leave the staging file
        behind, but never a truncated archive under the final name.

        The temporary archive and the staging file are removed on every exit path.

        Args:
            temp_path (Path): Path to the finished temporary archive.
            job_id (str): Identifier of the request.

        Returns:
            Path: Path to the published archive.

        Raises:
            PublishError: If the archive cannot be published.
        """
        destination = self.destination(job_id)
        staging = self._output_root / f".{destination.name}{CFG.publisher.staging_suffix}"
        logger.debug(f"Publishing '{temp_path}' to '{destination}' via '{staging}'.")

        try:
            self._output_root.mkdir(parents=True, exist_ok=True)
            size = Publisher._copy(temp_path, staging)
            os.replace(staging, destination)
        except OSError as e:
            raise PublishError(
                f"Could not publish archive '{destination}': {e}."
            ) from e
        finally:
            Publisher._removeQuietly(staging)
            Publisher._removeQuietly(temp_path)

        logger.debug(f"Published '{destination}' ({format_size(size)}).")
        return destination

    @staticmethod
    def _copy(source: Path, target: Path) -> int:
        """
        Copy `source` into `target` and flush the written data to disk.

        Returns:
            int: Number of bytes written.

        Raises:
            OSError: If reading or writing fails.
        """
        with source.open("rb") as src, target.open("wb") as dst:
            shutil.copyfileobj(src, dst, CFG.builder.chunk_size)
            dst.flush()
            os.fsync(dst.fileno())
            return dst.tell()

    @staticmethod
    def _removeQuietly(path: Path) -> None:
        """
        Remove a file if it exists, logging instead of raising on failure.
        """
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temporary file '{path}': {e}.")

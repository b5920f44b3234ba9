# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
import shutil
import tempfile
import time
import zipfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from zipd_lib.core.config import CFG
from zipd_lib.core.error import ArchiveBuildError, MemberUnavailableError
from zipd_lib.core.logger import get_logger
from zipd_lib.core.repeater import Repeater
from zipd_lib.properties.member import MemberRequest
from zipd_lib.resolve.resolver import Resolver

logger = get_logger(__name__, show_time=True)

# General purpose bit 11: filename and comment are encoded in UTF-8.
UTF8_FLAG = 0x800

# Earliest timestamp representable in a zip entry header.
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)

# Latest timestamp representable in a zip entry header.
ZIP_END = (2107, 12, 31, 23, 59, 58)


class UTF8ZipInfo(zipfile.ZipInfo):
    """
    Zip entry header that always declares its name as UTF-8 encoded.

    `zipfile` only sets the UTF-8 flag for non-ASCII names and clears
    `flag_bits` when an entry is opened for writing, so the flag is applied
    whenever the header is encoded.
    """

    __slots__ = ()

    def _encodeFilenameFlags(self):
        return self.filename.encode("utf-8"), self.flag_bits | UTF8_FLAG


@dataclass
class BuildResult:
    """Outcome of building one archive."""

    # Path to the temporary archive.
    path: Path
    # Members written into the archive, in request order.
    added: list[MemberRequest] = field(default_factory=list)
    # Members left out of the archive together with the reason.
    skipped: list[tuple[MemberRequest, str]] = field(default_factory=list)


class Builder:
    """
    Packages requested members into an uncompressed zip archive stored in a temporary file.
    """

    def __init__(
        self,
        resolver: Resolver,
        temp_dir: Path | None = None,
        chunk_size: int = CFG.builder.chunk_size,
    ):
        """
        Initialize the Builder.

        Args:
            resolver (Resolver): Resolver used to open the requested members.
            temp_dir (Path | None): Directory for temporary archives.
                Uses the system temporary directory if `None`.
            chunk_size (int): Number of bytes copied into the archive at a time.
        """
        self._resolver = resolver
        self._temp_dir = temp_dir
        self._chunk_size = chunk_size

    def build(self, members: Iterable[MemberRequest]) -> BuildResult:
        """
        Build an archive containing all resolvable members.

        Members are written in request order as stored (uncompressed) entries
        named `alias.extension`. Members that cannot be resolved are logged and
        left out. A request without any resolvable member yields a valid
        empty archive.

        The temporary archive is owned by the caller once this method returns.
        If the build fails, the temporary archive is removed before the error
        is raised.

        Args:
            members (Iterable[MemberRequest]): The requested members.

        Returns:
            BuildResult: Path to the temporary archive and the per-member outcome.

        Raises:
            ArchiveBuildError: If the temporary archive cannot be created or written.
        """
        try:
            fd, name = tempfile.mkstemp(
                prefix=CFG.builder.temp_prefix, suffix=".zip", dir=self._temp_dir
            )
        except OSError as e:
            raise ArchiveBuildError(f"Could not create a temporary archive: {e}.") from e

        result = BuildResult(Path(name))
        logger.debug(f"Temporary archive: '{result.path}'.")

        try:
            with (
                os.fdopen(fd, "wb") as file,
                zipfile.ZipFile(file, "w", compression=zipfile.ZIP_STORED) as archive,
            ):
                repeater = Repeater(members, self._addMember, archive, result)
                repeater.onException(MemberUnavailableError, log_skipped)
                repeater.run()
        except Exception as e:
            result.path.unlink(missing_ok=True)
            raise ArchiveBuildError(
                f"Could not write the temporary archive '{result.path}': {e}."
            ) from e

        result.skipped = [
            (e.member, e.reason)
            for e in repeater.encountered_errors.values()
            if isinstance(e, MemberUnavailableError)
        ]
        return result

    def _addMember(
        self, member: MemberRequest, archive: zipfile.ZipFile, result: BuildResult
    ) -> None:
        """
        Stream a single member into the archive.

        Raises:
            MemberUnavailableError: If the member cannot be resolved.
        """
        with self._resolver.resolve(member) as source:
            info = os.fstat(source.fileno())

            header = UTF8ZipInfo(
                member.entry_name,
                date_time=_clamp_date_time(info.st_mtime),
            )
            header.compress_type = zipfile.ZIP_STORED
            header.external_attr = (info.st_mode & 0xFFFF) << 16
            header.file_size = info.st_size

            with archive.open(header, "w") as entry:
                shutil.copyfileobj(source, entry, self._chunk_size)

        result.added.append(member)
        logger.debug(f"Added file '{member.source_name}' as '{member.entry_name}'.")


def log_skipped(exception: BaseException, _metadata: Repeater) -> None:
    """
    Report a member that was left out of the archive.
    """
    logger.warning(f"File skipped: {exception}.")


def _clamp_date_time(mtime: float) -> tuple[int, int, int, int, int, int]:
    """
    Convert a modification time to a zip header timestamp within the representable range.
    """
    try:
        date_time = time.localtime(mtime)[:6]
    except (OverflowError, OSError, ValueError):
        return ZIP_END if mtime > 0 else ZIP_EPOCH

    return min(max(date_time, ZIP_EPOCH), ZIP_END)

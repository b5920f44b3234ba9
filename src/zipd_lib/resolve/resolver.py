# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import stat
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from zipd_lib.core.common import is_within
from zipd_lib.core.error import MemberUnavailableError
from zipd_lib.core.logger import get_logger
from zipd_lib.properties.member import MemberRequest

logger = get_logger(__name__)


class Resolver:
    """
    Maps requested archive members to readable files inside the storage root.
    """

    def __init__(self, storage_root: Path):
        """
        Initialize the Resolver.

        Args:
            storage_root (Path): Directory containing the stored files.
        """
        self._storage_root = storage_root

    @property
    def storage_root(self) -> Path:
        return self._storage_root

    def resolve(self, member: MemberRequest) -> BinaryIO:
        """
        Open the stored file backing the specified member for reading.

        A member is unavailable if its file does not exist, cannot be read,
        is not a regular file, or lies outside the storage root. Members whose
        archive entry name is absolute or climbs out of the archive root are
        unavailable as well.

        Args:
            member (MemberRequest): The member to resolve.

        Returns:
            BinaryIO: The opened source file. The caller is responsible for closing it.

        Raises:
            MemberUnavailableError: If the member cannot be read.
        """
        self._checkEntryName(member)

        path = self._storage_root / member.source_name
        logger.debug(f"Resolving member '{member.source_name}' to '{path}'.")

        try:
            if not is_within(path, self._storage_root):
                raise MemberUnavailableError(member, "is outside the storage root")

            info = path.stat()
            if not stat.S_ISREG(info.st_mode):
                raise MemberUnavailableError(member, "is not a regular file")
            return path.open("rb")
        except FileNotFoundError:
            raise MemberUnavailableError(member, "was not found")
        except PermissionError:
            raise MemberUnavailableError(member, "could not be read: permission denied")
        except IsADirectoryError:
            raise MemberUnavailableError(member, "is not a regular file")
        except OSError as e:
            raise MemberUnavailableError(member, f"could not be read: {e}")
        except (ValueError, RuntimeError) as e:
            # embedded null bytes, unencodable names, symlink loops
            raise MemberUnavailableError(member, f"could not be resolved: {e}")

    @staticmethod
    def _checkEntryName(member: MemberRequest) -> None:
        """
        Ensure the member's entry name stays inside the archive.

        Raises:
            MemberUnavailableError: If the entry name is absolute, contains '..',
                contains a null byte, or cannot be encoded as UTF-8.
        """
        try:
            member.entry_name.encode("utf-8")
        except UnicodeEncodeError:
            raise MemberUnavailableError(
                member, f"has an entry name that is not valid UTF-8 {member.entry_name!r}"
            )

        entry = PurePosixPath(member.entry_name)
        if entry.is_absolute() or ".." in entry.parts or "\0" in member.entry_name:
            raise MemberUnavailableError(
                member, f"has an invalid entry name '{member.entry_name}'"
            )

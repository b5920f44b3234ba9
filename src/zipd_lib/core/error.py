# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Exception types used throughout zipd.

Member-level errors are recovered by the archive builder, job-level errors
end a single background job, and generator-level or request errors are
reported synchronously to the caller. Each exception carries an associated
exit code used by zipd commands to report failures consistently.
"""

from typing import TYPE_CHECKING

from .config import CFG

if TYPE_CHECKING:
    from zipd_lib.properties.member import MemberRequest


class ZipdError(Exception):
    """Common exception type for all recoverable zipd errors."""

    exit_code = CFG.exit_codes.default


class MemberUnavailableError(ZipdError):
    """Raised when a requested archive member cannot be read."""

    def __init__(self, member: "MemberRequest", reason: str):
        super().__init__(f"{member.source_name} {reason}")
        self.member = member
        self.reason = reason


class IdentifierError(ZipdError):
    """Raised when a request identifier cannot be generated."""

    pass


class RequestError(ZipdError):
    """Raised when an inbound archive request cannot be decoded."""

    pass


class ArchiveBuildError(ZipdError):
    """Raised when the temporary archive or its writer cannot be created."""

    pass


class PublishError(ZipdError):
    """Raised when a finished archive cannot be published."""

    pass

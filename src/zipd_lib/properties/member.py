# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Representation of archive requests.

This module defines `MemberRequest`, a single stored file requested for
inclusion in an archive together with the name it receives inside it, and
`ArchiveJob`, one archive request tied to its generated identifier.
"""

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Self

from zipd_lib.core.error import RequestError


@dataclass(frozen=True)
class MemberRequest:
    """
    One logical file requested for inclusion in an archive.
    """

    # Path of the stored file relative to the storage root.
    source_name: str

    # Extension of the entry inside the archive (without the leading dot).
    extension: str

    # Name of the entry inside the archive (without the extension).
    alias: str

    @property
    def entry_name(self) -> str:
        """Name of the member inside the archive, always using forward slashes."""
        name = f"{self.alias}.{self.extension}"
        if os.sep != "/":
            name = name.replace(os.sep, "/")
        return name

    @classmethod
    def fromDict(cls, data: Mapping[str, Any]) -> Self:
        """
        Construct a `MemberRequest` from its wire representation.

        Args:
            data (Mapping[str, Any]): Mapping with the keys `name`, `ext`, and `alias`.
                Missing or null values are treated as empty strings.

        Returns:
            MemberRequest: The decoded member.

        Raises:
            RequestError: If the mapping is malformed.
        """
        if not isinstance(data, Mapping):
            raise RequestError(f"Invalid member specification '{data}'.")

        values = []
        for key in ("name", "ext", "alias"):
            value = data.get(key)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise RequestError(
                    f"Invalid value of '{key}' in member specification '{dict(data)}'."
                )
            values.append(value)

        return cls(*values)

    def toDict(self) -> dict[str, str]:
        """Return the wire representation of the member."""
        return {"name": self.source_name, "ext": self.extension, "alias": self.alias}


@dataclass(frozen=True)
class ArchiveJob:
    """
    One archive request identified by its generated id.
    """

    id: str
    members: tuple[MemberRequest, ...]
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def archive_name(self) -> str:
        """Name of the archive published for this job."""
        return f"{self.id}.zip"


def parse_members(payload: Any) -> list[MemberRequest]:
    """
    Decode the body of an archive request.

    The payload must be a mapping with a `filenames` list of member
    specifications. A missing or null `filenames` is an empty request.

    Args:
        payload (Any): Decoded JSON body of the request.

    Returns:
        list[MemberRequest]: Requested members in request order.

    Raises:
        RequestError: If the payload is malformed.
    """
    if not isinstance(payload, Mapping):
        raise RequestError("Request body must be a JSON object.")

    filenames = payload.get("filenames") or []
    if not isinstance(filenames, Sequence) or isinstance(filenames, str):
        raise RequestError("The 'filenames' field must be a list.")

    return [MemberRequest.fromDict(item) for item in filenames]

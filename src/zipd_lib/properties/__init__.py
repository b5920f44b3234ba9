# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Data representations underlying zipd's archive model.

This module collects the types that describe what an archive request *is*:
the requested members and the job they belong to.
"""

from .member import ArchiveJob, MemberRequest, parse_members

__all__ = [
    "ArchiveJob",
    "MemberRequest",
    "parse_members",
]

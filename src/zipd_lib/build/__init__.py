# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Construction of archives from requested members.

This module provides the `Builder` class, which writes every resolvable
member of a request into a temporary zip archive, skipping members
that are unavailable.
"""

from .builder import Builder, BuildResult

__all__ = [
    "BuildResult",
    "Builder",
]

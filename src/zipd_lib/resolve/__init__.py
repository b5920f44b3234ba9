# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Lookup of stored files requested as archive members.

This module provides the `Resolver` class, which opens the file backing a
requested member or reports why the member is unavailable.
"""

from .resolver import Resolver

__all__ = [
    "Resolver",
]

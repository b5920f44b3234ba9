# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Publication of finished archives.

This module provides the `Publisher` class, which moves a temporary archive
into the output root under its request identifier without ever exposing
a partially written file.
"""

from .publisher import Publisher

__all__ = [
    "Publisher",
]

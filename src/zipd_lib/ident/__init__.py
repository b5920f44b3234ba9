# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Generation of unique archive request identifiers.
"""

from .generator import new_id

__all__ = [
    "new_id",
]

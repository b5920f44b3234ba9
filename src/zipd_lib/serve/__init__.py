# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
HTTP front end of zipd.

This module provides the `ZipdServer` class, which exposes archive requests
and on-demand cleaning of the output directory over HTTP.
"""

from .server import ZipdRequestHandler, ZipdServer

__all__ = [
    "ZipdRequestHandler",
    "ZipdServer",
]

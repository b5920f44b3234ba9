# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core implementation of the zipd archive service.

This package provides the logic behind zipd's archive workflow: generating
request identifiers, resolving requested members inside the storage
directory, building uncompressed zip archives, publishing them atomically,
sweeping the output directory of archives that outlived the retention window,
and the command-line and HTTP surfaces that drive them.
"""

from .zipd import __version__, cli

__all__ = [
    "__version__",
    "cli",
    "build",
    "core",
    "ident",
    "properties",
    "publish",
    "resolve",
    "serve",
    "submit",
    "sweep",
]

# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Acceptance and background processing of archive requests.

This module provides the `Orchestrator` class, which hands out a request
identifier immediately and builds and publishes the archive on a worker thread.
"""

from .orchestrator import Orchestrator

__all__ = [
    "Orchestrator",
]

# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Reclaiming disk space in the output root.

This module provides the `Sweeper` class, which deletes files that have
outlived the retention window, and the `PeriodicSweeper` class, which
repeats the sweep at a fixed interval in the background.
"""

from .scheduler import PeriodicSweeper
from .sweeper import Sweeper, SweepReport, sweep

__all__ = [
    "PeriodicSweeper",
    "SweepReport",
    "Sweeper",
    "sweep",
]

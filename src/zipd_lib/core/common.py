# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
General utility functions for the zipd library.

This module provides helpers for formatting durations and file sizes
in log messages and for checking that paths stay inside a root directory.
"""

from datetime import timedelta
from pathlib import Path


def format_duration(td: timedelta) -> str:
    """
    Convert a timedelta into a human-readable string showing only relevant units.

    The output string includes days, hours, minutes, and seconds, but omits
    units that are zero. Sub-second durations are shown in milliseconds.

    Args:
        td (timedelta): The duration to format.

    Returns:
        str: A formatted string representing the duration, e.g., '7d 2h 3m 4s'.
    """
    if timedelta(0) < td < timedelta(seconds=1):
        return f"{td.total_seconds() * 1000:.0f}ms"

    total_seconds = int(td.total_seconds())

    days, remainder = divmod(total_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if seconds > 0 or total_seconds == 0:
        parts.append(f"{seconds}s")

    return " ".join(parts)


def format_size(size: int) -> str:
    """Return a human-readable representation of `size` bytes."""
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024.0:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024.0
    return f"{value:.1f} TB"


def is_within(path: Path, root: Path) -> bool:
    """
    Check whether `path` lies inside `root` once both are fully resolved.

    Symbolic links are followed, so a link pointing out of `root` is not within it.
    """
    return path.resolve().is_relative_to(root.resolve())

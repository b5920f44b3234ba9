# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Configuration system for zipd.

This module defines dataclasses representing all configurable aspects of zipd,
including storage and output locations, the retention window, the background
worker pool, the HTTP transport, and global defaults.

The `Config` class loads user configuration from a TOML file (if available)
and provides a globally accessible `CFG` instance.
"""

import os
import tomllib
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Self


@dataclass
class PathSettings:
    """Filesystem locations used by zipd."""

    # Directory from which archive members are read.
    storage_root: str = "storage"
    # Directory into which archives are published and from which they are swept.
    output_root: str = "output"
    # Directory for archives under construction. System default if not set.
    temp_dir: str | None = None


@dataclass
class EnvironmentVariables:
    """Environment variable names used by zipd."""

    # Enables zipd debug mode.
    debug_mode: str = "ZIPD_DEBUG"
    # Explicit path to the zipd config file.
    config: str = "ZIPD_CONFIG"


@dataclass
class RetentionSettings:
    """Settings for the Retention Sweeper."""

    # Files in the output root older than this are deleted.
    max_age_days: float = 7
    # Interval (in hours) between two automatic sweeps.
    interval_hours: float = 24

    @property
    def max_age(self) -> timedelta:
        """Retention window as a timedelta."""
        return timedelta(days=self.max_age_days)

    @property
    def interval(self) -> timedelta:
        """Sweep period as a timedelta."""
        return timedelta(hours=self.interval_hours)


@dataclass
class OrchestratorSettings:
    """Settings for the Job Orchestrator."""

    # Maximum number of archives built at the same time.
    max_workers: int = 8


@dataclass
class BuilderSettings:
    """Settings for the Archive Builder."""

    # Prefix of temporary archive files.
    temp_prefix: str = "tmp-zip-"
    # Size (in bytes) of the chunks streamed from a member into the archive.
    chunk_size: int = 1024 * 1024


@dataclass
class PublisherSettings:
    """Settings for the Publisher."""

    # Suffix of the staging file written next to the published archive.
    staging_suffix: str = ".part"
    # Suffix of published archives.
    archive_suffix: str = ".zip"


@dataclass
class ServerSettings:
    """Settings for the HTTP transport."""

    # Address the server binds to.
    host: str = "0.0.0.0"
    # Port the server listens on.
    port: int = 8080
    # Largest accepted request body in bytes.
    max_request_bytes: int = 1024 * 1024


@dataclass
class DateFormats:
    """Date and time format strings."""

    # Standard date format used by zipd.
    standard: str = "%Y-%m-%d %H:%M:%S"


@dataclass
class ExitCodes:
    """Exit codes used for various errors."""

    # Default error code for failures of zipd commands.
    default: int = 91
    # Returned on an unexpected or unhandled error.
    unexpected_error: int = 99


@dataclass
class Config:
    """Main configuration for zipd."""

    paths: PathSettings = field(default_factory=PathSettings)
    env_vars: EnvironmentVariables = field(default_factory=EnvironmentVariables)
    retention: RetentionSettings = field(default_factory=RetentionSettings)
    orchestrator: OrchestratorSettings = field(default_factory=OrchestratorSettings)
    builder: BuilderSettings = field(default_factory=BuilderSettings)
    publisher: PublisherSettings = field(default_factory=PublisherSettings)
    server: ServerSettings = field(default_factory=ServerSettings)
    date_formats: DateFormats = field(default_factory=DateFormats)
    exit_codes: ExitCodes = field(default_factory=ExitCodes)

    # Name of the zipd binary.
    binary_name: str = "zipd"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """
        Load configuration from TOML file or use defaults.

        Args:
            config_path: Explicit path to config file. If None, searches standard locations.

        Returns:
            Config instance with loaded or default values.
        """
        if config_path is None:
            config_path = Config._get_config_path()

        try:
            if config_path and config_path.exists():
                with config_path.open("rb") as f:
                    config_data = tomllib.load(f)
                return _dict_to_dataclass(cls, config_data)
        except Exception as e:
            raise ValueError(f"Could not read zipd config '{config_path}': {e}.")

        # no config found - use defaults
        return cls()

    @staticmethod
    def _get_config_path() -> Path | None:
        """
        Search for config file in standard locations (XDG compliant).
        Returns the first existing config file, or None.
        """
        config_locations: list[Path | None] = [
            # 1. Explicit environment variable (highest priority)
            Path(env_path) if (env_path := os.getenv("ZIPD_CONFIG")) else None,
            # 2. Current working directory (for development/override)
            Path.cwd() / "zipd_config.toml",
            # 3. XDG config home (standard user config location)
            Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
            / "zipd"
            / "config.toml",
        ]

        for path in config_locations:
            if path and path.is_file():
                return path

        return None


def _dict_to_dataclass(cls, data: dict[str, Any]):
    """
    Recursively convert a dictionary to a dataclass instance.
    Handles nested dataclasses properly.
    """
    if not is_dataclass(cls):
        return data

    field_values = {}
    for field_info in fields(cls):
        field_name = field_info.name
        field_type = field_info.type

        if field_name in data:
            value = data[field_name]
            if is_dataclass(field_type) and isinstance(value, dict):
                field_values[field_name] = _dict_to_dataclass(field_type, value)
            else:
                field_values[field_name] = value

    return cls(**field_values)


# Global configuration for zipd.
CFG = Config.load()

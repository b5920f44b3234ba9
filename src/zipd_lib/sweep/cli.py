# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from datetime import timedelta
from pathlib import Path
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand

from zipd_lib.core.config import CFG
from zipd_lib.core.error import ZipdError
from zipd_lib.core.logger import get_logger

from .sweeper import Sweeper

logger = get_logger(__name__)


@click.command(
    short_help="Delete archives older than the retention window.",
    help=f"""Delete all files in the output directory that are older than the retention window.

By default, `{CFG.binary_name} sweep` cleans '{CFG.paths.output_root}' and removes files last modified
more than {CFG.retention.max_age_days:g} days ago. Directories are never removed.""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to clean. Defaults to the configured output directory.",
)
@click.option(
    "--max-age-days",
    type=click.FloatRange(min=0),
    default=None,
    help="Retention window in days. Defaults to the configured window.",
)
def sweep(root: Path | None, max_age_days: float | None) -> NoReturn:
    """
    Delete files older than the retention window from the output directory.
    """
    try:
        root = root or Path(CFG.paths.output_root)
        max_age = (
            timedelta(days=max_age_days)
            if max_age_days is not None
            else CFG.retention.max_age
        )
        report = Sweeper(root, max_age).sweep()
        sys.exit(CFG.exit_codes.default if report.failed else 0)
    except ZipdError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)

# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from pathlib import Path
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand

from zipd_lib.core.config import CFG
from zipd_lib.core.error import ZipdError
from zipd_lib.core.logger import get_logger
from zipd_lib.submit.orchestrator import Orchestrator
from zipd_lib.sweep.scheduler import PeriodicSweeper

from .server import ZipdServer

logger = get_logger(__name__, show_time=True)


@click.command(
    short_help="Run the zipd HTTP service.",
    help=f"""Run the zipd HTTP service.

{click.style("POST /zip", fg="green")}         Accept an archive request and respond with its identifier.
{click.style("GET|POST /clean-old", fg="green")}   Delete outputs older than the retention window.

While running, `{CFG.binary_name} serve` also cleans '{CFG.paths.output_root}' every
{CFG.retention.interval_hours:g} hours, deleting files older than {CFG.retention.max_age_days:g} days.""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@click.option(
    "--host",
    type=str,
    default=CFG.server.host,
    show_default=True,
    help="Address to bind to.",
)
@click.option(
    "--port",
    type=click.IntRange(0, 65535),
    default=CFG.server.port,
    show_default=True,
    help="Port to listen on.",
)
def serve(host: str, port: int) -> NoReturn:
    """
    Serve archive requests until interrupted.
    """
    try:
        output_root = Path(CFG.paths.output_root)
        output_root.mkdir(parents=True, exist_ok=True)

        sweeper = PeriodicSweeper(
            output_root, CFG.retention.max_age, CFG.retention.interval
        )
        orchestrator = Orchestrator.fromConfig()
        server = ZipdServer(
            (host, port),
            orchestrator,
            output_root,
            CFG.retention.max_age,
            CFG.server.max_request_bytes,
        )

        sweeper.start()
        logger.info(f"Server started at {host}:{port}.")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Shutting down.")
        finally:
            server.server_close()
            sweeper.stop()
            orchestrator.shutdown(wait=True)

        sys.exit(0)
    except ZipdError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)

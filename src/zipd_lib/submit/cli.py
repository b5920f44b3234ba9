# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import json
import sys
from pathlib import Path
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand

from zipd_lib.core.config import CFG
from zipd_lib.core.error import RequestError, ZipdError
from zipd_lib.core.logger import get_logger
from zipd_lib.properties.member import MemberRequest, parse_members

from .orchestrator import Orchestrator

logger = get_logger(__name__)


@click.command(
    short_help="Package stored files into an archive.",
    help=f"""Package stored files into a single uncompressed zip archive.

Each member is given as {click.style("NAME EXT ALIAS", fg="green")}: the path of the stored file relative to
the storage directory ('{CFG.paths.storage_root}'), the extension and the name it should have inside the archive.
Alternatively, read the members from a JSON request file of the form {{"filenames": [{{"name": ..., "ext": ..., "alias": ...}}]}}.

Members that cannot be read are skipped. `{CFG.binary_name} submit` waits for the archive to be published
to '{CFG.paths.output_root}' and prints its identifier.""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@click.option(
    "-m",
    "--member",
    "members",
    type=(str, str, str),
    multiple=True,
    metavar="NAME EXT ALIAS",
    help="Member to include in the archive. Can be specified multiple times.",
)
@click.option(
    "--request",
    "request_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file describing the members to include.",
)
def submit(members: tuple[tuple[str, str, str], ...], request_file: Path | None) -> NoReturn:
    """
    Build and publish an archive from the specified members.
    """
    try:
        requested = [MemberRequest(*member) for member in members]
        if request_file:
            requested.extend(_load_request(request_file))

        with Orchestrator.fromConfig() as orchestrator:
            job_id = orchestrator.submit(requested)

        destination = orchestrator.publisher.destination(job_id)
        if not destination.is_file():
            raise ZipdError(f"Archive '{job_id}' was not published.")

        print(job_id)
        logger.info(f"Archive available at '{destination}'.")
        sys.exit(0)
    except ZipdError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)


def _load_request(request_file: Path) -> list[MemberRequest]:
    """
    Read the members of an archive request from a JSON file.

    Raises:
        RequestError: If the file cannot be read or decoded.
    """
    try:
        payload = json.loads(request_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise RequestError(f"Could not read request file '{request_file}': {e}.") from e

    return parse_members(payload)

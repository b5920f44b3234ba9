# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import uuid

from zipd_lib.core.error import IdentifierError
from zipd_lib.core.logger import get_logger

logger = get_logger(__name__)


def new_id() -> str:
    """
    Generate a fresh identifier for an archive request.

    The identifier is a random (version 4) UUID in its canonical textual form.
    It is drawn from the operating system's entropy pool, so concurrent callers
    never need to coordinate.

    Returns:
        str: The generated identifier.

    Raises:
        IdentifierError: If the entropy source is unavailable.
    """
    try:
        job_id = str(uuid.uuid4())
    except (NotImplementedError, OSError) as e:
        raise IdentifierError(f"Could not generate a request identifier: {e}.") from e

    logger.debug(f"Generated request identifier '{job_id}'.")
    return job_id

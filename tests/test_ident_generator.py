# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import uuid
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from zipd_lib.core.error import IdentifierError
from zipd_lib.ident.generator import new_id


def test_new_id_is_canonical_uuid():
    job_id = new_id()

    assert str(uuid.UUID(job_id)) == job_id


def test_new_id_sequential_calls_are_distinct():
    ids = {new_id() for _ in range(1000)}

    assert len(ids) == 1000


def test_new_id_concurrent_calls_are_distinct():
    with ThreadPoolExecutor(max_workers=16) as executor:
        ids = list(executor.map(lambda _: new_id(), range(2000)))

    assert len(set(ids)) == len(ids)


@pytest.mark.parametrize("error", [NotImplementedError("no urandom"), OSError("no entropy")])
def test_new_id_raises_identifier_error_without_entropy(error):
    with (
        patch("zipd_lib.ident.generator.uuid.uuid4", side_effect=error),
        pytest.raises(IdentifierError, match="Could not generate"),
    ):
        new_id()

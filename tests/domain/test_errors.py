"""Tests for the exception taxonomy."""

import pytest

from graphvault.domain.entities import Relation
from graphvault.domain.errors import (
    ConnectionClosedError,
    DuplicateHashError,
    EndpointNotFoundError,
    EntityNotFoundError,
    GraphDecodeError,
    GraphVaultError,
    InvalidEntityError,
    RelationExistsError,
)


@pytest.mark.parametrize(
    ("error", "builtin"),
    [
        (EndpointNotFoundError("source"), LookupError),
        (EntityNotFoundError("node", "h"), KeyError),
        (DuplicateHashError("node", "h"), ValueError),
        (InvalidEntityError(object()), TypeError),
        (ConnectionClosedError("closed"), RuntimeError),
        (GraphDecodeError("bad"), ValueError),
    ],
)
def test_builtin_bases(error: GraphVaultError, builtin: type[Exception]) -> None:
    assert isinstance(error, GraphVaultError)
    assert isinstance(error, builtin)


def test_relation_exists_carries_context() -> None:
    existing = Relation(hash="r1", relation_name="knows", source_hash="a", target_hash="b")
    err = RelationExistsError("a", "b", existing)
    assert err.existing is existing
    assert "a -> b" in str(err)
    assert "knows" in str(err)


def test_endpoint_message() -> None:
    assert str(EndpointNotFoundError("target")) == "Target endpoint not found"


def test_invalid_entity_names_type() -> None:
    assert "int" in str(InvalidEntityError(3))

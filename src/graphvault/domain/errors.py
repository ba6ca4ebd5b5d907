"""Exception taxonomy for graph operations.

Every error raised by graphvault derives from :class:`GraphVaultError`.
Where a builtin exception describes the same failure, the error also
derives from it so callers can catch either.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from graphvault.domain.entities import Relation


class GraphVaultError(Exception):
    """Base class for all graphvault errors."""


class RelationExistsError(GraphVaultError):
    """A relation already links the same source and target nodes.

    The relation name is not part of the uniqueness key.
    """

    def __init__(self, source_hash: str, target_hash: str, existing: Relation) -> None:
        self.source_hash = source_hash
        self.target_hash = target_hash
        self.existing = existing
        super().__init__(
            f"Relation {source_hash} -> {target_hash} already exists "
            f"(hash={existing.hash}, name={existing.relation_name!r})"
        )


class EndpointNotFoundError(GraphVaultError, LookupError):
    """A relation endpoint selector resolved to no node."""

    def __init__(self, endpoint: str) -> None:
        self.endpoint = endpoint
        super().__init__(f"{endpoint.capitalize()} endpoint not found")


class EntityNotFoundError(GraphVaultError, KeyError):
    """No entity with the given hash exists in the graph."""

    def __init__(self, kind: str, entity_hash: str) -> None:
        self.kind = kind
        self.entity_hash = entity_hash
        super().__init__(f"No {kind} found with hash: {entity_hash}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class DuplicateHashError(GraphVaultError, ValueError):
    """An entity with the same hash is already stored."""

    def __init__(self, kind: str, entity_hash: str) -> None:
        self.kind = kind
        self.entity_hash = entity_hash
        super().__init__(f"A {kind} with hash {entity_hash} already exists")


class InvalidEntityError(GraphVaultError, TypeError):
    """The operation does not support the given entity type."""

    def __init__(self, entity: Any) -> None:
        self.entity = entity
        super().__init__(f"Invalid entity type: {type(entity).__name__}")


class ConnectionClosedError(GraphVaultError, RuntimeError):
    """The connection was closed and no longer holds a graph."""


class GraphDecodeError(GraphVaultError, ValueError):
    """Bytes could not be decoded into a graph."""

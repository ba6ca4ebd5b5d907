"""graphvault — embedded graph store persisted as a single snapshot file."""

from __future__ import annotations

from graphvault.connection import Connection, ConnectionStatus
from graphvault.domain.entities import EntityKind, GraphEntity, Node, Relation
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
from graphvault.domain.graph import Graph
from graphvault.domain.selectors import Selector, by_hash, where, with_label

__version__ = "0.1.0"

__all__ = [
    "Connection",
    "ConnectionClosedError",
    "ConnectionStatus",
    "DuplicateHashError",
    "EndpointNotFoundError",
    "EntityKind",
    "EntityNotFoundError",
    "Graph",
    "GraphDecodeError",
    "GraphEntity",
    "GraphVaultError",
    "InvalidEntityError",
    "Node",
    "Relation",
    "RelationExistsError",
    "Selector",
    "__version__",
    "by_hash",
    "where",
    "with_label",
]

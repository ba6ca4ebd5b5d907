"""Graph entities — nodes and relations sharing a property/label shape.

The entity set is sealed: :class:`Node` and :class:`Relation` are the only
concrete kinds. Code that dispatches on entity type checks against these
two classes explicitly rather than relying on open-ended inheritance.

INVARIANT: ``hash`` is the sole identity key. It is assigned once at
construction and frozen afterwards.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from graphvault.domain.ids import generate_hash


class EntityKind(StrEnum):
    """Concrete entity kinds stored in a graph."""

    NODE = "node"
    RELATION = "relation"


class GraphEntity(BaseModel):
    """Shared shape of nodes and relations. Not instantiated directly."""

    model_config = ConfigDict(validate_assignment=True)

    kind: ClassVar[EntityKind]

    hash: str = Field(default_factory=generate_hash, min_length=1, frozen=True)
    properties: dict[str, str] = Field(default_factory=dict)
    labels: set[str] = Field(default_factory=set)

    def has_label(self, label: str) -> bool:
        return label in self.labels


class Node(GraphEntity):
    """A graph vertex."""

    kind: ClassVar[EntityKind] = EntityKind.NODE


class Relation(GraphEntity):
    """A named, directed edge between two node hashes.

    The endpoints are weak references: a relation never owns its nodes and
    resolves them by lookup against the graph at query time.
    """

    kind: ClassVar[EntityKind] = EntityKind.RELATION

    relation_name: str
    source_hash: str = Field(min_length=1)
    target_hash: str = Field(min_length=1)

    def touches(self, node_hash: str) -> bool:
        """Return True if *node_hash* is either endpoint of this relation."""
        return self.source_hash == node_hash or self.target_hash == node_hash


# Sealed union of storable entities, used for type checks at dispatch sites.
ENTITY_TYPES: tuple[type[GraphEntity], ...] = (Node, Relation)

"""Graph — the aggregate owning every node and relation.

Nodes and relations are kept in insertion-ordered dicts keyed by hash,
which gives set semantics (uniqueness by hash) with O(1) lookup. The
graph enforces no structural rules beyond that uniqueness: relation
endpoints SHOULD reference stored nodes, but a dangling relation is
representable and can be found with :meth:`Graph.dangling_relations`.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable
from typing import Self

from graphvault.domain.entities import Node, Relation
from graphvault.domain.errors import DuplicateHashError, EntityNotFoundError


class Graph:
    """In-memory collection of all nodes and relations."""

    __slots__ = ("_nodes", "_relations")

    def __init__(
        self,
        nodes: Iterable[Node] = (),
        relations: Iterable[Relation] = (),
    ) -> None:
        self._nodes: dict[str, Node] = {}
        self._relations: dict[str, Relation] = {}
        for node in nodes:
            self.add_node(node)
        for relation in relations:
            self.add_relation(relation)

    @classmethod
    def empty(cls) -> Self:
        return cls()

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    @property
    def nodes(self) -> Collection[Node]:
        """Live view over stored nodes. Reflects later mutations."""
        return self._nodes.values()

    @property
    def relations(self) -> Collection[Relation]:
        """Live view over stored relations. Reflects later mutations."""
        return self._relations.values()

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def relation_count(self) -> int:
        return len(self._relations)

    def get_node(self, node_hash: str) -> Node | None:
        return self._nodes.get(node_hash)

    def get_relation(self, relation_hash: str) -> Relation | None:
        return self._relations.get(relation_hash)

    def has_node(self, node_hash: str) -> bool:
        return node_hash in self._nodes

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #

    def add_node(self, node: Node) -> None:
        if node.hash in self._nodes:
            raise DuplicateHashError("node", node.hash)
        self._nodes[node.hash] = node

    def add_relation(self, relation: Relation) -> None:
        if relation.hash in self._relations:
            raise DuplicateHashError("relation", relation.hash)
        self._relations[relation.hash] = relation

    def replace_node(self, node: Node) -> None:
        """Replace the stored node sharing *node*'s hash (full replace)."""
        if node.hash not in self._nodes:
            raise EntityNotFoundError("node", node.hash)
        self._nodes[node.hash] = node

    def replace_relation(self, relation: Relation) -> None:
        """Replace the stored relation sharing *relation*'s hash (full replace)."""
        if relation.hash not in self._relations:
            raise EntityNotFoundError("relation", relation.hash)
        self._relations[relation.hash] = relation

    def remove_nodes_where(self, predicate: Callable[[Node], bool]) -> int:
        """Remove every node matching *predicate*, returning the count removed."""
        doomed = [h for h, node in self._nodes.items() if predicate(node)]
        for h in doomed:
            del self._nodes[h]
        return len(doomed)

    def remove_relations_where(self, predicate: Callable[[Relation], bool]) -> int:
        """Remove every relation matching *predicate*, returning the count removed."""
        doomed = [h for h, rel in self._relations.items() if predicate(rel)]
        for h in doomed:
            del self._relations[h]
        return len(doomed)

    def clear(self) -> None:
        self._nodes.clear()
        self._relations.clear()

    # ------------------------------------------------------------------ #
    # Integrity
    # ------------------------------------------------------------------ #

    def dangling_relations(self) -> list[Relation]:
        """Relations with at least one endpoint hash not present as a node."""
        return [
            rel
            for rel in self._relations.values()
            if rel.source_hash not in self._nodes or rel.target_hash not in self._nodes
        ]

    def prune_dangling(self) -> int:
        """Remove dangling relations, returning the count removed."""
        return self.remove_relations_where(
            lambda rel: rel.source_hash not in self._nodes or rel.target_hash not in self._nodes
        )

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Graph):
            return NotImplemented
        return self._nodes == other._nodes and self._relations == other._relations

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count}, relations={self.relation_count})"

"""Connection — session owning one graph and its snapshot file.

Lifecycle: open (load-or-create) -> CRUD and queries against the
in-memory graph -> save (full snapshot rewrite) -> close.

- **Load**: a file that cannot be decoded is replaced by an empty graph
  in memory. Nothing is raised and nothing is written on open.
- **Save**: always the whole graph, never incremental. Creates save only
  in realtime mode; update, delete, and clear always save.
- **Concurrency**: none. Mutations are not synchronized; callers sharing
  a connection across threads must lock around it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable, Iterator
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Self

from graphvault.config.settings import GraphVaultSettings
from graphvault.domain.entities import ENTITY_TYPES, Node, Relation
from graphvault.domain.errors import (
    ConnectionClosedError,
    EndpointNotFoundError,
    GraphDecodeError,
    InvalidEntityError,
    RelationExistsError,
)
from graphvault.domain.graph import Graph
from graphvault.infrastructure.filesystem import read_snapshot, snapshot_exists, write_snapshot
from graphvault.infrastructure.graph.engine import GraphEngine
from graphvault.infrastructure.serialization import decode, encode

if TYPE_CHECKING:
    import os
    from types import TracebackType

    import networkx as nx

    from graphvault.domain.selectors import Selector

logger = logging.getLogger(__name__)


class ConnectionStatus(StrEnum):
    """Whether a connection currently holds a graph."""

    CONNECTED = "connected"
    NOT_CONNECTED = "not_connected"


class Connection:
    """Open a graph snapshot and mediate every read, write, and save.

    Usage::

        with Connection("people.gvdb", realtime=True) as conn:
            alice = conn.create_node({"name": "Alice"}, {"Person"})
            bob = conn.create_node({"name": "Bob"}, {"Person"})
            conn.create_relation("knows", by_hash(alice.hash), by_hash(bob.hash))
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        realtime: bool | None = None,
        *,
        settings: GraphVaultSettings | None = None,
    ) -> None:
        self._settings = settings if settings is not None else GraphVaultSettings()
        self._path = Path(path)
        self._realtime = self._settings.realtime if realtime is None else realtime
        self._graph: Graph | None = self._load()
        self._engine = GraphEngine(lambda: self._require_graph())
        self._status = ConnectionStatus.CONNECTED

    @classmethod
    def open(
        cls,
        path: str | os.PathLike[str],
        realtime: bool | None = None,
        *,
        settings: GraphVaultSettings | None = None,
    ) -> Self:
        """Open (or start) the graph stored at *path*."""
        return cls(path, realtime, settings=settings)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def realtime(self) -> bool:
        return self._realtime

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def graph(self) -> Graph:
        """The live in-memory graph."""
        return self._require_graph()

    def _load(self) -> Graph:
        if not snapshot_exists(self._path):
            logger.debug("No snapshot at %s, starting empty graph", self._path)
            return Graph.empty()

        try:
            graph = decode(read_snapshot(self._path))
        except GraphDecodeError as exc:
            logger.warning("Unreadable snapshot %s, starting empty graph: %s", self._path, exc)
            return Graph.empty()

        dangling = len(graph.dangling_relations())
        if dangling:
            logger.warning(
                "Snapshot %s has %d relation(s) with a missing endpoint", self._path, dangling
            )
        logger.debug(
            "Loaded %s: %d node(s), %d relation(s)",
            self._path,
            graph.node_count,
            graph.relation_count,
        )
        return graph

    def save(self) -> bool:
        """Write the entire graph to the snapshot file.

        A missing file is created only when ``settings.create_on_save``
        is set; otherwise saving to a never-written path does nothing.
        Returns True if the file was written.
        """
        graph = self._require_graph()
        if not self._settings.create_on_save and not snapshot_exists(self._path):
            logger.debug("Skipping save: %s does not exist", self._path)
            return False
        write_snapshot(self._path, encode(graph))
        return True

    def close(self) -> None:
        """Release the graph. Unsaved changes are discarded."""
        if self._status is not ConnectionStatus.CONNECTED:
            return
        self._status = ConnectionStatus.NOT_CONNECTED
        self._graph = None
        self._engine.invalidate()
        logger.debug("Closed connection to %s", self._path)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Connection(path={str(self._path)!r}, status={self._status.value})"

    def _require_graph(self) -> Graph:
        if self._graph is None:
            msg = f"Connection to {self._path} is closed"
            raise ConnectionClosedError(msg)
        return self._graph

    def _mutated(self, *, save: bool) -> None:
        self._engine.invalidate()
        if save:
            self.save()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_node(
        self,
        properties: dict[str, str] | None = None,
        labels: Iterable[str] | None = None,
    ) -> Node:
        """Create and store a node with a fresh hash."""
        graph = self._require_graph()
        node = Node(properties=dict(properties or {}), labels=_label_set(labels))
        graph.add_node(node)
        self._mutated(save=self._realtime)
        return node

    def create_relation(
        self,
        relation_name: str,
        source: Selector,
        target: Selector,
        properties: dict[str, str] | None = None,
        labels: Iterable[str] | None = None,
    ) -> Relation:
        """Create a relation between the nodes picked by two selectors.

        Raises:
            EndpointNotFoundError: A selector returned no node, or a node
                that is not stored in this graph.
            RelationExistsError: Any relation already links the same
                source and target, whatever its name.
        """
        graph = self._require_graph()
        source_node = source(graph.nodes)
        if source_node is None or not graph.has_node(source_node.hash):
            raise EndpointNotFoundError("source")
        target_node = target(graph.nodes)
        if target_node is None or not graph.has_node(target_node.hash):
            raise EndpointNotFoundError("target")

        existing = _pair_owner(graph, source_node.hash, target_node.hash)
        if existing is not None:
            raise RelationExistsError(source_node.hash, target_node.hash, existing)

        relation = Relation(
            relation_name=relation_name,
            source_hash=source_node.hash,
            target_hash=target_node.hash,
            properties=dict(properties or {}),
            labels=_label_set(labels),
        )
        graph.add_relation(relation)
        self._mutated(save=self._realtime)
        return relation

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    def update(self, entity: Node | Relation) -> None:
        """Replace the stored entity sharing *entity*'s hash, then save.

        A relation whose source or target changes is held to the same
        rules as ``create_relation``: both endpoints must be stored nodes
        and no other relation may already link the new pair. Relations
        keeping their endpoints are replaced unchecked, so a dangling
        relation can still have its name or properties edited.

        Raises:
            InvalidEntityError: *entity* is neither a Node nor a Relation.
            EntityNotFoundError: No stored entity has that hash.
            EndpointNotFoundError: A re-pointed relation names a missing node.
            RelationExistsError: A re-pointed relation's pair is taken.
        """
        graph = self._require_graph()
        if isinstance(entity, Node):
            graph.replace_node(entity)
        elif isinstance(entity, Relation):
            _check_repointed(graph, entity)
            graph.replace_relation(entity)
        else:
            raise InvalidEntityError(entity)
        self._mutated(save=True)

    def delete(self, entity: Node | Relation) -> int:
        """Delete *entity* and every relation touching it, then save.

        Returns the total number of nodes and relations removed.
        """
        if not isinstance(entity, ENTITY_TYPES):
            raise InvalidEntityError(entity)
        graph = self._require_graph()
        target = entity.hash

        removed = graph.remove_nodes_where(lambda n: n.hash == target)
        removed += graph.remove_relations_where(lambda r: r.touches(target))
        removed += graph.remove_relations_where(lambda r: r.hash == target)

        logger.debug("Deleted %s %s (%d removed)", entity.kind, target, removed)
        self._mutated(save=True)
        return removed

    def clear(self) -> None:
        """Remove every node and relation, then save. The file is kept."""
        self._require_graph().clear()
        self._mutated(save=True)

    def prune_dangling(self) -> int:
        """Remove relations whose endpoints no longer exist, then save."""
        removed = self._require_graph().prune_dangling()
        self._mutated(save=True)
        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> list[Node]:
        """Snapshot list of all nodes."""
        return list(self._require_graph().nodes)

    @property
    def relations(self) -> list[Relation]:
        """Snapshot list of all relations."""
        return list(self._require_graph().relations)

    def get_node(self, node_hash: str) -> Node | None:
        return self._require_graph().get_node(node_hash)

    def get_relation(self, relation_hash: str) -> Relation | None:
        return self._require_graph().get_relation(relation_hash)

    def query_nodes(self, query: Callable[[Collection[Node]], Iterable[Any]]) -> Iterator[Any]:
        """Run *query* over the live node collection.

        Each call re-runs *query*, so results reflect every mutation made
        since the previous call.
        """
        return iter(query(self._require_graph().nodes))

    def query_relations(
        self, query: Callable[[Collection[Relation]], Iterable[Any]]
    ) -> Iterator[Any]:
        """Run *query* over the live relation collection."""
        return iter(query(self._require_graph().relations))

    def find_nodes_with_relation_source(self, relation_name: str) -> list[Node]:
        """Nodes that are the source of some relation named *relation_name*."""
        graph = self._require_graph()
        hashes = {r.source_hash for r in graph.relations if r.relation_name == relation_name}
        return [n for n in graph.nodes if n.hash in hashes]

    def find_nodes_with_relation_target(self, relation_name: str) -> list[Node]:
        """Nodes that are the target of some relation named *relation_name*."""
        graph = self._require_graph()
        hashes = {r.target_hash for r in graph.relations if r.relation_name == relation_name}
        return [n for n in graph.nodes if n.hash in hashes]

    def relations_of(self, node: Node | str) -> list[Relation]:
        """Every relation with *node* (or a node hash) as either endpoint."""
        node_hash = node if isinstance(node, str) else node.hash
        return [r for r in self._require_graph().relations if r.touches(node_hash)]

    def dangling_relations(self) -> list[Relation]:
        return self._require_graph().dangling_relations()

    def to_networkx(self) -> nx.MultiDiGraph:
        """NetworkX projection of the current graph (shared, do not mutate)."""
        self._require_graph()
        return self._engine.graph


def _label_set(labels: Iterable[str] | None) -> set[str]:
    # A bare string is one label, not an iterable of characters.
    if isinstance(labels, str):
        return {labels}
    return set(labels or ())


def _pair_owner(graph: Graph, source_hash: str, target_hash: str) -> Relation | None:
    """The relation already linking *source_hash* to *target_hash*, if any."""
    return next(
        (
            rel
            for rel in graph.relations
            if rel.source_hash == source_hash and rel.target_hash == target_hash
        ),
        None,
    )


def _check_repointed(graph: Graph, relation: Relation) -> None:
    stored = graph.get_relation(relation.hash)
    if stored is None:
        return
    pair = (relation.source_hash, relation.target_hash)
    if (stored.source_hash, stored.target_hash) == pair:
        return
    if not graph.has_node(relation.source_hash):
        raise EndpointNotFoundError("source")
    if not graph.has_node(relation.target_hash):
        raise EndpointNotFoundError("target")
    existing = _pair_owner(graph, *pair)
    if existing is not None and existing.hash != relation.hash:
        raise RelationExistsError(relation.source_hash, relation.target_hash, existing)

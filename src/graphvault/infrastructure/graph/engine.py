"""GraphEngine — lazy-built NetworkX projection of the in-memory graph.

Built on first access and cached until :meth:`GraphEngine.invalidate`.
The connection invalidates after every mutation, so callers always see
the current graph. Relations with a missing endpoint are left out of
the projection.
"""

from __future__ import annotations

from collections.abc import Callable

import networkx as nx

from graphvault.domain.graph import Graph

type _Graph = nx.MultiDiGraph


class GraphEngine:
    """Lazy-loading NetworkX view over a :class:`Graph`."""

    def __init__(self, source: Callable[[], Graph]) -> None:
        self._source = source
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the projection, building it on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached projection, forcing rebuild on next access."""
        self._graph = None

    def _build(self) -> _Graph:
        """Build a MultiDiGraph keyed by node hash.

        Loads all nodes first (so isolated nodes appear in the graph),
        then adds one keyed edge per relation.
        """
        source = self._source()
        g: _Graph = nx.MultiDiGraph()
        for node in source.nodes:
            g.add_node(node.hash, labels=set(node.labels), properties=dict(node.properties))

        for rel in source.relations:
            if not (source.has_node(rel.source_hash) and source.has_node(rel.target_hash)):
                continue
            g.add_edge(
                rel.source_hash,
                rel.target_hash,
                key=rel.hash,
                relation_name=rel.relation_name,
                labels=set(rel.labels),
                properties=dict(rel.properties),
            )
        return g

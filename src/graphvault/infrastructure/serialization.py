"""Snapshot codec — whole-graph msgpack encoding.

Layout (versionless)::

    {"nodes": [<node map>, ...], "relations": [<relation map>, ...]}

Entity maps hold every model field; label sets are written as lists.

INVARIANT: ``decode(encode(g)) == g`` for every graph, including the
empty graph. Anything ``decode`` cannot turn into a graph raises
:class:`GraphDecodeError`; it never returns a partial graph.
"""

from __future__ import annotations

from typing import Any

import msgpack
from pydantic import ValidationError

from graphvault.domain.entities import Node, Relation
from graphvault.domain.errors import DuplicateHashError, GraphDecodeError
from graphvault.domain.graph import Graph

NODES_KEY = "nodes"
RELATIONS_KEY = "relations"


def _dump_entities(entities: Any) -> list[dict[str, Any]]:
    # sorted labels keep the encoding stable across runs
    dumped: list[dict[str, Any]] = []
    for entity in entities:
        data = entity.model_dump()
        data["labels"] = sorted(data["labels"])
        dumped.append(data)
    return dumped


def encode(graph: Graph) -> bytes:
    """Serialize the entire *graph* to bytes."""
    payload = {
        NODES_KEY: _dump_entities(graph.nodes),
        RELATIONS_KEY: _dump_entities(graph.relations),
    }
    return msgpack.packb(payload, use_bin_type=True)


def decode(data: bytes) -> Graph:
    """Deserialize bytes produced by :func:`encode` back into a graph.

    Raises:
        GraphDecodeError: *data* is not a msgpack graph snapshot.
    """
    try:
        payload = msgpack.unpackb(data, raw=False, strict_map_key=True)
    except Exception as exc:  # msgpack raises assorted types on malformed input
        msg = f"Not a msgpack document: {exc}"
        raise GraphDecodeError(msg) from exc

    if not isinstance(payload, dict) or set(payload) != {NODES_KEY, RELATIONS_KEY}:
        msg = "Snapshot must be a map with exactly 'nodes' and 'relations'"
        raise GraphDecodeError(msg)

    raw_nodes = payload[NODES_KEY]
    raw_relations = payload[RELATIONS_KEY]
    if not isinstance(raw_nodes, list) or not isinstance(raw_relations, list):
        msg = "Snapshot 'nodes' and 'relations' must be arrays"
        raise GraphDecodeError(msg)

    try:
        nodes = [Node.model_validate(item) for item in raw_nodes]
        relations = [Relation.model_validate(item) for item in raw_relations]
        return Graph(nodes, relations)
    except ValidationError as exc:
        msg = f"Invalid entity in snapshot: {exc.error_count()} error(s)"
        raise GraphDecodeError(msg) from exc
    except DuplicateHashError as exc:
        msg = f"Corrupt snapshot: {exc}"
        raise GraphDecodeError(msg) from exc

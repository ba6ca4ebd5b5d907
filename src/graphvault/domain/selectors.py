"""Selector factories for resolving relation endpoints.

A selector is any callable that receives the live node collection and
returns the chosen :class:`Node`, or None when nothing matches.
``Connection.create_relation`` accepts arbitrary selectors; these
factories cover the common lookups.
"""

from __future__ import annotations

from collections.abc import Callable, Collection

from graphvault.domain.entities import Node

type Selector = Callable[[Collection[Node]], Node | None]


def by_hash(node_hash: str) -> Selector:
    """Select the node with hash *node_hash*."""

    def select(nodes: Collection[Node]) -> Node | None:
        return next((n for n in nodes if n.hash == node_hash), None)

    return select


def where(predicate: Callable[[Node], bool]) -> Selector:
    """Select the first node (in insertion order) matching *predicate*."""

    def select(nodes: Collection[Node]) -> Node | None:
        return next((n for n in nodes if predicate(n)), None)

    return select


def with_label(label: str, **properties: str) -> Selector:
    """Select the first node carrying *label* and every given property value."""
    return where(
        lambda n: label in n.labels
        and all(n.properties.get(k) == v for k, v in properties.items())
    )

"""Read-only inspection commands: stats, listings, traversal, export."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from graphvault.output.result import CommandResult

if TYPE_CHECKING:
    from graphvault.commands._context import AppContext
    from graphvault.domain.entities import GraphEntity

_path_argument = click.argument("path", type=click.Path(dir_okay=False))


def entity_payload(entity: GraphEntity) -> dict[str, Any]:
    """JSON-ready dict of an entity with labels in sorted order."""
    data = entity.model_dump()
    data["labels"] = sorted(data["labels"])
    return data


@click.command()
@_path_argument
@click.pass_obj
def stats(app: AppContext, path: str) -> None:
    """Show node, relation, and dangling relation counts."""
    with app.connect(path, "stats") as conn:
        graph = conn.graph
        data = {
            "path": str(conn.path),
            "nodes": graph.node_count,
            "relations": graph.relation_count,
            "dangling": len(graph.dangling_relations()),
        }
    app.emit(CommandResult(ok=True, op="stats", data=data))


@click.command()
@_path_argument
@click.option("--label", default=None, help="Only nodes carrying this label.")
@click.pass_obj
def nodes(app: AppContext, path: str, label: str | None) -> None:
    """List nodes."""
    with app.connect(path, "nodes") as conn:
        items = [
            entity_payload(n)
            for n in conn.query_nodes(
                lambda ns: (n for n in ns if label is None or n.has_label(label))
            )
        ]
    app.emit(CommandResult(ok=True, op="nodes", data={"count": len(items), "items": items}))


@click.command()
@_path_argument
@click.option("--name", default=None, help="Only relations with this relation name.")
@click.pass_obj
def relations(app: AppContext, path: str, name: str | None) -> None:
    """List relations."""
    with app.connect(path, "relations") as conn:
        items = [
            entity_payload(r)
            for r in conn.query_relations(
                lambda rs: (r for r in rs if name is None or r.relation_name == name)
            )
        ]
    app.emit(CommandResult(ok=True, op="relations", data={"count": len(items), "items": items}))


@click.command()
@_path_argument
@click.argument("relation_name")
@click.pass_obj
def sources(app: AppContext, path: str, relation_name: str) -> None:
    """List nodes that are the source of RELATION_NAME relations."""
    with app.connect(path, "sources") as conn:
        items = [entity_payload(n) for n in conn.find_nodes_with_relation_source(relation_name)]
    app.emit(CommandResult(ok=True, op="sources", data={"count": len(items), "items": items}))


@click.command()
@_path_argument
@click.argument("relation_name")
@click.pass_obj
def targets(app: AppContext, path: str, relation_name: str) -> None:
    """List nodes that are the target of RELATION_NAME relations."""
    with app.connect(path, "targets") as conn:
        items = [entity_payload(n) for n in conn.find_nodes_with_relation_target(relation_name)]
    app.emit(CommandResult(ok=True, op="targets", data={"count": len(items), "items": items}))


@click.command()
@_path_argument
@click.pass_obj
def export(app: AppContext, path: str) -> None:
    """Dump the whole graph as JSON."""
    with app.connect(path, "export") as conn:
        data = {
            "nodes": [entity_payload(n) for n in conn.nodes],
            "relations": [entity_payload(r) for r in conn.relations],
        }
    app.emit(CommandResult(ok=True, op="export", data=data))

"""Maintenance commands that rewrite the snapshot file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphvault.output.result import CommandResult

if TYPE_CHECKING:
    from graphvault.commands._context import AppContext


@click.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_obj
def prune(app: AppContext, path: str) -> None:
    """Remove relations whose endpoint nodes no longer exist."""
    with app.connect(path, "prune") as conn:
        removed = conn.prune_dangling()
    app.emit(CommandResult(ok=True, op="prune", data={"removed": removed}))


@click.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.confirmation_option(prompt="Remove every node and relation?")
@click.pass_obj
def clear(app: AppContext, path: str) -> None:
    """Remove every node and relation, keeping the file."""
    with app.connect(path, "clear") as conn:
        nodes, relations = conn.graph.node_count, conn.graph.relation_count
        conn.clear()
    app.emit(
        CommandResult(ok=True, op="clear", data={"nodes_removed": nodes, "relations_removed": relations})
    )

"""Subcommand modules for graphvault.

Provides register_commands() which uses deferred imports to keep
``graphvault --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register inspection and maintenance commands on the root CLI group."""
    from graphvault.commands.inspect import export, nodes, relations, sources, stats, targets
    from graphvault.commands.maintain import clear, prune

    for command in (stats, nodes, relations, sources, targets, export, prune, clear):
        cli.add_command(command)

"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Opens connections with the resolved settings and
centralizes result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import click

from graphvault.config.logging import command_context, configure_logging
from graphvault.connection import Connection
from graphvault.infrastructure.filesystem import snapshot_exists
from graphvault.output.formatters import format_result
from graphvault.output.result import CommandError, CommandResult

if TYPE_CHECKING:
    from collections.abc import Iterator

    from graphvault.config.settings import GraphVaultSettings


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: GraphVaultSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @contextmanager
    def connect(self, path: str, op: str) -> Iterator[Connection]:
        """Open the snapshot at *path* for one command, closing afterwards.

        Commands never create snapshots: a missing file is reported as a
        NOT_FOUND error and the command exits with code 1. Log records
        emitted while the connection is open carry *op* and *path*.
        """
        if not snapshot_exists(Path(path)):
            self.emit(
                CommandResult(
                    ok=False,
                    op=op,
                    error=CommandError(code="NOT_FOUND", message=f"No graph file at {path}"),
                )
            )
        with command_context(op, path):
            conn = Connection(path, settings=self.settings)
            try:
                yield conn
            finally:
                conn.close()

    def emit(self, result: CommandResult) -> None:
        """Format and output a CommandResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(result, json_output=self.settings.json_output)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

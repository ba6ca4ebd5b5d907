"""Root CLI group for graphvault with global flags and command registration."""

from __future__ import annotations

import click

from graphvault import __version__
from graphvault.commands import register_commands
from graphvault.commands._context import AppContext
from graphvault.config.settings import GraphVaultSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="graphvault")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="TOML settings file.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """graphvault — inspect and maintain graph snapshot files."""
    # Only flags actually passed override env vars and TOML.
    flags = {"json_output": json_output, "verbose": verbose, "log_json": log_json}
    settings = GraphVaultSettings.from_cli(
        config_path=config_path,
        **{name: value for name, value in flags.items() if value},
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)

"""Operation-specific Rich renderers for CommandResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from graphvault.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from graphvault.output.result import CommandResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: CommandResult) -> str:
    """Render a CommandResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console)

    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: CommandResult) -> None:
    """Print the OK status line."""
    console.print(Text("OK", style="gv.ok"), Text(f"  {result.op}", style="gv.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="gv.key")
    v = Text(str(value), style="gv.hash" if key.endswith("hash") else "")
    console.print(k, v, sep="")


def _joined(values: list[str]) -> str:
    return ", ".join(values)


def _props(properties: dict[str, str]) -> str:
    return ", ".join(f"{k}={v}" for k, v in sorted(properties.items()))


def _node_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Hash", style="gv.hash", no_wrap=True)
    table.add_column("Labels", style="gv.label")
    table.add_column("Properties")
    for item in items:
        table.add_row(item["hash"], _joined(item["labels"]), _props(item["properties"]))
    return table


def _relation_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Hash", style="gv.hash", no_wrap=True)
    table.add_column("Name", style="gv.name")
    table.add_column("Source", no_wrap=True)
    table.add_column("Target", no_wrap=True)
    table.add_column("Labels", style="gv.label")
    table.add_column("Properties")
    for item in items:
        table.add_row(
            item["hash"],
            item["relation_name"],
            item["source_hash"],
            item["target_hash"],
            _joined(item["labels"]),
            _props(item["properties"]),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: CommandResult, console: Console) -> None:
    msg = result.error.message if result.error else "Unknown error"
    console.print(Text("ERROR", style="gv.error"), Text(f"  {result.op}", style="gv.op"), f"- {msg}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_generic(result: CommandResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_nodes(result: CommandResult, console: Console) -> None:
    _status_line(console, result)
    items = result.data.get("items", [])
    if not items:
        console.print(Text("  No nodes.", style="dim"))
        return
    console.print(_node_table(items))
    console.print(Text(f"  {len(items)} node(s)", style="dim"))


def _render_relations(result: CommandResult, console: Console) -> None:
    _status_line(console, result)
    items = result.data.get("items", [])
    if not items:
        console.print(Text("  No relations.", style="dim"))
        return
    console.print(_relation_table(items))
    console.print(Text(f"  {len(items)} relation(s)", style="dim"))


def _render_export(result: CommandResult, console: Console) -> None:
    # Export is machine-readable in both modes.
    console.out(json.dumps(result.data, indent=2, sort_keys=True), highlight=False)


_OP_RENDERERS: dict[str, Callable[[CommandResult, Console], None]] = {
    "nodes": _render_nodes,
    "sources": _render_nodes,
    "targets": _render_nodes,
    "relations": _render_relations,
    "export": _render_export,
}

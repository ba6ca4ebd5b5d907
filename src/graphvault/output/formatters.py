"""Rich/JSON output helpers.

The CLI renders CommandResult for humans (Rich tables) or machines
(--json). This is the single entry point commands use.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from graphvault.output.renderers import render_result

if TYPE_CHECKING:
    from graphvault.output.result import CommandResult


def format_result(result: CommandResult, *, json_output: bool = False) -> str:
    """Format a CommandResult for display.

    Args:
        result: The command result to format.
        json_output: If True, return JSON; otherwise return human-readable text.
    """
    if json_output:
        return result.model_dump_json(indent=2)
    return render_result(result)

"""Log routing for graphvault.

Library modules log through ``logging.getLogger(__name__)`` and never
configure anything themselves. The CLI calls :func:`configure_logging`
once per invocation, which installs a single stderr handler whose
structlog ``ProcessorFormatter`` renders both stdlib and structlog
records, as console lines or as JSON.

While a command works on a snapshot it wraps the work in
:func:`command_context`, so every record emitted in between, including
the connection's load warnings, carries ``op`` and ``path`` fields.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from structlog.types import Processor

PACKAGE_LOGGER = "graphvault"

_HANDLER_NAME = "graphvault-stderr"


def _enrichers() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _renderer(log_json: bool) -> Processor:
    if log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route graphvault records to stderr.

    Only the handler installed by an earlier call is replaced; handlers
    owned by the host application stay attached.

    Args:
        verbose: Let ``graphvault.*`` DEBUG records through. Otherwise
            only warnings and errors are shown.
        log_json: One JSON object per line instead of console text.
    """
    enrichers = _enrichers()
    structlog.configure(
        processors=[*enrichers, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=enrichers,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)


@contextmanager
def command_context(op: str, path: str | os.PathLike[str]) -> Iterator[None]:
    """Tag records emitted inside the block with the command and snapshot."""
    with structlog.contextvars.bound_contextvars(op=op, path=os.fspath(path)):
        yield

"""Shared pytest fixtures and test helpers for graphvault tests."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from graphvault.config.settings import GraphVaultSettings
from graphvault.connection import Connection
from graphvault.domain.entities import Node, Relation
from graphvault.domain.graph import Graph


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep GRAPHVAULT_* variables from the outer environment out of tests."""
    for name in ("GRAPHVAULT_REALTIME", "GRAPHVAULT_CREATE_ON_SAVE", "GRAPHVAULT_VERBOSE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo handlers installed by CLI invocations (configure_logging)."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    gv = logging.getLogger("graphvault")
    gv_level = gv.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    gv.setLevel(gv_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of a snapshot file that does not exist yet."""
    return tmp_path / "graph.gvdb"


@pytest.fixture
def conn(db_path: Path) -> Iterator[Connection]:
    """Open connection on a fresh path, closed after the test."""
    c = Connection(db_path)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def legacy_settings() -> GraphVaultSettings:
    """Settings where save() never creates a missing file."""
    return GraphVaultSettings(create_on_save=False)


@pytest.fixture
def people_graph() -> Graph:
    """Alice -knows-> Bob -works_with-> Carol, plus isolated Dave."""
    alice = Node(hash="alice", properties={"name": "Alice"}, labels={"Person"})
    bob = Node(hash="bob", properties={"name": "Bob"}, labels={"Person"})
    carol = Node(hash="carol", properties={"name": "Carol"}, labels={"Person", "Manager"})
    dave = Node(hash="dave", properties={"name": "Dave"})
    return Graph(
        [alice, bob, carol, dave],
        [
            Relation(
                hash="r1",
                relation_name="knows",
                source_hash="alice",
                target_hash="bob",
                properties={"since": "2020"},
            ),
            Relation(
                hash="r2",
                relation_name="works_with",
                source_hash="bob",
                target_hash="carol",
                labels={"Work"},
            ),
        ],
    )


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_graph(path: Path, graph: Graph) -> None:
    """Write *graph* to *path* as a snapshot file."""
    from graphvault.infrastructure.filesystem import write_snapshot
    from graphvault.infrastructure.serialization import encode

    write_snapshot(path, encode(graph))


def is_uuid4_text(value: str) -> bool:
    """True when *value* is a canonical lowercase UUID4 string."""
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        return False
    return parsed.version == 4 and str(parsed) == value

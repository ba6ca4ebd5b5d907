"""Tests for log routing and command context."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from graphvault.config.logging import PACKAGE_LOGGER, command_context, configure_logging
from graphvault.connection import Connection
from graphvault.domain.entities import Node, Relation
from graphvault.domain.graph import Graph
from tests.conftest import write_graph


def _records(err: str) -> list[dict]:
    return [json.loads(line) for line in err.splitlines() if line.strip()]


@pytest.fixture
def dangling_file(tmp_path: Path) -> Path:
    path = tmp_path / "dangling.gvdb"
    write_graph(
        path,
        Graph(
            [Node(hash="a")],
            [Relation(hash="r", relation_name="x", source_hash="a", target_hash="gone")],
        ),
    )
    return path


class TestLevels:
    def test_verbose_lets_package_debug_through(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG

    def test_quiet_keeps_package_at_warning(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("graphvault.connection").debug("noise")
        assert capfd.readouterr().err == ""


class TestHandlers:
    def test_reconfigure_replaces_own_handler(self) -> None:
        configure_logging()
        configure_logging(log_json=True)
        own = [h for h in logging.getLogger().handlers if h.get_name() == "graphvault-stderr"]
        assert len(own) == 1

    def test_host_handlers_survive(self) -> None:
        host = logging.NullHandler()
        logging.getLogger().addHandler(host)
        configure_logging()
        assert host in logging.getLogger().handlers


class TestCommandContext:
    def test_fields_attached_to_stdlib_records(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(log_json=True)
        with command_context("stats", Path("people.gvdb")):
            logging.getLogger("graphvault.connection").warning("Snapshot looks odd")
        [record] = _records(capfd.readouterr().err)
        assert record["event"] == "Snapshot looks odd"
        assert record["op"] == "stats"
        assert record["path"] == "people.gvdb"
        assert record["level"] == "warning"
        assert record["logger"] == "graphvault.connection"

    def test_fields_dropped_after_block(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        with command_context("stats", "people.gvdb"):
            pass
        logging.getLogger("graphvault").warning("later")
        [record] = _records(capfd.readouterr().err)
        assert "op" not in record
        assert "path" not in record

    def test_dangling_warning_on_open(
        self, dangling_file: Path, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(log_json=True)
        with command_context("prune", dangling_file):
            Connection(dangling_file).close()
        [record] = _records(capfd.readouterr().err)
        assert "missing endpoint" in record["event"]
        assert record["op"] == "prune"
        assert record["path"] == str(dangling_file)

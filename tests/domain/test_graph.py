"""Tests for the Graph aggregate."""

import pytest

from graphvault.domain.entities import Node, Relation
from graphvault.domain.errors import DuplicateHashError, EntityNotFoundError
from graphvault.domain.graph import Graph


def _rel(h: str, src: str, tgt: str, name: str = "r") -> Relation:
    return Relation(hash=h, relation_name=name, source_hash=src, target_hash=tgt)


class TestConstruction:
    def test_empty(self) -> None:
        g = Graph.empty()
        assert g.node_count == 0
        assert g.relation_count == 0
        assert list(g.nodes) == []

    def test_from_iterables(self, people_graph: Graph) -> None:
        assert people_graph.node_count == 4
        assert people_graph.relation_count == 2

    def test_duplicate_node_hash_rejected(self) -> None:
        with pytest.raises(DuplicateHashError):
            Graph([Node(hash="a"), Node(hash="a")])

    def test_duplicate_relation_hash_rejected(self) -> None:
        g = Graph([Node(hash="a")])
        g.add_relation(_rel("r", "a", "a"))
        with pytest.raises(DuplicateHashError):
            g.add_relation(_rel("r", "a", "a"))


class TestViews:
    def test_nodes_view_is_live(self) -> None:
        g = Graph.empty()
        view = g.nodes
        g.add_node(Node(hash="a"))
        assert [n.hash for n in view] == ["a"]

    def test_lookup(self, people_graph: Graph) -> None:
        assert people_graph.get_node("alice").properties["name"] == "Alice"
        assert people_graph.get_relation("r1").relation_name == "knows"
        assert people_graph.get_node("nobody") is None
        assert people_graph.has_node("dave")


class TestReplace:
    def test_replace_node(self, people_graph: Graph) -> None:
        people_graph.replace_node(Node(hash="alice", properties={"name": "Alicia"}))
        node = people_graph.get_node("alice")
        assert node.properties == {"name": "Alicia"}
        assert node.labels == set()  # full replace, not merge

    def test_replace_relation(self, people_graph: Graph) -> None:
        people_graph.replace_relation(_rel("r1", "alice", "carol", name="manages"))
        rel = people_graph.get_relation("r1")
        assert rel.relation_name == "manages"
        assert rel.target_hash == "carol"

    def test_replace_missing_raises(self) -> None:
        with pytest.raises(EntityNotFoundError) as exc_info:
            Graph.empty().replace_node(Node(hash="ghost"))
        assert "ghost" in str(exc_info.value)

    def test_not_found_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            Graph.empty().replace_relation(_rel("ghost", "a", "b"))


class TestRemove:
    def test_remove_nodes_where(self, people_graph: Graph) -> None:
        removed = people_graph.remove_nodes_where(lambda n: "Person" in n.labels)
        assert removed == 3
        assert [n.hash for n in people_graph.nodes] == ["dave"]

    def test_remove_relations_where_none_match(self, people_graph: Graph) -> None:
        assert people_graph.remove_relations_where(lambda r: False) == 0
        assert people_graph.relation_count == 2

    def test_clear(self, people_graph: Graph) -> None:
        people_graph.clear()
        assert people_graph == Graph.empty()


class TestDangling:
    def test_none_in_consistent_graph(self, people_graph: Graph) -> None:
        assert people_graph.dangling_relations() == []

    def test_detects_missing_endpoint(self, people_graph: Graph) -> None:
        people_graph.remove_nodes_where(lambda n: n.hash == "carol")
        assert [r.hash for r in people_graph.dangling_relations()] == ["r2"]

    def test_prune(self, people_graph: Graph) -> None:
        people_graph.remove_nodes_where(lambda n: n.hash == "alice")
        assert people_graph.prune_dangling() == 1
        assert [r.hash for r in people_graph.relations] == ["r2"]


class TestEquality:
    def test_equal_regardless_of_order(self) -> None:
        a = Graph([Node(hash="1"), Node(hash="2")])
        b = Graph([Node(hash="2"), Node(hash="1")])
        assert a == b

    def test_content_difference(self) -> None:
        a = Graph([Node(hash="1", labels={"x"})])
        b = Graph([Node(hash="1")])
        assert a != b

    def test_unhashable(self) -> None:
        with pytest.raises(TypeError):
            hash(Graph.empty())

    def test_repr(self, people_graph: Graph) -> None:
        assert repr(people_graph) == "Graph(nodes=4, relations=2)"

"""Tests for the node graph store."""

import pytest

from textflow.nodes import NodeGraph, NodeType, get_node_template, get_node_templates
from textflow.results import OperationStatus


def _make(graph, node_type):
    node = get_node_template(node_type).instantiate(graph.issue_node_id())
    graph.add_node(node)
    return node


class TestNodeIds:
    def test_ids_are_sequential(self):
        graph = NodeGraph()
        assert [graph.issue_node_id() for _ in range(3)] == ["1", "2", "3"]

    def test_removed_id_not_reused(self):
        graph = NodeGraph()
        first = _make(graph, "text")
        second = _make(graph, "text")
        graph.remove_node(second.id)
        third = _make(graph, "text")
        assert (first.id, second.id, third.id) == ("1", "2", "3")

    def test_explicit_ids_bump_counter(self):
        graph = NodeGraph()
        graph.add_node(get_node_template("text").instantiate("10"))
        assert graph.issue_node_id() == "11"

    def test_clear_keeps_counter(self):
        graph = NodeGraph()
        _make(graph, "text")
        graph.clear()
        assert graph.is_empty()
        assert graph.issue_node_id() == "2"


class TestTemplates:
    def test_every_type_has_a_template(self):
        assert {template.type for template in get_node_templates()} == set(NodeType)

    @pytest.mark.parametrize(
        "node_type, inputs, outputs",
        [("source", 0, 1), ("result", 1, 0), ("text", 1, 1), ("preview", 1, 1)],
    )
    def test_default_port_counts(self, node_type, inputs, outputs):
        node = get_node_template(node_type).instantiate("5")
        assert len(node.inputs) == inputs
        assert len(node.outputs) == outputs

    def test_default_text_and_title(self):
        node = get_node_template("python").instantiate("5")
        assert node.title == "Python 5"
        assert node.text == "python 5"
        assert node.description == "Runs Python code"
        assert get_node_template("preview").instantiate("6").text == ""

    def test_source_starts_as_text_kind(self):
        node = get_node_template("source").instantiate("1")
        assert node.config["source_kind"] == "text"

    def test_unknown_type_raises_key_error(self):
        with pytest.raises(KeyError):
            get_node_template("shader")


class TestConnections:
    def test_rejects_missing_ports(self):
        graph = NodeGraph()
        a = _make(graph, "text")
        b = _make(graph, "text")
        status, reason = graph.can_connect(a.id, "output9", b.id, "input1")
        assert status == OperationStatus.NOT_FOUND
        assert reason
        status, _ = graph.can_connect(a.id, "output1", "99", "input1")
        assert status == OperationStatus.NOT_FOUND

    def test_rejects_occupied_target(self):
        graph = NodeGraph()
        a, b, c = (_make(graph, "text") for _ in range(3))
        assert graph.connect(a.id, "output1", c.id, "input1") is not None
        assert graph.connect(b.id, "output1", c.id, "input1") is None
        assert len(graph.connections_to(c.id, "input1")) == 1

    def test_rejects_cycles_and_self_loops(self):
        graph = NodeGraph()
        a, b = _make(graph, "text"), _make(graph, "text")
        graph.connect(a.id, "output1", b.id, "input1")
        status, _ = graph.can_connect(b.id, "output1", a.id, "input1")
        assert status == OperationStatus.CYCLE
        status, _ = graph.can_connect(a.id, "output1", a.id, "input1")
        assert status == OperationStatus.CYCLE

    def test_cycles_allowed_when_requested(self):
        graph = NodeGraph()
        a, b = _make(graph, "text"), _make(graph, "text")
        graph.connect(a.id, "output1", b.id, "input1")
        edge = graph.connect(b.id, "output1", a.id, "input1", allow_cycles=True)
        assert edge is not None

    def test_remove_node_drops_touching_edges(self):
        graph = NodeGraph()
        a, b, c = (_make(graph, "text") for _ in range(3))
        graph.connect(a.id, "output1", b.id, "input1")
        graph.connect(b.id, "output1", c.id, "input1")
        removed = graph.remove_node(b.id)
        assert len(removed) == 2
        assert graph.edges() == ()

    def test_edge_queries(self):
        graph = NodeGraph()
        a, b = _make(graph, "text"), _make(graph, "result")
        edge = graph.connect(a.id, "output1", b.id, "input1")
        assert graph.outgoing(a.id) == (edge,)
        assert graph.incoming(b.id) == (edge,)
        assert graph.connections_from(a.id, "output2") == ()
        assert graph.get_edge(edge.id) is edge
        assert graph.remove_edges([edge.id]) == (edge,)
        assert graph.get_edge(edge.id) is None


def test_node_position_round_trip():
    graph = NodeGraph()
    node = _make(graph, "text")
    assert graph.node_position(node.id) is None
    graph.set_node_position(node.id, 3, 4)
    assert graph.node_position(node.id) == (3.0, 4.0)

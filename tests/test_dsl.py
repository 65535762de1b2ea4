"""Tests for the diagram building DSL."""

import pytest

from scriptflow import connect, diagram, node
from scriptflow.models import NodeType


def test_diagram_collects_nodes_and_connections():
    with diagram(name="Paste") as d:
        copy = node("key_combination", "Ctrl+C", x=0, y=0)
        wait = node("delay", "200 ms", x=0, y=120)
        paste = node(NodeType.KEY_COMBINATION, "Ctrl+V", x=0, y=240)

        copy >> wait >> paste

    assert d.name == "Paste"
    assert [n.label for n in d.nodes] == ["Ctrl+C", "200 ms", "Ctrl+V"]
    assert d.nodes[1].type == NodeType.DELAY
    assert [(c.source, c.target) for c in d.connections] == [
        (copy.id, wait.id),
        (wait.id, paste.id),
    ]


def test_connect_function_links_nodes():
    with diagram() as d:
        a = node(label="A", id="a")
        b = node(label="B", id="b", y=200)
        conn = connect(a, b)

    assert d.connections == [conn]
    assert (conn.source, conn.target) == ("a", "b")


def test_generated_node_ids_are_unique():
    with diagram() as d:
        node()
        node()
    assert d.nodes[0].id != d.nodes[1].id


def test_node_outside_diagram_raises():
    with pytest.raises(RuntimeError):
        node("command", "orphan")


def test_connect_outside_diagram_raises():
    with diagram():
        a = node(id="a")
        b = node(id="b")
    with pytest.raises(RuntimeError):
        connect(a, b)


def test_unknown_node_type_raises():
    with diagram():
        with pytest.raises(ValueError):
            node("teleport")


def test_routing_config_is_attached():
    from scriptflow.routing import RoutingConfig

    config = RoutingConfig(margin=5)
    with diagram(routing=config) as d:
        pass
    assert d.routing_config is config


def test_diagram_renders_on_exit(tmp_path):
    target = tmp_path / "flow"

    with diagram(filename=str(target)):
        a = node("command", "GUI r", x=0, y=0)
        b = node("text_input", "notepad", x=0, y=150)
        a >> b

    assert (tmp_path / "flow.svg").exists()


def test_generated_ids_skip_explicit_ones():
    with diagram() as d:
        node(id="node_1")
        node(id="node_2")
        node(id="node_3")
        for _ in range(5):
            node()

    ids = [n.id for n in d.nodes]
    assert len(set(ids)) == 8
    assert ids[3:] == ["node_4", "node_5", "node_6", "node_7", "node_8"]


def test_generated_ids_restart_in_each_diagram():
    with diagram() as first:
        node()
    with diagram() as second:
        node()

    assert first.nodes[0].id == second.nodes[0].id == "node_1"

"""Data models for scriptflow diagrams."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from .routing import RoutingConfig

DEFAULT_NODE_WIDTH = 112
DEFAULT_NODE_HEIGHT = 50


class NodeType(Enum):
    """Kinds of script steps a node can represent."""

    COMMAND = "command"
    KEY_COMBINATION = "key_combination"
    TEXT_INPUT = "text_input"
    DELAY = "delay"
    LOOP = "loop"
    CONDITION = "condition"


@dataclass(frozen=True)
class Point:
    """A 2D canvas coordinate."""

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box. Origin is top-left, y grows downward."""

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def expanded(self, margin: float) -> Rect:
        """Return a copy grown by ``margin`` on every side."""
        return Rect(
            self.x - margin,
            self.y - margin,
            self.width + margin * 2,
            self.height + margin * 2,
        )

    def contains(self, point: Point) -> bool:
        """Inclusive containment test."""
        return (
            self.left <= point.x <= self.right
            and self.top <= point.y <= self.bottom
        )


@dataclass
class Node:
    """A step of the script placed on the canvas."""

    id: str
    type: NodeType = NodeType.COMMAND
    x: float = 0
    y: float = 0
    label: str = ""
    width: float | None = None
    height: float | None = None
    _diagram: Diagram | None = field(default=None, repr=False, compare=False)

    def bounds(self) -> Rect:
        """Bounding box, using the default size for missing dimensions."""
        return Rect(
            self.x,
            self.y,
            self.width or DEFAULT_NODE_WIDTH,
            self.height or DEFAULT_NODE_HEIGHT,
        )

    def __rshift__(self, other: Node) -> Connection:
        """Connect this node to another one (a >> b)."""
        if self._diagram is None:
            raise ValueError(f"Node '{self.id}' does not belong to a diagram")
        return self._diagram.connect(self, other)


@dataclass
class Connection:
    """A directional link between two nodes, by id."""

    id: str
    source: str
    target: str
    _diagram: Diagram | None = field(default=None, repr=False, compare=False)

    def __rshift__(self, other: Node) -> Connection:
        """Chain connections: a >> b >> c."""
        if self._diagram is None:
            raise ValueError(f"Connection '{self.id}' does not belong to a diagram")
        return self._diagram.connect(self.target, other)


@dataclass
class Diagram:
    """A script: nodes on a canvas plus the links between them."""

    name: str = "New Script"
    nodes: list[Node] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)
    routing_config: RoutingConfig | None = None

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for node in self.nodes:
            if node.id in seen:
                raise ValueError(f"Duplicate node id '{node.id}'")
            seen.add(node.id)
            node._diagram = self
        connection_ids: set[str] = set()
        for connection in self.connections:
            for node_id in (connection.source, connection.target):
                if node_id not in seen:
                    raise ValueError(
                        f"Connection '{connection.id}' references unknown node '{node_id}'"
                    )
            if connection.source == connection.target:
                raise ValueError(
                    f"Connection '{connection.id}' links node '{connection.source}' to itself"
                )
            if connection.id in connection_ids:
                raise ValueError(f"Duplicate connection id '{connection.id}'")
            connection_ids.add(connection.id)
            connection._diagram = self

    def add_node(self, node: Node) -> Node:
        if any(existing.id == node.id for existing in self.nodes):
            raise ValueError(f"Duplicate node id '{node.id}'")
        node._diagram = self
        self.nodes.append(node)
        return node

    def next_node_id(self) -> str:
        """Return the first `node_<n>` id not yet used in this diagram."""
        used = {node.id for node in self.nodes}
        index = len(self.nodes) + 1
        while f"node_{index}" in used:
            index += 1
        return f"node_{index}"

    def get_node(self, node_id: str) -> Node:
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise KeyError(node_id)

    def connect(self, source: Node | str, target: Node | str) -> Connection:
        """Create a connection between two nodes of this diagram.

        Args:
            source: Node (or node id) the link leaves from
            target: Node (or node id) the link enters

        Returns:
            The new Connection
        """
        source_id = source if isinstance(source, str) else source.id
        target_id = target if isinstance(target, str) else target.id

        known = {node.id for node in self.nodes}
        for node_id in (source_id, target_id):
            if node_id not in known:
                raise ValueError(f"Unknown node id '{node_id}'")
        if source_id == target_id:
            raise ValueError(f"Cannot connect node '{source_id}' to itself")

        used = {connection.id for connection in self.connections}
        index = len(self.connections) + 1
        while f"conn_{index}" in used:
            index += 1

        connection = Connection(
            id=f"conn_{index}",
            source=source_id,
            target=target_id,
            _diagram=self,
        )
        self.connections.append(connection)
        return connection

    def graph(self) -> nx.MultiDiGraph:
        """Build the connection graph (node ids as vertices, links as edges)."""
        graph = nx.MultiDiGraph()
        for node in self.nodes:
            graph.add_node(node.id, node=node)
        for connection in self.connections:
            graph.add_edge(
                connection.source,
                connection.target,
                connection=connection,
            )
        return graph

"""Python DSL for assembling script diagrams."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Literal

from .models import Connection, Diagram, Node, NodeType
from .renderer import render_to_svg

if TYPE_CHECKING:
    from collections.abc import Generator

    from .routing import RoutingConfig

# Type alias for the type parameter
NodeTypeLiteral = Literal[
    "command", "key_combination", "text_input", "delay", "loop", "condition",
]

# Context stack for nested diagram blocks
_diagram_stack: list[Diagram] = []


def _current_diagram() -> Diagram | None:
    """Get the current diagram context."""
    return _diagram_stack[-1] if _diagram_stack else None


def _parse_node_type(value: NodeTypeLiteral | NodeType) -> NodeType:
    """Convert string literal to NodeType enum."""
    if isinstance(value, NodeType):
        return value
    return NodeType(value)


@contextmanager
def diagram(
        name: str = "New Script",
        filename: str | None = None,
        routing: RoutingConfig | None = None,
) -> Generator[Diagram]:
    """Create a diagram context.

    Usage:
        with diagram(name="Open terminal", filename="output/terminal"):
            run = node("key_combination", "Win+R", x=0, y=0)
            wait = node("delay", "500 ms", x=0, y=120)
            run >> wait

    Args:
        name: Script name
        filename: Output filename (without extension); rendered on exit if set
        routing: Connection routing constants for this diagram

    Yields:
        The Diagram object
    """
    d = Diagram(name=name, routing_config=routing)
    _diagram_stack.append(d)

    try:
        yield d
    finally:
        _diagram_stack.pop()

    if filename:
        render_to_svg(d, filename)


def node(
        type: NodeTypeLiteral | NodeType = "command",
        label: str = "",
        x: float = 0,
        y: float = 0,
        id: str | None = None,
        **kwargs: Any,
) -> Node:
    """Place a node on the active diagram.

    Args:
        type: Node type ("command", "delay", ...)
        label: Node label text
        x: Left edge on the canvas
        y: Top edge on the canvas
        id: Node id; generated when omitted
        **kwargs: Additional node options (width, height)

    Returns:
        The new Node
    """
    current = _current_diagram()
    if current is None:
        raise RuntimeError("node() must be called inside a diagram() block")

    n = Node(
        id=id or current.next_node_id(),
        type=_parse_node_type(type),
        x=x,
        y=y,
        label=label,
        **kwargs,
    )
    return current.add_node(n)


def connect(source: Node, target: Node) -> Connection:
    """Link two nodes of the active diagram.

    Usage:
        connect(run, wait)  # same as run >> wait
    """
    current = _current_diagram()
    if current is None:
        raise RuntimeError("connect() must be called inside a diagram() block")
    return current.connect(source, target)

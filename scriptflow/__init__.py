"""scriptflow - Obstacle-aware connection routing for script diagrams.

Example usage:
    from scriptflow import diagram, node

    with diagram(name="Open terminal", filename="terminal"):
        run = node("key_combination", "Win+R", x=0, y=0)
        typed = node("text_input", "cmd", x=0, y=120)
        enter = node("command", "ENTER", x=0, y=240)

        run >> typed >> enter
"""

from .dsl import (
    connect,
    diagram,
    node,
)
from .models import (
    DEFAULT_NODE_HEIGHT,
    DEFAULT_NODE_WIDTH,
    Connection,
    Diagram,
    Node,
    NodeType,
    Point,
    Rect,
)
from .renderer import (
    DEFAULT_THEME,
    DiagramRenderer,
    Theme,
    candidate_to_path,
    render_to_svg,
)
from .routing import (
    LineSegment,
    PathCandidate,
    QuadSegment,
    RoutingConfig,
    Side,
    calculate_connection_path,
    route_diagram,
)

__version__ = "0.1.0"

__all__ = [
    # DSL functions
    "diagram",
    "node",
    "connect",
    # Models
    "Diagram",
    "Node",
    "NodeType",
    "Connection",
    "Point",
    "Rect",
    "DEFAULT_NODE_WIDTH",
    "DEFAULT_NODE_HEIGHT",
    # Routing
    "RoutingConfig",
    "Side",
    "PathCandidate",
    "LineSegment",
    "QuadSegment",
    "calculate_connection_path",
    "route_diagram",
    # Rendering
    "render_to_svg",
    "candidate_to_path",
    "DiagramRenderer",
    "Theme",
    "DEFAULT_THEME",
    # Version
    "__version__",
]

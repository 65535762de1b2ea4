"""SVG renderer using drawsvg."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

import drawsvg as draw

from .models import NodeType
from .routing import LineSegment, QuadSegment, route_diagram

if TYPE_CHECKING:
    from .models import Diagram, Node
    from .routing import PathCandidate


class Theme:
    """Color theme for script diagrams."""

    def __init__(
        self,
        background: str = "#ffffff",
        node_fill: str = "#f8fafc",
        node_stroke: str = "#cbd5e1",
        text_color: str = "#1e293b",
        edge_color: str = "#64748b",
        type_colors: dict[NodeType, str] | None = None,
    ):
        self.background = background
        self.node_fill = node_fill
        self.node_stroke = node_stroke
        self.text_color = text_color
        self.edge_color = edge_color
        self.type_colors = type_colors or {
            NodeType.COMMAND: "#3b82f6",
            NodeType.KEY_COMBINATION: "#8b5cf6",
            NodeType.TEXT_INPUT: "#10b981",
            NodeType.DELAY: "#f59e0b",
            NodeType.LOOP: "#ec4899",
            NodeType.CONDITION: "#ef4444",
        }


DEFAULT_THEME = Theme()


def truncate_text(text: str, max_chars: int) -> str:
    """Truncate text to max characters with ellipsis."""
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 1] + "…"  # Unicode ellipsis


def candidate_to_path(candidate: PathCandidate, **kwargs: Any) -> draw.Path:
    """Turn a routed candidate into a drawsvg Path.

    Args:
        candidate: Routed connection
        **kwargs: SVG attributes for the path (stroke, stroke_width, ...)

    Returns:
        Path with one M command followed by L/Q commands per segment
    """
    path = draw.Path(**kwargs)
    path.M(candidate.start.x, candidate.start.y)

    for segment in candidate.segments:
        if isinstance(segment, QuadSegment):
            path.Q(
                segment.control.x, segment.control.y,
                segment.end.x, segment.end.y,
            )
        elif isinstance(segment, LineSegment):
            path.L(segment.end.x, segment.end.y)
        else:
            raise TypeError(f"Unsupported segment type: {type(segment).__name__}")

    return path


class DiagramRenderer:
    """Renders script diagrams to SVG."""

    def __init__(
        self,
        theme: Theme | None = None,
        padding: float = 40,
        arrow_size: float = 8,
        max_label_chars: int = 14,
    ):
        self.theme = theme or DEFAULT_THEME
        self.padding = padding
        self.arrow_size = arrow_size
        self.max_label_chars = max_label_chars

    def render(self, diagram: Diagram) -> draw.Drawing:
        """Render a diagram to an SVG Drawing object."""
        routes = route_diagram(diagram)

        # Canvas covers nodes and routes (U-paths can leave the node area)
        xs: list[float] = []
        ys: list[float] = []
        for node in diagram.nodes:
            bounds = node.bounds()
            xs.extend((bounds.left, bounds.right))
            ys.extend((bounds.top, bounds.bottom))
        for candidate in routes.values():
            for point in candidate.points() + list(candidate.control_points):
                xs.append(point.x)
                ys.append(point.y)

        if xs:
            min_x, max_x = min(xs), max(xs)
            min_y, max_y = min(ys), max(ys)
        else:
            min_x = max_x = min_y = max_y = 0

        origin_x = min_x - self.padding
        origin_y = min_y - self.padding
        width = max_x - min_x + self.padding * 2
        height = max_y - min_y + self.padding * 2

        d = draw.Drawing(width, height, origin=(origin_x, origin_y))

        # Add background
        d.append(
            draw.Rectangle(
                origin_x, origin_y, width, height,
                fill=self.theme.background,
            )
        )

        for node in diagram.nodes:
            self._render_node(d, node)

        # Connections on top so arrowheads are visible
        for connection in diagram.connections:
            self._render_connection(d, routes[connection.id])

        return d

    def _render_node(self, d: draw.Drawing, node: Node) -> None:
        """Render a single node."""
        bounds = node.bounds()
        accent = self.theme.type_colors.get(node.type, self.theme.node_stroke)

        d.append(
            draw.Rectangle(
                bounds.x, bounds.y, bounds.width, bounds.height,
                fill=self.theme.node_fill,
                stroke=accent,
                stroke_width=1.5,
                rx=6, ry=6,
            )
        )

        label_text = truncate_text(node.label or node.type.value, self.max_label_chars)
        d.append(
            draw.Text(
                label_text,
                12,
                bounds.center_x, bounds.y + bounds.height / 2,
                fill=self.theme.text_color,
                font_family="Inter, -apple-system, BlinkMacSystemFont, sans-serif",
                font_weight="500",
                text_anchor="middle",
                dominant_baseline="middle",
            )
        )

    def _render_connection(self, d: draw.Drawing, candidate: PathCandidate) -> None:
        """Stroke a routed connection and mark its end with an arrowhead."""
        d.append(
            candidate_to_path(
                candidate,
                stroke=self.theme.edge_color,
                stroke_width=1.5,
                fill="none",
            )
        )

        # Arrow follows the tangent of the last segment
        last = candidate.segments[-1]
        before = last.control if isinstance(last, QuadSegment) else last.start
        end = candidate.end
        if before == end:
            angle = math.pi / 2
        else:
            angle = math.atan2(end.y - before.y, end.x - before.x)
        self._draw_arrowhead(d, end.x, end.y, angle, self.arrow_size)

    def _draw_arrowhead(
        self,
        d: draw.Drawing,
        x: float,
        y: float,
        angle: float,
        size: float,
    ) -> None:
        """Draw an arrowhead at the given position and angle."""
        # Triangle arrowhead points
        p1_x = x - size * math.cos(angle - math.pi / 6)
        p1_y = y - size * math.sin(angle - math.pi / 6)
        p2_x = x - size * math.cos(angle + math.pi / 6)
        p2_y = y - size * math.sin(angle + math.pi / 6)

        d.append(
            draw.Lines(
                x, y,
                p1_x, p1_y,
                p2_x, p2_y,
                x, y,
                fill=self.theme.edge_color,
                stroke="none",
            )
        )


def render_to_svg(diagram: Diagram, filename: str | None = None) -> str:
    """Render a diagram to SVG.

    Args:
        diagram: The diagram to render
        filename: Optional filename to save to (without extension)

    Returns:
        SVG content as string
    """
    renderer = DiagramRenderer()
    drawing = renderer.render(diagram)

    if filename:
        drawing.save_svg(f"{filename}.svg")

    return drawing.as_svg()

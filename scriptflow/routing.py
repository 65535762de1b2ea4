"""Obstacle-aware connection routing between script nodes.

Every public function here is pure: it reads node positions and returns a
freshly built PathCandidate. Nothing is cached between calls, so the router
can be invoked on every drag update.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .models import Point

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from .models import Diagram, Node, Rect

logger = logging.getLogger(__name__)


@dataclass
class RoutingConfig:
    """Tunable constants of the connection router."""

    # Clearance kept around every obstacle
    margin: float = 15.0
    # Gap between a node border and the connection anchor
    anchor_offset: float = 6.0
    # Upward direct lines are only accepted when shorter than this
    upward_direct_limit: float = 100.0
    # S-path vertical leg: clamp(distance * ratio, min, max)
    s_min_vertical_offset: float = 20.0
    s_max_vertical_offset: float = 40.0
    s_vertical_ratio: float = 0.1
    # S-path horizontal excursion: max(min, distance * ratio) * multiplier
    s_min_horizontal_offset: float = 60.0
    s_horizontal_ratio: float = 0.25
    s_offset_multipliers: tuple[float, ...] = (1.0, 1.2, 1.5, 2.0)
    # U-path clearance above the higher anchor: max(min, |dx| * ratio)
    u_min_offset: float = 40.0
    u_offset_ratio: float = 0.3
    # Curve bulge: clamp(distance * ratio, min, max)
    curve_min_radius: float = 30.0
    curve_max_radius: float = 80.0
    curve_radius_ratio: float = 0.4
    # Curves are ranked as if they were this much longer than a straight line
    curve_length_factor: float = 1.2
    # Curve collision is a point-sampling approximation, not an exact
    # curve/rectangle intersection. The curve is sampled at
    # curve_samples + 1 evenly spaced parameters (t = 0 .. 1).
    curve_samples: int = 20


DEFAULT_ROUTING_CONFIG = RoutingConfig()


class Side(Enum):
    """Which way a mirrored strategy bends, as a sign on the x axis."""

    RIGHT = 1
    LEFT = -1


@dataclass(frozen=True)
class LineSegment:
    """Straight stroke from start to end."""

    start: Point
    end: Point

    def point_at(self, t: float) -> Point:
        return Point(
            self.start.x + (self.end.x - self.start.x) * t,
            self.start.y + (self.end.y - self.start.y) * t,
        )


@dataclass(frozen=True)
class QuadSegment:
    """Quadratic Bezier stroke from start to end bending towards control."""

    start: Point
    control: Point
    end: Point

    def point_at(self, t: float) -> Point:
        return sample_quadratic_curve(self.start, self.control, self.end, t)


Segment = LineSegment | QuadSegment


@dataclass(frozen=True)
class PathCandidate:
    """A continuous drawable route between two anchors.

    Attributes:
        segments: Ordered strokes, each starting where the previous one ends
        control_points: Bend points (polylines) or the curve control point
        length: Estimated length, only meaningful for ranking
        strategy: Name of the generator that produced the route
    """

    segments: tuple[Segment, ...]
    control_points: tuple[Point, ...]
    length: float
    strategy: str

    @property
    def start(self) -> Point:
        return self.segments[0].start

    @property
    def end(self) -> Point:
        return self.segments[-1].end

    def points(self) -> list[Point]:
        """Segment endpoints in drawing order (start, bends..., end)."""
        result = [self.segments[0].start]
        result.extend(segment.end for segment in self.segments)
        return result


def _polyline(points: Sequence[Point], strategy: str) -> PathCandidate:
    """Build a line-only candidate through ``points``."""
    segments = tuple(
        LineSegment(a, b) for a, b in zip(points, points[1:])
    )
    length = sum(a.distance_to(b) for a, b in zip(points, points[1:]))
    return PathCandidate(
        segments=segments,
        control_points=tuple(points[1:-1]),
        length=length,
        strategy=strategy,
    )


def get_connection_points(
    source: Node,
    target: Node,
    config: RoutingConfig = DEFAULT_ROUTING_CONFIG,
) -> tuple[Point, Point]:
    """Resolve the fixed anchors of a connection.

    Connections leave below the bottom-center of the source and enter
    above the top-center of the target.
    """
    source_bounds = source.bounds()
    target_bounds = target.bounds()

    start = Point(
        source_bounds.center_x,
        source_bounds.bottom + config.anchor_offset,
    )
    end = Point(
        target_bounds.center_x,
        target_bounds.top - config.anchor_offset,
    )
    return start, end


def segment_intersects_rect(
    start: Point,
    end: Point,
    rect: Rect,
    margin: float = DEFAULT_ROUTING_CONFIG.margin,
) -> bool:
    """Check whether a segment crosses any edge of an expanded rectangle.

    Solves the segment's parametric equation against each of the four edges
    of ``rect`` grown by ``margin``. An axis with zero extent has no
    crossing parameter and is skipped.
    """
    box = rect.expanded(margin)

    dx = end.x - start.x
    dy = end.y - start.y

    if dx != 0:
        for edge_x in (box.left, box.right):
            t = (edge_x - start.x) / dx
            if 0 <= t <= 1:
                y = start.y + t * dy
                if box.top <= y <= box.bottom:
                    return True

    if dy != 0:
        for edge_y in (box.top, box.bottom):
            t = (edge_y - start.y) / dy
            if 0 <= t <= 1:
                x = start.x + t * dx
                if box.left <= x <= box.right:
                    return True

    return False


def check_path_collision(
    start: Point,
    end: Point,
    nodes: Sequence[Node],
    exclude_ids: Collection[str],
    config: RoutingConfig = DEFAULT_ROUTING_CONFIG,
) -> bool:
    """Check a segment against every node not listed in ``exclude_ids``."""
    for node in nodes:
        if node.id in exclude_ids:
            continue
        if segment_intersects_rect(start, end, node.bounds(), config.margin):
            return True
    return False


def _polyline_collides(
    points: Sequence[Point],
    nodes: Sequence[Node],
    exclude_ids: Collection[str],
    config: RoutingConfig,
) -> bool:
    return any(
        check_path_collision(a, b, nodes, exclude_ids, config)
        for a, b in zip(points, points[1:])
    )


def sample_quadratic_curve(
    start: Point,
    control: Point,
    end: Point,
    t: float,
) -> Point:
    """Evaluate a quadratic Bezier curve at parameter ``t``."""
    mt = 1 - t
    return Point(
        mt * mt * start.x + 2 * mt * t * control.x + t * t * end.x,
        mt * mt * start.y + 2 * mt * t * control.y + t * t * end.y,
    )


def check_curve_collision(
    start: Point,
    control: Point,
    end: Point,
    nodes: Sequence[Node],
    exclude_ids: Collection[str],
    config: RoutingConfig = DEFAULT_ROUTING_CONFIG,
) -> bool:
    """Approximate curve collision by sampling points along the curve.

    Any sample falling inside a non-excluded node's expanded bounds counts
    as a collision. Thin obstacles between two samples can be missed.
    """
    obstacles = [
        node.bounds().expanded(config.margin)
        for node in nodes
        if node.id not in exclude_ids
    ]
    if not obstacles:
        return False

    samples = max(1, config.curve_samples)
    for i in range(samples + 1):
        point = sample_quadratic_curve(start, control, end, i / samples)
        if any(box.contains(point) for box in obstacles):
            return True
    return False


def direct_path(
    start: Point,
    end: Point,
    nodes: Sequence[Node],
    exclude_ids: Collection[str],
    config: RoutingConfig = DEFAULT_ROUTING_CONFIG,
) -> PathCandidate | None:
    """Straight line, unless it points far upwards or hits an obstacle."""
    distance = start.distance_to(end)
    is_upward = end.y < start.y
    if is_upward and distance >= config.upward_direct_limit:
        return None

    if check_path_collision(start, end, nodes, exclude_ids, config):
        return None

    return _polyline([start, end], "direct")


def s_path(
    start: Point,
    end: Point,
    nodes: Sequence[Node],
    exclude_ids: Collection[str],
    config: RoutingConfig = DEFAULT_ROUTING_CONFIG,
    side: Side = Side.RIGHT,
) -> PathCandidate | None:
    """Orthogonal five-segment detour bending towards ``side``.

    Drops below the source, runs sideways, descends to just above the
    target level, then comes back over the target. The sideways excursion
    grows through ``config.s_offset_multipliers`` until one clears every
    obstacle.
    """
    distance = start.distance_to(end)
    base_offset = max(
        config.s_min_horizontal_offset,
        distance * config.s_horizontal_ratio,
    )
    vertical_offset = min(
        config.s_max_vertical_offset,
        max(config.s_min_vertical_offset, distance * config.s_vertical_ratio),
    )

    for multiplier in config.s_offset_multipliers:
        bend_x = start.x + side.value * base_offset * multiplier
        points = [
            start,
            Point(start.x, start.y + vertical_offset),
            Point(bend_x, start.y + vertical_offset),
            Point(bend_x, end.y - vertical_offset),
            Point(end.x, end.y - vertical_offset),
            end,
        ]
        if not _polyline_collides(points, nodes, exclude_ids, config):
            return _polyline(points, f"s_path_{side.name.lower()}")

    return None


def l_path(
    start: Point,
    end: Point,
    nodes: Sequence[Node],
    exclude_ids: Collection[str],
    config: RoutingConfig = DEFAULT_ROUTING_CONFIG,
) -> PathCandidate | None:
    """Single right-angle bend, horizontal leg first, then vertical first."""
    for corner in (Point(end.x, start.y), Point(start.x, end.y)):
        points = [start, corner, end]
        if not _polyline_collides(points, nodes, exclude_ids, config):
            return _polyline(points, "l_path")
    return None


def u_path(
    start: Point,
    end: Point,
    nodes: Sequence[Node],
    exclude_ids: Collection[str],
    config: RoutingConfig = DEFAULT_ROUTING_CONFIG,
) -> PathCandidate | None:
    """Escape route that climbs above both anchors and comes back down."""
    offset = max(config.u_min_offset, abs(end.x - start.x) * config.u_offset_ratio)
    top_y = min(start.y, end.y) - offset

    points = [
        start,
        Point(start.x, top_y),
        Point(end.x, top_y),
        end,
    ]
    if _polyline_collides(points, nodes, exclude_ids, config):
        return None
    return _polyline(points, "u_path")


def curved_path(
    start: Point,
    end: Point,
    nodes: Sequence[Node],
    exclude_ids: Collection[str],
    config: RoutingConfig = DEFAULT_ROUTING_CONFIG,
    side: Side = Side.RIGHT,
) -> PathCandidate | None:
    """Quadratic arc bulging perpendicular to the anchor line.

    RIGHT bulges along (-dy, dx), LEFT along (dy, -dx). Coincident anchors
    have no perpendicular and produce no curve.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    distance = math.hypot(dx, dy)
    if distance == 0:
        return None

    radius = min(
        config.curve_max_radius,
        max(config.curve_min_radius, distance * config.curve_radius_ratio),
    )
    perp_x = -dy / distance * side.value
    perp_y = dx / distance * side.value
    control = Point(
        (start.x + end.x) / 2 + perp_x * radius,
        (start.y + end.y) / 2 + perp_y * radius,
    )

    if check_curve_collision(start, control, end, nodes, exclude_ids, config):
        return None

    return PathCandidate(
        segments=(QuadSegment(start, control, end),),
        control_points=(control,),
        length=distance * config.curve_length_factor,
        strategy=f"curved_{side.name.lower()}",
    )


def calculate_path_options(
    start: Point,
    end: Point,
    nodes: Sequence[Node],
    exclude_ids: Collection[str],
    config: RoutingConfig = DEFAULT_ROUTING_CONFIG,
) -> list[PathCandidate]:
    """Run every strategy and collect the candidates that were found."""
    args = (start, end, nodes, exclude_ids, config)
    attempts = [
        direct_path(*args),
        s_path(*args, side=Side.RIGHT),
        s_path(*args, side=Side.LEFT),
        l_path(*args),
        u_path(*args),
        curved_path(*args, side=Side.RIGHT),
        curved_path(*args, side=Side.LEFT),
    ]
    options = [candidate for candidate in attempts if candidate is not None]
    logger.debug(
        "Route %s -> %s: candidates %s",
        start, end, [candidate.strategy for candidate in options],
    )
    return options


def select_best_path(
    options: Sequence[PathCandidate],
    start: Point,
    end: Point,
) -> PathCandidate:
    """Pick the winner: direct, then shortest S-path, then shortest of the rest.

    With no options the raw straight line is returned regardless of
    obstacles, so a connection is always drawable.
    """
    if not options:
        logger.info(
            "No collision-free route from %s to %s, drawing a straight line",
            start, end,
        )
        return _polyline([start, end], "fallback")

    for candidate in options:
        if not candidate.control_points:
            return candidate

    s_paths = [
        candidate for candidate in options
        if len(candidate.control_points) >= 4
    ]
    if s_paths:
        return min(s_paths, key=lambda candidate: candidate.length)

    return min(options, key=lambda candidate: candidate.length)


def calculate_connection_path(
    source: Node,
    target: Node,
    all_nodes: Sequence[Node],
    config: RoutingConfig | None = None,
) -> PathCandidate:
    """Route a connection from ``source`` to ``target`` around ``all_nodes``.

    Args:
        source: Node the connection leaves from
        target: Node the connection enters
        all_nodes: Every node on the canvas; the two endpoints are ignored
        config: Routing constants (defaults when omitted)

    Returns:
        The selected PathCandidate, never None
    """
    config = config or DEFAULT_ROUTING_CONFIG
    start, end = get_connection_points(source, target, config)
    exclude_ids = (source.id, target.id)

    options = calculate_path_options(start, end, all_nodes, exclude_ids, config)
    best = select_best_path(options, start, end)
    logger.debug("Route %s -> %s: selected %s", source.id, target.id, best.strategy)
    return best


def route_diagram(
    diagram: Diagram,
    config: RoutingConfig | None = None,
) -> dict[str, PathCandidate]:
    """Route every connection of a diagram.

    Returns:
        Mapping of connection id to its selected path
    """
    config = config or diagram.routing_config or DEFAULT_ROUTING_CONFIG
    graph = diagram.graph()

    routes: dict[str, PathCandidate] = {}
    for source_id, target_id, data in graph.edges(data=True):
        connection = data["connection"]
        routes[connection.id] = calculate_connection_path(
            graph.nodes[source_id]["node"],
            graph.nodes[target_id]["node"],
            diagram.nodes,
            config,
        )
    return routes

"""Shared scene builders for scriptflow tests."""

from __future__ import annotations

import pytest

from scriptflow.models import Node, Point, Rect
from scriptflow.routing import LineSegment, QuadSegment, segment_intersects_rect


def box(node_id: str, x: float, y: float, width: float, height: float) -> Node:
    """Obstacle node with explicit dimensions."""
    return Node(id=node_id, x=x, y=y, width=width, height=height)


def endpoints_for(start: Point, end: Point) -> tuple[Node, Node]:
    """Default-sized nodes whose anchors land exactly on ``start``/``end``."""
    source = Node(id="source", x=start.x - 56, y=start.y - 56)
    target = Node(id="target", x=end.x - 56, y=end.y + 6)
    return source, target


def segment_collides(
    segment: LineSegment | QuadSegment,
    rect: Rect,
    margin: float = 15.0,
    samples: int = 20,
) -> bool:
    """Collision check for either segment kind, used to verify winners."""
    if isinstance(segment, LineSegment):
        return segment_intersects_rect(segment.start, segment.end, rect, margin)
    expanded = rect.expanded(margin)
    return any(
        expanded.contains(segment.point_at(i / samples))
        for i in range(samples + 1)
    )


@pytest.fixture
def horizontal_blocked():
    """Anchors (0,0)->(100,0) with a small obstacle centered on the line."""
    return Point(0, 0), Point(100, 0), [box("blocker", 40, -10, 20, 20)]


@pytest.fixture
def wall_scene():
    """Anchors (0,0)->(0,300) with a wall spanning the band between them."""
    return Point(0, 0), Point(0, 300), [box("wall", -5000, 100, 10000, 100)]

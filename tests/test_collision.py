"""Tests for anchor resolution and the collision checks."""

import pytest

from conftest import box

from scriptflow.models import Node, Point, Rect
from scriptflow.routing import (
    RoutingConfig,
    check_curve_collision,
    check_path_collision,
    get_connection_points,
    sample_quadratic_curve,
    segment_intersects_rect,
)


def test_anchors_are_offset_below_and_above():
    source = Node(id="s", x=0, y=0)
    target = Node(id="t", x=200, y=300, width=100, height=40)

    start, end = get_connection_points(source, target)

    assert start == Point(56, 56)
    assert end == Point(250, 294)


def test_anchor_offset_follows_config():
    source = Node(id="s", x=0, y=0, width=20, height=20)
    target = Node(id="t", x=0, y=100, width=20, height=20)

    start, end = get_connection_points(source, target, RoutingConfig(anchor_offset=0))

    assert start == Point(10, 20)
    assert end == Point(10, 100)


def test_segment_crossing_expanded_rect():
    rect = Rect(40, -10, 20, 20)
    assert segment_intersects_rect(Point(0, 0), Point(100, 0), rect)


def test_segment_only_touching_margin_band():
    # Rect spans y 0..10, margin 15 stretches it to y -15..25
    rect = Rect(0, 0, 10, 10)
    assert segment_intersects_rect(Point(-50, 20), Point(50, 20), rect)
    assert not segment_intersects_rect(Point(-50, 30), Point(50, 30), rect)
    assert not segment_intersects_rect(Point(-50, 20), Point(50, 20), rect, margin=0)


def test_segment_stopping_short_of_rect():
    rect = Rect(100, -10, 20, 20)
    assert not segment_intersects_rect(Point(0, 0), Point(80, 0), rect)


def test_segment_behind_start_is_outside_parameter_range():
    rect = Rect(-120, -10, 20, 20)
    assert not segment_intersects_rect(Point(0, 0), Point(100, 0), rect)


def test_vertical_and_horizontal_segments_skip_zero_axis():
    rect = Rect(-10, 40, 20, 20)
    assert segment_intersects_rect(Point(0, 0), Point(0, 100), rect)
    assert not segment_intersects_rect(Point(100, 0), Point(100, 100), rect)


def test_zero_length_segment_never_collides():
    rect = Rect(-10, -10, 20, 20)
    assert not segment_intersects_rect(Point(0, 0), Point(0, 0), rect)


def test_segment_fully_inside_expanded_rect_does_not_cross_edges():
    rect = Rect(-100, -100, 200, 200)
    assert not segment_intersects_rect(Point(-5, 0), Point(5, 0), rect)


def test_path_collision_respects_exclusions():
    nodes = [box("a", 40, -10, 20, 20)]
    assert check_path_collision(Point(0, 0), Point(100, 0), nodes, [])
    assert not check_path_collision(Point(0, 0), Point(100, 0), nodes, ["a"])


def test_path_collision_checks_every_obstacle():
    nodes = [box("far", 1000, 1000, 10, 10), box("near", 40, -10, 20, 20)]
    assert check_path_collision(Point(0, 0), Point(100, 0), nodes, [])


def test_path_collision_uses_default_node_size():
    # Default size 112x50 puts this node across the line
    nodes = [Node(id="n", x=0, y=-20)]
    assert check_path_collision(Point(-50, 0), Point(300, 0), nodes, [])


def test_sample_quadratic_curve_endpoints_and_midpoint():
    start, control, end = Point(0, 0), Point(50, 100), Point(100, 0)
    assert sample_quadratic_curve(start, control, end, 0) == start
    assert sample_quadratic_curve(start, control, end, 1) == end
    mid = sample_quadratic_curve(start, control, end, 0.5)
    assert mid.x == pytest.approx(50)
    assert mid.y == pytest.approx(50)


def test_curve_collision_detects_bulge_through_obstacle():
    nodes = [box("o", 40, 40, 20, 20)]
    assert check_curve_collision(Point(0, 0), Point(50, 100), Point(100, 0), nodes, [])
    assert not check_curve_collision(Point(0, 0), Point(50, -100), Point(100, 0), nodes, [])


def test_curve_collision_respects_exclusions():
    nodes = [box("o", 40, 40, 20, 20)]
    assert not check_curve_collision(
        Point(0, 0), Point(50, 100), Point(100, 0), nodes, ["o"],
    )


def test_curve_collision_is_a_sampling_approximation():
    # A sliver between two samples is missed with coarse sampling
    nodes = [box("sliver", 44.8, -100, 0.4, 200)]
    start, control, end = Point(0, 0), Point(50, 0), Point(100, 0)
    coarse = RoutingConfig(margin=0, curve_samples=4)
    fine = RoutingConfig(margin=0, curve_samples=20)

    assert not check_curve_collision(start, control, end, nodes, [], coarse)
    assert check_curve_collision(start, control, end, nodes, [], fine)

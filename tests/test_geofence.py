"""Mini README: Tests for the geofence evaluator and position maths.

Covers boundary-inclusive point-in-polygon checks, polygon validation and
the distance/heading helpers the planners are built on.
"""

from __future__ import annotations

import pytest

from dispatchdrone.geometry import (
    STEP,
    InvalidPolygonError,
    Position,
    bearing,
    distance,
    is_close,
    next_position,
    point_in_polygon,
    snap_heading,
    steps_between,
)


def _square():
    return [
        Position(0.0, 0.0),
        Position(0.0, 1.0),
        Position(1.0, 1.0),
        Position(1.0, 0.0),
        Position(0.0, 0.0),
    ]


def test_point_inside_square() -> None:
    assert point_in_polygon(Position(0.5, 0.5), _square())


def test_point_outside_square() -> None:
    assert not point_in_polygon(Position(2.0, 2.0), _square())


def test_point_on_edge_counts_as_inside() -> None:
    """Boundary points are inside, including vertices."""

    assert point_in_polygon(Position(1.0, 0.5), _square())
    assert point_in_polygon(Position(0.0, 0.0), _square())


def test_concave_polygon_excludes_notch() -> None:
    u_shape = [
        Position(0.0, 0.0),
        Position(3.0, 0.0),
        Position(3.0, 3.0),
        Position(2.0, 3.0),
        Position(2.0, 1.0),
        Position(1.0, 1.0),
        Position(1.0, 3.0),
        Position(0.0, 3.0),
        Position(0.0, 0.0),
    ]
    assert not point_in_polygon(Position(1.5, 2.0), u_shape)
    assert point_in_polygon(Position(0.5, 2.0), u_shape)


def test_too_few_vertices_rejected() -> None:
    triangle = [Position(0.0, 0.0), Position(1.0, 1.0), Position(0.0, 0.0)]
    with pytest.raises(InvalidPolygonError):
        point_in_polygon(Position(0.5, 0.5), triangle)


def test_open_ring_rejected() -> None:
    open_ring = [
        Position(0.0, 0.0),
        Position(1.0, 1.0),
        Position(1.0, 2.0),
        Position(2.0, 4.0),
        Position(4.0, 5.0),
    ]
    with pytest.raises(InvalidPolygonError):
        point_in_polygon(Position(0.5, 0.5), open_ring)


def test_ring_with_repeated_vertices_rejected() -> None:
    degenerate = [Position(0.0, 0.0), Position(1.0, 1.0), Position(1.0, 1.0), Position(0.0, 0.0)]
    with pytest.raises(InvalidPolygonError):
        point_in_polygon(Position(0.5, 0.5), degenerate)


def test_distance_is_euclidean() -> None:
    assert distance(Position(0.0, 0.0), Position(3.0, 4.0)) == pytest.approx(5.0, abs=1e-9)


def test_is_close_uses_single_step() -> None:
    assert is_close(Position(0.0, 0.0), Position(0.0001, 0.0001))
    assert not is_close(Position(0.0, 0.0), Position(1.0, 1.0))


def test_next_position_moves_one_step_along_heading() -> None:
    east = next_position(Position(0.0, 0.0), 0.0)
    north = next_position(Position(0.0, 0.0), 90.0)

    assert east.lng == pytest.approx(STEP)
    assert east.lat == pytest.approx(0.0, abs=1e-9)
    assert north.lng == pytest.approx(0.0, abs=1e-9)
    assert north.lat == pytest.approx(STEP)


def test_bearing_snaps_to_compass_headings() -> None:
    assert snap_heading(bearing(Position(0.0, 0.0), Position(1.0, 1.0))) == pytest.approx(45.0)
    assert snap_heading(359.0) == pytest.approx(0.0)
    assert snap_heading(-10.0) == pytest.approx(0.0)
    assert snap_heading(100.0) == pytest.approx(90.0)


def test_steps_between_rounds_up() -> None:
    assert steps_between(Position(0.0, 0.0), Position(10.5 * STEP, 0.0)) == 11

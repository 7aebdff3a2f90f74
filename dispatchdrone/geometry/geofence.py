"""Mini README: Point-in-polygon evaluation for geofenced regions.

Structure:
    * InvalidPolygonError - raised for rings that are too small or not closed.
    * validate_ring - shared ring validation.
    * point_in_polygon - boundary-inclusive even-odd ray casting.

Polygons are closed rings: the first and last vertex must coincide and at
least three distinct vertices are required. Points lying exactly on an edge
count as inside.
"""

from __future__ import annotations

from typing import Sequence

from .positions import EPSILON, Position


class InvalidPolygonError(ValueError):
    """Raised when a polygon cannot be evaluated as a closed ring."""


def validate_ring(vertices: Sequence[Position]) -> None:
    """Raise ``InvalidPolygonError`` unless ``vertices`` form a closed ring."""

    if vertices is None or len(vertices) < 4:
        raise InvalidPolygonError("Polygon requires at least 3 distinct vertices plus the closing vertex")
    if vertices[0] != vertices[-1]:
        raise InvalidPolygonError("Polygon ring is not closed: first and last vertex differ")
    if len(set(vertices[:-1])) < 3:
        raise InvalidPolygonError("Polygon requires at least 3 distinct vertices")


def _on_segment(point: Position, start: Position, end: Position) -> bool:
    """True when ``point`` lies on the segment ``start``-``end``."""

    cross = (end.lng - start.lng) * (point.lat - start.lat) - (end.lat - start.lat) * (point.lng - start.lng)
    if abs(cross) > EPSILON:
        return False
    return (
        min(start.lng, end.lng) - EPSILON <= point.lng <= max(start.lng, end.lng) + EPSILON
        and min(start.lat, end.lat) - EPSILON <= point.lat <= max(start.lat, end.lat) + EPSILON
    )


def point_in_polygon(point: Position, vertices: Sequence[Position]) -> bool:
    """Return True when ``point`` is inside or on the boundary of the ring."""

    validate_ring(vertices)

    for start, end in zip(vertices, vertices[1:]):
        if _on_segment(point, start, end):
            return True

    inside = False
    for start, end in zip(vertices, vertices[1:]):
        if (start.lat > point.lat) != (end.lat > point.lat):
            crossing_lng = start.lng + (point.lat - start.lat) * (end.lng - start.lng) / (end.lat - start.lat)
            if point.lng < crossing_lng:
                inside = not inside
    return inside

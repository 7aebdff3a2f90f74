"""Mini README: Geometry helpers for planar drone navigation.

``positions`` holds the coordinate type and step/heading maths, ``geofence``
the polygon membership test used by the restricted-area index.
"""

from .geofence import InvalidPolygonError, point_in_polygon, validate_ring
from .positions import (
    ANGLE_INCREMENT,
    EPSILON,
    HEADINGS,
    STEP,
    Position,
    bearing,
    distance,
    is_close,
    next_position,
    snap_heading,
    steps_between,
)

__all__ = [
    "ANGLE_INCREMENT",
    "EPSILON",
    "HEADINGS",
    "InvalidPolygonError",
    "Position",
    "STEP",
    "bearing",
    "distance",
    "is_close",
    "next_position",
    "point_in_polygon",
    "snap_heading",
    "steps_between",
    "validate_ring",
]

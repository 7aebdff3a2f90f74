"""Mini README: Planar position maths shared by the planners.

Structure:
    * Position - immutable ``(lng, lat)`` coordinate in degrees.
    * distance / is_close - Euclidean helpers in coordinate degrees.
    * next_position / bearing / snap_heading - compass-heading moves.
    * steps_between - move count estimate used for budget checks.

Coordinates are treated as a flat plane; one move is ``STEP`` degrees along
one of ``HEADING_COUNT`` headings spaced ``ANGLE_INCREMENT`` apart, with 0
pointing east and 90 pointing north.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Tuple

STEP = 0.00015
ANGLE_INCREMENT = 22.5
HEADING_COUNT = 16
HEADINGS: Tuple[float, ...] = tuple(index * ANGLE_INCREMENT for index in range(HEADING_COUNT))
EPSILON = 1e-12


@dataclass(frozen=True, slots=True)
class Position:
    """Longitude/latitude pair in degrees."""

    lng: float
    lat: float

    def as_list(self) -> list:
        """Return ``[lng, lat]`` as used by GeoJSON coordinates."""

        return [self.lng, self.lat]


def distance(first: Position, second: Position) -> float:
    """Euclidean distance between two positions in degrees."""

    return math.hypot(first.lng - second.lng, first.lat - second.lat)


def is_close(first: Position, second: Position) -> bool:
    """True when the positions are strictly less than one move apart."""

    return distance(first, second) < STEP


def normalise_angle(angle: float) -> float:
    """Map any angle into ``[0, 360)``."""

    angle = math.fmod(angle, 360.0)
    if angle < 0:
        angle += 360.0
    return 0.0 if angle >= 360.0 else angle


def snap_heading(angle: float) -> float:
    """Round an angle to the nearest allowed compass heading."""

    snapped = round(normalise_angle(angle) / ANGLE_INCREMENT) * ANGLE_INCREMENT
    return normalise_angle(snapped)


def bearing(origin: Position, target: Position) -> float:
    """Angle in degrees from ``origin`` towards ``target``."""

    return normalise_angle(
        math.degrees(math.atan2(target.lat - origin.lat, target.lng - origin.lng))
    )


def next_position(origin: Position, angle: float) -> Position:
    """Move one ``STEP`` from ``origin`` along ``angle`` degrees."""

    radians = math.radians(angle)
    return Position(
        lng=origin.lng + STEP * math.cos(radians),
        lat=origin.lat + STEP * math.sin(radians),
    )


def steps_between(origin: Position, target: Position) -> int:
    """Estimated number of moves needed to cover the straight-line distance."""

    return math.ceil(distance(origin, target) / STEP)

"""Mini README: Restricted airspace lookups used by the path planners.

Structure:
    * AltitudeLimits / RestrictedArea - geofenced no-fly polygon records.
    * RestrictedAreaCache - read-through cache with explicit invalidation.
    * RestrictedAreaIndex - point, segment and path membership queries.

The cache holds an immutable tuple of prepared polygons. A reload builds a new
tuple and swaps the reference in one assignment, so planners running on other
threads either see the old snapshot or the new one, never a mix. Malformed
rings are dropped with a warning when the snapshot is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import threading
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..geometry import InvalidPolygonError, Position, point_in_polygon, validate_ring
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

SEGMENT_SAMPLES = 20


@dataclass(frozen=True, slots=True)
class AltitudeLimits:
    """Vertical extent of a restricted area in metres."""

    lower: Optional[float] = None
    upper: Optional[float] = None


@dataclass(frozen=True, slots=True)
class RestrictedArea:
    """Named no-fly polygon; ``vertices`` is a closed ring."""

    name: str
    vertices: Tuple[Position, ...]
    area_id: Optional[int] = None
    limits: AltitudeLimits = field(default_factory=AltitudeLimits)


@dataclass(frozen=True, slots=True)
class _PreparedArea:
    area: RestrictedArea
    vertices: Tuple[Position, ...]
    bounds: Tuple[float, float, float, float]

    def contains(self, position: Position) -> bool:
        lng_min, lat_min, lng_max, lat_max = self.bounds
        if not (lng_min <= position.lng <= lng_max and lat_min <= position.lat <= lat_max):
            return False
        return point_in_polygon(position, self.vertices)


def _prepare(areas: Iterable[RestrictedArea]) -> Tuple[_PreparedArea, ...]:
    """Validate areas and precompute their bounding boxes."""

    prepared: List[_PreparedArea] = []
    for area in areas:
        vertices = tuple(area.vertices or ())
        if len(set(vertices)) < 3:
            LOGGER.debug("Ignoring restricted area '%s' with fewer than 3 vertices", area.name)
            continue
        try:
            validate_ring(vertices)
        except InvalidPolygonError as error:
            LOGGER.warning("Skipping restricted area '%s': %s", area.name, error)
            continue
        lngs = [vertex.lng for vertex in vertices]
        lats = [vertex.lat for vertex in vertices]
        prepared.append(
            _PreparedArea(
                area=area,
                vertices=vertices,
                bounds=(min(lngs), min(lats), max(lngs), max(lats)),
            )
        )
    return tuple(prepared)


class RestrictedAreaCache:
    """Cache restricted areas until an operator explicitly invalidates them."""

    def __init__(self, loader: Callable[[], Sequence[RestrictedArea]]) -> None:
        self._loader = loader
        self._snapshot: Optional[Tuple[_PreparedArea, ...]] = None
        self._lock = threading.Lock()

    def snapshot(self) -> Tuple[_PreparedArea, ...]:
        """Return the current prepared snapshot, loading it on first use."""

        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot
        with self._lock:
            if self._snapshot is None:
                areas = self._loader() or []
                self._snapshot = _prepare(areas)
                LOGGER.info("Cached %s restricted areas", len(self._snapshot))
            return self._snapshot

    def get(self) -> List[RestrictedArea]:
        """Return the cached restricted areas."""

        return [prepared.area for prepared in self.snapshot()]

    def invalidate(self) -> None:
        """Drop the snapshot so the next lookup reloads from the loader."""

        with self._lock:
            self._snapshot = None
        LOGGER.info("Restricted area cache invalidated")


class RestrictedAreaIndex:
    """Answer membership queries against the cached restricted areas."""

    def __init__(self, cache: RestrictedAreaCache) -> None:
        self._cache = cache

    @classmethod
    def from_areas(cls, areas: Sequence[RestrictedArea]) -> "RestrictedAreaIndex":
        """Build an index over a fixed collection of areas."""

        fixed = list(areas)
        return cls(RestrictedAreaCache(lambda: fixed))

    def invalidate(self) -> None:
        self._cache.invalidate()

    def areas(self) -> List[RestrictedArea]:
        return self._cache.get()

    def area_names(self) -> List[str]:
        return [area.name for area in self._cache.get()]

    def _containing_area(
        self, position: Position, snapshot: Tuple[_PreparedArea, ...]
    ) -> Optional[RestrictedArea]:
        for prepared in snapshot:
            if prepared.contains(position):
                return prepared.area
        return None

    def is_in_restricted_area(self, position: Position) -> bool:
        """True when ``position`` lies inside or on any restricted area."""

        if position is None:
            return False
        return self._containing_area(position, self._cache.snapshot()) is not None

    def segment_crosses_restricted_area(self, start: Position, end: Position) -> bool:
        """Sample the straight segment and report whether it touches an area.

        Endpoints are checked first, then ``SEGMENT_SAMPLES - 1`` evenly spaced
        interior points. Zones narrower than the sample spacing can slip
        between samples on long segments.
        """

        if start is None or end is None:
            return False
        snapshot = self._cache.snapshot()
        if not snapshot:
            return False
        if self._containing_area(start, snapshot) or self._containing_area(end, snapshot):
            return True
        for index in range(1, SEGMENT_SAMPLES):
            t = index / SEGMENT_SAMPLES
            sample = Position(
                lng=start.lng + t * (end.lng - start.lng),
                lat=start.lat + t * (end.lat - start.lat),
            )
            if self._containing_area(sample, snapshot):
                return True
        return False

    def path_crosses_restricted_area(self, waypoints: Sequence[Position]) -> bool:
        """True when any consecutive pair of waypoints crosses an area."""

        if waypoints is None or len(waypoints) < 2:
            return False
        return any(
            self.segment_crosses_restricted_area(start, end)
            for start, end in zip(waypoints, waypoints[1:])
        )

    def restricted_area_for_segment(self, start: Position, end: Position) -> Optional[str]:
        """Name of the first area hit along the segment, endpoints included."""

        snapshot = self._cache.snapshot()
        for index in range(SEGMENT_SAMPLES + 1):
            t = index / SEGMENT_SAMPLES
            sample = Position(
                lng=start.lng + t * (end.lng - start.lng),
                lat=start.lat + t * (end.lat - start.lat),
            )
            area = self._containing_area(sample, snapshot)
            if area is not None:
                return area.name
        return None

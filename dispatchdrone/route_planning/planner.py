"""Mini README: Step-based path finders that avoid restricted airspace.

Structure:
    * PathFinder - contract shared by every strategy: ``find(start, end)``.
    * GreedyHeadingPathFinder - heads for the target, detouring on obstruction.
    * RelaxedHeadingPathFinder - wider detours with stuck detection.
    * FallbackPathFinder - tries a primary strategy, then a fallback.
    * RouteFinder - structural type satisfied by every finder above.

Every path starts at ``start``, ends exactly at ``end`` and is made of moves of
at most ``STEP`` along the 16 compass headings, apart from the final hop onto
the exact destination. No segment of a returned path crosses a restricted
area. Failure is reported as ``None`` so callers can drop, retry or reassign
the dispatch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from ..geometry import (
    ANGLE_INCREMENT,
    EPSILON,
    HEADINGS,
    Position,
    bearing,
    distance,
    is_close,
    next_position,
    snap_heading,
)
from ..logging_utils import get_logger
from ..restrictions import RestrictedAreaIndex

LOGGER = get_logger(__name__)

DEFAULT_MAX_ITERATIONS = 20_000


@runtime_checkable
class RouteFinder(Protocol):
    """Anything that turns a start and destination into waypoints or None."""

    name: str

    def find(self, start: Position, end: Position) -> Optional[List[Position]]:
        ...


class PathFinder(ABC):
    """Base class for strategies producing restricted-area-free paths."""

    name = "pathfinder"

    def __init__(self, index: RestrictedAreaIndex, *, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> None:
        self.index = index
        self.max_iterations = max_iterations
        LOGGER.debug("Initialised %s with max_iterations=%s", self.name, max_iterations)

    def find(self, start: Position, end: Position) -> Optional[List[Position]]:
        """Return waypoints from ``start`` to exactly ``end`` or None."""

        if start is None or end is None:
            return None
        if self.index.is_in_restricted_area(end):
            LOGGER.debug("%s: destination %s lies in restricted airspace", self.name, end)
            return None
        if start == end:
            return [start]

        path = self._search(start, end)
        if not path:
            LOGGER.debug("%s: no path from %s to %s", self.name, start, end)
            return None
        if path[-1] != end:
            if self.index.segment_crosses_restricted_area(path[-1], end):
                LOGGER.debug("%s: final hop onto %s is obstructed", self.name, end)
                return None
            path.append(end)
        return path

    def _crosses(self, start: Position, end: Position) -> bool:
        return self.index.segment_crosses_restricted_area(start, end)

    @abstractmethod
    def _search(self, start: Position, end: Position) -> Optional[List[Position]]:
        """Return waypoints from ``start`` to a point close to ``end``."""


class GreedyHeadingPathFinder(PathFinder):
    """Step towards the target, trying nearby headings when blocked."""

    name = "greedy"
    max_offset = 4
    progress_tolerance = 1.5

    def _detour(self, current: Position, end: Position, heading: float, tolerance: float) -> Optional[Position]:
        """Pick an unobstructed heading near ``heading`` that keeps progress."""

        distance_before = distance(current, end)
        for offset in range(1, self.max_offset + 1):
            for sign in (-1, 1):
                candidate = next_position(current, heading + sign * offset * ANGLE_INCREMENT)
                if self._crosses(current, candidate):
                    continue
                if distance(candidate, end) <= distance_before * tolerance:
                    return candidate

        for any_heading in HEADINGS:
            candidate = next_position(current, any_heading)
            if not self._crosses(current, candidate):
                return candidate
        return None

    def _next_step(self, current: Position, end: Position, tolerance: float) -> Optional[Position]:
        heading = snap_heading(bearing(current, end))
        direct = next_position(current, heading)
        if not self._crosses(current, direct):
            return direct
        return self._detour(current, end, heading, tolerance)

    def _search(self, start: Position, end: Position) -> Optional[List[Position]]:
        path = [start]
        current = start
        for _ in range(self.max_iterations):
            if is_close(current, end):
                return path
            step = self._next_step(current, end, self.progress_tolerance)
            if step is None:
                return None
            current = step
            path.append(current)
        return path if is_close(current, end) else None


class RelaxedHeadingPathFinder(GreedyHeadingPathFinder):
    """Greedy search with wider detours, used once the greedy search fails."""

    name = "relaxed"
    max_offset = 6
    stuck_tolerance = 2.0
    stuck_widen_after = 20
    stuck_abandon_after = 50

    def _search(self, start: Position, end: Position) -> Optional[List[Position]]:
        """Greedy walk that gives up once progress towards ``end`` stalls.

        A step counts as progress only when it beats the best distance reached
        so far, so oscillating around an obstacle keeps the stuck count rising.
        """

        path = [start]
        current = start
        best = distance(start, end)
        stuck = 0
        for _ in range(self.max_iterations):
            if is_close(current, end):
                return path
            tolerance = self.stuck_tolerance if stuck > self.stuck_widen_after else self.progress_tolerance
            step = self._next_step(current, end, tolerance)
            if step is None:
                return None
            remaining = distance(step, end)
            if remaining < best - EPSILON:
                best = remaining
                stuck = 0
            else:
                stuck += 1
                if stuck > self.stuck_abandon_after:
                    LOGGER.debug("relaxed: abandoning search after %s non-improving steps", stuck)
                    return None
            current = step
            path.append(current)
        return path if is_close(current, end) else None


class FallbackPathFinder:
    """Try ``primary`` and fall back to ``fallback`` when it finds nothing."""

    name = "fallback"

    def __init__(self, primary: RouteFinder, fallback: RouteFinder) -> None:
        self.primary = primary
        self.fallback = fallback

    def find(self, start: Position, end: Position) -> Optional[List[Position]]:
        path = self.primary.find(start, end)
        if path is not None:
            return path
        LOGGER.debug("Primary %s search failed, retrying with %s", self.primary.name, self.fallback.name)
        return self.fallback.find(start, end)

"""Mini README: Fleet-level delivery scheduling.

Structure:
    * MixedDateError - raised when a batch spans more than one date.
    * FlightAssignment / DroneRoute / PlanResult - planning output.
    * FleetRouteScheduler - two-phase planner turning dispatches into routes.

Planning first looks for one drone that can fly the whole batch as a single
continuous A* route. When no drone manages that, drones are taken in order
of descending capacity and fly repeated out-and-back flights built greedily
from the nearest pending dispatch, within their move and payload budgets.
Nearest-dispatch ties go to the candidate encountered first. Dispatches no
drone can serve are reported in ``PlanResult.unplanned``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..fleet import AvailabilityMatcher, DispatchRequest, Drone, build_windows_by_drone, fits
from ..fleet.models import Capability, DispatchId
from ..geometry import EPSILON, Position, distance, steps_between
from ..logging_utils import get_logger
from ..restrictions import RestrictedAreaCache, RestrictedAreaIndex
from ..route_planning import (
    AStarPathFinder,
    FallbackPathFinder,
    GreedyHeadingPathFinder,
    RelaxedHeadingPathFinder,
    RouteFinder,
)
from ..route_planning.astar import DEFAULT_MAX_EXPANSIONS
from ..route_planning.planner import DEFAULT_MAX_ITERATIONS
from ..upstream import FleetDataSource

LOGGER = get_logger(__name__)

DEFAULT_BASE = Position(lng=0.0, lat=0.0)

LegCache = Dict[Tuple[Position, Position], Optional[List[Position]]]


class MixedDateError(ValueError):
    """Raised when dispatches in one batch carry different dates."""


@dataclass(slots=True)
class FlightAssignment:
    """Waypoints flown to serve one dispatch.

    The arrival is marked by a duplicated waypoint; the last assignment of a
    flight also carries the return path to base.
    """

    dispatch_id: DispatchId
    flight_path: List[Position]
    flight_number: int = 1

    def as_dict(self) -> Dict[str, object]:
        return {
            "deliveryId": self.dispatch_id,
            "flightNumber": self.flight_number,
            "flightPath": [{"lng": point.lng, "lat": point.lat} for point in self.flight_path],
        }


@dataclass(slots=True)
class DroneRoute:
    """All assignments flown by one drone, across one or more flights."""

    drone_id: str
    deliveries: List[FlightAssignment] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "droneId": self.drone_id,
            "deliveries": [delivery.as_dict() for delivery in self.deliveries],
        }


@dataclass(slots=True)
class PlanResult:
    """Totals and per-drone routes for a planning call."""

    total_cost: float = 0.0
    total_moves: int = 0
    drone_routes: List[DroneRoute] = field(default_factory=list)
    unplanned: List[DispatchId] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "totalCost": self.total_cost,
            "totalMoves": self.total_moves,
            "dronePaths": [route.as_dict() for route in self.drone_routes],
            "unplanned": list(self.unplanned),
        }


@dataclass(slots=True)
class _Leg:
    dispatch: DispatchRequest
    path: List[Position]
    moves: int


def flight_cost(capability: Capability, moves: int) -> float:
    """Cost of one flight: fixed take-off and landing costs plus per-move cost."""

    return capability.cost_initial + capability.cost_final + moves * capability.cost_per_move


def ensure_single_date(dispatches: Sequence[DispatchRequest]) -> Optional[str]:
    """Return the batch date, raising ``MixedDateError`` if several are present."""

    dates = {dispatch.date.strip() for dispatch in dispatches if dispatch.date and dispatch.date.strip()}
    if len(dates) > 1:
        raise MixedDateError(f"Dispatches span multiple dates: {', '.join(sorted(dates))}")
    return next(iter(dates), None)


def slice_to_closest(path: List[Position], destination: Position) -> List[Position]:
    """Cut ``path`` at its point closest to ``destination`` and end exactly there."""

    closest = min(range(len(path)), key=lambda index: distance(path[index], destination))
    sliced = path[: closest + 1]
    if sliced[-1] != destination:
        sliced.append(destination)
    return sliced


def _nearest(origin: Position, candidates: Sequence[DispatchRequest]) -> DispatchRequest:
    best = candidates[0]
    best_distance = distance(origin, best.delivery)
    for candidate in candidates[1:]:
        candidate_distance = distance(origin, candidate.delivery)
        if candidate_distance < best_distance:
            best, best_distance = candidate, candidate_distance
    return best


class FleetRouteScheduler:
    """Plan a batch of dispatches across the fleet."""

    def __init__(
        self,
        data_source: FleetDataSource,
        *,
        index: Optional[RestrictedAreaIndex] = None,
        greedy_max_iterations: int = DEFAULT_MAX_ITERATIONS,
        astar_max_iterations: int = DEFAULT_MAX_EXPANSIONS,
    ) -> None:
        self.data_source = data_source
        self.index = index or RestrictedAreaIndex(RestrictedAreaCache(data_source.fetch_restricted_areas))
        self.flight_finder: RouteFinder = FallbackPathFinder(
            GreedyHeadingPathFinder(self.index, max_iterations=greedy_max_iterations),
            RelaxedHeadingPathFinder(self.index, max_iterations=greedy_max_iterations),
        )
        self.batch_finder: RouteFinder = AStarPathFinder(self.index, max_iterations=astar_max_iterations)

    def _default_base(self) -> Position:
        service_points = self.data_source.fetch_service_points() or []
        return service_points[0] if service_points else DEFAULT_BASE

    def plan(self, dispatches: Sequence[DispatchRequest]) -> PlanResult:
        """Plan routes for ``dispatches``; see the module docstring for phases."""

        records = [dispatch for dispatch in dispatches or [] if dispatch is not None]
        LOGGER.info("Calculating delivery paths for %s dispatches", len(records))
        ensure_single_date(records)

        pending = [dispatch for dispatch in records if dispatch.is_valid]
        if len(pending) < len(records):
            LOGGER.debug("Dropped %s incomplete dispatch records", len(records) - len(pending))
        if not pending:
            return PlanResult()

        drones = [drone for drone in self.data_source.fetch_drones() or [] if drone.capability is not None]
        matcher = AvailabilityMatcher(
            drones, build_windows_by_drone(self.data_source.fetch_drone_availability() or [])
        )
        ranked = sorted(drones, key=lambda drone: -drone.capability.capacity)
        base = self._default_base()

        result = self._plan_single_drone(ranked, pending, base, matcher)
        if result is None:
            result = self._plan_multi_drone(ranked, pending, base, matcher)
        LOGGER.info(
            "Delivery planning complete: %s drones used, %s total moves, %.2f total cost, %s unplanned",
            len(result.drone_routes),
            result.total_moves,
            result.total_cost,
            len(result.unplanned),
        )
        return result

    # Phase 1 -----------------------------------------------------------------

    def _plan_single_drone(
        self,
        ranked: Sequence[Drone],
        pending: Sequence[DispatchRequest],
        base: Position,
        matcher: AvailabilityMatcher,
    ) -> Optional[PlanResult]:
        eligible = set(matcher.query_available_drones(pending))
        legs: LegCache = {}
        for drone in ranked:
            if drone.drone_id not in eligible:
                continue
            route = self._single_route(drone, pending, base, legs)
            if route is None:
                LOGGER.debug("Drone %s cannot fly the whole batch in one route", drone.drone_id)
                continue
            deliveries, moves = route
            LOGGER.info("Drone %s serves all %s dispatches in one flight", drone.drone_id, len(pending))
            return PlanResult(
                total_cost=flight_cost(drone.capability, moves),
                total_moves=moves,
                drone_routes=[DroneRoute(drone_id=drone.drone_id, deliveries=deliveries)],
            )
        return None

    def _batch_leg(self, start: Position, end: Position, legs: LegCache) -> Optional[List[Position]]:
        """A* leg shared by every drone tried in Phase 1; callers get a copy."""

        key = (start, end)
        if key not in legs:
            legs[key] = self.batch_finder.find(start, end)
        path = legs[key]
        return None if path is None else list(path)

    def _single_route(
        self, drone: Drone, pending: Sequence[DispatchRequest], base: Position, legs: LegCache
    ) -> Optional[Tuple[List[FlightAssignment], int]]:
        capability = drone.capability
        payload = sum(dispatch.requirements.capacity for dispatch in pending)
        if payload > capability.capacity + EPSILON:
            return None

        current = base
        moves = 0
        deliveries: List[FlightAssignment] = []
        for dispatch in pending:
            path = self._batch_leg(current, dispatch.delivery, legs)
            if path is None:
                return None
            path = slice_to_closest(path, dispatch.delivery)
            moves += len(path) - 1
            if moves > capability.max_moves:
                return None
            path.append(path[-1])
            deliveries.append(FlightAssignment(dispatch_id=dispatch.dispatch_id, flight_path=path))
            current = dispatch.delivery

        return_path = self._batch_leg(current, base, legs)
        if return_path is None:
            return None
        moves += len(return_path) - 1
        if moves > capability.max_moves:
            return None
        deliveries[-1].flight_path.extend(return_path[1:])
        return deliveries, moves

    # Phase 2 -----------------------------------------------------------------

    def _plan_multi_drone(
        self,
        ranked: Sequence[Drone],
        pending: Sequence[DispatchRequest],
        base: Position,
        matcher: AvailabilityMatcher,
    ) -> PlanResult:
        pending = list(pending)
        unserviceable: List[DispatchRequest] = []
        result = PlanResult()

        for drone in ranked:
            if not pending:
                break
            route = DroneRoute(drone_id=drone.drone_id)
            flight_number = 0
            for _ in range(len(pending) + 1):
                if not pending:
                    break
                flight = self._fly(drone, base, pending, unserviceable, matcher)
                if flight is None:
                    break
                legs, moves = flight
                flight_number += 1
                route.deliveries.extend(
                    FlightAssignment(dispatch_id=leg.dispatch.dispatch_id, flight_path=leg.path, flight_number=flight_number)
                    for leg in legs
                )
                result.total_moves += moves
                result.total_cost += flight_cost(drone.capability, moves)
                LOGGER.debug(
                    "Drone %s flight %s serves %s dispatches in %s moves",
                    drone.drone_id,
                    flight_number,
                    len(legs),
                    moves,
                )
            if route.deliveries:
                result.drone_routes.append(route)

        result.unplanned = [dispatch.dispatch_id for dispatch in pending + unserviceable]
        return result

    def _fly(
        self,
        drone: Drone,
        base: Position,
        pending: List[DispatchRequest],
        unserviceable: List[DispatchRequest],
        matcher: AvailabilityMatcher,
    ) -> Optional[Tuple[List[_Leg], int]]:
        """Build one out-and-back flight, mutating ``pending`` as dispatches are taken."""

        capability = drone.capability
        moves_left = capability.max_moves
        capacity_used = 0.0
        current = base
        legs: List[_Leg] = []

        candidates = [
            dispatch
            for dispatch in pending
            if fits(dispatch.requirements, capability) and matcher.can_handle_all(drone, [dispatch])
        ]
        while candidates:
            dispatch = _nearest(current, candidates)
            candidates.remove(dispatch)

            if capacity_used + dispatch.requirements.capacity > capability.capacity + EPSILON:
                continue

            path = self.flight_finder.find(current, dispatch.delivery)
            if path is None:
                LOGGER.warning("Dispatch %s is unreachable without entering restricted airspace", dispatch.dispatch_id)
                pending.remove(dispatch)
                unserviceable.append(dispatch)
                continue

            moves_to = len(path) - 1
            if moves_to + steps_between(dispatch.delivery, base) > moves_left:
                continue

            moves_left -= moves_to
            capacity_used += dispatch.requirements.capacity
            path.append(path[-1])
            legs.append(_Leg(dispatch=dispatch, path=path, moves=moves_to))
            pending.remove(dispatch)
            current = dispatch.delivery

        return_path: Optional[List[Position]] = None
        while legs:
            return_path = self.flight_finder.find(legs[-1].dispatch.delivery, base)
            if return_path is not None and len(return_path) - 1 <= moves_left:
                break
            leg = legs.pop()
            moves_left += leg.moves
            capacity_used -= leg.dispatch.requirements.capacity
            pending.append(leg.dispatch)
            LOGGER.debug(
                "Drone %s cannot return after dispatch %s, returning it to pending",
                drone.drone_id,
                leg.dispatch.dispatch_id,
            )

        if not legs:
            return None

        moves_left -= len(return_path) - 1
        legs[-1].path.extend(return_path[1:])
        return legs, capability.max_moves - moves_left

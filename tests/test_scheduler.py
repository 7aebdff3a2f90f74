"""Mini README: Tests for the fleet route scheduler.

Runs whole planning calls against a static data source: the single-drone
batch route, multi-flight fallbacks, budget and availability limits and the
reporting of dispatches nobody can serve.
"""

from __future__ import annotations

import pytest

from dispatchdrone.fleet import Capability, DispatchRequest, Drone, Requirements, TimeWindow
from dispatchdrone.geometry import STEP, Position, steps_between
from dispatchdrone.restrictions import RestrictedArea, RestrictedAreaIndex
from dispatchdrone.route_planning import GreedyHeadingPathFinder
from dispatchdrone.scheduling import FleetRouteScheduler, MixedDateError
from dispatchdrone.upstream import StaticFleetDataSource

BASE = Position(0.0, 0.0)


def _drone(drone_id: str, *, capacity: float = 10.0, max_moves: int = 2000, **capability) -> Drone:
    profile = dict(cost_per_move=0.01, cost_initial=4.0, cost_final=2.0)
    profile.update(capability)
    return Drone(
        drone_id=drone_id,
        name=f"Drone {drone_id}",
        capability=Capability(capacity=capacity, max_moves=max_moves, **profile),
    )


def _dispatch(dispatch_id, lng: float, lat: float = 0.0, *, capacity: float = 1.0, date=None, time=None):
    return DispatchRequest(
        dispatch_id=dispatch_id,
        requirements=Requirements(capacity=capacity),
        delivery=Position(lng, lat),
        date=date,
        time=time,
    )


def _scheduler(drones, **kwargs) -> FleetRouteScheduler:
    kwargs.setdefault("service_points", [BASE])
    return FleetRouteScheduler(StaticFleetDataSource(drones=drones, **kwargs))


def test_mixed_dates_are_rejected() -> None:
    scheduler = _scheduler([_drone("1")])
    batch = [_dispatch(1, 0.001, date="2025-01-01"), _dispatch(2, 0.001, date="2025-01-02")]

    with pytest.raises(MixedDateError):
        scheduler.plan(batch)


def test_empty_and_invalid_batches_plan_nothing() -> None:
    scheduler = _scheduler([_drone("1")])

    assert scheduler.plan([]).as_dict() == {"totalCost": 0.0, "totalMoves": 0, "dronePaths": [], "unplanned": []}
    result = scheduler.plan([None, DispatchRequest(dispatch_id=5), DispatchRequest(dispatch_id=None)])
    assert result.total_moves == 0
    assert result.drone_routes == []


def test_single_drone_serves_whole_batch_in_one_route() -> None:
    drone = _drone("1")
    scheduler = _scheduler([drone])
    first, second = _dispatch(1, 10.5 * STEP), _dispatch(2, 20.3 * STEP)

    result = scheduler.plan([first, second])

    assert result.total_moves == 11 + 10 + 21
    assert result.total_cost == pytest.approx(4.0 + 2.0 + 42 * 0.01)
    assert result.unplanned == []
    assert len(result.drone_routes) == 1

    route = result.drone_routes[0]
    assert route.drone_id == "1"
    assert [delivery.dispatch_id for delivery in route.deliveries] == [1, 2]
    assert all(delivery.flight_number == 1 for delivery in route.deliveries)

    outbound = route.deliveries[0].flight_path
    assert outbound[0] == BASE
    assert outbound[-1] == outbound[-2] == first.delivery

    closing = route.deliveries[1].flight_path
    assert closing[0] == first.delivery
    assert second.delivery in closing
    assert closing[-1] == BASE


def test_payload_overflow_falls_back_to_multiple_flights() -> None:
    drones = [_drone("A", capacity=4.0), _drone("B", capacity=4.0)]
    scheduler = _scheduler(drones)
    batch = [_dispatch(1, 5.5 * STEP, capacity=3.0), _dispatch(2, 8.5 * STEP, capacity=3.0)]

    result = scheduler.plan(batch)

    assert [route.drone_id for route in result.drone_routes] == ["A"]
    deliveries = result.drone_routes[0].deliveries
    assert [(delivery.dispatch_id, delivery.flight_number) for delivery in deliveries] == [(1, 1), (2, 2)]
    assert result.total_moves == (6 + 6) + (9 + 9)
    assert result.total_cost == pytest.approx(2 * (4.0 + 2.0) + 30 * 0.01)
    for delivery in deliveries:
        assert delivery.flight_path[0] == BASE
        assert delivery.flight_path[-1] == BASE


def test_move_budget_too_small_leaves_dispatch_unplanned() -> None:
    scheduler = _scheduler([_drone("1", max_moves=10)])

    result = scheduler.plan([_dispatch(7, 10.5 * STEP)])

    assert result.drone_routes == []
    assert result.unplanned == [7]
    assert result.total_moves == 0


def test_destination_in_restricted_area_is_reported() -> None:
    tower = RestrictedArea(
        name="tower",
        vertices=(
            Position(0.0014, -0.0006),
            Position(0.0016, -0.0006),
            Position(0.0016, 0.0006),
            Position(0.0014, 0.0006),
            Position(0.0014, -0.0006),
        ),
    )
    scheduler = _scheduler([_drone("1")], restricted_areas=[tower])

    result = scheduler.plan([_dispatch("ok", 5.5 * STEP), _dispatch("blocked", 0.0015)])

    assert result.unplanned == ["blocked"]
    assert [delivery.dispatch_id for delivery in result.drone_routes[0].deliveries] == ["ok"]
    assert result.total_moves == 12


def test_unavailable_drone_is_skipped() -> None:
    drones = [_drone("big", capacity=20.0), _drone("small", capacity=5.0)]
    availability = [("big", [TimeWindow("THURSDAY", "08:00", "18:00")])]
    scheduler = _scheduler(drones, availability=availability)

    result = scheduler.plan([_dispatch(1, 5.5 * STEP, date="2025-01-01", time="10:00")])

    assert [route.drone_id for route in result.drone_routes] == ["small"]


def test_first_service_point_is_the_base() -> None:
    base = Position(1.0, 1.0)
    scheduler = _scheduler([_drone("1")], service_points=[base, Position(2.0, 2.0)])

    result = scheduler.plan([_dispatch(1, 1.0 + 5.5 * STEP, 1.0)])

    path = result.drone_routes[0].deliveries[0].flight_path
    assert path[0] == base
    assert path[-1] == base
    assert result.total_moves == 12


def _moves(path) -> int:
    return sum(1 for first, second in zip(path, path[1:]) if first != second)


def test_leg_without_return_budget_moves_to_a_later_flight() -> None:
    """The far dispatch fits outbound but not home again, so it is flown on its own."""

    first, second = _dispatch(1, 10.5 * STEP), _dispatch(2, 0.012, 0.0051)
    greedy = GreedyHeadingPathFinder(RestrictedAreaIndex.from_areas([]))
    max_moves = 11 + _moves(greedy.find(first.delivery, second.delivery)) + steps_between(second.delivery, BASE)
    scheduler = _scheduler([_drone("1", max_moves=max_moves)])

    result = scheduler.plan([first, second])

    deliveries = result.drone_routes[0].deliveries
    assert [(delivery.dispatch_id, delivery.flight_number) for delivery in deliveries] == [(1, 1), (2, 2)]
    assert result.unplanned == []
    assert result.total_moves == 198
    for flight_number in (1, 2):
        flown = sum(_moves(d.flight_path) for d in deliveries if d.flight_number == flight_number)
        assert flown <= max_moves


def test_single_route_falls_through_to_next_drone_and_reuses_legs() -> None:
    drones = [_drone("big", capacity=20.0, max_moves=15), _drone("small", capacity=5.0)]
    scheduler = _scheduler(drones)
    searches = []
    astar = scheduler.batch_finder

    class CountingFinder:
        name = "counting"

        def find(self, start, end):
            searches.append((start, end))
            return astar.find(start, end)

    scheduler.batch_finder = CountingFinder()

    result = scheduler.plan([_dispatch(1, 10.5 * STEP)])

    assert [route.drone_id for route in result.drone_routes] == ["small"]
    assert result.drone_routes[0].deliveries[0].flight_number == 1
    assert result.total_moves == 22
    assert len(searches) == 2

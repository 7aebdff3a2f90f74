"""Mini README: Tests for capability and availability matching.

Validates requirement fitting with epsilon slack, fail-open availability,
weekly window matching and the fleet-wide availability query, including a
seeded randomised check that undersized drones are never offered.
"""

from __future__ import annotations

import random

from dispatchdrone.fleet import (
    AvailabilityMatcher,
    Capability,
    DispatchRequest,
    Drone,
    Requirements,
    TimeWindow,
    build_windows_by_drone,
    fits,
    is_available,
    parse_time,
)
from dispatchdrone.geometry import Position

# 2025-01-01 is a Wednesday.
WEDNESDAY = "2025-01-01"


def _dispatch(dispatch_id=1, *, capacity=1.0, cooling=False, heating=False, max_cost=None, date=None, time=None):
    return DispatchRequest(
        dispatch_id=dispatch_id,
        requirements=Requirements(capacity=capacity, cooling=cooling, heating=heating, max_cost=max_cost),
        delivery=Position(0.001, 0.001),
        date=date,
        time=time,
    )


def _drone(drone_id="1", **capability):
    return Drone(drone_id=drone_id, name=f"Drone {drone_id}", capability=Capability(**capability))


def test_fits_allows_epsilon_slack() -> None:
    assert fits(Requirements(capacity=1.0 + 1e-13), Capability(capacity=1.0))
    assert not fits(Requirements(capacity=1.1), Capability(capacity=1.0))


def test_fits_checks_thermal_flags() -> None:
    assert not fits(Requirements(cooling=True), Capability(capacity=5.0))
    assert not fits(Requirements(heating=True), Capability(capacity=5.0, cooling=True))
    assert fits(Requirements(cooling=True, heating=True), Capability(capacity=5.0, cooling=True, heating=True))
    assert not fits(None, Capability(capacity=5.0))


def test_parse_time_accepts_supported_formats() -> None:
    assert parse_time("14:30").hour == 14
    assert parse_time("9:30").hour == 9
    assert parse_time("14:30:15").second == 15
    assert parse_time("9:05:00").minute == 5
    assert parse_time("noon") is None
    assert parse_time("") is None


def test_availability_fails_open_without_data() -> None:
    windows = {"1": [TimeWindow("MONDAY", "09:00", "17:00")]}

    assert is_available("1", _dispatch(), windows)
    assert is_available("2", _dispatch(date=WEDNESDAY, time="10:00"), windows)
    assert is_available("1", _dispatch(date="not-a-date", time="10:00"), windows)
    assert is_available("1", _dispatch(date=WEDNESDAY, time="whenever"), windows)


def test_availability_matches_day_and_inclusive_bounds() -> None:
    windows = {"1": [TimeWindow("Monday", "09:00", "17:00"), TimeWindow("WEDNESDAY", "09:00:00", "17:00:00")]}

    assert is_available("1", _dispatch(date=WEDNESDAY, time="9:00"), windows)
    assert is_available("1", _dispatch(date=WEDNESDAY, time="17:00:00"), windows)
    assert not is_available("1", _dispatch(date=WEDNESDAY, time="17:01"), windows)
    assert not is_available("1", _dispatch(date="2025-01-02", time="10:00"), windows)


def test_window_with_unparsable_times_never_matches() -> None:
    windows = {"1": [TimeWindow("WEDNESDAY", "morning", "evening")]}

    assert not is_available("1", _dispatch(date=WEDNESDAY, time="10:00"), windows)


def test_can_handle_all_requires_every_dispatch() -> None:
    matcher = AvailabilityMatcher([_drone(capacity=4.0, cooling=True, cost_initial=1.0, cost_final=1.0)])
    drone = matcher.drones[0]

    assert matcher.can_handle_all(drone, [_dispatch(1, capacity=2.0), _dispatch(2, cooling=True)])
    assert not matcher.can_handle_all(drone, [_dispatch(1, capacity=2.0), _dispatch(2, heating=True)])
    assert matcher.can_handle_all(drone, [_dispatch(1, max_cost=2.0)])
    assert not matcher.can_handle_all(drone, [_dispatch(1, max_cost=1.5)])
    assert not matcher.can_handle_all(Drone(drone_id="bare"), [_dispatch()])


def test_query_available_drones_respects_windows() -> None:
    windows = build_windows_by_drone(
        [("1", [TimeWindow("WEDNESDAY", "08:00", "12:00")]), ("2", [TimeWindow("THURSDAY", "08:00", "12:00")]), ("3", [])]
    )
    matcher = AvailabilityMatcher(
        [_drone("1", capacity=5.0), _drone("2", capacity=5.0), _drone("3", capacity=5.0)], windows
    )

    assert matcher.query_available_drones([_dispatch(date=WEDNESDAY, time="10:00")]) == ["1", "3"]
    assert matcher.query_available_drones([]) == []
    assert matcher.query_available_drones([DispatchRequest(dispatch_id=9)]) == []


def test_undersized_drones_never_offered() -> None:
    """Randomised pairs: a drone below the required capacity is never returned."""

    generator = random.Random(20250101)
    for _ in range(250):
        capacity = round(generator.uniform(0.0, 20.0), 3)
        required = round(generator.uniform(0.0, 20.0), 3)
        drone = _drone(
            "candidate",
            capacity=capacity,
            cooling=generator.random() < 0.5,
            heating=generator.random() < 0.5,
        )
        dispatch = _dispatch(capacity=required)
        available = AvailabilityMatcher([drone]).query_available_drones([dispatch])

        if capacity < required:
            assert available == []
        else:
            assert available == ["candidate"]

"""Mini README: Batch scheduling of dispatches onto the fleet.

The ``scheduler`` module exposes ``FleetRouteScheduler`` together with the
result types returned to interfaces and the batch validation error.
"""

from .scheduler import (
    DroneRoute,
    FleetRouteScheduler,
    FlightAssignment,
    MixedDateError,
    PlanResult,
    ensure_single_date,
    flight_cost,
)

__all__ = [
    "DroneRoute",
    "FleetRouteScheduler",
    "FlightAssignment",
    "MixedDateError",
    "PlanResult",
    "ensure_single_date",
    "flight_cost",
]

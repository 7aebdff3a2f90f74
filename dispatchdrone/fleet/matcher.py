"""Mini README: Capability and availability matching for dispatches.

Structure:
    * fits - payload and thermal requirement check.
    * parse_time / is_available - weekly time-window availability check.
    * AvailabilityMatcher - fleet-wide queries combining every check.

Availability is fail-open: a dispatch without date or time, a drone without
recorded windows, or a date/time that cannot be parsed all count as
available. Capacity and cost comparisons allow ``EPSILON`` slack.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..geometry import EPSILON
from ..logging_utils import get_logger
from .models import Capability, DispatchRequest, Drone, Requirements, TimeWindow

LOGGER = get_logger(__name__)

# %H accepts one or two digit hours, covering HH:mm and H:mm variants.
_TIME_FORMATS = ("%H:%M:%S", "%H:%M")


def fits(requirements: Optional[Requirements], capability: Optional[Capability]) -> bool:
    """True when the capability covers payload, cooling and heating needs."""

    if requirements is None or capability is None:
        return False
    if capability.capacity + EPSILON < requirements.capacity:
        return False
    if requirements.cooling and not capability.cooling:
        return False
    if requirements.heating and not capability.heating:
        return False
    return True


def parse_time(value: Optional[str]) -> Optional[time]:
    """Parse ``HH:mm[:ss]`` style strings, returning None when unparsable."""

    if not value:
        return None
    for time_format in _TIME_FORMATS:
        try:
            return datetime.strptime(value.strip(), time_format).time()
        except ValueError:
            continue
    return None


def _in_window(day_name: str, dispatch_time: time, window: TimeWindow) -> bool:
    if not window.day_of_week or window.day_of_week.strip().upper() != day_name:
        return False
    start = parse_time(window.start)
    until = parse_time(window.until)
    if start is None or until is None:
        LOGGER.warning(
            "Could not parse window times: from='%s', until='%s'", window.start, window.until
        )
        return False
    return start <= dispatch_time <= until


def is_available(
    drone_id: str,
    dispatch: DispatchRequest,
    windows_by_drone: Mapping[str, Sequence[TimeWindow]],
) -> bool:
    """Return True when the drone is free at the dispatch's date and time."""

    if not dispatch.date or not dispatch.time:
        return True
    windows = windows_by_drone.get(drone_id)
    if not windows:
        return True

    try:
        day_name = date.fromisoformat(dispatch.date.strip()).strftime("%A").upper()
    except ValueError:
        LOGGER.warning(
            "Failed to parse date '%s' for dispatch %s, assuming available",
            dispatch.date,
            dispatch.dispatch_id,
        )
        return True

    dispatch_time = parse_time(dispatch.time)
    if dispatch_time is None:
        LOGGER.warning("Could not parse dispatch time '%s', assuming available", dispatch.time)
        return True

    return any(_in_window(day_name, dispatch_time, window) for window in windows)


def build_windows_by_drone(
    availability: Iterable[Tuple[str, Sequence[TimeWindow]]]
) -> Dict[str, List[TimeWindow]]:
    """Collapse upstream availability records into a drone id lookup."""

    windows_by_drone: Dict[str, List[TimeWindow]] = {}
    for drone_id, windows in availability:
        if drone_id is None or not windows:
            continue
        windows_by_drone[str(drone_id)] = list(windows)
    return windows_by_drone


class AvailabilityMatcher:
    """Decide which drones can serve a set of dispatches unaided."""

    def __init__(
        self,
        drones: Sequence[Drone],
        windows_by_drone: Optional[Mapping[str, Sequence[TimeWindow]]] = None,
    ) -> None:
        self._drones = list(drones or [])
        self._windows_by_drone = dict(windows_by_drone or {})
        LOGGER.debug(
            "Initialised AvailabilityMatcher with %s drones and %s availability records",
            len(self._drones),
            len(self._windows_by_drone),
        )

    @property
    def drones(self) -> List[Drone]:
        return list(self._drones)

    def is_available(self, drone_id: str, dispatch: DispatchRequest) -> bool:
        return is_available(drone_id, dispatch, self._windows_by_drone)

    def can_handle_all(self, drone: Drone, dispatches: Sequence[DispatchRequest]) -> bool:
        """AND of capacity, thermal, availability and cost checks."""

        if drone is None or drone.capability is None:
            return False
        capability = drone.capability
        for dispatch in dispatches:
            requirements = dispatch.requirements
            if not fits(requirements, capability):
                LOGGER.debug(
                    "Drone %s cannot meet requirements of dispatch %s",
                    drone.drone_id,
                    dispatch.dispatch_id,
                )
                return False
            if not self.is_available(drone.drone_id, dispatch):
                LOGGER.debug(
                    "Drone %s unavailable for dispatch %s (%s at %s)",
                    drone.drone_id,
                    dispatch.dispatch_id,
                    dispatch.date,
                    dispatch.time,
                )
                return False
            if requirements.max_cost is not None:
                minimum_cost = capability.cost_initial + capability.cost_final
                if minimum_cost > requirements.max_cost + EPSILON:
                    LOGGER.debug(
                        "Drone %s too expensive for dispatch %s (%s > %s)",
                        drone.drone_id,
                        dispatch.dispatch_id,
                        minimum_cost,
                        requirements.max_cost,
                    )
                    return False
        return True

    def query_available_drones(self, dispatches: Sequence[DispatchRequest]) -> List[str]:
        """Return ids of drones able to handle every dispatch in the batch."""

        valid = [dispatch for dispatch in dispatches or [] if dispatch is not None and dispatch.requirements is not None]
        if not valid:
            LOGGER.debug("No dispatches with requirements supplied for availability query")
            return []
        available = [drone.drone_id for drone in self._drones if self.can_handle_all(drone, valid)]
        LOGGER.debug(
            "Found %s available drones (out of %s) for %s dispatches",
            len(available),
            len(self._drones),
            len(valid),
        )
        return available

"""Mini README: Abstract data source feeding the planner.

Structure:
    * FleetDataSource - interface for fetching drones, bases, restricted
      areas and availability windows.
    * StaticFleetDataSource - in-memory implementation for tests and demos.

Implementations must degrade to empty lists when the upstream is
unavailable; the planner treats empty collections as "no candidates" or "no
constraint" rather than as errors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Tuple

from ..fleet import Drone, TimeWindow
from ..geometry import Position
from ..logging_utils import get_logger
from ..restrictions import RestrictedArea

LOGGER = get_logger(__name__)

AvailabilityRecord = Tuple[str, List[TimeWindow]]


class FleetDataSource(ABC):
    """Base interface for upstream fleet data providers."""

    source_name: str = "generic"

    @abstractmethod
    def fetch_drones(self) -> List[Drone]:
        """Return every drone in the fleet."""

    @abstractmethod
    def fetch_service_points(self) -> List[Position]:
        """Return base locations; the first one is the default base."""

    @abstractmethod
    def fetch_restricted_areas(self) -> List[RestrictedArea]:
        """Return restricted airspace polygons."""

    @abstractmethod
    def fetch_drone_availability(self) -> List[AvailabilityRecord]:
        """Return ``(drone_id, windows)`` pairs."""

    def metadata(self) -> dict:
        """Return diagnostic metadata for API responses."""

        return {"source": self.source_name}


class StaticFleetDataSource(FleetDataSource):
    """Serve fixed collections, typically built in tests or demos."""

    source_name = "static"

    def __init__(
        self,
        *,
        drones: Optional[Iterable[Drone]] = None,
        service_points: Optional[Iterable[Position]] = None,
        restricted_areas: Optional[Iterable[RestrictedArea]] = None,
        availability: Optional[Sequence[AvailabilityRecord]] = None,
    ) -> None:
        self._drones = list(drones or [])
        self._service_points = list(service_points or [])
        self._restricted_areas = list(restricted_areas or [])
        self._availability = [(drone_id, list(windows)) for drone_id, windows in availability or []]
        LOGGER.debug(
            "Initialised static source with %s drones, %s bases, %s restricted areas",
            len(self._drones),
            len(self._service_points),
            len(self._restricted_areas),
        )

    def fetch_drones(self) -> List[Drone]:
        return list(self._drones)

    def fetch_service_points(self) -> List[Position]:
        return list(self._service_points)

    def fetch_restricted_areas(self) -> List[RestrictedArea]:
        return list(self._restricted_areas)

    def fetch_drone_availability(self) -> List[AvailabilityRecord]:
        return list(self._availability)

"""Mini README: Fleet records, matching and lookup helpers.

``models`` defines drones and dispatches, ``matcher`` decides which drones
can serve which dispatches, and ``query`` provides attribute filters for
ad-hoc drone lookups.
"""

from .matcher import AvailabilityMatcher, build_windows_by_drone, fits, is_available, parse_time
from .models import Capability, DispatchRequest, Drone, Requirements, TimeWindow
from .query import QueryFilter, drones_with_cooling, find_drone, query, query_as_path

__all__ = [
    "AvailabilityMatcher",
    "Capability",
    "DispatchRequest",
    "Drone",
    "QueryFilter",
    "Requirements",
    "TimeWindow",
    "build_windows_by_drone",
    "drones_with_cooling",
    "find_drone",
    "fits",
    "is_available",
    "parse_time",
    "query",
    "query_as_path",
]

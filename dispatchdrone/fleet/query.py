"""Mini README: Attribute filters for ad-hoc drone lookups.

Structure:
    * AttributeValue - tagged number/string/boolean value.
    * ATTRIBUTE_ACCESSORS - registry of attribute name -> accessor.
    * QueryFilter - one ``attribute operator value`` condition.
    * query / query_as_path / drones_with_cooling / find_drone - lookups.

Numbers support ``=``, ``!=``, ``<`` and ``>``. Strings and booleans only
support ``=`` and compare case-insensitively. Unknown attributes, missing
capabilities and unparsable numbers never match.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Union

from ..logging_utils import get_logger
from .models import Capability, Drone

LOGGER = get_logger(__name__)


class ValueKind(str, Enum):
    """Type tag for extracted attribute values."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"


@dataclass(frozen=True, slots=True)
class AttributeValue:
    """Attribute value paired with its type tag."""

    kind: ValueKind
    value: Union[float, str, bool]


def _number(value: float) -> AttributeValue:
    return AttributeValue(ValueKind.NUMBER, float(value))


def _capability_number(getter: Callable[[Capability], float]) -> Callable[[Drone], Optional[AttributeValue]]:
    def accessor(drone: Drone) -> Optional[AttributeValue]:
        if drone.capability is None:
            return None
        return _number(getter(drone.capability))

    return accessor


def _capability_flag(getter: Callable[[Capability], bool]) -> Callable[[Drone], Optional[AttributeValue]]:
    def accessor(drone: Drone) -> Optional[AttributeValue]:
        if drone.capability is None:
            return None
        return AttributeValue(ValueKind.BOOLEAN, bool(getter(drone.capability)))

    return accessor


def _identifier(drone: Drone) -> AttributeValue:
    try:
        return _number(float(drone.drone_id))
    except (TypeError, ValueError):
        return AttributeValue(ValueKind.STRING, str(drone.drone_id))


ATTRIBUTE_ACCESSORS: Dict[str, Callable[[Drone], Optional[AttributeValue]]] = {
    "id": _identifier,
    "name": lambda drone: AttributeValue(ValueKind.STRING, drone.name or ""),
    "capacity": _capability_number(lambda capability: capability.capacity),
    "cooling": _capability_flag(lambda capability: capability.cooling),
    "heating": _capability_flag(lambda capability: capability.heating),
    "maxmoves": _capability_number(lambda capability: capability.max_moves),
    "costpermove": _capability_number(lambda capability: capability.cost_per_move),
    "costinitial": _capability_number(lambda capability: capability.cost_initial),
    "costfinal": _capability_number(lambda capability: capability.cost_final),
}

_NUMBER_OPERATORS: Dict[str, Callable[[float, float], bool]] = {
    "=": lambda left, right: left == right,
    "!=": lambda left, right: left != right,
    "<": lambda left, right: left < right,
    ">": lambda left, right: left > right,
}


@dataclass(frozen=True, slots=True)
class QueryFilter:
    """Single attribute condition, e.g. ``capacity > 4``."""

    attribute: str
    operator: str
    value: str

    def matches(self, drone: Drone) -> bool:
        accessor = ATTRIBUTE_ACCESSORS.get((self.attribute or "").strip().lower())
        if accessor is None:
            return False
        extracted = accessor(drone)
        if extracted is None:
            return False

        if extracted.kind is not ValueKind.NUMBER:
            return self.operator == "=" and str(extracted.value).lower() == str(self.value).strip().lower()

        comparison = _NUMBER_OPERATORS.get(self.operator)
        if comparison is None:
            return False
        try:
            expected = float(self.value)
        except (TypeError, ValueError):
            return False
        return comparison(extracted.value, expected)


def query(drones: Iterable[Drone], filters: Iterable[QueryFilter]) -> List[str]:
    """Return ids of drones matching every filter."""

    conditions = list(filters)
    matched = [drone.drone_id for drone in drones if all(condition.matches(drone) for condition in conditions)]
    LOGGER.debug("Query with %s filters matched %s drones", len(conditions), len(matched))
    return matched


def query_as_path(drones: Iterable[Drone], attribute: str, value: str) -> List[str]:
    """Equality lookup used by path-style queries."""

    return query(drones, [QueryFilter(attribute=attribute, operator="=", value=value)])


def drones_with_cooling(drones: Iterable[Drone], state: bool) -> List[str]:
    """Ids of drones whose cooling flag equals ``state``."""

    return [
        drone.drone_id
        for drone in drones
        if (drone.capability is not None and drone.capability.cooling) == state
    ]


def find_drone(drones: Iterable[Drone], drone_id: str) -> Drone:
    """Return the drone with ``drone_id`` or raise ``KeyError``."""

    for drone in drones:
        if str(drone.drone_id) == str(drone_id):
            return drone
    raise KeyError(f"Drone {drone_id} is not registered")

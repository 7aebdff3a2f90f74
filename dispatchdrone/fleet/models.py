"""Mini README: Fleet and dispatch records consumed by the planner.

Structure:
    * Capability / Drone - what a drone can carry and what it costs to fly.
    * TimeWindow - weekly availability slot for one drone.
    * Requirements / DispatchRequest - a requested delivery.

Records are plain dataclasses so the planning core stays free of transport
concerns; the upstream and interface layers convert their payloads into these
types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..geometry import Position

DispatchId = Union[int, str]


@dataclass(frozen=True, slots=True)
class Capability:
    """Payload, thermal and cost profile of a drone."""

    capacity: float = 0.0
    cooling: bool = False
    heating: bool = False
    max_moves: int = 0
    cost_per_move: float = 0.0
    cost_initial: float = 0.0
    cost_final: float = 0.0


@dataclass(frozen=True, slots=True)
class Drone:
    """Fleet member with a fixed capability for the planning call."""

    drone_id: str
    name: str = ""
    capability: Optional[Capability] = None


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Weekly slot during which a drone can fly, bounds inclusive."""

    day_of_week: str
    start: str
    until: str


@dataclass(frozen=True, slots=True)
class Requirements:
    """Capabilities a dispatch needs from the drone serving it."""

    capacity: float = 0.0
    cooling: bool = False
    heating: bool = False
    max_cost: Optional[float] = None


@dataclass(frozen=True, slots=True)
class DispatchRequest:
    """A single requested delivery."""

    dispatch_id: Optional[DispatchId]
    requirements: Optional[Requirements] = None
    delivery: Optional[Position] = None
    date: Optional[str] = None
    time: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """Dispatches without id, requirements or delivery are not plannable."""

        return (
            self.dispatch_id is not None
            and self.requirements is not None
            and self.delivery is not None
        )

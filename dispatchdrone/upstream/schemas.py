"""Mini README: Pydantic schemas for upstream and API JSON payloads.

Structure:
    * PositionSchema, CapabilitySchema, DroneSchema - fleet payloads.
    * RequirementsSchema, DispatchSchema - delivery requests.
    * RestrictedAreaSchema, ServicePointSchema - airspace and bases.
    * TimeWindowSchema, ServicePointDronesSchema - availability payloads.

Field names follow the camelCase wire format through aliases; each schema
offers a ``to_domain`` helper returning the planner's dataclasses.
"""

from __future__ import annotations

from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..fleet import Capability, DispatchRequest, Drone, Requirements, TimeWindow
from ..geometry import Position
from ..restrictions import AltitudeLimits, RestrictedArea


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PositionSchema(_WireModel):
    lng: float
    lat: float

    def to_domain(self) -> Position:
        return Position(lng=self.lng, lat=self.lat)


class CapabilitySchema(_WireModel):
    capacity: float = 0.0
    cooling: bool = False
    heating: bool = False
    max_moves: int = Field(0, alias="maxMoves")
    cost_per_move: float = Field(0.0, alias="costPerMove")
    cost_initial: float = Field(0.0, alias="costInitial")
    cost_final: float = Field(0.0, alias="costFinal")

    def to_domain(self) -> Capability:
        return Capability(
            capacity=self.capacity,
            cooling=self.cooling,
            heating=self.heating,
            max_moves=self.max_moves,
            cost_per_move=self.cost_per_move,
            cost_initial=self.cost_initial,
            cost_final=self.cost_final,
        )


class DroneSchema(_WireModel):
    id: str
    name: str = ""
    capability: Optional[CapabilitySchema] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        return str(value) if isinstance(value, (int, float)) else value

    def to_domain(self) -> Drone:
        return Drone(
            drone_id=self.id,
            name=self.name,
            capability=self.capability.to_domain() if self.capability else None,
        )


class RequirementsSchema(_WireModel):
    capacity: float = 0.0
    cooling: bool = False
    heating: bool = False
    max_cost: Optional[float] = Field(None, alias="maxCost")

    def to_domain(self) -> Requirements:
        return Requirements(
            capacity=self.capacity,
            cooling=self.cooling,
            heating=self.heating,
            max_cost=self.max_cost,
        )


class DispatchSchema(_WireModel):
    """Dispatch payload; missing id, requirements or delivery are tolerated
    here and dropped by the scheduler."""

    id: Optional[Union[int, str]] = None
    date: Optional[str] = None
    time: Optional[str] = None
    requirements: Optional[RequirementsSchema] = None
    delivery: Optional[PositionSchema] = None

    def to_domain(self) -> DispatchRequest:
        return DispatchRequest(
            dispatch_id=self.id,
            date=self.date,
            time=self.time,
            requirements=self.requirements.to_domain() if self.requirements else None,
            delivery=self.delivery.to_domain() if self.delivery else None,
        )


class LimitsSchema(_WireModel):
    lower: Optional[float] = None
    upper: Optional[float] = None


class RestrictedAreaSchema(_WireModel):
    name: str = ""
    id: Optional[int] = None
    limits: Optional[LimitsSchema] = None
    vertices: List[PositionSchema] = Field(default_factory=list)

    def to_domain(self) -> RestrictedArea:
        limits = self.limits or LimitsSchema()
        return RestrictedArea(
            name=self.name,
            area_id=self.id,
            limits=AltitudeLimits(lower=limits.lower, upper=limits.upper),
            vertices=tuple(vertex.to_domain() for vertex in self.vertices),
        )


class LocationSchema(PositionSchema):
    alt: Optional[float] = None


class ServicePointSchema(_WireModel):
    id: Optional[int] = None
    name: str = ""
    location: Optional[LocationSchema] = None

    def to_domain(self) -> Optional[Position]:
        return self.location.to_domain() if self.location else None


class TimeWindowSchema(_WireModel):
    day_of_week: str = Field(alias="dayOfWeek")
    start: str = Field(alias="from")
    until: str

    def to_domain(self) -> TimeWindow:
        return TimeWindow(day_of_week=self.day_of_week, start=self.start, until=self.until)


class DroneAvailabilitySchema(_WireModel):
    id: str
    availability: List[TimeWindowSchema] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        return str(value) if isinstance(value, (int, float)) else value


class ServicePointDronesSchema(_WireModel):
    service_point_id: Optional[int] = Field(None, alias="servicePointId")
    drones: List[DroneAvailabilitySchema] = Field(default_factory=list)

    def to_domain(self) -> List[Tuple[str, List[TimeWindow]]]:
        return [
            (drone.id, [window.to_domain() for window in drone.availability])
            for drone in self.drones
        ]

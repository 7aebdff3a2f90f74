"""Mini README: Request bodies accepted by the planning API.

Fleet and dispatch payloads reuse ``dispatchdrone.upstream.schemas``; the
models here only cover the geometric helper endpoints and attribute queries.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ..fleet import QueryFilter
from ..upstream.schemas import PositionSchema


class DistanceRequest(BaseModel):
    position1: PositionSchema
    position2: PositionSchema


class NextPositionRequest(BaseModel):
    start: PositionSchema
    angle: float = Field(..., ge=0, lt=360)


class RegionSchema(BaseModel):
    name: str = ""
    vertices: List[PositionSchema]


class RegionRequest(BaseModel):
    position: PositionSchema
    region: RegionSchema


class QueryAttributeSchema(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    attribute: str
    operator: str = "="
    value: str

    def to_domain(self) -> QueryFilter:
        return QueryFilter(attribute=self.attribute, operator=self.operator, value=self.value)

"""Mini README: HTTP data source for the upstream fleet service.

Structure:
    * IlpDataSource - ``requests`` based client for the REST resources
      ``drones``, ``service-points``, ``restricted-areas`` and
      ``drones-for-service-points``.

Every fetch logs and returns an empty list on transport errors or
non-JSON responses. Individual records failing schema validation are skipped
with a warning so one bad record does not hide the rest of the fleet.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ..fleet import Drone
from ..geometry import Position
from ..logging_utils import get_logger
from ..restrictions import RestrictedArea
from .base import AvailabilityRecord, FleetDataSource
from .schemas import DroneSchema, RestrictedAreaSchema, ServicePointDronesSchema, ServicePointSchema

LOGGER = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class IlpDataSource(FleetDataSource):
    """Fetch fleet data from the upstream REST service."""

    source_name = "ilp"

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint if endpoint.endswith("/") else endpoint + "/"
        self.timeout = timeout
        self._session = session or requests.Session()
        LOGGER.debug("Initialised IlpDataSource for endpoint '%s'", self.endpoint)

    def _get(self, resource: str) -> List[Any]:
        url = self.endpoint + resource
        LOGGER.debug("Fetching %s", url)
        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as error:
            LOGGER.error("Failed to fetch %s: %s", url, error)
            return []
        except ValueError as error:
            LOGGER.error("Upstream returned invalid JSON for %s: %s", url, error)
            return []
        if not isinstance(payload, list):
            LOGGER.warning("Expected a list from %s but received %s", url, type(payload).__name__)
            return []
        return payload

    def _parse(self, resource: str, schema: Type[SchemaT]) -> List[SchemaT]:
        parsed: List[SchemaT] = []
        for record in self._get(resource):
            try:
                parsed.append(schema.model_validate(record))
            except ValidationError as error:
                LOGGER.warning("Skipping malformed %s record: %s", resource, error)
        LOGGER.info("Fetched %s %s records", len(parsed), resource)
        return parsed

    def _collect(self, resource: str, schema: Type[SchemaT], convert: Callable[[SchemaT], Any]) -> list:
        return [convert(record) for record in self._parse(resource, schema)]

    def fetch_drones(self) -> List[Drone]:
        return self._collect("drones", DroneSchema, lambda record: record.to_domain())

    def fetch_service_points(self) -> List[Position]:
        positions = self._collect("service-points", ServicePointSchema, lambda record: record.to_domain())
        return [position for position in positions if position is not None]

    def fetch_restricted_areas(self) -> List[RestrictedArea]:
        return self._collect("restricted-areas", RestrictedAreaSchema, lambda record: record.to_domain())

    def fetch_drone_availability(self) -> List[AvailabilityRecord]:
        records: List[AvailabilityRecord] = []
        for service_point in self._parse("drones-for-service-points", ServicePointDronesSchema):
            records.extend(service_point.to_domain())
        return records

    def metadata(self) -> dict:
        return {"source": self.source_name, "endpoint": self.endpoint}

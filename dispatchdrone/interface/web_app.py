"""Mini README: FastAPI-powered planning service for Dispatchdrone.

Structure:
    * create_application - application factory wiring routes to the planner.

Routes live under ``/api/v1``. Geometry helpers answer distance, closeness,
heading and region questions; fleet routes expose attribute queries and
availability; planning routes run the fleet scheduler and return either the
route report or a GeoJSON line. Restricted areas are cached process-wide and
refreshed only through the invalidate route.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from ..configuration import get_settings
from ..fleet import AvailabilityMatcher, build_windows_by_drone, drones_with_cooling, find_drone, query, query_as_path
from ..geometry import InvalidPolygonError, distance, is_close, next_position, point_in_polygon
from ..logging_utils import get_logger
from ..restrictions import RestrictedAreaCache, RestrictedAreaIndex
from ..scheduling import FleetRouteScheduler, MixedDateError, PlanResult
from ..upstream import FleetDataSource, IlpDataSource
from ..upstream.schemas import DispatchSchema
from ..utils.geojson import plan_to_geojson, restricted_areas_to_geojson
from .schemas import DistanceRequest, NextPositionRequest, QueryAttributeSchema, RegionRequest

LOGGER = get_logger(__name__)

API_PREFIX = "/api/v1"


def create_application(data_source: Optional[FleetDataSource] = None) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = get_settings()
    source = data_source or IlpDataSource(
        settings.ilp_endpoint, timeout=settings.request_timeout_seconds
    )
    index = RestrictedAreaIndex(RestrictedAreaCache(source.fetch_restricted_areas))
    scheduler = FleetRouteScheduler(
        source,
        index=index,
        greedy_max_iterations=settings.greedy_max_iterations,
        astar_max_iterations=settings.astar_max_iterations,
    )

    app = FastAPI(title="Dispatchdrone Planning Service", version="0.1.0")
    LOGGER.info("Planning service using %s data source", source.source_name)

    def _plan(dispatches: List[DispatchSchema]) -> PlanResult:
        try:
            return scheduler.plan([dispatch.to_domain() for dispatch in dispatches])
        except MixedDateError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error

    @app.get(f"{API_PREFIX}/source")
    async def source_metadata() -> JSONResponse:
        """Describe the upstream data source backing the planner."""

        return JSONResponse(source.metadata())

    @app.post(f"{API_PREFIX}/distance-to")
    async def distance_to(request: DistanceRequest) -> JSONResponse:
        return JSONResponse(distance(request.position1.to_domain(), request.position2.to_domain()))

    @app.post(f"{API_PREFIX}/is-close-to")
    async def is_close_to(request: DistanceRequest) -> JSONResponse:
        return JSONResponse(is_close(request.position1.to_domain(), request.position2.to_domain()))

    @app.post(f"{API_PREFIX}/next-position")
    async def next_position_route(request: NextPositionRequest) -> JSONResponse:
        moved = next_position(request.start.to_domain(), request.angle)
        return JSONResponse({"lng": moved.lng, "lat": moved.lat})

    @app.post(f"{API_PREFIX}/is-in-region")
    async def is_in_region(request: RegionRequest) -> JSONResponse:
        """Check a point against an arbitrary closed polygon."""

        vertices = [vertex.to_domain() for vertex in request.region.vertices]
        try:
            inside = point_in_polygon(request.position.to_domain(), vertices)
        except InvalidPolygonError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse(inside)

    @app.get(f"{API_PREFIX}/drones-with-cooling/{{state}}")
    def cooling_drones(state: bool) -> JSONResponse:
        return JSONResponse(drones_with_cooling(source.fetch_drones(), state))

    @app.get(f"{API_PREFIX}/drone-details/{{drone_id}}")
    def drone_details(drone_id: str) -> JSONResponse:
        try:
            drone = find_drone(source.fetch_drones(), drone_id)
        except KeyError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        capability = drone.capability
        return JSONResponse(
            {
                "id": drone.drone_id,
                "name": drone.name,
                "capability": None
                if capability is None
                else {
                    "capacity": capability.capacity,
                    "cooling": capability.cooling,
                    "heating": capability.heating,
                    "maxMoves": capability.max_moves,
                    "costPerMove": capability.cost_per_move,
                    "costInitial": capability.cost_initial,
                    "costFinal": capability.cost_final,
                },
            }
        )

    @app.get(f"{API_PREFIX}/query-as-path/{{attribute}}/{{value}}")
    def query_path(attribute: str, value: str) -> JSONResponse:
        return JSONResponse(query_as_path(source.fetch_drones(), attribute, value))

    @app.post(f"{API_PREFIX}/query")
    def query_drones(filters: List[QueryAttributeSchema]) -> JSONResponse:
        return JSONResponse(query(source.fetch_drones(), [item.to_domain() for item in filters]))

    @app.post(f"{API_PREFIX}/query-available-drones")
    def query_available_drones(dispatches: List[DispatchSchema]) -> JSONResponse:
        matcher = AvailabilityMatcher(
            source.fetch_drones(), build_windows_by_drone(source.fetch_drone_availability())
        )
        available = matcher.query_available_drones([dispatch.to_domain() for dispatch in dispatches])
        return JSONResponse(available)

    @app.post(f"{API_PREFIX}/calc-delivery-path")
    def calc_delivery_path(dispatches: List[DispatchSchema]) -> JSONResponse:
        result = _plan(dispatches)
        return JSONResponse(result.as_dict())

    @app.post(f"{API_PREFIX}/calc-delivery-path-as-geojson")
    def calc_delivery_path_as_geojson(dispatches: List[DispatchSchema]) -> JSONResponse:
        result = _plan(dispatches)
        if len(result.drone_routes) > 1:
            LOGGER.warning("GeoJSON requested but %s drones were needed; drawing the first", len(result.drone_routes))
        return JSONResponse(plan_to_geojson(result))

    @app.get(f"{API_PREFIX}/restricted-areas")
    def restricted_areas() -> JSONResponse:
        return JSONResponse(restricted_areas_to_geojson(index.areas()))

    @app.post(f"{API_PREFIX}/restricted-areas/invalidate")
    def invalidate_restricted_areas() -> JSONResponse:
        """Operator hook forcing the next lookup to refetch restricted areas."""

        index.invalidate()
        return JSONResponse({"invalidated": True})

    return app

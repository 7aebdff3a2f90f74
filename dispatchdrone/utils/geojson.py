"""Mini README: GeoJSON helpers for Dispatchdrone.

This module converts planning results and restricted areas into GeoJSON so
map frontends can overlay them. Keeping the logic isolated avoids importing
web framework dependencies when running unit tests or reusing the helpers in
the CLI.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from ..restrictions import RestrictedArea
from ..scheduling import PlanResult


def plan_to_geojson(result: PlanResult) -> Dict:
    """Return a LineString Feature for the first drone route of ``result``.

    Single-drone batches are the expected input; when several drones were
    needed only the first route is drawn and ``droneCount`` reports the rest.
    """

    coordinates: List[List[float]] = []
    if result.drone_routes:
        for delivery in result.drone_routes[0].deliveries:
            coordinates.extend(point.as_list() for point in delivery.flight_path)
    if not coordinates:
        coordinates.append([0.0, 0.0])

    return {
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": coordinates},
        "properties": {
            "totalMoves": result.total_moves,
            "totalCost": result.total_cost,
            "deliveryCount": len(result.drone_routes[0].deliveries) if result.drone_routes else 0,
            "droneCount": len(result.drone_routes),
        },
    }


def restricted_areas_to_geojson(areas: Iterable[RestrictedArea]) -> Dict:
    """Return a FeatureCollection with one Polygon per restricted area."""

    features = []
    for area in areas:
        features.append(
            {
                "type": "Feature",
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[vertex.as_list() for vertex in area.vertices]],
                },
                "properties": {
                    "name": area.name,
                    "id": area.area_id,
                    "lower": area.limits.lower,
                    "upper": area.limits.upper,
                },
            }
        )
    return {"type": "FeatureCollection", "features": features}

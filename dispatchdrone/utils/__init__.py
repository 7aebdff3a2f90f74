"""Mini README: Utility helper functions for Dispatchdrone.

Currently exports GeoJSON converters used by the web interface and CLI.
"""

from .geojson import plan_to_geojson, restricted_areas_to_geojson

__all__ = ["plan_to_geojson", "restricted_areas_to_geojson"]

"""Mini README: Upstream collaborators supplying fleet data.

``base`` defines the ``FleetDataSource`` interface and an in-memory
implementation, ``ilp_client`` the HTTP implementation and ``schemas`` the
pydantic models shared with the web interface.
"""

from .base import AvailabilityRecord, FleetDataSource, StaticFleetDataSource
from .ilp_client import IlpDataSource

__all__ = [
    "AvailabilityRecord",
    "FleetDataSource",
    "IlpDataSource",
    "StaticFleetDataSource",
]

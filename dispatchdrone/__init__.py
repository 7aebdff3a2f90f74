"""Mini README: Core package initializer for the Dispatchdrone planner.

Dispatchdrone plans delivery flights for a fleet of drones while keeping
them out of restricted airspace. Subpackages are layered leaf-first:
``geometry`` and ``restrictions`` answer spatial questions, ``fleet`` matches
drones to dispatches, ``route_planning`` searches step paths and
``scheduling`` turns a batch of dispatches into per-drone routes.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]

"""Mini README: Restricted airspace subsystem.

Exports the restricted-area records, the invalidatable cache and the index
that planners consult for every candidate move.
"""

from .index import AltitudeLimits, RestrictedArea, RestrictedAreaCache, RestrictedAreaIndex

__all__ = [
    "AltitudeLimits",
    "RestrictedArea",
    "RestrictedAreaCache",
    "RestrictedAreaIndex",
]

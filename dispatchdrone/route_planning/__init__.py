"""Mini README: Route planning subsystem for restricted-airspace avoidance.

Exports the ``PathFinder`` contract and its interchangeable strategies. The
scheduler uses A* for whole-batch single-drone routes and the greedy search
with relaxed fallback for iterative multi-drone flights.
"""

from .astar import AStarPathFinder
from .planner import (
    FallbackPathFinder,
    GreedyHeadingPathFinder,
    PathFinder,
    RelaxedHeadingPathFinder,
    RouteFinder,
)

__all__ = [
    "AStarPathFinder",
    "FallbackPathFinder",
    "GreedyHeadingPathFinder",
    "PathFinder",
    "RelaxedHeadingPathFinder",
    "RouteFinder",
]

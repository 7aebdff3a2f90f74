"""Mini README: A* search over the discrete step graph.

Structure:
    * AStarPathFinder - optimal-under-discretisation path finder.

Nodes are positions reachable from the start by single ``STEP`` moves along
the 16 headings; every edge costs ``STEP`` and the heuristic is the straight
line distance to the goal. Equal total costs are resolved in favour of the
node closer to the goal. Positions are bucketed on a quarter-step grid so
move orders that land on (nearly) the same point share one node. A bucket keeps the
position it was first expanded from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import heapq
import itertools
import math
from typing import Dict, List, Optional, Tuple

from ..geometry import HEADINGS, STEP, Position, distance, is_close, next_position
from ..logging_utils import get_logger
from .planner import PathFinder

LOGGER = get_logger(__name__)

DEFAULT_MAX_EXPANSIONS = 50_000
_KEY_QUANTUM = STEP / 4.0

NodeKey = Tuple[int, int]


def _node_key(position: Position) -> NodeKey:
    return (round(position.lng / _KEY_QUANTUM), round(position.lat / _KEY_QUANTUM))


@dataclass(order=True, slots=True)
class _QueueEntry:
    total_cost: float
    heuristic: float
    sequence: int
    key: NodeKey = field(compare=False)


class AStarPathFinder(PathFinder):
    """Search the step graph with A*, returning an empty result on exhaustion."""

    name = "astar"

    def __init__(self, index, *, max_iterations: int = DEFAULT_MAX_EXPANSIONS) -> None:
        super().__init__(index, max_iterations=max_iterations)

    def _search(self, start: Position, end: Position) -> Optional[List[Position]]:
        counter = itertools.count()
        start_key = _node_key(start)
        positions: Dict[NodeKey, Position] = {start_key: start}
        cost_so_far: Dict[NodeKey, float] = {start_key: 0.0}
        parents: Dict[NodeKey, Optional[NodeKey]] = {start_key: None}
        closed = set()

        start_heuristic = distance(start, end)
        open_heap = [_QueueEntry(start_heuristic, start_heuristic, next(counter), start_key)]

        expansions = 0
        while open_heap and expansions < self.max_iterations:
            entry = heapq.heappop(open_heap)
            if entry.key in closed:
                continue
            closed.add(entry.key)
            expansions += 1

            current = positions[entry.key]
            if is_close(current, end):
                LOGGER.debug("astar: reached goal after %s expansions", expansions)
                return self._reconstruct(entry.key, parents, positions)

            current_cost = cost_so_far[entry.key]
            for heading in HEADINGS:
                neighbour = next_position(current, heading)
                key = _node_key(neighbour)
                if key in closed:
                    continue
                tentative = current_cost + STEP
                if tentative >= cost_so_far.get(key, math.inf):
                    continue
                if self._crosses(current, neighbour):
                    continue
                cost_so_far[key] = tentative
                parents[key] = entry.key
                positions[key] = neighbour
                heuristic = distance(neighbour, end)
                heapq.heappush(open_heap, _QueueEntry(tentative + heuristic, heuristic, next(counter), key))

        LOGGER.debug("astar: gave up after %s expansions", expansions)
        return None

    @staticmethod
    def _reconstruct(
        key: NodeKey,
        parents: Dict[NodeKey, Optional[NodeKey]],
        positions: Dict[NodeKey, Position],
    ) -> List[Position]:
        path: List[Position] = []
        cursor: Optional[NodeKey] = key
        while cursor is not None:
            path.append(positions[cursor])
            cursor = parents[cursor]
        path.reverse()
        return path

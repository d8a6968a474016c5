# route_engine/services/pathfinding.py
"""
A* search over the directed road graph.

The frontier is a binary heap keyed by ``(f_score, open_seq)`` where
``open_seq`` is the order in which a node first entered the open set.
Updated nodes are pushed again with their new f-score and the same
sequence number; stale heap entries are skipped on pop. This selects
exactly the node a linear scan over an insertion-ordered open set would
select: lowest f-score, ties going to the node opened first.
"""

import heapq
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple

from route_engine.core.errors import NoPathFoundError, SearchCancelledError
from route_engine.core.logger import logger
from route_engine.models.graph import Coordinate, Edge, Graph
from route_engine.services.geo import haversine_km

# Constant speed assumed for the remaining distance to the goal.
# Not a proven lower bound on roads faster than this.
AVERAGE_SPEED_KMH: float = 50.0

DEFAULT_CHECK_INTERVAL: int = 1000

AdjacencyIndex = Dict[int, List[Tuple[int, float]]]


@dataclass(frozen=True)
class SearchResult:
    came_from: Dict[int, int]
    total_weight: float
    expanded: int


def edge_weight(edge: Edge) -> float:
    """
    Search weight of one edge: travel time when known, length otherwise.
    """
    return edge.travel_time if edge.travel_time > 0 else edge.length


def build_adjacency(graph: Graph) -> AdjacencyIndex:
    """
    Outgoing (neighbor, weight) pairs per node, in edge-list order.

    Parallel edges are kept as separate entries; reverse edges are never
    added.
    """
    adjacency: AdjacencyIndex = {}
    for edge in graph.edges:
        adjacency.setdefault(edge.from_, []).append((edge.to, edge_weight(edge)))
    return adjacency


def heuristic_seconds(graph: Graph, node_id: int, goal_id: int) -> float:
    """
    Estimated travel time in seconds from `node_id` to `goal_id` at
    AVERAGE_SPEED_KMH. Infinite when either node is unknown.
    """
    node = graph.nodes.get(node_id)
    goal = graph.nodes.get(goal_id)
    if node is None or goal is None:
        return math.inf

    distance_km = haversine_km(node.lat, node.lon, goal.lat, goal.lon)
    return distance_km / AVERAGE_SPEED_KMH * 3600.0


def find_path(
    graph: Graph,
    adjacency: AdjacencyIndex,
    start: int,
    goal: int,
    cancel_check: Optional[Callable[[], bool]] = None,
    check_interval: int = DEFAULT_CHECK_INTERVAL,
) -> SearchResult:
    """
    Run A* from `start` to `goal`.

    Raises NoPathFoundError when the open set runs out (or only holds nodes
    with an infinite estimate) and SearchCancelledError when `cancel_check`
    returns True. `cancel_check` is polled every `check_interval` expansions.
    """
    g_score: Dict[int, float] = {start: 0.0}
    f_score: Dict[int, float] = {start: heuristic_seconds(graph, start, goal)}
    came_from: Dict[int, int] = {}
    closed: Set[int] = set()
    open_seq: Dict[int, int] = {start: 0}

    heap: List[Tuple[float, int, int]] = [(f_score[start], 0, start)]
    expanded = 0
    interval = max(1, check_interval)

    while heap:
        f, seq, current = heapq.heappop(heap)
        if current in closed or f != f_score[current]:
            continue  # stale

        if math.isinf(f):
            break

        if current == goal:
            logger.debug(
                "A* reached node {} after {} expansions (cost {:.3f})",
                goal,
                expanded,
                g_score[goal],
            )
            return SearchResult(came_from=came_from, total_weight=g_score[goal], expanded=expanded)

        closed.add(current)
        expanded += 1

        if cancel_check is not None and expanded % interval == 0 and cancel_check():
            logger.warning("A* search {} -> {} cancelled after {} expansions", start, goal, expanded)
            raise SearchCancelledError(start, goal, expanded)

        current_g = g_score[current]
        for neighbor, weight in adjacency.get(current, ()):
            if neighbor in closed:
                continue

            tentative = current_g + weight
            if neighbor not in open_seq:
                open_seq[neighbor] = len(open_seq)
            if not tentative < g_score.get(neighbor, math.inf):
                continue

            came_from[neighbor] = current
            g_score[neighbor] = tentative
            f_score[neighbor] = tentative + heuristic_seconds(graph, neighbor, goal)
            heapq.heappush(heap, (f_score[neighbor], open_seq[neighbor], neighbor))

    logger.debug("A* open set exhausted after {} expansions", expanded)
    raise NoPathFoundError(start, goal)


def reconstruct_path(
    graph: Graph,
    came_from: Dict[int, int],
    goal: int,
) -> Tuple[List[int], List[Coordinate]]:
    """
    Walk predecessors back from `goal` and return (node_ids, coordinates)
    in start -> goal order. Ids without a node record are left out of the
    coordinate list.
    """
    node_ids: List[int] = [goal]
    current = goal
    while current in came_from:
        current = came_from[current]
        node_ids.append(current)
    node_ids.reverse()

    coords: List[Coordinate] = []
    for node_id in node_ids:
        node = graph.nodes.get(node_id)
        if node is None:
            logger.warning("Node {} on reconstructed path is missing from the graph", node_id)
            continue
        coords.append(node.coordinate)

    return node_ids, coords

# route_engine/services/nearest_node.py
from typing import Optional

from route_engine.core.errors import NearestNodeNotFoundError
from route_engine.core.logger import logger
from route_engine.models.graph import Coordinate, Graph
from route_engine.services.geo import haversine_km


def find_nearest_node(graph: Graph, point: Coordinate) -> int:
    """
    Return the id of the node closest (great-circle) to `point`.

    Exhaustive scan in the graph's node order; an incumbent is only replaced
    by a strictly closer node, so the first node seen wins a tie. Nodes whose
    distance cannot be compared (NaN coordinates) are never selected.
    """
    nearest_node: Optional[int] = None
    best_dist = float("inf")

    for node in graph.nodes.values():
        d = haversine_km(point.lat, point.lon, node.lat, node.lon)
        if d < best_dist:
            best_dist = d
            nearest_node = node.id

    if nearest_node is None:
        raise NearestNodeNotFoundError(
            f"No graph node found near ({point.lat:.6f}, {point.lon:.6f}); "
            f"graph has {len(graph.nodes)} nodes"
        )

    logger.debug(
        "Nearest node for ({:.6f}, {:.6f}) -> node {} at {:.1f} m",
        point.lat,
        point.lon,
        nearest_node,
        best_dist * 1000.0,
    )
    return nearest_node

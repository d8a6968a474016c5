# route_engine/services/routing_service.py

from time import monotonic, perf_counter
from typing import Callable, List, Optional

from route_engine.core.config import settings
from route_engine.core.errors import (
    NearestNodeNotFoundError,
    NoPathFoundError,
    SearchCancelledError,
)
from route_engine.core.logger import logger
from route_engine.models.graph import Coordinate, Graph
from route_engine.models.results import (
    NearestNodeNotFound,
    NoPathFound,
    RouteFound,
    RouteResult,
    SearchCancelled,
)
from route_engine.models.routing import (
    RouteGeometry,
    RouteMarkers,
    RouteRequest,
    RouteResponse,
)
from route_engine.services import pathfinding
from route_engine.services.geo import haversine_km
from route_engine.services.graph_manager import GraphManager
from route_engine.services.nearest_node import find_nearest_node
from route_engine.services.pathfinding import AdjacencyIndex


def compute_route(
    graph: Graph,
    start: Coordinate,
    end: Coordinate,
    *,
    adjacency: Optional[AdjacencyIndex] = None,
    cancel_check: Optional[Callable[[], bool]] = None,
    check_interval: int = pathfinding.DEFAULT_CHECK_INTERVAL,
) -> RouteResult:
    """
    Fastest route between the nodes nearest to `start` and `end`.

    Never raises for routine failures: the outcome is one of RouteFound,
    NearestNodeNotFound, NoPathFound or SearchCancelled. When `adjacency`
    is None it is built from `graph` for this call only.
    """
    t0 = perf_counter()

    try:
        start_node = find_nearest_node(graph, start)
        end_node = find_nearest_node(graph, end)
    except NearestNodeNotFoundError as exc:
        logger.warning("Cannot snap route endpoints: {}", exc)
        return NearestNodeNotFound(message=str(exc))

    t_nn = perf_counter()
    logger.info(
        "Nearest-node lookup: start_node={}, end_node={}, time={:.2f} ms",
        start_node,
        end_node,
        (t_nn - t0) * 1000.0,
    )

    if start_node == end_node:
        node = graph.nodes[start_node]
        logger.info("Start and end snap to the same node {}; single-point route", start_node)
        return RouteFound(
            coordinates=(node.coordinate,),
            node_ids=(start_node,),
            total_weight=0.0,
            start_node=start_node,
            end_node=end_node,
        )

    if adjacency is None:
        adjacency = pathfinding.build_adjacency(graph)

    t_sp0 = perf_counter()
    try:
        result = pathfinding.find_path(
            graph,
            adjacency,
            start_node,
            end_node,
            cancel_check=cancel_check,
            check_interval=check_interval,
        )
    except NoPathFoundError as exc:
        logger.warning("{}", exc)
        return NoPathFound(start_node=start_node, end_node=end_node, message=str(exc))
    except SearchCancelledError as exc:
        return SearchCancelled(start_node=start_node, end_node=end_node, message=str(exc))
    t_sp1 = perf_counter()

    node_ids, coords = pathfinding.reconstruct_path(graph, result.came_from, end_node)

    logger.info(
        "Route found with {} nodes, weight {:.1f}, {} expansions in {:.2f} ms",
        len(node_ids),
        result.total_weight,
        result.expanded,
        (t_sp1 - t_sp0) * 1000.0,
    )
    logger.info("Total routing time: {:.2f} ms", (perf_counter() - t0) * 1000.0)

    return RouteFound(
        coordinates=tuple(coords),
        node_ids=tuple(node_ids),
        total_weight=result.total_weight,
        start_node=start_node,
        end_node=end_node,
    )


def deadline_check(timeout_s: float) -> Callable[[], bool]:
    """
    Cancellation check that fires once `timeout_s` seconds have elapsed.
    """
    deadline = monotonic() + timeout_s
    return lambda: monotonic() >= deadline


class RoutingService:
    """
    High-level routing service:
    - makes sure the road graph is loaded
    - snaps origin/destination to graph nodes
    - runs the A* search
    - shapes the outcome for the HTTP layer
    """

    def __init__(self, graph_manager: GraphManager | None = None) -> None:
        self.graph_manager = graph_manager or GraphManager()
        logger.info("RoutingService initialised (graph will be loaded on demand).")

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def route(self, start: Coordinate, end: Coordinate) -> RouteResult:
        """
        Compute a route on the managed graph. Raises GraphLoadError when the
        dataset cannot be loaded; every other outcome is a RouteResult.
        """
        graph = self.graph_manager.ensure_graph()
        adjacency = self.graph_manager.adjacency if settings.CACHE_ADJACENCY else None

        cancel_check = None
        if settings.SEARCH_TIMEOUT_S is not None:
            cancel_check = deadline_check(settings.SEARCH_TIMEOUT_S)

        return compute_route(
            graph,
            start,
            end,
            adjacency=adjacency,
            cancel_check=cancel_check,
            check_interval=settings.SEARCH_CHECK_INTERVAL,
        )

    def build_response(self, request: RouteRequest, found: RouteFound) -> RouteResponse:
        """
        Turn a RouteFound into the /route response body.
        """
        start = Coordinate(lat=request.start.lat, lon=request.start.lon)
        end = Coordinate(lat=request.end.lat, lon=request.end.lon)

        geometry = RouteGeometry(
            type="LineString",
            coordinates=[[c.lat, c.lon] for c in found.coordinates],
        )

        return RouteResponse(
            coordinates=list(found.coordinates),
            geometry=geometry,
            node_ids=list(found.node_ids),
            total_weight=found.total_weight,
            markers=RouteMarkers(start=start, end=end),
            warnings=self._snap_warnings(start, end, found),
        )

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _snap_warnings(self, start: Coordinate, end: Coordinate, found: RouteFound) -> List[str]:
        """
        Warn when an endpoint had to be moved far to reach the road network.
        """
        warnings: List[str] = []
        limit_m = settings.SNAP_WARNING_DISTANCE_M

        for label, requested, snapped in (
            ("Start", start, found.coordinates[0]),
            ("End", end, found.coordinates[-1]),
        ):
            snap_m = haversine_km(requested.lat, requested.lon, snapped.lat, snapped.lon) * 1000.0
            if snap_m > limit_m:
                warnings.append(
                    f"{label} point is {snap_m:.0f} m from the nearest road node "
                    f"(limit {limit_m:.0f} m)."
                )

        return warnings

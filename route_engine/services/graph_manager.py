# route_engine/services/graph_manager.py
from pathlib import Path
from time import perf_counter
from typing import Optional

from pydantic import ValidationError

from route_engine.core.config import settings
from route_engine.core.errors import GraphLoadError
from route_engine.core.logger import logger
from route_engine.models.graph import Graph
from route_engine.services.pathfinding import AdjacencyIndex, build_adjacency


def load_graph(path: Path) -> Graph:
    """
    Read a serialized graph dataset (nodes keyed by string id, edge list,
    advisory counts) from `path`.
    """
    if not path.exists():
        raise GraphLoadError(f"Graph file not found: {path}")

    try:
        return Graph.model_validate_json(path.read_bytes())
    except ValidationError as exc:
        raise GraphLoadError(f"Invalid graph file {path}: {exc.error_count()} errors") from exc


class GraphManager:
    # Holds the road graph used for routing and its derived adjacency index.

    def __init__(self, graph_path: Optional[Path] = None) -> None:
        self.graph_path = Path(graph_path or settings.GRAPH_PATH)
        # Current routing graph (or None if not loaded yet)
        self.graph: Optional[Graph] = None
        self._adjacency: Optional[AdjacencyIndex] = None
        logger.info("GraphManager initialised (graph will be loaded from {} on demand).", self.graph_path)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    @property
    def is_loaded(self) -> bool:
        return self.graph is not None

    def ensure_graph(self) -> Graph:
        """
        Return the current graph, loading it from graph_path the first time.
        """
        if self.graph is None:
            t0 = perf_counter()
            graph = load_graph(self.graph_path)
            logger.info("Graph loaded from {} in {:.2f} ms", self.graph_path, (perf_counter() - t0) * 1000.0)
            self.set_graph(graph)
        return self.graph

    def set_graph(self, graph: Graph) -> None:
        """
        Install `graph` as the routing graph and drop any derived state.
        """
        self.graph = graph
        self._adjacency = None
        self._log_diagnostics(graph)

    def clear(self) -> None:
        """
        Forget the current graph; the next ensure_graph() reloads it from disk.
        """
        self.graph = None
        self._adjacency = None

    @property
    def adjacency(self) -> AdjacencyIndex:
        """
        Adjacency index of the current graph, built once and reused.
        """
        graph = self.ensure_graph()
        if self._adjacency is None:
            t0 = perf_counter()
            self._adjacency = build_adjacency(graph)
            logger.info(
                "Adjacency index built for {} source nodes in {:.2f} ms",
                len(self._adjacency),
                (perf_counter() - t0) * 1000.0,
            )
        return self._adjacency

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _log_diagnostics(self, graph: Graph) -> None:
        """
        Report header/size mismatches and edges pointing at unknown nodes.

        Such edges are kept: they can never lead to the goal, so the search
        simply never completes a path through them.
        """
        n_nodes = len(graph.nodes)
        n_edges = len(graph.edges)

        logger.info("Graph ready: {} nodes, {} edges", n_nodes, n_edges)

        if graph.node_count is not None and graph.node_count != n_nodes:
            logger.warning(
                "Graph header says {} nodes but {} were loaded", graph.node_count, n_nodes
            )
        if graph.edge_count is not None and graph.edge_count != n_edges:
            logger.warning(
                "Graph header says {} edges but {} were loaded", graph.edge_count, n_edges
            )

        dangling = sum(
            1
            for edge in graph.edges
            if edge.from_ not in graph.nodes or edge.to not in graph.nodes
        )
        if dangling:
            logger.warning(
                "{} edges reference node ids missing from the graph; they are treated as unreachable",
                dangling,
            )

# route_engine/services/osm_export.py
from pathlib import Path
from typing import Any, Dict, List, Optional

import networkx as nx
import osmnx as ox

from route_engine.core.logger import logger
from route_engine.models.graph import Edge, Graph, Node

MPH_TO_KMH = 1.609344


def parse_maxspeed(value: Any) -> Optional[float]:
    """
    Parse an OSM maxspeed tag into km/h.

    osmnx keeps the raw tag, which can be a number, "50", "30 mph", or a
    list of such values for merged ways; the first value is used.
    """
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)

    raw = str(value).strip().lower()
    parts = raw.split()
    if not parts:
        return None
    try:
        speed = float(parts[0])
    except ValueError:
        return None
    if "mph" in raw:
        return speed * MPH_TO_KMH
    return speed


def graph_from_networkx(G: nx.MultiDiGraph) -> Graph:
    """
    Convert an osmnx road graph (node attrs x/y, edge attrs length/travel_time/maxspeed)
    into the dataset model used by the engine.
    """
    nodes: Dict[int, Node] = {}
    num_skipped_nodes = 0

    for node_id, data in G.nodes(data=True):
        x = data.get("x")
        y = data.get("y")
        if x is None or y is None:
            num_skipped_nodes += 1
            continue
        nodes[int(node_id)] = Node(id=int(node_id), lat=float(y), lon=float(x))

    edges: List[Edge] = []
    num_skipped_edges = 0

    for u, v, data in G.edges(data=True):
        length = data.get("length")
        if length is None:
            num_skipped_edges += 1
            continue
        edges.append(
            Edge(
                from_=int(u),
                to=int(v),
                length=float(length),
                travel_time=float(data.get("travel_time") or 0.0),
                maxspeed=parse_maxspeed(data.get("maxspeed")),
            )
        )

    logger.info(
        "Converted graph: {} nodes, {} edges ({} nodes without coords, {} edges without length)",
        len(nodes),
        len(edges),
        num_skipped_nodes,
        num_skipped_edges,
    )

    return Graph(nodes=nodes, edges=edges, node_count=len(nodes), edge_count=len(edges))


def download_graph(place: str, network_type: str = "drive") -> Graph:
    """
    Download the drivable OSM network for `place` and attach speeds and
    travel times (seconds) to every edge.
    """
    logger.info("Downloading OSM graph for {!r} (network_type={})", place, network_type)

    G: nx.MultiDiGraph = ox.graph_from_place(place, network_type=network_type, simplify=True)
    G = ox.add_edge_speeds(G)
    G = ox.add_edge_travel_times(G)

    return graph_from_networkx(G)


def save_graph(graph: Graph, path: Path) -> None:
    """
    Write `graph` in the dataset format read by GraphManager.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(graph.model_dump_json(by_alias=True), encoding="utf-8")
    logger.info("Graph written to {}", path)

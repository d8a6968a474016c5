# tests/conftest.py
import os
import sys

import pytest

# Add the project root directory to sys.path so that "import route_engine" works
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from route_engine.models.graph import Edge, Graph, Node  # noqa: E402


def make_graph(nodes, edges):
    """
    Build a Graph from {id: (lat, lon)} and [(from, to, travel_time, length)].
    """
    return Graph(
        nodes={node_id: Node(id=node_id, lat=lat, lon=lon) for node_id, (lat, lon) in nodes.items()},
        edges=[
            Edge(from_=u, to=v, travel_time=travel_time, length=length)
            for u, v, travel_time, length in edges
        ],
        node_count=len(nodes),
        edge_count=len(edges),
    )


@pytest.fixture
def chain_graph() -> Graph:
    # Three nodes ~111 m apart along the equator, 1 -> 2 -> 3
    return make_graph(
        {1: (0.0, 0.0), 2: (0.0, 0.001), 3: (0.0, 0.002)},
        [(1, 2, 5.0, 1.0), (2, 3, 5.0, 1.0)],
    )


@pytest.fixture
def installed_graph(chain_graph):
    """
    Install chain_graph on the API's shared GraphManager for one test.
    """
    from route_engine.api.v1 import routes_routing

    routes_routing.graph_manager.set_graph(chain_graph)
    yield routes_routing.graph_manager
    routes_routing.graph_manager.clear()

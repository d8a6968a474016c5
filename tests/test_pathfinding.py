# tests/test_pathfinding.py
import math
import random

import networkx as nx
import pytest

from conftest import make_graph
from route_engine.core.errors import NoPathFoundError, SearchCancelledError
from route_engine.models.graph import Coordinate, Edge
from route_engine.services.geo import haversine_km
from route_engine.services.pathfinding import (
    AVERAGE_SPEED_KMH,
    build_adjacency,
    edge_weight,
    find_path,
    heuristic_seconds,
    reconstruct_path,
)


def _search(graph, start, goal, **kwargs):
    result = find_path(graph, build_adjacency(graph), start, goal, **kwargs)
    node_ids, _ = reconstruct_path(graph, result.came_from, goal)
    return node_ids, result.total_weight


def test_edge_weight_prefers_positive_travel_time():
    assert edge_weight(Edge(from_=1, to=2, travel_time=10.0, length=3.0)) == 10.0
    assert edge_weight(Edge(from_=2, to=3, travel_time=0.0, length=20.0)) == 20.0


def test_edge_accepts_wire_name_from():
    edge = Edge.model_validate({"from": 4, "to": 5, "length": 12.5, "travel_time": 1.5})
    assert edge.from_ == 4
    assert edge.maxspeed is None


def test_adjacency_is_directed_and_keeps_parallel_edges():
    graph = make_graph(
        {1: (0.0, 0.0), 2: (0.0, 0.001)},
        [(1, 2, 30.0, 1.0), (1, 2, 10.0, 1.0), (2, 1, 0.0, 7.0)],
    )
    adjacency = build_adjacency(graph)

    assert adjacency[1] == [(2, 30.0), (2, 10.0)]
    assert adjacency[2] == [(1, 7.0)]


def test_heuristic_uses_constant_average_speed():
    graph = make_graph({1: (0.0, 0.0), 2: (0.0, 1.0)}, [])
    expected = haversine_km(0.0, 0.0, 0.0, 1.0) / AVERAGE_SPEED_KMH * 3600.0

    assert heuristic_seconds(graph, 1, 2) == pytest.approx(expected)
    assert heuristic_seconds(graph, 2, 2) == 0.0


def test_heuristic_is_infinite_for_unknown_nodes(chain_graph):
    assert math.isinf(heuristic_seconds(chain_graph, 1, 42))
    assert math.isinf(heuristic_seconds(chain_graph, 42, 1))


def test_zero_travel_time_falls_back_to_length():
    graph = make_graph(
        {1: (0.0, 0.0), 2: (0.0, 0.001), 3: (0.0, 0.002)},
        [(1, 2, 5.0, 1.0), (2, 3, 0.0, 20.0)],
    )
    node_ids, weight = _search(graph, 1, 3)

    assert node_ids == [1, 2, 3]
    assert weight == 25.0


def test_cheaper_parallel_edge_wins():
    graph = make_graph(
        {1: (0.0, 0.0), 2: (0.0, 0.001)},
        [(1, 2, 30.0, 1.0), (1, 2, 10.0, 1.0)],
    )
    _, weight = _search(graph, 1, 2)
    assert weight == 10.0


def test_faster_detour_beats_shorter_direct_edge():
    graph = make_graph(
        {1: (0.0, 0.0), 2: (0.0005, 0.001), 3: (0.0, 0.002)},
        [(1, 3, 100.0, 1.0), (1, 2, 20.0, 1.0), (2, 3, 20.0, 1.0)],
    )
    node_ids, weight = _search(graph, 1, 3)

    assert node_ids == [1, 2, 3]
    assert weight == 40.0


def test_start_without_outgoing_edges_has_no_path():
    graph = make_graph({1: (0.0, 0.0), 2: (0.0, 0.001)}, [(2, 1, 5.0, 1.0)])

    with pytest.raises(NoPathFoundError) as excinfo:
        find_path(graph, build_adjacency(graph), 1, 2)

    assert excinfo.value.start_node == 1
    assert excinfo.value.end_node == 2


def test_disconnected_components_have_no_path():
    graph = make_graph(
        {1: (0.0, 0.0), 2: (0.0, 0.001), 3: (0.0, 0.01), 4: (0.0, 0.011)},
        [(1, 2, 5.0, 1.0), (2, 1, 5.0, 1.0), (3, 4, 5.0, 1.0)],
    )
    with pytest.raises(NoPathFoundError):
        find_path(graph, build_adjacency(graph), 1, 4)


def test_edge_to_missing_node_is_ignored():
    graph = make_graph(
        {1: (0.0, 0.0), 2: (0.0, 0.001)},
        [(1, 99, 1.0, 1.0), (1, 2, 5.0, 1.0)],
    )
    node_ids, weight = _search(graph, 1, 2)

    assert node_ids == [1, 2]
    assert weight == 5.0


def test_path_only_through_missing_node_is_no_path():
    graph = make_graph(
        {1: (0.0, 0.0), 2: (0.0, 0.001)},
        [(1, 99, 1.0, 1.0), (99, 2, 1.0, 1.0)],
    )
    with pytest.raises(NoPathFoundError):
        find_path(graph, build_adjacency(graph), 1, 2)


def test_node_id_zero_is_part_of_the_path():
    graph = make_graph(
        {5: (0.0, 0.0), 0: (0.0, 0.001), 6: (0.0, 0.002)},
        [(5, 0, 5.0, 1.0), (0, 6, 5.0, 1.0)],
    )
    node_ids, _ = _search(graph, 5, 6)
    assert node_ids == [5, 0, 6]


def test_equal_cost_tie_goes_to_first_opened_node():
    nodes = {1: (0.0, 0.0), 2: (0.001, 0.001), 3: (-0.001, 0.001), 4: (0.0, 0.002)}
    via_2_first = make_graph(
        nodes,
        [(1, 2, 10.0, 1.0), (1, 3, 10.0, 1.0), (2, 4, 10.0, 1.0), (3, 4, 10.0, 1.0)],
    )
    via_3_first = make_graph(
        nodes,
        [(1, 3, 10.0, 1.0), (1, 2, 10.0, 1.0), (3, 4, 10.0, 1.0), (2, 4, 10.0, 1.0)],
    )

    assert _search(via_2_first, 1, 4) == ([1, 2, 4], 20.0)
    assert _search(via_3_first, 1, 4) == ([1, 3, 4], 20.0)


def test_search_is_deterministic():
    graph = _random_grid_graph(seed=3, drop=0.0)
    assert _search(graph, 0, 35) == _search(graph, 0, 35)


def test_cancel_check_stops_search(chain_graph):
    calls = []

    def cancel():
        calls.append(1)
        return True

    with pytest.raises(SearchCancelledError) as excinfo:
        find_path(chain_graph, build_adjacency(chain_graph), 1, 3, cancel_check=cancel, check_interval=1)

    assert excinfo.value.expanded == 1
    assert calls == [1]


def test_cancel_check_is_polled_every_interval():
    graph = _random_grid_graph(seed=5, drop=0.0)
    calls = []

    def never_cancel():
        calls.append(1)
        return False

    result = find_path(graph, build_adjacency(graph), 0, 35, cancel_check=never_cancel, check_interval=2)
    assert len(calls) == result.expanded // 2


def test_reconstruct_path_skips_ids_without_node_record(chain_graph):
    node_ids, coords = reconstruct_path(chain_graph, {3: 99, 99: 1}, 3)

    assert node_ids == [1, 99, 3]
    assert coords == [Coordinate(lat=0.0, lon=0.0), Coordinate(lat=0.0, lon=0.002)]


def _random_grid_graph(seed: int, size: int = 6, drop: float = 0.15):
    """
    size x size grid around London with travel times never faster than the
    heuristic speed, so the heuristic stays admissible.
    """
    rng = random.Random(seed)
    nodes = {}
    for row in range(size):
        for col in range(size):
            nodes[row * size + col] = (51.45 + row * 0.002, -0.20 + col * 0.003)

    edges = []
    for row in range(size):
        for col in range(size):
            u = row * size + col
            for dr, dc in ((0, 1), (1, 0), (0, -1), (-1, 0), (1, 1)):
                r, c = row + dr, col + dc
                if not (0 <= r < size and 0 <= c < size) or rng.random() < drop:
                    continue
                v = r * size + c
                lat1, lon1 = nodes[u]
                lat2, lon2 = nodes[v]
                km = haversine_km(lat1, lon1, lat2, lon2)
                min_time = km / AVERAGE_SPEED_KMH * 3600.0
                edges.append((u, v, min_time * rng.uniform(1.0, 3.0), km * 1000.0))

    return make_graph(nodes, edges)


@pytest.mark.parametrize("seed", [1, 2, 3, 4])
def test_astar_matches_dijkstra(seed):
    graph = _random_grid_graph(seed)
    adjacency = build_adjacency(graph)

    G = nx.MultiDiGraph()
    G.add_nodes_from(graph.nodes)
    for edge in graph.edges:
        G.add_edge(edge.from_, edge.to, weight=edge_weight(edge))

    checked = 0
    for start, goal in ((0, 35), (35, 0), (5, 30), (14, 21), (7, 31)):
        if not nx.has_path(G, start, goal):
            with pytest.raises(NoPathFoundError):
                find_path(graph, adjacency, start, goal)
            continue
        result = find_path(graph, adjacency, start, goal)
        expected = nx.dijkstra_path_length(G, start, goal, weight="weight")
        assert result.total_weight == pytest.approx(expected)
        checked += 1

    assert checked > 0

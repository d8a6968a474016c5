# route_engine/models/results.py

from dataclasses import dataclass
from typing import Literal, Tuple, Union

from route_engine.models.graph import Coordinate


@dataclass(frozen=True)
class RouteFound:
    """
    A route between the two snapped nodes.

    `coordinates[0]` and `coordinates[-1]` are node positions, not the
    requested points.
    """
    coordinates: Tuple[Coordinate, ...]
    node_ids: Tuple[int, ...]
    total_weight: float
    start_node: int
    end_node: int
    status: Literal["ok"] = "ok"


@dataclass(frozen=True)
class NearestNodeNotFound:
    message: str
    status: Literal["nearest_node_not_found"] = "nearest_node_not_found"


@dataclass(frozen=True)
class NoPathFound:
    start_node: int
    end_node: int
    message: str
    status: Literal["no_path_found"] = "no_path_found"


@dataclass(frozen=True)
class SearchCancelled:
    start_node: int
    end_node: int
    message: str
    status: Literal["search_cancelled"] = "search_cancelled"


RouteResult = Union[RouteFound, NearestNodeNotFound, NoPathFound, SearchCancelled]

# Outcomes that callers report to the user instead of drawing a route
RouteFailure = Union[NearestNodeNotFound, NoPathFound, SearchCancelled]

__all__ = [
    "RouteFound",
    "NearestNodeNotFound",
    "NoPathFound",
    "SearchCancelled",
    "RouteResult",
    "RouteFailure",
]

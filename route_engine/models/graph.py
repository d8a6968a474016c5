# route_engine/models/graph.py

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Coordinate(BaseModel):
    """
    Simple latitude/longitude coordinate, in degrees.

    Ranges are not checked here: the engine only uses coordinates for
    distance computation. Request-side validation lives in the API models.
    """
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float


class Node(BaseModel):
    """
    One road-network node as exported from OpenStreetMap.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    lat: float
    lon: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lon=self.lon)


class Edge(BaseModel):
    """
    Directed road segment between two nodes.

    `length` is in whatever unit the exporter used (metres for osmnx),
    `travel_time` in seconds and may be 0 when no speed was known.
    `maxspeed` is carried through but not used by the search.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: int = Field(alias="from")
    to: int
    length: float
    travel_time: float
    maxspeed: Optional[float] = None


class Graph(BaseModel):
    """
    Immutable road graph handed to the engine by the loader.

    `node_count` and `edge_count` are copied from the dataset header and are
    only used for diagnostics.
    """
    model_config = ConfigDict(frozen=True)

    nodes: Dict[int, Node]
    edges: List[Edge]
    node_count: Optional[int] = None
    edge_count: Optional[int] = None

    @model_validator(mode="after")
    def check_node_keys(self) -> "Graph":
        # Lookups go through the mapping key, snapping returns Node.id
        for key, node in self.nodes.items():
            if key != node.id:
                raise ValueError(f"node key {key} does not match node id {node.id}")
        return self

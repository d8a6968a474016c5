# route_engine/models/routing.py

from typing import List, Optional

from pydantic import BaseModel, Field

from route_engine.models.graph import Coordinate


class QueryCoordinate(BaseModel):
    """
    Coordinate supplied by an API caller; out-of-range values are rejected
    with a 422 before they reach the engine.
    """
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class RouteRequest(BaseModel):
    """
    Request body for the /route endpoint.
    """
    start: QueryCoordinate
    end: QueryCoordinate


class RouteGeometry(BaseModel):
    """
    Geometry of the computed route as a GeoJSON-like LineString.

    coordinates is a list of [lat, lon] pairs, e.g.:
    [
        [51.4643, -0.1660],
        [51.4650, -0.1671],
        ...
    ]
    """
    type: str = "LineString"
    coordinates: List[List[float]]


class RouteMarkers(BaseModel):
    """
    The literal requested points, for drawing start/end markers next to the
    snapped route line.
    """
    start: Coordinate
    end: Coordinate


class RouteResponse(BaseModel):
    """
    Response for the /route endpoint.

    - `coordinates` are the snapped node positions, in travel order.
    - `geometry` is the same polyline as a LineString of [lat, lon] pairs.
    - `total_weight` is the summed search weight (seconds where the data
      carried travel times).
    """
    coordinates: List[Coordinate]
    geometry: RouteGeometry
    node_ids: List[int]
    total_weight: float
    markers: RouteMarkers
    warnings: Optional[List[str]] = []


class RouteErrorDetail(BaseModel):
    """
    Body of the `detail` field returned with a failed routing request.
    """
    status: str
    message: str

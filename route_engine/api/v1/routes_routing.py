# route_engine/api/v1/routes_routing.py
from fastapi import APIRouter, HTTPException

from route_engine.core.errors import GraphLoadError
from route_engine.core.logger import logger
from route_engine.models.graph import Coordinate
from route_engine.models.results import (
    NearestNodeNotFound,
    NoPathFound,
    RouteFound,
    SearchCancelled,
)
from route_engine.models.routing import RouteErrorDetail, RouteRequest, RouteResponse
from route_engine.services.graph_manager import GraphManager
from route_engine.services.routing_service import RoutingService

router = APIRouter(
    prefix="/route",
    tags=["routing"],
)

# Single shared instances
graph_manager = GraphManager()
routing_service = RoutingService(graph_manager=graph_manager)

FAILURE_STATUS_CODES = {
    NoPathFound: 404,
    NearestNodeNotFound: 422,
    SearchCancelled: 504,
}


@router.post(
    "/",
    response_model=RouteResponse,
    summary="Compute the fastest route between start and end",
)
def compute_route(request: RouteRequest) -> RouteResponse:
    """
    Compute the fastest route between start and end on the loaded road graph.

    - Snaps start/end to the nearest graph nodes.
    - Runs A* weighted by travel time (length where no travel time is known).
    - Returns the snapped polyline plus the literal start/end as markers.
    """
    start = Coordinate(lat=request.start.lat, lon=request.start.lon)
    end = Coordinate(lat=request.end.lat, lon=request.end.lon)

    logger.info(
        "Received routing request from ({:.6f}, {:.6f}) -> ({:.6f}, {:.6f})",
        start.lat,
        start.lon,
        end.lat,
        end.lon,
    )

    try:
        result = routing_service.route(start, end)
    except GraphLoadError as exc:
        logger.error("Routing graph unavailable: {}", exc)
        detail = RouteErrorDetail(status="graph_unavailable", message=str(exc))
        raise HTTPException(status_code=503, detail=detail.model_dump()) from exc

    if isinstance(result, RouteFound):
        return routing_service.build_response(request, result)

    detail = RouteErrorDetail(status=result.status, message=result.message)
    raise HTTPException(status_code=FAILURE_STATUS_CODES[type(result)], detail=detail.model_dump())

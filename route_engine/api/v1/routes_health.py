# route_engine/api/v1/routes_health.py
from fastapi import APIRouter

from route_engine.api.v1.routes_routing import graph_manager
from route_engine.core.config import settings

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


@router.get("/", summary="Health check")
async def health_check():
    """
    Simple health check endpoint to verify that the API is running.
    Does not trigger a graph load.
    """
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "graph_loaded": graph_manager.is_loaded,
    }

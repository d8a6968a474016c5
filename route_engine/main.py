# route_engine/main.py

from fastapi import FastAPI

from route_engine.api.v1 import routes_health, routes_routing
from route_engine.core.config import settings
from route_engine.core.logger import logger


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Fastest-route API over a precomputed OpenStreetMap road graph.",
    )

    # Routers
    app.include_router(routes_health.router, prefix="", tags=["health"])
    app.include_router(routes_routing.router, prefix="", tags=["routing"])

    logger.info("{} {} ({}) ready", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)

    return app


app = create_app()

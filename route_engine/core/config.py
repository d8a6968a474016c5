# route_engine/core/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (.env file).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    APP_NAME: str = "Fastest Route Engine"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Serialized road graph produced by scripts/export_osm_graph.py
    GRAPH_PATH: str = "data/osm_graph.json"

    # Keep one adjacency index per loaded graph instead of rebuilding per request
    CACHE_ADJACENCY: bool = True

    # Wall-clock budget for one A* search; None disables cancellation
    SEARCH_TIMEOUT_S: Optional[float] = None
    # How many node expansions between two cancellation checks
    SEARCH_CHECK_INTERVAL: int = 1000

    # Snaps farther than this from the requested point produce a warning
    SNAP_WARNING_DISTANCE_M: float = 500.0

    # Place string for OSMnx, e.g. "London, United Kingdom"
    OSM_PLACE: str = "London, United Kingdom"


settings = Settings()

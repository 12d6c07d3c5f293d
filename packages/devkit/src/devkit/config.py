from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class EvacuationSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    SERVICE_NAME: str = "evacuation-api"
    LOG_LEVEL: str = "INFO"
    REDIS_URL: str | None = None

    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"
    OVERPASS_TIMEOUT_SECONDS: float = 15.0
    OVERPASS_RESULT_LIMIT: int = 100
    OVERPASS_DAILY_LIMIT: int = 10_000

    OSRM_URL: str = "https://router.project-osrm.org"
    OSRM_TIMEOUT_SECONDS: float = 10.0

    DEFAULT_SEARCH_RADIUS_METERS: int = 30_000
    DEFAULT_SAMPLE_INTERVAL: int = 10
    MAX_SAFE_SPOTS: int = 20


def load_settings(service_name: str) -> EvacuationSettings:
    return EvacuationSettings(SERVICE_NAME=service_name)

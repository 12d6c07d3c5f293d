"""Common runtime devkit for service infrastructure concerns."""

from devkit.config import EvacuationSettings, load_settings
from devkit.observability import configure_logging, configure_otel
from devkit.redis import AsyncRedisManager, create_redis_client

__all__ = [
    "AsyncRedisManager",
    "EvacuationSettings",
    "configure_logging",
    "configure_otel",
    "create_redis_client",
    "load_settings",
]

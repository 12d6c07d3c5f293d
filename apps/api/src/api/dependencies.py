from __future__ import annotations

from devkit.config import load_settings
from devkit.redis import create_redis_client
from evacuation_planner.assembler import PlanAssembler
from evacuation_planner.clients.osrm_client import OsrmClient
from evacuation_planner.clients.overpass_client import OverpassClient
from evacuation_planner.locator import SafeSpotLocator
from evacuation_planner.route_planner import RoutePlanner

from api.quota import DailyQuotaGuard, InMemoryQuotaStore, QuotaStore, RedisQuotaStore

settings = load_settings("evacuation-api")

_redis_client = create_redis_client(settings.REDIS_URL)
_quota_store: QuotaStore = (
    RedisQuotaStore(_redis_client) if _redis_client is not None else InMemoryQuotaStore()
)
_overpass_quota_guard = DailyQuotaGuard(
    _quota_store,
    source="overpass",
    limit=settings.OVERPASS_DAILY_LIMIT,
)
_plan_assembler = PlanAssembler(
    SafeSpotLocator(
        OverpassClient(
            base_url=settings.OVERPASS_URL,
            timeout_seconds=settings.OVERPASS_TIMEOUT_SECONDS,
            result_limit=settings.OVERPASS_RESULT_LIMIT,
        ),
        quota_guard=_overpass_quota_guard,
        max_results=settings.MAX_SAFE_SPOTS,
    ),
    RoutePlanner(
        OsrmClient(base_url=settings.OSRM_URL, timeout_seconds=settings.OSRM_TIMEOUT_SECONDS),
    ),
)


def get_plan_assembler() -> PlanAssembler:
    return _plan_assembler


def get_overpass_quota_guard() -> DailyQuotaGuard:
    return _overpass_quota_guard

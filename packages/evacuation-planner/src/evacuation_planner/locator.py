from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from geo_engine.distance import haversine_distance_km
from geo_engine.models import GeoPoint

from evacuation_planner.classification import FACILITY_CATEGORIES, FacilityCategory, classify_tags
from evacuation_planner.errors import QuotaExceededError, UpstreamUnavailableError
from evacuation_planner.formatting import round_tenths
from evacuation_planner.models import RawFeature, SafeSpot
from evacuation_planner.quota import QuotaGuard

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 20


class FacilityQueryService(Protocol):
    async def query_facilities(
        self,
        lat: float,
        lng: float,
        radius_meters: float,
        categories: Sequence[FacilityCategory],
    ) -> list[RawFeature]: ...


class SafeSpotLocator:
    """Finds and ranks evacuation destinations around a crisis location."""

    def __init__(
        self,
        feature_service: FacilityQueryService,
        quota_guard: QuotaGuard | None = None,
        max_results: int = DEFAULT_MAX_RESULTS,
        categories: Sequence[FacilityCategory] = FACILITY_CATEGORIES,
    ) -> None:
        if max_results <= 0:
            raise ValueError("max_results must be > 0")
        self._feature_service = feature_service
        self._quota_guard = quota_guard
        self._max_results = max_results
        self._categories = tuple(categories)

    async def locate(self, lat: float, lng: float, radius_meters: float) -> list[SafeSpot]:
        if radius_meters <= 0:
            raise ValueError("radius_meters must be > 0")
        await self._ensure_quota()

        try:
            features = await self._feature_service.query_facilities(lat, lng, radius_meters, self._categories)
        except UpstreamUnavailableError as exc:
            logger.warning(
                "safe_spot_query_failed",
                extra={"code": exc.code, "detail": exc.message, "radius_meters": radius_meters},
            )
            return []
        finally:
            await self._record_quota_use()

        origin = GeoPoint(lat=lat, lng=lng)
        spots = [spot for spot in (to_safe_spot(origin, feature) for feature in features) if spot is not None]
        ranked = rank_safe_spots(spots)[: self._max_results]
        logger.info(
            "safe_spots_located",
            extra={"feature_count": len(features), "candidate_count": len(spots), "returned": len(ranked)},
        )
        return ranked

    async def _ensure_quota(self) -> None:
        # An unreachable quota store does not block planning.
        guard = self._quota_guard
        if guard is None:
            return
        try:
            allowed = await guard.check_quota()
        except Exception as exc:
            logger.warning(
                "safe_spot_quota_store_failed",
                extra={"source": guard.source, "operation": "check", "error": str(exc)},
            )
            return
        if not allowed:
            logger.warning("safe_spot_quota_exceeded", extra={"source": guard.source, "limit": guard.limit})
            raise QuotaExceededError(guard.source, guard.limit)

    async def _record_quota_use(self) -> None:
        guard = self._quota_guard
        if guard is None:
            return
        try:
            await guard.increment_quota()
        except Exception as exc:
            logger.warning(
                "safe_spot_quota_store_failed",
                extra={"source": guard.source, "operation": "increment", "error": str(exc)},
            )


def rank_safe_spots(spots: Sequence[SafeSpot]) -> list[SafeSpot]:
    return sorted(spots, key=SafeSpot.rank_key)


def to_safe_spot(origin: GeoPoint, feature: RawFeature) -> SafeSpot | None:
    if feature.lat is None or feature.lng is None:
        return None
    spot_type = classify_tags(feature.tags, feature.category_hint)
    if spot_type is None:
        return None
    tags = feature.tags
    distance_km = haversine_distance_km(origin, GeoPoint(lat=feature.lat, lng=feature.lng))
    address = ", ".join(
        part for part in (tags.get("addr:street"), tags.get("addr:housenumber"), tags.get("addr:city")) if part
    )
    return SafeSpot(
        id=feature.source_id,
        name=tags.get("name") or tags.get("name:en") or spot_type.label,
        type=spot_type,
        latitude=feature.lat,
        longitude=feature.lng,
        distance_km=round_tenths(distance_km),
        capacity=tags.get("capacity") or tags.get("beds") or None,
        address=address or None,
        phone=tags.get("phone") or tags.get("contact:phone") or None,
    )

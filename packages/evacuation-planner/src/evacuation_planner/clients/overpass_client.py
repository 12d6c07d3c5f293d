from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

import httpx

from evacuation_planner.classification import FacilityCategory
from evacuation_planner.errors import UpstreamUnavailableError
from evacuation_planner.models import RawFeature

logger = logging.getLogger(__name__)

DEFAULT_OVERPASS_URL = "https://overpass-api.de/api/interpreter"


def build_facility_query(
    lat: float,
    lng: float,
    radius_meters: float,
    categories: Sequence[FacilityCategory],
    result_limit: int,
    server_timeout_seconds: int,
) -> str:
    around = f"(around:{radius_meters:g},{lat},{lng})"
    selectors = "\n".join(
        f'  {element}["{category.key}"="{category.value}"]{around};'
        for category in categories
        for element in ("node", "way")
    )
    return f"[out:json][timeout:{server_timeout_seconds}];\n(\n{selectors}\n);\nout center {result_limit};"


class OverpassClient:
    def __init__(
        self,
        base_url: str = DEFAULT_OVERPASS_URL,
        timeout_seconds: float = 15.0,
        result_limit: int = 100,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds
        self._result_limit = result_limit
        self._client_factory = client_factory

    async def query_facilities(
        self,
        lat: float,
        lng: float,
        radius_meters: float,
        categories: Sequence[FacilityCategory],
    ) -> list[RawFeature]:
        query = build_facility_query(
            lat,
            lng,
            radius_meters,
            categories,
            result_limit=self._result_limit,
            server_timeout_seconds=max(1, int(self._timeout_seconds)),
        )
        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            async with factory() as client:
                response = await client.post(self._base_url, data={"data": query})
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailableError("UPSTREAM_TIMEOUT", "Overpass timeout") from exc
        except httpx.HTTPStatusError as exc:
            raise UpstreamUnavailableError(
                "UPSTREAM_HTTP_ERROR", f"Overpass returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError("UPSTREAM_FAILURE", "Overpass request failed") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamUnavailableError("UPSTREAM_MALFORMED", "Overpass returned non-JSON body") from exc
        elements = payload.get("elements") if isinstance(payload, dict) else None
        if not isinstance(elements, list):
            raise UpstreamUnavailableError("UPSTREAM_MALFORMED", "Overpass payload has no elements list")

        features = [feature for feature in map(self._to_feature, elements) if feature is not None]
        logger.debug(
            "overpass_elements_received",
            extra={"element_count": len(elements), "feature_count": len(features)},
        )
        return features

    def _to_feature(self, element: Any) -> RawFeature | None:
        if not isinstance(element, dict) or "id" not in element:
            return None
        lat, lng = element.get("lat"), element.get("lon")
        center = element.get("center")
        if (lat is None or lng is None) and isinstance(center, dict):
            lat, lng = center.get("lat"), center.get("lon")
        tags = element.get("tags")
        return RawFeature(
            element_type=str(element.get("type", "node")),
            element_id=element["id"],
            lat=_as_float(lat),
            lng=_as_float(lng),
            tags={str(key): str(value) for key, value in tags.items()} if isinstance(tags, dict) else {},
        )


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None

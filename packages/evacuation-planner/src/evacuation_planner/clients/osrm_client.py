from __future__ import annotations

from collections.abc import Callable

import httpx

from evacuation_planner.errors import UpstreamUnavailableError
from evacuation_planner.models import RouteGeometry
from geo_engine.models import GeoPoint

DEFAULT_OSRM_URL = "https://router.project-osrm.org"


class OsrmClient:
    def __init__(
        self,
        base_url: str = DEFAULT_OSRM_URL,
        timeout_seconds: float = 10.0,
        profile: str = "driving",
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._profile = profile
        self._client_factory = client_factory

    async def compute_route(self, origin: GeoPoint, destination: GeoPoint) -> RouteGeometry:
        # OSRM takes lng,lat pairs.
        waypoints = ";".join("{},{}".format(*point.as_lng_lat()) for point in (origin, destination))
        params = {"overview": "full", "geometries": "geojson", "alternatives": "false", "steps": "false"}
        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            async with factory() as client:
                response = await client.get(
                    f"{self._base_url}/route/v1/{self._profile}/{waypoints}",
                    params=params,
                )
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailableError("UPSTREAM_TIMEOUT", "OSRM timeout") from exc
        except httpx.HTTPStatusError as exc:
            raise UpstreamUnavailableError(
                "UPSTREAM_HTTP_ERROR", f"OSRM returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError("UPSTREAM_FAILURE", "OSRM request failed") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamUnavailableError("UPSTREAM_MALFORMED", "OSRM returned non-JSON body") from exc
        return _parse_route(payload)


def _parse_route(payload: object) -> RouteGeometry:
    if not isinstance(payload, dict) or payload.get("code") != "Ok":
        code = payload.get("code") if isinstance(payload, dict) else None
        raise UpstreamUnavailableError("UPSTREAM_MALFORMED", f"OSRM response code {code!r}")
    routes = payload.get("routes")
    if not isinstance(routes, list) or not routes or not isinstance(routes[0], dict):
        raise UpstreamUnavailableError("UPSTREAM_MALFORMED", "OSRM returned no routes")
    route = routes[0]
    try:
        raw_coordinates = route["geometry"]["coordinates"]
        coordinates = [(float(point[0]), float(point[1])) for point in raw_coordinates]
        distance_meters = float(route["distance"])
        duration_seconds = float(route["duration"])
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise UpstreamUnavailableError("UPSTREAM_MALFORMED", "OSRM route payload is malformed") from exc
    if not coordinates:
        raise UpstreamUnavailableError("UPSTREAM_MALFORMED", "OSRM route geometry is empty")
    return RouteGeometry(
        coordinates=coordinates,
        distance_meters=distance_meters,
        duration_seconds=duration_seconds,
    )

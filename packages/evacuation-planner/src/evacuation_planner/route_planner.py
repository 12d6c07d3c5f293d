from __future__ import annotations

import logging
from typing import Protocol

from geo_engine.models import GeoPoint
from geo_engine.polyline import sample_polyline

from evacuation_planner.errors import UpstreamUnavailableError
from evacuation_planner.formatting import round_half_up, round_tenths
from evacuation_planner.models import Route, RouteGeometry, SafeSpot, SafeSpotType

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_INTERVAL = 10
DEFAULT_ROUTE_COLOR = "#3b82f6"

ROUTE_COLORS: dict[SafeSpotType, str] = {
    SafeSpotType.HOSPITAL: "#ef4444",
    SafeSpotType.SHELTER: "#f59e0b",
    SafeSpotType.SCHOOL: "#8b5cf6",
    SafeSpotType.AIRPORT: "#3b82f6",
    SafeSpotType.PARK: "#22c55e",
}


class RouteComputationService(Protocol):
    async def compute_route(self, origin: GeoPoint, destination: GeoPoint) -> RouteGeometry: ...


def route_color(spot_type: SafeSpotType | str) -> str:
    try:
        return ROUTE_COLORS[SafeSpotType(spot_type)]
    except ValueError:
        return DEFAULT_ROUTE_COLOR


class RoutePlanner:
    def __init__(self, route_service: RouteComputationService) -> None:
        self._route_service = route_service

    async def route(
        self,
        crisis_id: str,
        origin: GeoPoint,
        destination: SafeSpot,
        sample_interval: int = DEFAULT_SAMPLE_INTERVAL,
    ) -> Route | None:
        """Drivable route from ``origin`` to ``destination``, or None when unavailable.

        The geometry is thinned to every ``sample_interval``-th point; the
        first and last points are always kept so the path meets both markers.
        """
        if sample_interval < 1:
            raise ValueError("sample_interval must be >= 1")
        target = GeoPoint(lat=destination.latitude, lng=destination.longitude)
        try:
            geometry = await self._route_service.compute_route(origin, target)
        except UpstreamUnavailableError as exc:
            logger.warning(
                "route_upstream_failed",
                extra={"code": exc.code, "detail": exc.message, "destination_id": destination.id},
            )
            return None
        if not geometry.coordinates:
            logger.warning("route_geometry_empty", extra={"destination_id": destination.id})
            return None

        coordinates = sample_polyline(geometry.coordinates, sample_interval)
        route = Route(
            id=f"route-{crisis_id}-{destination.id}",
            destination_id=destination.id,
            coordinates=tuple(coordinates),
            original_point_count=len(geometry.coordinates),
            distance_km=round_tenths(geometry.distance_meters / 1000),
            duration_min=max(0, round_half_up(geometry.duration_seconds / 60)),
            color=route_color(destination.type),
        )
        logger.info(
            "route_planned",
            extra={
                "destination_id": destination.id,
                "original_points": route.original_point_count,
                "sampled_points": len(route.coordinates),
            },
        )
        return route

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from geo_engine.models import GeoPoint
from opentelemetry import trace

from evacuation_planner.locator import SafeSpotLocator
from evacuation_planner.models import SAFE_SPOT_PRIORITY, Plan, Route, SafeSpot
from evacuation_planner.route_planner import DEFAULT_SAMPLE_INTERVAL, RoutePlanner

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("evacuation-planner")

DEFAULT_SEARCH_RADIUS_METERS = 30_000


class PlanAssembler:
    """Runs the locator, then routes to the single top-ranked safe spot."""

    def __init__(self, locator: SafeSpotLocator, route_planner: RoutePlanner) -> None:
        self._locator = locator
        self._route_planner = route_planner

    async def assemble(
        self,
        crisis_id: str,
        crisis_title: str,
        lat: float,
        lng: float,
        radius_meters: float = DEFAULT_SEARCH_RADIUS_METERS,
        sample_interval: int = DEFAULT_SAMPLE_INTERVAL,
    ) -> Plan:
        with tracer.start_as_current_span("evacuation.locate") as span:
            span.set_attribute("crisis.id", crisis_id)
            span.set_attribute("search.radius_meters", radius_meters)
            spots = await self._locator.locate(lat, lng, radius_meters)
            span.set_attribute("safe_spots.count", len(spots))

        best = spots[0] if spots else None
        route: Route | None = None
        if best is not None:
            with tracer.start_as_current_span("evacuation.route") as span:
                span.set_attribute("destination.id", best.id)
                route = await self._route_planner.route(
                    crisis_id,
                    GeoPoint(lat=lat, lng=lng),
                    best,
                    sample_interval=sample_interval,
                )
                span.set_attribute("route.available", route is not None)

        plan = Plan(
            crisis_id=crisis_id,
            crisis_title=crisis_title,
            crisis_latitude=lat,
            crisis_longitude=lng,
            all_safe_spots=tuple(spots),
            best_safe_spot=best,
            primary_route=route,
            summary=build_summary(crisis_title, spots, route),
        )
        logger.info(
            "evacuation_plan_assembled",
            extra={
                "crisis_id": crisis_id,
                "safe_spot_count": len(spots),
                "has_route": route is not None,
            },
        )
        return plan


def build_summary(crisis_title: str, spots: Sequence[SafeSpot], route: Route | None) -> str:
    if not spots:
        return f"No evacuation routes available for {crisis_title}. Contact emergency services immediately."
    best = spots[0]
    if route is None:
        return (
            f"Found {len(spots)} safe location(s) near {crisis_title}. "
            f"Best option: {best.name} ({best.type.value}), {best.distance_km}km away in a straight line. "
            "No drivable route could be computed; follow local authority guidance."
        )
    return (
        f"Evacuate from {crisis_title} to {best.name} ({best.type.value}): "
        f"{route.distance_km}km by road, about {route.duration_min} min. "
        f"Found {len(spots)} safe location(s): {_type_breakdown(spots)}."
    )


def _type_breakdown(spots: Sequence[SafeSpot]) -> str:
    counts = Counter(spot.type for spot in spots)
    return ", ".join(f"{counts[spot_type]} {spot_type.value}" for spot_type in SAFE_SPOT_PRIORITY if counts[spot_type])

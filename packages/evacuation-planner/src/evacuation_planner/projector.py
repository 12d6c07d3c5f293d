from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from evacuation_planner.formatting import format_distance, format_duration
from evacuation_planner.models import LngLat, Route, SafeSpot, SafeSpotType

ROUTE_WIDTH = 4

ICONS: dict[SafeSpotType, str] = {
    SafeSpotType.HOSPITAL: "🏥",
    SafeSpotType.SHELTER: "🏠",
    SafeSpotType.SCHOOL: "🏫",
    SafeSpotType.AIRPORT: "✈️",
    SafeSpotType.PARK: "🌳",
}


class _RenderModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class SafeSpotMarker(_RenderModel):
    id: str
    title: str
    description: str
    latitude: float
    longitude: float
    category: str = "other"
    severity: str = "low"
    marker_style: str = "safeSpot"
    safe_spot_type: SafeSpotType
    distance: float


class DrawableRoute(_RenderModel):
    id: str
    coordinates: tuple[LngLat, ...]
    color: str
    width: int = ROUTE_WIDTH
    label: str


def describe_safe_spot(spot: SafeSpot) -> str:
    parts = [f"{ICONS[spot.type]} {spot.type.value.upper()} - {spot.distance_km}km away"]
    if spot.address:
        parts.append(spot.address)
    if spot.phone:
        parts.append(f"Tel: {spot.phone}")
    return " | ".join(parts)


def project_safe_spot_markers(crisis_id: str, spots: Sequence[SafeSpot]) -> list[SafeSpotMarker]:
    return [
        SafeSpotMarker(
            id=f"{crisis_id}-safe-{index}",
            title=spot.name,
            description=describe_safe_spot(spot),
            latitude=spot.latitude,
            longitude=spot.longitude,
            safe_spot_type=spot.type,
            distance=spot.distance_km,
        )
        for index, spot in enumerate(spots)
    ]


def project_route(route: Route, origin_name: str, destination_name: str) -> DrawableRoute:
    metrics = f"{format_distance(route.distance_km * 1000)}, {format_duration(route.duration_min * 60)}"
    return DrawableRoute(
        id=route.id,
        coordinates=route.coordinates,
        color=route.color,
        label=f"{origin_name} → {destination_name} ({metrics})",
    )

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

LngLat = tuple[float, float]


class SafeSpotType(StrEnum):
    HOSPITAL = "hospital"
    SHELTER = "shelter"
    SCHOOL = "school"
    AIRPORT = "airport"
    PARK = "park"

    @property
    def priority_rank(self) -> int:
        return SAFE_SPOT_PRIORITY.index(self)

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Lower index wins when ranking destinations.
SAFE_SPOT_PRIORITY: tuple[SafeSpotType, ...] = (
    SafeSpotType.HOSPITAL,
    SafeSpotType.SHELTER,
    SafeSpotType.SCHOOL,
    SafeSpotType.AIRPORT,
    SafeSpotType.PARK,
)


class _PlanModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class SafeSpot(_PlanModel):
    id: str
    name: str
    type: SafeSpotType
    latitude: float
    longitude: float
    distance_km: float
    capacity: str | None = None
    address: str | None = None
    phone: str | None = None

    def rank_key(self) -> tuple[int, float, str]:
        return self.type.priority_rank, self.distance_km, self.id


class Route(_PlanModel):
    id: str
    destination_id: str
    coordinates: tuple[LngLat, ...]
    original_point_count: int
    distance_km: float
    duration_min: int
    color: str


class Plan(_PlanModel):
    crisis_id: str
    crisis_title: str
    crisis_latitude: float
    crisis_longitude: float
    all_safe_spots: tuple[SafeSpot, ...]
    best_safe_spot: SafeSpot | None
    primary_route: Route | None
    summary: str

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class RawFeature:
    """One element returned by the geographic-feature service."""

    element_type: str
    element_id: int | str
    lat: float | None
    lng: float | None
    tags: dict[str, str] = field(default_factory=dict)
    category_hint: SafeSpotType | None = None

    @property
    def source_id(self) -> str:
        return f"osm-{self.element_type}-{self.element_id}"


@dataclass(frozen=True)
class RouteGeometry:
    coordinates: list[LngLat]
    distance_meters: float
    duration_seconds: float

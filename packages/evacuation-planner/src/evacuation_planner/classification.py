from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from evacuation_planner.models import SafeSpotType

Tags = Mapping[str, str]


@dataclass(frozen=True)
class FacilityCategory:
    """A single ``key=value`` tag filter sent to the feature service."""

    key: str
    value: str
    spot_type: SafeSpotType

    def matches(self, tags: Tags) -> bool:
        return tags.get(self.key) == self.value


FACILITY_CATEGORIES: tuple[FacilityCategory, ...] = (
    FacilityCategory("amenity", "hospital", SafeSpotType.HOSPITAL),
    FacilityCategory("amenity", "clinic", SafeSpotType.HOSPITAL),
    FacilityCategory("amenity", "shelter", SafeSpotType.SHELTER),
    FacilityCategory("amenity", "school", SafeSpotType.SCHOOL),
    FacilityCategory("aeroway", "aerodrome", SafeSpotType.AIRPORT),
    FacilityCategory("leisure", "park", SafeSpotType.PARK),
)


def _tag_in(key: str, *values: str) -> Callable[[Tags], bool]:
    def predicate(tags: Tags) -> bool:
        return tags.get(key) in values

    return predicate


# Evaluated top to bottom; first match wins.
CLASSIFICATION_RULES: tuple[tuple[Callable[[Tags], bool], SafeSpotType], ...] = (
    (_tag_in("amenity", "hospital", "clinic"), SafeSpotType.HOSPITAL),
    (_tag_in("healthcare", "hospital", "clinic"), SafeSpotType.HOSPITAL),
    (_tag_in("amenity", "shelter"), SafeSpotType.SHELTER),
    (_tag_in("emergency", "shelter", "assembly_point"), SafeSpotType.SHELTER),
    (_tag_in("amenity", "school"), SafeSpotType.SCHOOL),
    (_tag_in("aeroway", "aerodrome"), SafeSpotType.AIRPORT),
    (_tag_in("leisure", "park"), SafeSpotType.PARK),
)


def classify_tags(tags: Tags, category_hint: SafeSpotType | None = None) -> SafeSpotType | None:
    for predicate, spot_type in CLASSIFICATION_RULES:
        if predicate(tags):
            return spot_type
    return category_hint

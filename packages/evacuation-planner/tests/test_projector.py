from __future__ import annotations

from evacuation_planner.formatting import format_distance, format_duration, round_half_up, round_tenths
from evacuation_planner.models import Route, SafeSpot, SafeSpotType
from evacuation_planner.projector import ROUTE_WIDTH, project_route, project_safe_spot_markers

SPOTS = [
    SafeSpot(
        id="osm-node-1",
        name="County General",
        type=SafeSpotType.HOSPITAL,
        latitude=34.1,
        longitude=-118.24,
        distance_km=5.6,
        address="Main St, 12",
        phone="+1 555 0100",
    ),
    SafeSpot(id="osm-node-2", name="Park", type=SafeSpotType.PARK, latitude=34.06, longitude=-118.24, distance_km=1.1),
]


def test_project_safe_spot_markers() -> None:
    markers = project_safe_spot_markers("crisis-1", SPOTS)

    assert [marker.id for marker in markers] == ["crisis-1-safe-0", "crisis-1-safe-1"]
    assert markers[0].title == "County General"
    assert markers[0].description == "🏥 HOSPITAL - 5.6km away | Main St, 12 | Tel: +1 555 0100"
    assert markers[1].description == "🌳 PARK - 1.1km away"
    assert all(marker.severity == "low" for marker in markers)
    payload = markers[0].model_dump(mode="json", by_alias=True)
    assert payload["markerStyle"] == "safeSpot"
    assert payload["safeSpotType"] == "hospital"
    assert payload["distance"] == 5.6


def test_project_route() -> None:
    route = Route(
        id="route-crisis-1-osm-node-1",
        destination_id="osm-node-1",
        coordinates=((-118.24, 34.05), (-118.24, 34.1)),
        original_point_count=2,
        distance_km=6.2,
        duration_min=72,
        color="#ef4444",
    )

    drawable = project_route(route, "Griffith Fire", "County General")

    assert drawable.id == route.id
    assert drawable.coordinates == route.coordinates
    assert drawable.color == "#ef4444"
    assert drawable.width == ROUTE_WIDTH
    assert drawable.label == "Griffith Fire → County General (6.2km, 1h 12min)"


def test_format_distance() -> None:
    assert format_distance(850) == "850m"
    assert format_distance(1234) == "1.2km"


def test_format_duration() -> None:
    assert format_duration(720) == "12min"
    assert format_duration(3900) == "1h 5min"


def test_half_values_round_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_tenths(2.25) == 2.3
    assert format_distance(2250) == "2.3km"
    assert format_distance(850.5) == "851m"
    assert format_duration(150) == "3min"

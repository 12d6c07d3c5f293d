from __future__ import annotations

from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_overpass_quota_guard, get_plan_assembler
from api.quota import DailyQuotaGuard, InMemoryQuotaStore
from evacuation_planner.assembler import PlanAssembler
from evacuation_planner.errors import UpstreamUnavailableError
from evacuation_planner.locator import SafeSpotLocator
from evacuation_planner.models import RawFeature, RouteGeometry
from evacuation_planner.route_planner import RoutePlanner

CRISIS_LAT, CRISIS_LNG = 34.05, -118.24
PLAN_BODY = {
    "crisisId": "fire-42",
    "crisisTitle": "Griffith Fire",
    "latitude": CRISIS_LAT,
    "longitude": CRISIS_LNG,
}


class StaticFeatureService:
    def __init__(self, features: list[RawFeature]) -> None:
        self._features = features
        self.radii: list[float] = []

    async def query_facilities(self, lat, lng, radius_meters, categories):
        self.radii.append(radius_meters)
        return list(self._features)


class StaticRouteService:
    def __init__(self, geometry: RouteGeometry | None) -> None:
        self._geometry = geometry

    async def compute_route(self, origin, destination) -> RouteGeometry:
        if self._geometry is None:
            raise UpstreamUnavailableError("UPSTREAM_TIMEOUT", "slow")
        return self._geometry


FEATURES = [
    RawFeature("node", 1, CRISIS_LAT + 0.01, CRISIS_LNG, {"leisure": "park"}),
    RawFeature("way", 2, CRISIS_LAT + 0.05, CRISIS_LNG, {"amenity": "hospital", "name": "County General"}),
]
GEOMETRY = RouteGeometry(
    coordinates=[(CRISIS_LNG, CRISIS_LAT + i * 0.001) for i in range(30)],
    distance_meters=6240.0,
    duration_seconds=720.0,
)


def build_client(features, geometry, guard: DailyQuotaGuard | None = None):
    app = create_app()
    feature_service = StaticFeatureService(features)
    guard = guard or DailyQuotaGuard(InMemoryQuotaStore(), source="overpass", limit=100)
    assembler = PlanAssembler(
        SafeSpotLocator(feature_service, quota_guard=guard),
        RoutePlanner(StaticRouteService(geometry)),
    )
    app.dependency_overrides[get_plan_assembler] = lambda: assembler
    app.dependency_overrides[get_overpass_quota_guard] = lambda: guard
    return TestClient(app), app, feature_service


def test_create_plan_response_shape() -> None:
    client, app, feature_service = build_client(FEATURES, GEOMETRY)

    response = client.post("/v1/evacuation/plans", json=PLAN_BODY)
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["meta"]["outcome"] == "planned"
    plan = body["data"]["plan"]
    assert plan["crisisId"] == "fire-42"
    assert plan["bestSafeSpot"]["id"] == "osm-way-2"
    assert plan["primaryRoute"]["destinationId"] == "osm-way-2"
    assert len(plan["primaryRoute"]["coordinates"]) == 4
    assert [marker["id"] for marker in body["data"]["markers"]] == ["fire-42-safe-0", "fire-42-safe-1"]
    assert body["data"]["routes"][0]["label"] == "Griffith Fire → County General (6.2km, 12min)"
    assert feature_service.radii == [30000]
    assert app.state.api_metrics.snapshot()[-1]["outcome"] == "planned"


def test_create_plan_honours_request_overrides() -> None:
    client, _, feature_service = build_client(FEATURES, GEOMETRY)

    response = client.post(
        "/v1/evacuation/plans",
        json={**PLAN_BODY, "searchRadiusMeters": 5000, "sampleInterval": 1},
    )

    assert response.status_code == 200
    assert len(response.json()["data"]["plan"]["primaryRoute"]["coordinates"]) == 30
    assert feature_service.radii == [5000]


def test_create_plan_without_candidates() -> None:
    client, app, _ = build_client([], GEOMETRY)

    response = client.post("/v1/evacuation/plans", json=PLAN_BODY)
    body = response.json()

    assert response.status_code == 200
    assert body["data"]["plan"]["bestSafeSpot"] is None
    assert body["data"]["plan"]["primaryRoute"] is None
    assert body["data"]["routes"] == []
    assert body["meta"]["outcome"] == "no_candidates"
    assert body["data"]["plan"]["summary"] == (
        "No evacuation routes available for Griffith Fire. Contact emergency services immediately."
    )


def test_create_plan_without_route() -> None:
    client, _, _ = build_client(FEATURES, None)

    body = client.post("/v1/evacuation/plans", json=PLAN_BODY).json()

    assert body["meta"]["outcome"] == "no_route"
    assert body["data"]["plan"]["bestSafeSpot"] is not None
    assert body["data"]["plan"]["primaryRoute"] is None
    assert len(body["data"]["markers"]) == 2


def test_create_plan_quota_exceeded() -> None:
    guard = DailyQuotaGuard(InMemoryQuotaStore(), source="overpass", limit=0)
    client, app, feature_service = build_client(FEATURES, GEOMETRY, guard=guard)

    response = client.post("/v1/evacuation/plans", json=PLAN_BODY)
    body = response.json()

    assert response.status_code == 429
    assert body["success"] is False
    assert body["error"]["code"] == "QUOTA_EXCEEDED"
    assert feature_service.radii == []
    assert app.state.api_metrics.snapshot()[-1]["outcome"] == "quota_exceeded"


def test_create_plan_validation_error() -> None:
    client, _, _ = build_client(FEATURES, GEOMETRY)

    response = client.post("/v1/evacuation/plans", json={**PLAN_BODY, "latitude": 123.0})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_quota_status_reports_usage() -> None:
    client, _, _ = build_client(FEATURES, GEOMETRY)

    client.post("/v1/evacuation/plans", json=PLAN_BODY)
    body = client.get("/v1/evacuation/quota").json()

    assert body["data"] == {"source": "overpass", "limit": 100, "used": 1, "remaining": 99}

import pytest

from geo_engine.distance import haversine_distance_km, haversine_distance_meters
from geo_engine.models import GeoPoint


def test_haversine_distance_is_zero_for_same_point() -> None:
    point = GeoPoint(lat=37.5665, lng=126.9780)
    distance = haversine_distance_km(point, point)
    assert distance == 0.0


def test_haversine_distance_is_positive_for_different_points() -> None:
    city_hall = GeoPoint(lat=37.5665, lng=126.9780)
    gangnam = GeoPoint(lat=37.4979, lng=127.0276)
    distance = haversine_distance_km(city_hall, gangnam)
    assert distance > 0
    assert distance < 20


def test_haversine_one_degree_of_latitude() -> None:
    distance = haversine_distance_km(GeoPoint(lat=0.0, lng=0.0), GeoPoint(lat=1.0, lng=0.0))
    assert distance == pytest.approx(111.195, abs=0.01)


def test_haversine_is_symmetric() -> None:
    paris = GeoPoint(lat=48.8566, lng=2.3522)
    london = GeoPoint(lat=51.5074, lng=-0.1278)
    assert haversine_distance_km(paris, london) == pytest.approx(haversine_distance_km(london, paris))
    assert haversine_distance_km(paris, london) == pytest.approx(343.5, abs=1.0)


def test_haversine_meters_matches_km() -> None:
    start = GeoPoint(lat=34.0522, lng=-118.2437)
    end = GeoPoint(lat=34.1, lng=-118.3)
    assert haversine_distance_meters(start, end) == pytest.approx(haversine_distance_km(start, end) * 1000)


def test_geo_point_as_lng_lat() -> None:
    assert GeoPoint(lat=34.05, lng=-118.24).as_lng_lat() == (-118.24, 34.05)

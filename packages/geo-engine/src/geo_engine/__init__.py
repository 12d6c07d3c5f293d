"""Geo engine core package."""

from geo_engine.distance import haversine_distance_km, haversine_distance_meters
from geo_engine.models import GeoPoint
from geo_engine.polyline import max_sampled_length, sample_polyline

__all__ = [
    "GeoPoint",
    "haversine_distance_km",
    "haversine_distance_meters",
    "max_sampled_length",
    "sample_polyline",
]

from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def as_lng_lat(self) -> tuple[float, float]:
        return (self.lng, self.lat)

"""Distance and bounding-box helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass

from beacon.core.errors import InvalidCoordinateError
from beacon.models.coordinate import Coordinate

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_DEGREE_LAT = 111_320.0

# cos(lat) floor for the longitude delta; about 89.4 degrees
MIN_COS_LATITUDE = 0.01


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned lat/lng rectangle (degrees)."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, point: Coordinate) -> bool:
        return (
            self.min_lat <= point.latitude <= self.max_lat
            and self.min_lng <= point.longitude <= self.max_lng
        )


def haversine_meters(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two points in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(1.0, h)))


def bounding_box(center: Coordinate, radius_m: float) -> BoundingBox:
    """Rectangle around the circle of ``radius_m`` centred on ``center``.

    Corners lie outside the circle, so callers must still filter by exact
    distance. 111,320 m/degree is the equatorial figure while distances use
    the mean Earth radius, so points within ~0.1% of the radius on the box
    edge can fall outside it. Longitudes are not wrapped at the antimeridian.
    """
    deg_lat = radius_m / METERS_PER_DEGREE_LAT
    cos_lat = max(abs(math.cos(math.radians(center.latitude))), MIN_COS_LATITUDE)
    deg_lng = radius_m / (METERS_PER_DEGREE_LAT * cos_lat)
    return BoundingBox(
        min_lat=center.latitude - deg_lat,
        max_lat=center.latitude + deg_lat,
        min_lng=center.longitude - deg_lng,
        max_lng=center.longitude + deg_lng,
    )


def validate_coordinate(point: Coordinate) -> Coordinate:
    """Reject non-finite or out-of-range coordinates."""
    lat, lng = point.latitude, point.longitude
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidCoordinateError("Coordinate must be finite")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinateError(f"Latitude {lat} out of range [-90, 90]")
    if not -180.0 <= lng <= 180.0:
        raise InvalidCoordinateError(f"Longitude {lng} out of range [-180, 180]")
    return point

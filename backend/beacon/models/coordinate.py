"""Geographic coordinate value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point in decimal degrees."""

    latitude: float
    longitude: float

    @classmethod
    def from_geojson(cls, point: dict[str, Any] | None) -> Coordinate | None:
        """Read a GeoJSON Point (``[lng, lat]`` order). Returns None when unusable."""
        if not point:
            return None
        coords = point.get("coordinates") or []
        if len(coords) < 2 or coords[0] is None or coords[1] is None:
            return None
        return cls(latitude=float(coords[1]), longitude=float(coords[0]))

    @classmethod
    def from_fields(cls, latitude: Any, longitude: Any) -> Coordinate | None:
        """Build from separate lat/lng fields; None if either is missing or not numeric."""
        if isinstance(latitude, bool) or isinstance(longitude, bool):
            return None
        if not isinstance(latitude, (int, float)) or not isinstance(longitude, (int, float)):
            return None
        return cls(latitude=float(latitude), longitude=float(longitude))

    def to_geojson(self) -> dict[str, Any]:
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}

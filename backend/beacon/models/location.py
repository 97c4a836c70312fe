"""Emergency-service location snapshot."""

from __future__ import annotations

from dataclasses import dataclass

from beacon.models.coordinate import Coordinate


@dataclass
class ServiceLocation:
    """A place run by an emergency service (police station, hospital...)."""

    id: str
    name: str
    email: str
    coordinate: Coordinate | None
    address: str = ""
    phone: str = ""
    service_id: str | None = None
    is_disabled: bool = False

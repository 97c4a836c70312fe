"""User-side snapshots read from the user store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from beacon.models.coordinate import Coordinate


@dataclass
class PersonalContact:
    """An SOS contact saved on the requester's profile."""

    id: str
    name: str
    relation: str
    email: str
    mobile: str = ""


@dataclass
class Requester:
    """The user who triggered the SOS."""

    id: str
    name: str
    email: str
    mobile: str | None
    coordinate: Coordinate | None
    last_location_at: datetime | None
    contacts: list[PersonalContact] = field(default_factory=list)


@dataclass
class NearbyUser:
    """Another app user returned by a proximity query."""

    id: str
    name: str
    email: str
    coordinate: Coordinate | None
    last_location_at: datetime | None

"""Repository abstractions for the SOS services."""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime
from typing import Any, Protocol

from beacon.models.coordinate import Coordinate
from beacon.models.location import ServiceLocation
from beacon.models.user import NearbyUser, PersonalContact, Requester
from beacon.services.geo_service import BoundingBox


class UserStore(Protocol):
    """Read boundary for users plus the requester's own SOS contact list."""

    async def get_requester(self, user_id: str) -> Requester | None: ...

    async def find_users_near(
        self,
        center: Coordinate,
        radius_m: float,
        *,
        exclude_ids: Collection[str],
        fresh_since: datetime | None,
        limit: int,
    ) -> list[NearbyUser]:
        """Users with an email within ``radius_m``, nearest first."""
        ...

    async def list_contacts(self, user_id: str) -> list[PersonalContact] | None: ...

    async def add_contact(self, user_id: str, contact: dict[str, Any]) -> PersonalContact: ...

    async def update_contact(self, user_id: str, contact_id: str, changes: dict[str, Any]) -> bool: ...

    async def delete_contact(self, user_id: str, contact_id: str) -> bool: ...


class LocationStore(Protocol):
    """Read boundary for emergency-service locations."""

    async def find_in_bounding_box(
        self,
        box: BoundingBox,
        *,
        must_have_email: bool,
        limit: int,
    ) -> list[ServiceLocation]:
        """Enabled locations inside ``box``; unordered raw prefilter."""
        ...

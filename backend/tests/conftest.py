"""Pytest fixtures."""

import os

# Configure before the app (and its settings) are imported
os.environ.setdefault("MONGO_ENSURE_INDEXES", "false")
os.environ.setdefault("MAIL_PROVIDER", "log")

from datetime import datetime, timedelta, timezone  # noqa: E402
from itertools import count  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from beacon.core.deps import get_location_store, get_mailer, get_user_store  # noqa: E402
from beacon.core.security import create_access_token  # noqa: E402
from beacon.main import app  # noqa: E402
from beacon.models import (  # noqa: E402
    Coordinate,
    NearbyUser,
    PersonalContact,
    Requester,
    SendResult,
    ServiceLocation,
)
from beacon.services.geo_service import haversine_meters  # noqa: E402

# Kottayam, Kerala
HOME = Coordinate(9.59, 76.52)


def offset_north(point: Coordinate, meters: float) -> Coordinate:
    """Point ``meters`` due north of ``point`` (1 deg latitude = 111,194.93 m on the mean sphere)."""
    return Coordinate(point.latitude + meters / 111_194.93, point.longitude)


class FakeUserStore:
    """In-memory UserStore. ``find_users_near`` behaves like Mongo ``$near``."""

    def __init__(self):
        self.users: dict[str, Requester] = {}
        self.near_calls: list[dict] = []
        self.lookups: list[str] = []
        self._ids = count(1)

    def add_user(
        self,
        user_id,
        name="User",
        email=None,
        coordinate=HOME,
        last_location_at=None,
        mobile=None,
        contacts=None,
    ):
        self.users[user_id] = Requester(
            id=user_id,
            name=name,
            email=email if email is not None else f"{user_id}@test.com",
            mobile=mobile,
            coordinate=coordinate,
            last_location_at=last_location_at or datetime.now(timezone.utc),
            contacts=list(contacts or []),
        )
        return self.users[user_id]

    async def get_requester(self, user_id):
        self.lookups.append(user_id)
        return self.users.get(user_id)

    async def find_users_near(self, center, radius_m, *, exclude_ids, fresh_since, limit):
        self.near_calls.append(
            {"radius_m": radius_m, "exclude_ids": set(exclude_ids), "fresh_since": fresh_since, "limit": limit}
        )
        hits = []
        for u in self.users.values():
            if u.id in exclude_ids or not u.email or u.coordinate is None:
                continue
            if fresh_since is not None and (u.last_location_at is None or u.last_location_at < fresh_since):
                continue
            dist = haversine_meters(center, u.coordinate)
            if dist <= radius_m:
                hits.append((dist, u))
        hits.sort(key=lambda h: h[0])
        return [
            NearbyUser(id=u.id, name=u.name, email=u.email, coordinate=u.coordinate, last_location_at=u.last_location_at)
            for _, u in hits[:limit]
        ]

    async def list_contacts(self, user_id):
        user = self.users.get(user_id)
        return list(user.contacts) if user else None

    async def add_contact(self, user_id, contact):
        created = PersonalContact(id=f"c{next(self._ids)}", **contact)
        self.users[user_id].contacts.append(created)
        return created

    async def update_contact(self, user_id, contact_id, changes):
        for c in self.users[user_id].contacts:
            if c.id == contact_id:
                for k, v in changes.items():
                    setattr(c, k, v)
                return True
        return False

    async def delete_contact(self, user_id, contact_id):
        user = self.users[user_id]
        before = len(user.contacts)
        user.contacts = [c for c in user.contacts if c.id != contact_id]
        return len(user.contacts) < before


class FakeLocationStore:
    """In-memory LocationStore doing the same range match as the Mongo query."""

    def __init__(self, locations=None):
        self.locations: list[ServiceLocation] = list(locations or [])
        self.box_calls: list[dict] = []

    def add(self, loc_id, coordinate, email=None, name=None, is_disabled=False):
        loc = ServiceLocation(
            id=loc_id,
            name=name or loc_id,
            email=email if email is not None else f"{loc_id}@service.test",
            coordinate=coordinate,
            is_disabled=is_disabled,
        )
        self.locations.append(loc)
        return loc

    async def find_in_bounding_box(self, box, *, must_have_email, limit):
        self.box_calls.append({"box": box, "must_have_email": must_have_email, "limit": limit})
        out = []
        for loc in self.locations:
            if loc.is_disabled or loc.coordinate is None or not box.contains(loc.coordinate):
                continue
            if must_have_email and not loc.email:
                continue
            out.append(loc)
        return out[:limit]


class RecordingMailer:
    """Mailer that records sends; can be told to fail or raise for given addresses."""

    def __init__(self, fail_for=(), raise_for=()):
        self.sent: list[dict] = []
        self.fail_for = set(fail_for)
        self.raise_for = set(raise_for)

    async def send(self, to_email, subject, html_body, text_body):
        self.sent.append({"to": to_email, "subject": subject, "html": html_body, "text": text_body})
        if to_email in self.raise_for:
            raise RuntimeError(f"connection reset sending to {to_email}")
        if to_email in self.fail_for:
            return SendResult(success=False, error="mailbox unavailable")
        return SendResult(success=True)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def users():
    return FakeUserStore()


@pytest.fixture
def locations():
    return FakeLocationStore()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def client(users, locations, mailer):
    """Test client with storage and mail swapped for fakes."""
    app.dependency_overrides[get_user_store] = lambda: users
    app.dependency_overrides[get_location_store] = lambda: locations
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_header(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def minutes_ago(minutes: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(minutes=minutes)

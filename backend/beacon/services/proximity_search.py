"""Proximity search: single-radius strategies and the expanding-radius driver.

Two storage shapes are supported behind one ``ProximitySearchStrategy``:

* ``NativeIndexStrategy`` - the store answers "nearest N within r" itself
  (users, 2dsphere index).
* ``BoundingBoxStrategy`` - the store can only range-match lat/lng, so we
  pull a rectangle and do the exact haversine pass here (service locations).

``expanding_radius_search`` drives either one over increasing radii.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from datetime import datetime, timedelta, timezone
from typing import Protocol

from beacon.core.sos_policies import BOUNDING_BOX_RAW_CAP
from beacon.models.candidate import Candidate, SearchOutcome, SearchSpec, SearchStatus
from beacon.models.coordinate import Coordinate
from beacon.models.user import NearbyUser
from beacon.repositories.interfaces import LocationStore, UserStore
from beacon.services.geo_service import bounding_box, haversine_meters

logger = logging.getLogger(__name__)


class ProximitySearchStrategy(Protocol):
    """One search pass at a fixed radius."""

    async def search(
        self,
        center: Coordinate,
        radius_m: float,
        limit: int,
        exclude_ids: Collection[str],
    ) -> list[Candidate]:
        """Up to ``limit`` candidates within ``radius_m``, nearest first, none in ``exclude_ids``."""
        ...


class BoundingBoxStrategy:
    """Box prefilter in storage, exact distance filter in memory.

    If more than ``raw_cap`` rows fall inside the box, storage truncates the
    prefilter in no particular order: results stay correct (nothing outside
    the radius) but true neighbours may be missed.
    """

    def __init__(self, store: LocationStore, raw_cap: int = BOUNDING_BOX_RAW_CAP) -> None:
        self._store = store
        self._raw_cap = raw_cap

    async def search(
        self,
        center: Coordinate,
        radius_m: float,
        limit: int,
        exclude_ids: Collection[str],
    ) -> list[Candidate]:
        if limit <= 0:
            return []
        box = bounding_box(center, radius_m)
        raw = await self._store.find_in_bounding_box(box, must_have_email=True, limit=self._raw_cap)

        within: list[Candidate] = []
        for loc in raw:
            if loc.coordinate is None or not loc.email or loc.id in exclude_ids:
                continue
            dist = haversine_meters(center, loc.coordinate)
            if dist <= radius_m:
                within.append(
                    Candidate(id=loc.id, name=loc.name, email=loc.email, distance_meters=dist, kind="location")
                )

        # sort() is stable, so equal distances keep storage order
        within.sort(key=lambda c: c.distance_meters)
        logger.debug(
            "Bounding-box pass r=%sm: %d raw, %d within radius",
            radius_m, len(raw), len(within),
        )
        return within[:limit]


def is_fresh_nearby_user(
    user: NearbyUser,
    requester_id: str,
    fresh_since: datetime | None,
) -> bool:
    """Eligibility for a nearby-user alert: fresh fix, has email, not the requester."""
    if user.id == requester_id or not user.email:
        return False
    if fresh_since is None:
        return True
    if user.last_location_at is None:
        return False
    seen = user.last_location_at
    if seen.tzinfo is None:
        # Mongo hands back naive UTC datetimes unless tz_aware is set
        seen = seen.replace(tzinfo=timezone.utc)
    return seen >= fresh_since


class NativeIndexStrategy:
    """Nearest-N query answered by the store's geospatial index (users)."""

    def __init__(
        self,
        store: UserStore,
        requester_id: str,
        freshness_window: timedelta | None = None,
        now: datetime | None = None,
    ) -> None:
        self._store = store
        self._requester_id = requester_id
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        self._fresh_since = now - freshness_window if freshness_window is not None else None

    @property
    def fresh_since(self) -> datetime | None:
        return self._fresh_since

    async def search(
        self,
        center: Coordinate,
        radius_m: float,
        limit: int,
        exclude_ids: Collection[str],
    ) -> list[Candidate]:
        if limit <= 0:
            return []
        excluded = {self._requester_id, *exclude_ids}
        users = await self._store.find_users_near(
            center,
            radius_m,
            exclude_ids=excluded,
            fresh_since=self._fresh_since,
            limit=limit,
        )

        found: list[Candidate] = []
        for u in users:
            if u.id in excluded or not is_fresh_nearby_user(u, self._requester_id, self._fresh_since):
                continue
            dist = haversine_meters(center, u.coordinate) if u.coordinate else radius_m
            found.append(Candidate(id=u.id, name=u.name, email=u.email, distance_meters=dist, kind="user"))
        return found[:limit]


async def expanding_radius_search(
    strategy: ProximitySearchStrategy,
    center: Coordinate,
    spec: SearchSpec,
) -> SearchOutcome:
    """Run ``strategy`` over ``spec.radii`` in order until ``max_candidates`` are collected.

    Each pass asks only for the shortfall and excludes ids already
    collected. Passes are sequential because each one's count decides
    whether the next is needed.
    """
    collected: list[Candidate] = []
    seen: set[str] = set()
    radii_tried: list[int] = []
    radius_used: int | None = None

    for radius in spec.radii:
        if len(collected) >= spec.max_candidates:
            break
        radii_tried.append(radius)
        radius_used = radius

        found = await strategy.search(center, radius, spec.max_candidates - len(collected), seen)
        for cand in found:
            if cand.id in seen:
                continue
            seen.add(cand.id)
            collected.append(cand)
            if len(collected) >= spec.max_candidates:
                break

        logger.info(
            "Radius pass %sm: %d found, %d/%d collected",
            radius, len(found), len(collected), spec.max_candidates,
        )
        if len(collected) >= spec.max_candidates:
            return SearchOutcome(collected, radii_tried, radius_used, SearchStatus.SATISFIED)

    status = SearchStatus.SATISFIED if len(collected) >= spec.max_candidates else SearchStatus.EXHAUSTED
    return SearchOutcome(collected, radii_tried, radius_used, status)

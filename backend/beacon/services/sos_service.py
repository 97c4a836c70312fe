"""SOS alert service: the three dispatch workflows.

Each workflow loads the requester, checks their location, resolves a
candidate set, composes one message and fans it out. Nothing here writes to
storage.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from beacon.core.config import settings
from beacon.core.errors import LocationUnavailableError, RequesterNotFoundError
from beacon.core.sos_policies import (
    BOUNDING_BOX_RAW_CAP,
    DEFAULT_FRESHNESS_MINUTES,
    DEFAULT_MAX_NEARBY_USERS,
    MAX_FRESHNESS_MINUTES,
    MAX_NEARBY_USERS_CEILING,
    MAX_SERVICE_TARGETS,
)
from beacon.models.candidate import (
    Candidate,
    NotificationPayload,
    Recipient,
    SearchOutcome,
    SearchSpec,
    SosDispatchSummary,
)
from beacon.models.coordinate import Coordinate
from beacon.models.user import Requester
from beacon.repositories.interfaces import LocationStore, UserStore
from beacon.services import notification_composer as composer
from beacon.services.dispatch_service import fan_out
from beacon.services.geo_service import validate_coordinate
from beacon.services.mailer import Mailer
from beacon.services.proximity_search import (
    BoundingBoxStrategy,
    NativeIndexStrategy,
    expanding_radius_search,
)

logger = logging.getLogger(__name__)


def clamp_max_users(value: int | None) -> int:
    """Non-positive or missing -> default (3); otherwise capped at 10."""
    if value is None or value <= 0:
        return DEFAULT_MAX_NEARBY_USERS
    return min(int(value), MAX_NEARBY_USERS_CEILING)


def resolve_freshness_minutes(value: int | None) -> int:
    """Non-positive or missing -> default (10); otherwise capped at one week."""
    if value is None or value <= 0:
        return DEFAULT_FRESHNESS_MINUTES
    return min(int(value), MAX_FRESHNESS_MINUTES)


async def _load_requester(users: UserStore, user_id: str) -> tuple[Requester, Coordinate]:
    """Requester plus a validated coordinate, or a precondition failure."""
    requester = await users.get_requester(user_id)
    if requester is None:
        raise RequesterNotFoundError("User not found")
    if requester.coordinate is None:
        raise LocationUnavailableError("User location unavailable")
    return requester, validate_coordinate(requester.coordinate)


def _recipient(candidate: Candidate) -> Recipient:
    return Recipient(
        recipient_id=candidate.id,
        display_name=candidate.name,
        email=candidate.email,
        distance_meters=round(candidate.distance_meters),
    )


async def _dispatch(
    summary: SosDispatchSummary,
    recipients: Sequence[Recipient],
    payload: NotificationPayload,
    mailer: Mailer,
) -> SosDispatchSummary:
    summary.results = await fan_out(recipients, payload, mailer)
    summary.dispatched = sum(1 for r in summary.results if r.success)
    logger.info(
        "SOS %s: %d/%d notified",
        summary.workflow, summary.dispatched, summary.total_candidates,
    )
    return summary


def _with_search(summary: SosDispatchSummary, outcome: SearchOutcome) -> SosDispatchSummary:
    summary.radii_tried = list(outcome.radii_tried)
    summary.radius_used = outcome.radius_used
    summary.search_status = outcome.status
    return summary


async def alert_personal_contacts(
    user_id: str,
    message: str | None = None,
    *,
    users: UserStore,
    mailer: Mailer,
) -> SosDispatchSummary:
    """Email every saved SOS contact that has an email address."""
    requester, location = await _load_requester(users, user_id)
    note = composer.normalize_note(message)

    contacts = [c for c in requester.contacts if c.email and c.email.strip()]
    summary = SosDispatchSummary(
        workflow=composer.CONTACTS,
        dispatched=0,
        total_candidates=len(contacts),
        requester_location=(location.latitude, location.longitude),
        custom_message_included=note is not None,
    )
    if not contacts:
        logger.info("SOS contacts: user %s has no contacts with email", requester.id)
        return summary

    payload = composer.compose_notification(
        composer.CONTACTS, requester.name, location, phone=requester.mobile, note=note
    )
    recipients = [
        Recipient(recipient_id=c.id, display_name=c.name or c.email, email=c.email.strip())
        for c in contacts
    ]
    return await _dispatch(summary, recipients, payload, mailer)


async def alert_nearby_users(
    user_id: str,
    message: str | None = None,
    max_users: int | None = None,
    freshness_minutes: int | None = None,
    *,
    users: UserStore,
    mailer: Mailer,
    radii: Sequence[int] | None = None,
    now: datetime | None = None,
) -> SosDispatchSummary:
    """Email other users whose recent location is close to the requester.

    Only users seen within the freshness window count; stale fixes are
    excluded outright rather than ranked lower.
    """
    requester, location = await _load_requester(users, user_id)
    note = composer.normalize_note(message)
    limit = clamp_max_users(max_users)
    minutes = resolve_freshness_minutes(freshness_minutes)

    spec = SearchSpec(
        radii=tuple(radii or settings.nearby_user_radii_m),
        max_candidates=limit,
        freshness_window=timedelta(minutes=minutes),
    )
    strategy = NativeIndexStrategy(users, requester.id, spec.freshness_window, now=now)
    outcome = await expanding_radius_search(strategy, location, spec)

    summary = _with_search(
        SosDispatchSummary(
            workflow=composer.NEARBY_USERS,
            dispatched=0,
            total_candidates=len(outcome.candidates),
            requester_location=(location.latitude, location.longitude),
            freshness_minutes=minutes,
            custom_message_included=note is not None,
        ),
        outcome,
    )
    if not outcome.candidates:
        logger.info("SOS nearby users: none fresh within %s", outcome.radii_tried)
        return summary

    payload = composer.compose_notification(
        composer.NEARBY_USERS, requester.name, location, phone=requester.mobile, note=note
    )
    return await _dispatch(summary, [_recipient(c) for c in outcome.candidates], payload, mailer)


async def alert_nearby_services(
    user_id: str,
    message: str | None = None,
    *,
    users: UserStore,
    locations: LocationStore,
    mailer: Mailer,
    radii: Sequence[int] | None = None,
    max_services: int = MAX_SERVICE_TARGETS,
    raw_cap: int = BOUNDING_BOX_RAW_CAP,
) -> SosDispatchSummary:
    """Email up to ``max_services`` enabled service locations, widening the radius as needed."""
    requester, location = await _load_requester(users, user_id)
    note = composer.normalize_note(message)

    spec = SearchSpec(radii=tuple(radii or settings.service_radii_m), max_candidates=max_services)
    outcome = await expanding_radius_search(BoundingBoxStrategy(locations, raw_cap), location, spec)

    summary = _with_search(
        SosDispatchSummary(
            workflow=composer.SERVICES,
            dispatched=0,
            total_candidates=len(outcome.candidates),
            requester_location=(location.latitude, location.longitude),
            custom_message_included=note is not None,
        ),
        outcome,
    )
    if not outcome.candidates:
        logger.info("SOS services: nothing within %s", outcome.radii_tried)
        return summary

    payload = composer.compose_notification(
        composer.SERVICES,
        requester.name,
        location,
        phone=requester.mobile,
        note=note,
        radius_m=outcome.radius_used,
    )
    return await _dispatch(summary, [_recipient(c) for c in outcome.candidates], payload, mailer)

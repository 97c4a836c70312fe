"""Domain models."""

from __future__ import annotations

from beacon.models.candidate import (
    Candidate,
    DispatchResult,
    NotificationPayload,
    Recipient,
    SearchOutcome,
    SearchSpec,
    SearchStatus,
    SendResult,
    SosDispatchSummary,
)
from beacon.models.coordinate import Coordinate
from beacon.models.location import ServiceLocation
from beacon.models.user import NearbyUser, PersonalContact, Requester

__all__ = [
    "Candidate",
    "Coordinate",
    "DispatchResult",
    "NearbyUser",
    "NotificationPayload",
    "PersonalContact",
    "Recipient",
    "Requester",
    "SearchOutcome",
    "SearchSpec",
    "SearchStatus",
    "SendResult",
    "ServiceLocation",
    "SosDispatchSummary",
]

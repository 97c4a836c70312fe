"""Search and dispatch value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum


@dataclass(frozen=True)
class Candidate:
    """A located, contactable entity eligible to receive one alert."""

    id: str
    name: str
    email: str
    distance_meters: float
    kind: str  # user | location


@dataclass(frozen=True)
class SearchSpec:
    """Per-request search parameters."""

    radii: tuple[int, ...]
    max_candidates: int
    freshness_window: timedelta | None = None


class SearchStatus(str, Enum):
    SATISFIED = "satisfied"  # stopped early, max_candidates reached
    EXHAUSTED = "exhausted"  # ran out of radii


@dataclass
class SearchOutcome:
    candidates: list[Candidate]
    radii_tried: list[int]
    radius_used: int | None
    status: SearchStatus


@dataclass(frozen=True)
class Recipient:
    """Where one notification goes."""

    recipient_id: str
    display_name: str
    email: str
    distance_meters: int | None = None


@dataclass(frozen=True)
class NotificationPayload:
    subject: str
    html_body: str
    text_body: str


@dataclass(frozen=True)
class SendResult:
    success: bool
    error: str | None = None


@dataclass
class DispatchResult:
    """Outcome of one send attempt."""

    recipient_id: str
    display_name: str
    email: str
    success: bool
    distance_meters: int | None = None
    error: str | None = None


@dataclass
class SosDispatchSummary:
    """Aggregated result of one SOS workflow."""

    workflow: str  # contacts | nearby_users | services
    dispatched: int
    total_candidates: int
    requester_location: tuple[float, float] | None = None
    radii_tried: list[int] = field(default_factory=list)
    radius_used: int | None = None
    search_status: SearchStatus | None = None
    freshness_minutes: int | None = None
    custom_message_included: bool = False
    results: list[DispatchResult] = field(default_factory=list)

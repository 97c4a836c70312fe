"""SOS dispatch schemas."""

from pydantic import BaseModel

from beacon.models.candidate import SosDispatchSummary


class SosAlertRequest(BaseModel):
    message: str | None = None


class NearbyUsersAlertRequest(SosAlertRequest):
    # Out-of-range values fall back to defaults / the ceiling rather than 422
    max_users: int | None = None
    freshness_minutes: int | None = None


class RequesterLocation(BaseModel):
    lat: float
    lng: float


class DispatchResultResponse(BaseModel):
    id: str
    name: str
    email: str
    distance_meters: int | None = None
    success: bool
    error: str | None = None


class SosDispatchResponse(BaseModel):
    message: str
    workflow: str
    dispatched: int
    total_candidates: int
    radii_tried: list[int] = []
    radius_used: int | None = None
    search_status: str | None = None  # satisfied | exhausted
    freshness_minutes: int | None = None
    requester_location: RequesterLocation | None = None
    custom_message_included: bool = False
    results: list[DispatchResultResponse] = []

    @classmethod
    def from_summary(cls, summary: SosDispatchSummary, message: str) -> "SosDispatchResponse":
        loc = summary.requester_location
        return cls(
            message=message,
            workflow=summary.workflow,
            dispatched=summary.dispatched,
            total_candidates=summary.total_candidates,
            radii_tried=summary.radii_tried,
            radius_used=summary.radius_used,
            search_status=summary.search_status.value if summary.search_status else None,
            freshness_minutes=summary.freshness_minutes,
            requester_location=RequesterLocation(lat=loc[0], lng=loc[1]) if loc else None,
            custom_message_included=summary.custom_message_included,
            results=[
                DispatchResultResponse(
                    id=r.recipient_id,
                    name=r.display_name,
                    email=r.email,
                    distance_meters=r.distance_meters,
                    success=r.success,
                    error=r.error,
                )
                for r in summary.results
            ],
        )

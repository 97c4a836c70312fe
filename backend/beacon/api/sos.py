"""SOS dispatch API."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends

from beacon.api.errors import http_error
from beacon.core.deps import get_current_user_id, get_location_store, get_mailer, get_user_store
from beacon.core.errors import SosError
from beacon.repositories import LocationStore, UserStore
from beacon.schemas.sos import NearbyUsersAlertRequest, SosAlertRequest, SosDispatchResponse
from beacon.services.mailer import Mailer
from beacon.services.sos_service import (
    alert_nearby_services,
    alert_nearby_users,
    alert_personal_contacts,
)

router = APIRouter(prefix="/sos", tags=["sos"])


@router.post("/contacts", response_model=SosDispatchResponse)
async def send_to_contacts(
    data: SosAlertRequest | None = Body(default=None),
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store),
    mailer: Mailer = Depends(get_mailer),
):
    """Email the requester's saved SOS contacts."""
    d = data or SosAlertRequest()
    try:
        summary = await alert_personal_contacts(user_id, d.message, users=users, mailer=mailer)
    except SosError as e:
        raise http_error(e) from e
    message = (
        "SOS contact notifications processed"
        if summary.total_candidates
        else "No SOS contacts with email to notify"
    )
    return SosDispatchResponse.from_summary(summary, message)


@router.post("/nearby-users", response_model=SosDispatchResponse)
async def send_to_nearby_users(
    data: NearbyUsersAlertRequest | None = Body(default=None),
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store),
    mailer: Mailer = Depends(get_mailer),
):
    """Email up to ``max_users`` (default 3, max 10) recently-located users nearby."""
    d = data or NearbyUsersAlertRequest()
    try:
        summary = await alert_nearby_users(
            user_id,
            d.message,
            d.max_users,
            d.freshness_minutes,
            users=users,
            mailer=mailer,
        )
    except SosError as e:
        raise http_error(e) from e
    message = (
        "Nearby user notifications processed"
        if summary.total_candidates
        else "No nearby active users found within radius"
    )
    return SosDispatchResponse.from_summary(summary, message)


@router.post("/services", response_model=SosDispatchResponse)
async def send_to_services(
    data: SosAlertRequest | None = Body(default=None),
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store),
    locations: LocationStore = Depends(get_location_store),
    mailer: Mailer = Depends(get_mailer),
):
    """Email up to 3 nearby emergency-service locations, widening the radius 2 -> 7 -> 12 km."""
    d = data or SosAlertRequest()
    try:
        summary = await alert_nearby_services(
            user_id, d.message, users=users, locations=locations, mailer=mailer
        )
    except SosError as e:
        raise http_error(e) from e
    message = (
        "Nearby service notifications processed"
        if summary.total_candidates
        else "No nearby services found within expanding radii"
    )
    return SosDispatchResponse.from_summary(summary, message)

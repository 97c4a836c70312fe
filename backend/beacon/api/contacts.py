"""SOS contacts API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from beacon.api.errors import http_error
from beacon.core.deps import get_current_user_id, get_user_store
from beacon.core.errors import SosError
from beacon.repositories import UserStore
from beacon.schemas.contact import (
    SosContactCreate,
    SosContactListResponse,
    SosContactResponse,
    SosContactUpdate,
)
from beacon.services import contact_service

router = APIRouter(prefix="/sos-contacts", tags=["sos-contacts"])


def _listing(contacts, message: str | None = None) -> SosContactListResponse:
    return SosContactListResponse(
        message=message,
        data=[SosContactResponse.model_validate(c) for c in contacts],
    )


@router.get("", response_model=SosContactListResponse)
async def get_contacts(
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store),
):
    """List the current user's SOS contacts."""
    try:
        contacts = await contact_service.list_contacts(users, user_id)
    except SosError as e:
        raise http_error(e) from e
    return _listing(contacts)


@router.post("", response_model=SosContactListResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    data: SosContactCreate,
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store),
):
    """Add an SOS contact (email required, max 5, no duplicate emails)."""
    try:
        contacts = await contact_service.add_contact(
            users,
            user_id,
            email=data.email,
            name=data.name,
            relation=data.relation,
            mobile=data.mobile,
        )
    except SosError as e:
        raise http_error(e) from e
    return _listing(contacts, "Contact added successfully")


@router.patch("/{contact_id}", response_model=SosContactListResponse)
async def patch_contact(
    contact_id: str,
    data: SosContactUpdate,
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store),
):
    """Update some fields of an SOS contact."""
    try:
        contacts = await contact_service.update_contact(
            users,
            user_id,
            contact_id,
            **data.model_dump(exclude_unset=True),
        )
    except SosError as e:
        raise http_error(e) from e
    return _listing(contacts, "Contact updated successfully")


@router.delete("/{contact_id}", response_model=SosContactListResponse)
async def remove_contact(
    contact_id: str,
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store),
):
    """Delete an SOS contact."""
    try:
        contacts = await contact_service.delete_contact(users, user_id, contact_id)
    except SosError as e:
        raise http_error(e) from e
    return _listing(contacts, "Contact deleted successfully")

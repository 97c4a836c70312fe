"""SOS contact management."""

from __future__ import annotations

from beacon.core.errors import ContactNotFoundError, ContactValidationError, RequesterNotFoundError
from beacon.core.sos_policies import MAX_SOS_CONTACTS
from beacon.models.user import PersonalContact
from beacon.repositories.interfaces import UserStore


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


async def list_contacts(users: UserStore, user_id: str) -> list[PersonalContact]:
    contacts = await users.list_contacts(user_id)
    if contacts is None:
        raise RequesterNotFoundError("User not found")
    return contacts


async def add_contact(
    users: UserStore,
    user_id: str,
    *,
    email: str,
    name: str = "",
    relation: str = "",
    mobile: str = "",
) -> list[PersonalContact]:
    """Append a contact. Email is required and unique per user; max 5 contacts."""
    email_norm = normalize_email(email)
    if not email_norm:
        raise ContactValidationError("Email is required for SOS contacts.")

    contacts = await list_contacts(users, user_id)
    if len(contacts) >= MAX_SOS_CONTACTS:
        raise ContactValidationError(f"You can add a maximum of {MAX_SOS_CONTACTS} SOS contacts.")
    if any(normalize_email(c.email) == email_norm for c in contacts):
        raise ContactValidationError("A contact with this email already exists.")

    created = await users.add_contact(
        user_id,
        {
            "name": (name or "").strip(),
            "relation": (relation or "").strip(),
            "email": email_norm,
            "mobile": (mobile or "").strip(),
        },
    )
    return [*contacts, created]


async def update_contact(
    users: UserStore,
    user_id: str,
    contact_id: str,
    *,
    email: str | None = None,
    name: str | None = None,
    relation: str | None = None,
    mobile: str | None = None,
) -> list[PersonalContact]:
    """Partial update. Fields left as None are untouched."""
    contacts = await list_contacts(users, user_id)
    if not any(c.id == contact_id for c in contacts):
        raise ContactNotFoundError("Contact not found")

    changes: dict[str, str] = {}
    if email is not None:
        email_norm = normalize_email(email)
        if not email_norm:
            raise ContactValidationError("Email is required for SOS contacts.")
        if any(c.id != contact_id and normalize_email(c.email) == email_norm for c in contacts):
            raise ContactValidationError("Another contact with this email already exists.")
        changes["email"] = email_norm
    if name is not None:
        changes["name"] = name.strip()
    if relation is not None:
        changes["relation"] = relation.strip()
    if mobile is not None:
        changes["mobile"] = mobile.strip()

    if changes and not await users.update_contact(user_id, contact_id, changes):
        raise ContactNotFoundError("Contact not found")
    return await list_contacts(users, user_id)


async def delete_contact(users: UserStore, user_id: str, contact_id: str) -> list[PersonalContact]:
    contacts = await list_contacts(users, user_id)
    if not any(c.id == contact_id for c in contacts):
        raise ContactNotFoundError("Contact not found")
    if not await users.delete_contact(user_id, contact_id):
        raise ContactNotFoundError("Contact not found")
    return await list_contacts(users, user_id)

"""Build the SOS email once per request."""

from __future__ import annotations

from html import escape

from beacon.models.candidate import NotificationPayload
from beacon.models.coordinate import Coordinate

CONTACTS = "contacts"
NEARBY_USERS = "nearby_users"
SERVICES = "services"

_ACCENT = "#d32f2f"


def google_maps_link(point: Coordinate) -> str:
    return f"https://maps.google.com/?q={point.latitude},{point.longitude}"


def osm_link(point: Coordinate) -> str:
    lat, lng = point.latitude, point.longitude
    return f"https://www.openstreetmap.org/?mlat={lat}&mlon={lng}#map=16/{lat}/{lng}"


def normalize_note(note: str | None) -> str | None:
    """Trim the free-text note; blank means no note."""
    if note is None:
        return None
    note = note.strip()
    return note or None


def _wrap_html(inner: str) -> str:
    return (
        '<div style="font-family:Arial,sans-serif;max-width:600px;margin:auto;'
        'border:1px solid #ddd;border-radius:8px;padding:16px;">'
        f"{inner}"
        '<p style="color:#888;font-size:12px;margin-top:24px;">'
        "Sent automatically by Beacon SOS.</p></div>"
    )


def _headline(kind: str, name: str, radius_m: int | None) -> tuple[str, str, str, str]:
    """(subject, heading, intro, closing) for a workflow kind."""
    if kind == CONTACTS:
        return (
            f"SOS ALERT: {name} needs assistance",
            "Emergency SOS Alert",
            f"<strong>{escape(name)}</strong> has triggered an SOS alert.",
            "Please try to contact them or arrange help if it is safe to do so.",
        )
    if kind == NEARBY_USERS:
        return (
            f"Nearby SOS: {name} needs help",
            "Nearby SOS Alert",
            f"You are near <strong>{escape(name)}</strong> who triggered an SOS.",
            "If it is safe, consider assisting or alerting authorities.",
        )
    if kind == SERVICES:
        closing = "Please coordinate or respond if appropriate."
        if radius_m:
            closing = (
                f"You were selected based on proximity (radius up to {radius_m / 1000:.1f} km). "
                + closing
            )
        return (
            f"SOS ALERT near {name}",
            "Proximity SOS Alert",
            f"An SOS alert was triggered by <strong>{escape(name)}</strong>.",
            closing,
        )
    raise ValueError(f"Unknown notification kind: {kind}")


def compose_notification(
    kind: str,
    requester_name: str,
    location: Coordinate,
    phone: str | None = None,
    note: str | None = None,
    radius_m: int | None = None,
) -> NotificationPayload:
    """Subject plus HTML and plain-text bodies for one alert.

    Both map links are always present; phone and note blocks are left out
    entirely when there is nothing to show.
    """
    note = normalize_note(note)
    phone = (phone or "").strip() or None
    google = google_maps_link(location)
    osm = osm_link(location)
    subject, heading, intro, closing = _headline(kind, requester_name, radius_m)

    parts = [
        f'<h2 style="margin-top:0;color:{_ACCENT};">{heading}</h2>',
        f"<p>{intro}</p>",
    ]
    if phone:
        parts.append(f"<p><strong>Mobile:</strong> {escape(phone)}</p>")
    parts.append("<p><strong>Location:</strong></p>")
    parts.append(
        f'<ul><li><a href="{escape(google)}">Google Maps</a></li>'
        f'<li><a href="{escape(osm)}">OpenStreetMap</a></li></ul>'
    )
    if note:
        parts.append(
            f'<p style="padding:12px;background:#f8f8f8;border-left:4px solid {_ACCENT};">'
            f"<em>{escape(note)}</em></p>"
        )
    parts.append(f"<p>{closing}</p>")

    lines = [subject, f"Location: {google}", f"Alternate map: {osm}"]
    if phone:
        lines.append(f"Mobile: {phone}")
    if note:
        lines.append(f"Message: {note}")

    return NotificationPayload(
        subject=subject,
        html_body=_wrap_html("".join(parts)),
        text_body="\n".join(lines),
    )

"""Concurrent notification fan-out."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from beacon.models.candidate import DispatchResult, NotificationPayload, Recipient
from beacon.services.mailer import Mailer

logger = logging.getLogger(__name__)


async def _send_one(recipient: Recipient, payload: NotificationPayload, mailer: Mailer) -> DispatchResult:
    result = DispatchResult(
        recipient_id=recipient.recipient_id,
        display_name=recipient.display_name,
        email=recipient.email,
        distance_meters=recipient.distance_meters,
        success=False,
    )
    try:
        sent = await mailer.send(recipient.email, payload.subject, payload.html_body, payload.text_body)
    except Exception as exc:  # noqa: BLE001 - one recipient must not sink the batch
        logger.warning("Send to %s raised: %s", recipient.email, exc)
        result.error = str(exc) or type(exc).__name__
        return result

    result.success = bool(sent.success)
    if not result.success:
        result.error = str(sent.error) if sent.error else "Send failed"
        logger.warning("Send to %s failed: %s", recipient.email, result.error)
    return result


async def fan_out(
    recipients: Sequence[Recipient],
    payload: NotificationPayload,
    mailer: Mailer,
) -> list[DispatchResult]:
    """Send ``payload`` to every recipient at once; one result per recipient, input order.

    Waits for every send to settle. Nothing is retried or cancelled.
    """
    if not recipients:
        return []
    results = await asyncio.gather(*(_send_one(r, payload, mailer) for r in recipients))
    ok = sum(1 for r in results if r.success)
    logger.info("Fan-out complete: %d/%d delivered", ok, len(results))
    return list(results)

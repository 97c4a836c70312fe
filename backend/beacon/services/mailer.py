"""Outbound email transport.

Senders never raise for delivery problems: they return ``SendResult`` so a
single bad address cannot break a fan-out batch. Retries are out of scope.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from beacon.core.config import settings
from beacon.models.candidate import SendResult

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    async def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> SendResult: ...


class LogMailer:
    """Development sender: logs the message instead of delivering it."""

    async def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> SendResult:
        logger.info("[EMAIL] -> %s: Subject=%r (%d bytes html)", to_email, subject, len(html_body))
        return SendResult(success=True)


class HttpMailer:
    """Transactional mail API (Brevo-compatible JSON body)."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        from_email: str,
        from_name: str = "",
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self.api_key = api_key
        self.from_email = from_email
        self.from_name = from_name
        self.timeout = timeout
        self._transport = transport

    def _payload(self, to_email: str, subject: str, html_body: str, text_body: str) -> dict:
        sender = {"email": self.from_email}
        if self.from_name:
            sender["name"] = self.from_name
        return {
            "sender": sender,
            "to": [{"email": to_email}],
            "subject": subject,
            "htmlContent": html_body,
            "textContent": text_body,
        }

    async def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> SendResult:
        headers = {"api-key": self.api_key, "accept": "application/json"}
        payload = self._payload(to_email, subject, html_body, text_body)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(self.api_url, json=payload, headers=headers)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                body = exc.response.text[:300]
                logger.warning("Mail API rejected %s: %s %s", to_email, exc.response.status_code, body)
                return SendResult(success=False, error=f"HTTP {exc.response.status_code}: {body}")
            except httpx.HTTPError as exc:
                logger.warning("Mail API request failed for %s: %s", to_email, exc)
                return SendResult(success=False, error=str(exc) or type(exc).__name__)
        return SendResult(success=True)


def get_mailer() -> Mailer:
    """Mailer selected by ``settings.mail_provider``."""
    provider = settings.mail_provider.strip().lower()
    if provider == "log":
        return LogMailer()
    if provider == "http":
        if not settings.mail_api_key:
            logger.warning("MAIL_API_KEY is not set; falling back to log mailer")
            return LogMailer()
        return HttpMailer(
            api_url=settings.mail_api_url,
            api_key=settings.mail_api_key,
            from_email=settings.mail_from,
            from_name=settings.mail_from_name,
            timeout=settings.mail_timeout_seconds,
        )
    raise ValueError(f"Unsupported mail provider '{settings.mail_provider}'. Use 'log' or 'http'.")

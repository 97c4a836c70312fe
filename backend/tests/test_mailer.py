"""Mail transport tests (no network: httpx.MockTransport)."""

import json

import httpx
import pytest

from beacon.services import mailer as mailer_module
from beacon.services.mailer import HttpMailer, LogMailer, get_mailer


def _http_mailer(handler, from_name="Beacon"):
    return HttpMailer(
        api_url="https://mail.example.test/v3/smtp/email",
        api_key="secret-key",
        from_email="alerts@beacon.test",
        from_name=from_name,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.anyio
async def test_http_mailer_posts_transactional_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"messageId": "<abc@mail>"})

    result = await _http_mailer(handler).send("r@x.test", "SOS", "<p>hi</p>", "hi")

    assert result.success is True
    assert result.error is None
    assert seen["url"] == "https://mail.example.test/v3/smtp/email"
    assert seen["key"] == "secret-key"
    assert seen["body"] == {
        "sender": {"email": "alerts@beacon.test", "name": "Beacon"},
        "to": [{"email": "r@x.test"}],
        "subject": "SOS",
        "htmlContent": "<p>hi</p>",
        "textContent": "hi",
    }


@pytest.mark.anyio
async def test_http_mailer_omits_empty_sender_name():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200)

    await _http_mailer(handler, from_name="").send("r@x.test", "SOS", "<p/>", "")
    assert bodies[0]["sender"] == {"email": "alerts@beacon.test"}


@pytest.mark.anyio
async def test_http_mailer_reports_rejection():
    def handler(request):
        return httpx.Response(400, text="invalid_parameter: to")

    result = await _http_mailer(handler).send("bad", "SOS", "<p/>", "")
    assert result.success is False
    assert result.error == "HTTP 400: invalid_parameter: to"


@pytest.mark.anyio
async def test_http_mailer_reports_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = await _http_mailer(handler).send("r@x.test", "SOS", "<p/>", "")
    assert result.success is False
    assert "connection refused" in result.error


@pytest.mark.anyio
async def test_log_mailer_always_succeeds():
    result = await LogMailer().send("r@x.test", "SOS", "<p/>", "")
    assert result.success is True


def test_get_mailer_selection(monkeypatch):
    monkeypatch.setattr(mailer_module.settings, "mail_provider", "log")
    assert isinstance(get_mailer(), LogMailer)

    monkeypatch.setattr(mailer_module.settings, "mail_provider", "http")
    monkeypatch.setattr(mailer_module.settings, "mail_api_key", "")
    assert isinstance(get_mailer(), LogMailer)

    monkeypatch.setattr(mailer_module.settings, "mail_api_key", "k")
    selected = get_mailer()
    assert isinstance(selected, HttpMailer)
    assert selected.api_key == "k"

    monkeypatch.setattr(mailer_module.settings, "mail_provider", "smoke-signals")
    with pytest.raises(ValueError):
        get_mailer()

"""EmailService: simulation mode and provider failures."""

import asyncio

import aiohttp

from notus.config import Settings
from notus.core.errors import InternalError
from notus.core.services import email_service as email_module
from notus.core.services.email_service import (
    DEFAULT_INVITER_NAME,
    EmailService,
    share_invite_html,
    share_invite_subject,
)


class _ExplodingSession:
    """Stands in for aiohttp.ClientSession; ``post`` raises the given error."""

    def __init__(self, error, **kwargs):
        self.error = error
        self.kwargs = kwargs

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def post(self, *args, **kwargs):
        raise self.error


async def test_without_api_key_emails_are_simulated():
    service = EmailService(Settings(resend_api_key=None))
    assert service.simulated

    result = await service.send_share_invite("bob@example.com", "http://app.test/x", None, "Notes")
    assert result.success
    assert result.data.simulated
    assert result.data.message_id.startswith("sim-share-invite-")


def test_invite_content_escapes_user_text():
    assert share_invite_subject(DEFAULT_INVITER_NAME, "Notes") == 'Un utilisateur vous a invité à collaborer sur "Notes"'
    body = share_invite_html("http://app.test/?token=a&b", "<Alice>", "Notes")
    assert "&lt;Alice&gt;" in body
    assert 'href="http://app.test/?token=a&amp;b"' in body


async def test_timeout_is_a_failed_result(monkeypatch):
    monkeypatch.setattr(
        email_module.aiohttp, "ClientSession", lambda **kw: _ExplodingSession(asyncio.TimeoutError(), **kw)
    )
    service = EmailService(Settings(resend_api_key="re_test", http_timeout_seconds=5))

    result = await service.send_share_invite("bob@example.com", "http://app.test/x", "Alice", "Notes")
    assert not result.success
    assert isinstance(result.error, InternalError)


async def test_transport_error_is_a_failed_result(monkeypatch):
    monkeypatch.setattr(
        email_module.aiohttp,
        "ClientSession",
        lambda **kw: _ExplodingSession(aiohttp.ClientConnectionError("refused"), **kw),
    )
    service = EmailService(Settings(resend_api_key="re_test"))

    result = await service.send("bob@example.com", "Hi", "<p>Hi</p>")
    assert isinstance(result.error, InternalError)

"""Transactional email through the Resend HTTP API."""

import asyncio
import html
import logging
import time
from dataclasses import dataclass
from typing import Optional

import aiohttp

from ...config import Settings, get_settings
from ..errors import InternalError
from ..result import Result
from .interfaces import IEmailService

logger = logging.getLogger("notus.email")

DEFAULT_INVITER_NAME = "Un utilisateur"


@dataclass(frozen=True)
class EmailReceipt:
    message_id: str
    simulated: bool = False


def share_invite_subject(inviter_name: str, doc_title: str) -> str:
    return f'{inviter_name} vous a invité à collaborer sur "{doc_title}"'


def share_invite_html(link: str, inviter_name: str, doc_title: str) -> str:
    inviter = html.escape(inviter_name)
    title = html.escape(doc_title)
    href = html.escape(link, quote=True)
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        "<h2>Invitation à collaborer</h2>"
        f"<p><strong>{inviter}</strong> vous a invité à collaborer sur le document "
        f"<strong>&laquo;&nbsp;{title}&nbsp;&raquo;</strong>.</p>"
        f'<p><a href="{href}" style="background:#2563eb;color:#fff;padding:12px 24px;'
        'border-radius:6px;text-decoration:none;">Accepter l\'invitation</a></p>'
        "<p>Ce lien expire dans 2 jours. Si vous n'attendiez pas cette invitation, "
        "ignorez simplement cet email.</p>"
        "</div>"
    )


class EmailService(IEmailService):
    """Sends emails; without an API key it only logs them (simulation mode)."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    def simulated(self) -> bool:
        return not self.settings.resend_api_key

    async def send_share_invite(
        self, email: str, link: str, inviter_name: Optional[str], doc_title: str
    ) -> Result[EmailReceipt]:
        inviter_name = inviter_name or DEFAULT_INVITER_NAME
        return await self.send(
            to=email,
            subject=share_invite_subject(inviter_name, doc_title),
            body_html=share_invite_html(link, inviter_name, doc_title),
            tag="share-invite",
        )

    async def send(self, to: str, subject: str, body_html: str, tag: str = "email") -> Result[EmailReceipt]:
        if self.simulated:
            logger.warning("Simulation mode: email not actually sent", extra={"to": to, "subject": subject})
            return Result.ok(EmailReceipt(message_id=f"sim-{tag}-{int(time.time() * 1000)}", simulated=True))

        payload = {
            "from": self.settings.email_from,
            "to": [to],
            "subject": subject,
            "html": body_html,
        }
        headers = {"Authorization": f"Bearer {self.settings.resend_api_key}"}
        timeout = aiohttp.ClientTimeout(total=self.settings.http_timeout_seconds)

        start = time.time()
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.settings.resend_api_url, json=payload, headers=headers) as resp:
                    data = await resp.json(content_type=None)
                    if resp.status >= 400:
                        message = (data or {}).get("message") or f"HTTP {resp.status}"
                        logger.error(f"Resend rejected email: {message}", extra={"to": to, "status": resp.status})
                        return Result.fail(InternalError(detail=message))
        except asyncio.TimeoutError:
            logger.error(f"Resend timeout after {time.time() - start:.1f}s", extra={"to": to})
            return Result.fail(InternalError(detail="email provider timeout"))
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Resend transport error: {e}", extra={"to": to})
            return Result.fail(InternalError(detail=str(e)))

        message_id = str((data or {}).get("id", ""))
        logger.info("Email sent", extra={"to": to, "message_id": message_id})
        return Result.ok(EmailReceipt(message_id=message_id))

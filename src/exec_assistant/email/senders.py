# src/exec_assistant/email/senders.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field

import httpx

from ..errors import ProviderError

logger = logging.getLogger(__name__)


def normalize_recipients(to: str | Sequence[str]) -> list[str]:
    if isinstance(to, str):
        items = [to]
    else:
        items = list(to)
    out = [str(x).strip() for x in items if x and str(x).strip()]
    if not out:
        raise ValueError("At least one recipient is required")
    return out


@dataclass(slots=True, frozen=True)
class SendResult:
    message_id: str | None
    recipients: list[str] = field(default_factory=list)


@dataclass(slots=True)
class OutboxMessage:
    to: list[str]
    subject: str
    html: str
    text: str | None
    message_id: str


class LoggingEmailSender:
    """
    Offline EmailSender: keeps messages in an in-process outbox and logs them.

    Used when no email provider is configured.
    """

    def __init__(self) -> None:
        self.outbox: list[OutboxMessage] = []

    async def send(
        self,
        to: str | Sequence[str],
        subject: str,
        html: str,
        text: str | None = None,
    ) -> SendResult:
        recipients = normalize_recipients(to)
        message_id = f"local-{uuid.uuid4().hex}"
        self.outbox.append(
            OutboxMessage(to=recipients, subject=subject, html=html, text=text, message_id=message_id)
        )
        logger.info("Email (offline outbox) to=%s subject=%r id=%s", recipients, subject, message_id)
        return SendResult(message_id=message_id, recipients=recipients)


class SendGridEmailSender:
    """SendGrid v3 `mail/send` over httpx."""

    def __init__(
        self,
        *,
        api_key: str,
        from_email: str,
        base_url: str = "https://api.sendgrid.com",
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ProviderError("email", "SendGrid API key is not set. Set EXEC_SENDGRID_API_KEY in your .env.")
        if not from_email or not from_email.strip():
            raise ProviderError("email", "Sender address is not set. Set EXEC_EMAIL_FROM in your .env.")
        self._from_email = from_email.strip()
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout, connect=5.0),
            headers={"Authorization": f"Bearer {api_key.strip()}"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send(
        self,
        to: str | Sequence[str],
        subject: str,
        html: str,
        text: str | None = None,
    ) -> SendResult:
        recipients = normalize_recipients(to)
        content = []
        if text:
            content.append({"type": "text/plain", "value": text})
        content.append({"type": "text/html", "value": html})
        payload = {
            "personalizations": [{"to": [{"email": r} for r in recipients]}],
            "from": {"email": self._from_email},
            "subject": subject,
            "content": content,
        }

        try:
            resp = await self._client.post("/v3/mail/send", json=payload)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "SendGrid rejected email to=%s status=%s body=%r",
                recipients,
                e.response.status_code,
                e.response.text[:500],
            )
            raise ProviderError("email", "Failed to send email") from e
        except httpx.HTTPError as e:
            logger.error("SendGrid request failed to=%s: %s", recipients, e)
            raise ProviderError("email", "Failed to send email") from e

        message_id = resp.headers.get("X-Message-Id")
        logger.info("Email sent successfully to %s id=%s", recipients, message_id)
        return SendResult(message_id=message_id, recipients=recipients)

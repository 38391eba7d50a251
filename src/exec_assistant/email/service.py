# src/exec_assistant/email/service.py

"""
Email composition.

Selects subject + body for each kind of outgoing mail and hands it to an EmailSender.
Bodies are plain escaped HTML with a text alternative; visual templates are out of scope.
"""

from __future__ import annotations

import html
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from ..core.ports import EmailSender
from ..errors import ProviderError
from .senders import SendResult

logger = logging.getLogger(__name__)


def _fmt_when(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip()).isoformat()
        except ValueError:
            return value.strip()
    return ""


def _render(heading: str, lines: list[tuple[str, str]], footer: str) -> tuple[str, str]:
    """Build (html, text) bodies from labelled lines; empty values are skipped."""
    rows = [(label, value) for label, value in lines if value]
    html_rows = "".join(
        f"<p><strong>{html.escape(label)}:</strong> {html.escape(value)}</p>" for label, value in rows
    )
    body_html = f"<h2>{html.escape(heading)}</h2>{html_rows}<p>{html.escape(footer)}</p>"
    body_text = "\n".join([heading, "", *(f"{label}: {value}" for label, value in rows), "", footer])
    return body_html, body_text


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return [str(v) for v in value if v]


class EmailService:
    def __init__(self, sender: EmailSender) -> None:
        self._sender = sender

    async def send_email(
        self,
        to: str | Sequence[str],
        subject: str,
        html_body: str,
        text: str | None = None,
    ) -> SendResult:
        try:
            return await self._sender.send(to, subject, html_body, text)
        except ProviderError:
            raise
        except ValueError:
            raise
        except Exception as e:
            logger.exception("Error sending email to=%s subject=%r", to, subject)
            raise ProviderError("email", "Failed to send email") from e

    async def send_plain(self, to: str | Sequence[str], subject: str, body: str) -> SendResult:
        """Free-form message: the body is escaped and wrapped, the text part is the body itself."""
        body = body or ""
        html_body = "".join(f"<p>{html.escape(par)}</p>" for par in body.split("\n\n") if par.strip())
        return await self.send_email(to, subject or "(no subject)", html_body or "<p></p>", body)

    async def send_follow_up(self, to: str | Sequence[str], details: Mapping[str, Any]) -> SendResult:
        title = str(details.get("title") or "Meeting")
        body_html, body_text = _render(
            "Meeting Follow-Up",
            [
                ("Meeting", title),
                ("Date", _fmt_when(details.get("date"))),
                ("Attendees", ", ".join(_as_list(details.get("attendees")))),
                ("Notes", str(details.get("notes") or "")),
            ],
            "Thank you for attending the meeting. Please find the summary above.",
        )
        return await self.send_email(to, f"Follow-up: {title}", body_html, body_text)

    async def send_meeting_invite(self, to: str | Sequence[str], details: Mapping[str, Any]) -> SendResult:
        title = str(details.get("title") or "Meeting")
        body_html, body_text = _render(
            "Meeting Invitation",
            [
                ("Meeting", title),
                ("Start", _fmt_when(details.get("startTime"))),
                ("End", _fmt_when(details.get("endTime"))),
                ("Location", str(details.get("location") or "")),
                ("Description", str(details.get("description") or "")),
            ],
            "Please confirm your attendance.",
        )
        return await self.send_email(to, f"Meeting Invitation: {title}", body_html, body_text)

    async def send_task_reminder(self, to: str, details: Mapping[str, Any]) -> SendResult:
        title = str(details.get("title") or "Task")
        priority = str(details.get("priority") or "medium")
        body_html, body_text = _render(
            "Task Reminder",
            [
                ("Task", title),
                ("Priority", priority.upper()),
                ("Due", _fmt_when(details.get("dueDate"))),
                ("Description", str(details.get("description") or "")),
            ],
            "This is a reminder to complete this task.",
        )
        return await self.send_email(to, f"Task Reminder: {title}", body_html, body_text)

    async def send_bulk(self, emails: Sequence[Mapping[str, str]]) -> int:
        """
        Send several independent messages ({to, subject, html}).

        Stops at the first failure (raised as ProviderError); returns the number sent.
        """
        sent = 0
        for item in emails:
            await self.send_email(item["to"], item["subject"], item["html"])
            sent += 1
        logger.info("Bulk emails sent successfully: %d emails", sent)
        return sent

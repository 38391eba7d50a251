# src/exec_assistant/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps calendar/email/LLM providers swappable and makes testing easier.
All provider calls are async: they suspend the calling command, not the process.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Awaitable, Protocol, Sequence

if TYPE_CHECKING:
    from ..calendar.models import CalendarEvent, EventDetails
    from ..email.senders import SendResult
    from ..tasks.task_scheduler import DailyDigest


class LLMClient(Protocol):
    """Text-in / text-out completion. No structural guarantee on the output."""

    def generate(self, prompt: str) -> Awaitable[str]: ...


class CalendarProvider(Protocol):
    def list_events(
        self,
        time_min: datetime | None = None,
        time_max: datetime | None = None,
    ) -> Awaitable[list[CalendarEvent]]:
        """Events overlapping [time_min, time_max), ordered by start."""
        ...

    def create_event(self, details: EventDetails) -> Awaitable[CalendarEvent]: ...

    def update_event(self, event_id: str, patch: dict[str, Any]) -> Awaitable[CalendarEvent]: ...

    def delete_event(self, event_id: str) -> Awaitable[None]: ...


class EmailSender(Protocol):
    def send(
        self,
        to: str | Sequence[str],
        subject: str,
        html: str,
        text: str | None = None,
    ) -> Awaitable[SendResult]: ...


class DigestSink(Protocol):
    """Where the daily task digest goes (no delivery channel is mandated)."""

    def publish(self, digest: DailyDigest) -> Awaitable[None]: ...

# src/exec_assistant/dispatch/results.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..calendar.models import CalendarEvent
from ..email.senders import SendResult


class MeetingOutcome(StrEnum):
    """How far the two-step schedule_meeting saga got."""

    SCHEDULED = "scheduled"  # event created, invites sent
    SCHEDULED_WITHOUT_INVITES = "scheduled_without_invites"  # event created, no attendees
    INVITE_FAILED = "invite_failed"  # event created, invite email failed


@dataclass(slots=True, frozen=True)
class MeetingScheduled:
    event: CalendarEvent
    outcome: MeetingOutcome
    invite: SendResult | None = None


@dataclass(slots=True, frozen=True)
class ActionResult:
    type: str
    message: str
    data: Any = None

# src/exec_assistant/calendar/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(slots=True, frozen=True)
class TimeInterval:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Interval start {self.start.isoformat()} is after end {self.end.isoformat()}")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(slots=True)
class EventDetails:
    """Payload for creating a calendar event."""

    summary: str
    start: datetime
    end: datetime
    description: str | None = None
    location: str | None = None
    attendees: list[str] = field(default_factory=list)


@dataclass(slots=True)
class CalendarEvent:
    id: str
    summary: str
    start: datetime
    end: datetime
    description: str | None = None
    location: str | None = None
    attendees: list[str] = field(default_factory=list)
    html_link: str | None = None

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.start, self.end)

# src/exec_assistant/calendar/memory_calendar.py

from __future__ import annotations

import asyncio
import dataclasses
import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from ..errors import EventNotFoundError
from .models import CalendarEvent, EventDetails

logger = logging.getLogger(__name__)

_PATCHABLE = {"summary", "description", "location", "attendees", "start", "end"}


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


class InMemoryCalendar:
    """
    Process-local CalendarProvider.

    Used for local runs without a calendar backend and as a realistic collaborator in tests.
    """

    def __init__(self, events: list[CalendarEvent] | None = None) -> None:
        self._events: dict[str, CalendarEvent] = {}
        self._lock = asyncio.Lock()
        for ev in events or []:
            self._events[ev.id] = ev

    async def list_events(
        self,
        time_min: datetime | None = None,
        time_max: datetime | None = None,
    ) -> list[CalendarEvent]:
        lo = _aware(time_min) if time_min is not None else datetime.now(UTC)
        hi = _aware(time_max) if time_max is not None else None
        async with self._lock:
            out = [
                dataclasses.replace(ev, attendees=list(ev.attendees))
                for ev in self._events.values()
                if ev.end > lo and (hi is None or ev.start < hi)
            ]
        out.sort(key=lambda e: (e.start, e.end))
        return out

    async def create_event(self, details: EventDetails) -> CalendarEvent:
        if details.start > details.end:
            raise ValueError("Event start must not be after its end")
        event_id = uuid.uuid4().hex
        event = CalendarEvent(
            id=event_id,
            summary=details.summary,
            start=_aware(details.start),
            end=_aware(details.end),
            description=details.description,
            location=details.location,
            attendees=list(details.attendees),
            html_link=f"memory://calendar/events/{event_id}",
        )
        async with self._lock:
            self._events[event_id] = event
        logger.info("Event created: %s (%s)", event_id, details.summary)
        return dataclasses.replace(event, attendees=list(event.attendees))

    async def update_event(self, event_id: str, patch: dict[str, Any]) -> CalendarEvent:
        unknown = set(patch) - _PATCHABLE
        if unknown:
            raise ValueError(f"Unknown event fields: {', '.join(sorted(unknown))}")
        async with self._lock:
            current = self._events.get(event_id)
            if current is None:
                raise EventNotFoundError(event_id)
            changes = dict(patch)
            for key in ("start", "end"):
                if key in changes:
                    changes[key] = _aware(changes[key])
            updated = dataclasses.replace(current, **changes)
            if updated.start > updated.end:
                raise ValueError("Event start must not be after its end")
            self._events[event_id] = updated
        logger.info("Event updated: %s", event_id)
        return dataclasses.replace(updated, attendees=list(updated.attendees))

    async def delete_event(self, event_id: str) -> None:
        async with self._lock:
            if event_id not in self._events:
                raise EventNotFoundError(event_id)
            del self._events[event_id]
        logger.info("Event deleted: %s", event_id)

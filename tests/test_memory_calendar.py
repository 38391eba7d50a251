# tests/test_memory_calendar.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from exec_assistant.calendar.memory_calendar import InMemoryCalendar
from exec_assistant.calendar.models import EventDetails
from exec_assistant.errors import EventNotFoundError

from .conftest import NOW


def details(summary: str, hour: int, minutes: int = 60) -> EventDetails:
    start = datetime(2025, 3, 11, hour, 0, tzinfo=UTC)
    return EventDetails(summary=summary, start=start, end=start + timedelta(minutes=minutes))


@pytest.mark.asyncio
async def test_events_listed_by_start_and_overlap() -> None:
    cal = InMemoryCalendar()
    late = await cal.create_event(details("late", 15))
    early = await cal.create_event(details("early", 9))

    assert [e.id for e in await cal.list_events(NOW)] == [early.id, late.id]
    window = await cal.list_events(datetime(2025, 3, 11, 9, 30, tzinfo=UTC), datetime(2025, 3, 11, 12, tzinfo=UTC))
    assert [e.summary for e in window] == ["early"]
    assert early.html_link == f"memory://calendar/events/{early.id}"


@pytest.mark.asyncio
async def test_update_and_delete_event() -> None:
    cal = InMemoryCalendar()
    ev = await cal.create_event(details("sync", 10))

    shift = timedelta(hours=1)
    moved = await cal.update_event(ev.id, {"summary": "sync (moved)", "start": ev.start + shift, "end": ev.end + shift})
    assert moved.summary == "sync (moved)"
    assert moved.start == datetime(2025, 3, 11, 11, 0, tzinfo=UTC)

    with pytest.raises(ValueError):
        await cal.update_event(ev.id, {"color": "red"})
    with pytest.raises(ValueError):
        await cal.update_event(ev.id, {"end": ev.start - timedelta(hours=1)})

    await cal.delete_event(ev.id)
    assert await cal.list_events(NOW) == []
    with pytest.raises(EventNotFoundError):
        await cal.delete_event(ev.id)
    with pytest.raises(EventNotFoundError):
        await cal.update_event(ev.id, {"summary": "gone"})


@pytest.mark.asyncio
async def test_returned_events_are_copies() -> None:
    cal = InMemoryCalendar()
    ev = await cal.create_event(
        EventDetails(summary="x", start=NOW, end=NOW + timedelta(hours=1), attendees=["a@example.com"])
    )
    ev.attendees.append("intruder@example.com")
    assert (await cal.list_events(NOW))[0].attendees == ["a@example.com"]

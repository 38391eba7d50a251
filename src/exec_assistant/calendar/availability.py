# src/exec_assistant/calendar/availability.py

"""
Availability engine.

Free slots are the gaps between busy events inside a working-hours window:

    cursor = window_start
    for each busy interval (ordered by start):
        if busy.start - cursor >= duration: emit [cursor, busy.start)
        cursor = max(cursor, busy.end)
    if window_end - cursor >= duration: emit [cursor, window_end)

Each maximal free interval is emitted once (never sliced into duration-sized chunks).
Overlapping / nested busy events never move the cursor backwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

from ..core.ports import CalendarProvider
from ..errors import ProviderError
from .models import TimeInterval

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60


def working_window(
    day: date,
    *,
    tz: tzinfo,
    start_hour: int = 9,
    end_hour: int = 17,
) -> TimeInterval:
    """[day@start_hour, day@end_hour) in the reference time zone."""
    if not 0 <= start_hour < end_hour <= 24:
        raise ValueError(f"Invalid working hours: {start_hour}..{end_hour}")
    start = datetime.combine(day, time(hour=start_hour), tzinfo=tz)
    end = datetime.combine(day, time(), tzinfo=tz) + timedelta(hours=end_hour)
    return TimeInterval(start, end)


def compute_free_slots(
    busy: Iterable[TimeInterval],
    window: TimeInterval,
    duration: timedelta,
) -> list[TimeInterval]:
    if duration <= timedelta(0):
        raise ValueError("duration must be positive")

    slots: list[TimeInterval] = []
    cursor = window.start

    for interval in sorted(busy, key=lambda i: i.start):
        busy_start = min(interval.start, window.end)
        if busy_start - cursor >= duration:
            slots.append(TimeInterval(cursor, busy_start))
        cursor = max(cursor, interval.end)

    if window.end - cursor >= duration:
        slots.append(TimeInterval(cursor, window.end))

    return slots


async def find_available_slots(
    calendar: CalendarProvider,
    day: date,
    duration_minutes: int = DEFAULT_DURATION_MINUTES,
    *,
    tz: tzinfo | str = "UTC",
    start_hour: int = 9,
    end_hour: int = 17,
) -> list[TimeInterval]:
    """Fetch busy events for `day` and return the free slots of at least `duration_minutes`."""
    if int(duration_minutes) <= 0:
        raise ValueError("duration_minutes must be > 0")

    zone = ZoneInfo(tz) if isinstance(tz, str) else tz
    window = working_window(day, tz=zone, start_hour=start_hour, end_hour=end_hour)

    try:
        events = await calendar.list_events(window.start, window.end)
    except ProviderError:
        raise
    except Exception as e:
        logger.exception("Failed to fetch busy events for %s", day.isoformat())
        raise ProviderError("calendar", "Failed to find available slots") from e

    busy = [ev.interval for ev in events]
    slots = compute_free_slots(busy, window, timedelta(minutes=int(duration_minutes)))
    logger.debug(
        "Availability day=%s duration=%smin busy=%d -> slots=%d",
        day.isoformat(),
        duration_minutes,
        len(busy),
        len(slots),
    )
    return slots

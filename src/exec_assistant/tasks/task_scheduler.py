# src/exec_assistant/tasks/task_scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

Two independent timers on the event loop:
- reminder tick (hourly by default): tasks due within the lookahead window whose
  reminder has not been sent -> task-reminder email to the assignee -> mark_reminder_sent.
  Send first, then mark: a failed send leaves the task unmarked so a later tick retries it.
- daily digest (fixed local hour): overdue + upcoming + stats -> DigestSink.

Each trigger is single-flight: a tick that fires while the previous tick of the same
trigger is still running is skipped. Failures are logged and never stop the loops.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta, tzinfo
from typing import Any, TypeVar
from zoneinfo import ZoneInfo

from ..core.ports import DigestSink
from ..email.service import EmailService
from .task_models import Task, TaskStats
from .task_store import TaskStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LOOP_RETRY_SECONDS = 60


@dataclass(slots=True, frozen=True)
class DailyDigest:
    generated_at: datetime
    overdue: list[Task]
    upcoming: list[Task]
    stats: TaskStats

    def summary_line(self) -> str:
        return (
            f"overdue={len(self.overdue)} upcoming={len(self.upcoming)} "
            f"total={self.stats.total} pending={self.stats.pending} "
            f"in_progress={self.stats.in_progress} completed={self.stats.completed}"
        )


class LoggingDigestSink:
    """Default DigestSink: the digest goes to the log."""

    async def publish(self, digest: DailyDigest) -> None:
        logger.info("Daily digest prepared: %s", digest.summary_line())
        for task in digest.overdue:
            logger.info("  overdue: %s (due %s) %s", task.title, task.due_date.isoformat(), task.id)


def next_daily_run(now: datetime, hour: int, tz: tzinfo) -> datetime:
    """The next `hour`:00 local time in `tz`, strictly after `now`."""
    local = now.astimezone(tz)
    target = datetime.combine(local.date(), time(hour=hour), tzinfo=tz)
    if target <= local:
        target = datetime.combine(local.date() + timedelta(days=1), time(hour=hour), tzinfo=tz)
    return target


def seconds_until_next_daily_run(now: datetime, hour: int, tz: tzinfo) -> float:
    """Delay until next_daily_run(); subtracted in UTC so DST transitions are accounted for."""
    target = next_daily_run(now, hour, tz)
    return (target.astimezone(UTC) - now.astimezone(UTC)).total_seconds()


class ReminderScheduler:
    def __init__(
        self,
        task_store: TaskStore,
        email: EmailService,
        *,
        digest_sink: DigestSink | None = None,
        interval_seconds: float = 3600.0,
        lookahead_hours: float = 24.0,
        digest_hour: int = 9,
        tz: tzinfo | str = "UTC",
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        if not 0 <= int(digest_hour) <= 23:
            raise ValueError(f"digest_hour must be in 0..23, got {digest_hour}")
        self._store = task_store
        self._email = email
        self._digest_sink: DigestSink = digest_sink or LoggingDigestSink()
        self._interval_s = max(0.01, float(interval_seconds))
        self._lookahead_h = float(lookahead_hours)
        self._digest_hour = int(digest_hour)
        self._tz = ZoneInfo(tz) if isinstance(tz, str) else tz
        self._clock = clock or (lambda: datetime.now(UTC))
        self._sleep = sleep or asyncio.sleep

        self._reminder_lock = asyncio.Lock()
        self._digest_lock = asyncio.Lock()
        self._loops: list[asyncio.Task[None]] = []
        self._inflight: set[asyncio.Task[Any]] = set()

    # ---- one-shot operations ----

    async def run_reminder_pass(self, now: datetime | None = None) -> int:
        """Send due-date reminders once per task. Returns the number of reminders sent."""
        now = now or self._clock()
        candidates = self._store.list_reminder_candidates(self._lookahead_h, now=now)
        logger.info("Running task reminder check: %d candidate(s)", len(candidates))

        sent = 0
        for task in candidates:
            if not task.assigned_to:
                logger.debug("Task %s has no assignee; no reminder", task.id)
                continue
            try:
                await self._email.send_task_reminder(
                    task.assigned_to,
                    {
                        "title": task.title,
                        "dueDate": task.due_date.isoformat(),
                        "priority": task.priority.value,
                        "description": task.description,
                    },
                )
                self._store.mark_reminder_sent(task.id)
            except Exception:
                logger.exception("Reminder failed for task %s", task.id)
                continue
            sent += 1
            logger.info("Reminder sent for task: %s", task.id)

        logger.info("Sent %d task reminder(s)", sent)
        return sent

    def build_daily_digest(self, now: datetime | None = None) -> DailyDigest:
        now = now or self._clock()
        return DailyDigest(
            generated_at=now,
            overdue=self._store.list_overdue(now=now),
            upcoming=self._store.list_upcoming(self._lookahead_h, now=now),
            stats=self._store.stats(now=now),
        )

    async def send_daily_digest(self, now: datetime | None = None) -> DailyDigest:
        digest = self.build_daily_digest(now)
        await self._digest_sink.publish(digest)
        return digest

    # ---- single-flight ticks ----

    async def _single_flight(
        self, name: str, lock: asyncio.Lock, fn: Callable[[], Awaitable[T]]
    ) -> T | None:
        if lock.locked():
            logger.warning("%s tick skipped: previous run still in progress", name)
            return None
        async with lock:
            try:
                return await fn()
            except Exception:
                logger.exception("%s tick failed", name)
                return None

    async def reminder_tick(self) -> int | None:
        return await self._single_flight("reminder", self._reminder_lock, self.run_reminder_pass)

    async def digest_tick(self) -> DailyDigest | None:
        return await self._single_flight("digest", self._digest_lock, self.send_daily_digest)

    def _spawn(self, coro: Awaitable[Any]) -> None:
        task = asyncio.ensure_future(coro)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    # ---- loops ----

    async def run_hourly_loop(self) -> None:
        """
        Fire a reminder tick every interval_seconds.

        Ticks are spawned, not awaited, so the timer keeps its period; a slow tick
        makes the next one skip instead of queueing behind it.
        To stop the loop, cancel the coroutine/task.
        """
        while True:
            self._spawn(self.reminder_tick())
            await self._sleep(self._interval_s)

    async def run_daily_loop(self) -> None:
        """
        Fire a digest tick at digest_hour:00 local time every day.

        The sleep runs on the monotonic clock and may end slightly before the wall-clock
        target; the loop waits out the remainder so each target fires exactly once.
        """
        last_target: datetime | None = None
        while True:
            try:
                ref = self._clock()
                if last_target is not None and ref < last_target:
                    ref = last_target
                target = next_daily_run(ref, self._digest_hour, self._tz)
                logger.debug(
                    "Next daily digest at %s (in %.0fs)",
                    target.isoformat(),
                    seconds_until_next_daily_run(ref, self._digest_hour, self._tz),
                )
                while True:
                    remaining = (target.astimezone(UTC) - self._clock().astimezone(UTC)).total_seconds()
                    if remaining <= 0:
                        break
                    await self._sleep(remaining)
                last_target = target
                self._spawn(self.digest_tick())
            except Exception:
                logger.exception("Daily digest loop error; retrying in %ds", _LOOP_RETRY_SECONDS)
                await self._sleep(_LOOP_RETRY_SECONDS)

    def start(self) -> None:
        if self._loops:
            return
        self._loops = [
            asyncio.create_task(self.run_hourly_loop(), name="reminder-loop"),
            asyncio.create_task(self.run_daily_loop(), name="digest-loop"),
        ]
        logger.info(
            "Reminder scheduler started (interval=%.0fs, lookahead=%.0fh, digest_hour=%02d)",
            self._interval_s,
            self._lookahead_h,
            self._digest_hour,
        )

    async def stop(self) -> None:
        pending = [*self._loops, *self._inflight]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        self._loops = []
        self._inflight.clear()
        logger.info("Reminder scheduler stopped")

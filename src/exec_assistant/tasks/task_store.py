# src/exec_assistant/tasks/task_store.py

from __future__ import annotations

import dataclasses
import logging
import secrets
import threading
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

from ..errors import TaskNotFoundError
from .task_models import Task, TaskPriority, TaskStats, TaskStatus

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# Fields a caller may change through update_task(); everything else is store-owned.
_UPDATABLE_FIELDS = frozenset(
    {"title", "description", "due_date", "priority", "status", "assigned_to", "tags"}
)
_PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at", "reminder_sent"})


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_aware(dt: datetime) -> datetime:
    if not isinstance(dt, datetime):
        raise TypeError(f"due_date must be a datetime, got {type(dt).__name__}")
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def _snapshot(task: Task) -> Task:
    return dataclasses.replace(task, tags=list(task.tags))


class TaskStore:
    """
    In-memory task store.

    Ownership:
    - the store owns every Task; all reads return copies,
    - mutations are whole-record replacements done under one lock,
      so two callers can never interleave a read-modify-write on the same id.

    Thread-safety:
    - a single RLock guards the table (asyncio callers never await while holding it).
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._tasks: dict[str, Task] = {}
        self._lock = threading.RLock()
        self._clock: Clock = clock or _utcnow
        logger.info("TaskStore ready (in-memory)")

    # ---- low-level helpers ----

    def _now(self) -> datetime:
        return _as_aware(self._clock())

    def _generate_id(self) -> str:
        ms = int(self._now().timestamp() * 1000)
        while True:
            task_id = f"task_{ms}_{secrets.token_hex(5)}"
            if task_id not in self._tasks:
                return task_id

    def _require(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    @staticmethod
    def _sorted_by_due(tasks: Iterable[Task]) -> list[Task]:
        return sorted((_snapshot(t) for t in tasks), key=lambda t: (t.due_date, t.created_at))

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)

    def create_task(
        self,
        *,
        title: str,
        due_date: datetime,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        status: TaskStatus | str = TaskStatus.PENDING,
        description: str | None = None,
        assigned_to: str | None = None,
        tags: Iterable[str] | None = None,
    ) -> Task:
        if not title or not str(title).strip():
            raise ValueError("title is required")

        prio = TaskPriority.parse(priority)
        st = TaskStatus.parse(status)
        due = _as_aware(due_date)

        with self._lock:
            now = self._now()
            task = Task(
                id=self._generate_id(),
                title=str(title).strip(),
                due_date=due,
                priority=prio,
                status=st,
                created_at=now,
                updated_at=now,
                description=description,
                assigned_to=assigned_to or None,
                tags=list(dict.fromkeys(tags or [])),
                reminder_sent=False,
            )
            self._tasks[task.id] = task

        logger.info("Task created: %s priority=%s due=%s", task.id, prio.value, due.isoformat())
        return _snapshot(task)

    def get_task(self, task_id: str) -> Task:
        with self._lock:
            return _snapshot(self._require(task_id))

    def update_task(self, task_id: str, **changes: Any) -> Task:
        """
        Partial merge.

        id / created_at / updated_at / reminder_sent are store-owned and are ignored
        (with a warning). Unknown field names raise ValueError.
        """
        ignored = sorted(k for k in changes if k in _PROTECTED_FIELDS)
        if ignored:
            logger.warning("update_task(%s): ignoring protected fields %s", task_id, ignored)

        unknown = sorted(k for k in changes if k not in _PROTECTED_FIELDS and k not in _UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown task fields: {', '.join(unknown)}")

        patch: dict[str, Any] = {}
        for key, value in changes.items():
            if key not in _UPDATABLE_FIELDS:
                continue
            if key == "title":
                if not value or not str(value).strip():
                    raise ValueError("title cannot be empty")
                value = str(value).strip()
            elif key == "priority":
                value = TaskPriority.parse(value)
            elif key == "status":
                value = TaskStatus.parse(value)
            elif key == "due_date":
                value = _as_aware(value)
            elif key == "tags":
                value = list(dict.fromkeys(value or []))
            elif key == "assigned_to":
                value = value or None
            patch[key] = value

        with self._lock:
            current = self._require(task_id)
            updated = dataclasses.replace(
                current,
                **patch,
                updated_at=max(self._now(), current.updated_at),
            )
            self._tasks[task_id] = updated

        logger.info("Task updated: %s fields=%s", task_id, sorted(patch))
        return _snapshot(updated)

    def delete_task(self, task_id: str) -> None:
        with self._lock:
            self._require(task_id)
            del self._tasks[task_id]
        logger.info("Task deleted: %s", task_id)

    def list_tasks(
        self,
        *,
        status: TaskStatus | str | None = None,
        priority: TaskPriority | str | None = None,
        assigned_to: str | None = None,
    ) -> list[Task]:
        """All tasks matching the given filters, ascending by due date."""
        st = TaskStatus.parse(status) if status else None
        prio = TaskPriority.parse(priority) if priority else None

        with self._lock:
            selected = [
                t
                for t in self._tasks.values()
                if (st is None or t.status == st)
                and (prio is None or t.priority == prio)
                and (not assigned_to or t.assigned_to == assigned_to)
            ]
            return self._sorted_by_due(selected)

    def list_by_priority(self, priority: TaskPriority | str) -> list[Task]:
        return self.list_tasks(priority=priority)

    def list_upcoming(self, hours: float = 24, *, now: datetime | None = None) -> list[Task]:
        """Non-terminal tasks due within [now, now + hours]."""
        start = _as_aware(now) if now is not None else self._now()
        end = start + timedelta(hours=hours)
        with self._lock:
            selected = [
                t for t in self._tasks.values() if not t.status.is_terminal and start <= t.due_date <= end
            ]
            return self._sorted_by_due(selected)

    def list_overdue(self, *, now: datetime | None = None) -> list[Task]:
        ref = _as_aware(now) if now is not None else self._now()
        with self._lock:
            return self._sorted_by_due(t for t in self._tasks.values() if t.is_overdue(ref))

    def list_reminder_candidates(self, hours: float = 24, *, now: datetime | None = None) -> list[Task]:
        """Upcoming tasks that have not had their reminder sent yet."""
        return [t for t in self.list_upcoming(hours, now=now) if not t.reminder_sent]

    def mark_reminder_sent(self, task_id: str) -> Task:
        """Flip reminder_sent False -> True. Idempotent; never resets the flag."""
        with self._lock:
            current = self._require(task_id)
            if current.reminder_sent:
                return _snapshot(current)
            updated = dataclasses.replace(
                current,
                reminder_sent=True,
                updated_at=max(self._now(), current.updated_at),
            )
            self._tasks[task_id] = updated
        logger.debug("Task %s reminder_sent=True", task_id)
        return _snapshot(updated)

    def stats(self, *, now: datetime | None = None) -> TaskStats:
        ref = _as_aware(now) if now is not None else self._now()
        with self._lock:
            tasks = list(self._tasks.values())

        by_status = {s: 0 for s in TaskStatus}
        by_priority = {p.value: 0 for p in TaskPriority}
        overdue = 0
        for t in tasks:
            by_status[t.status] += 1
            by_priority[t.priority.value] += 1
            if t.is_overdue(ref):
                overdue += 1

        return TaskStats(
            total=len(tasks),
            pending=by_status[TaskStatus.PENDING],
            in_progress=by_status[TaskStatus.IN_PROGRESS],
            completed=by_status[TaskStatus.COMPLETED],
            cancelled=by_status[TaskStatus.CANCELLED],
            overdue=overdue,
            by_priority=by_priority,
        )

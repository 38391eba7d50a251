# src/exec_assistant/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Task lifecycle status. COMPLETED and CANCELLED are terminal."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus:
        """Strict parse; accepts "in_progress" as an alias of "in-progress"."""
        if isinstance(raw, TaskStatus):
            return raw
        s = str(raw or "").strip().lower().replace("_", "-")
        try:
            return cls(s)
        except ValueError:
            raise ValueError(f"Invalid task status: {raw!r}") from None

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.CANCELLED)


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Any) -> TaskPriority:
        if isinstance(raw, TaskPriority):
            return raw
        s = str(raw or "").strip().lower()
        try:
            return cls(s)
        except ValueError:
            raise ValueError(f"Invalid task priority: {raw!r}") from None

    @classmethod
    def coerce(cls, raw: Any, default: TaskPriority | None = None) -> TaskPriority:
        """Lenient parse used for model-produced values: anything unknown -> default (medium)."""
        try:
            return cls.parse(raw)
        except ValueError:
            return default or cls.MEDIUM


@dataclass(slots=True)
class Task:
    id: str
    title: str
    due_date: datetime
    priority: TaskPriority
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    description: str | None = None
    assigned_to: str | None = None
    tags: list[str] = field(default_factory=list)
    reminder_sent: bool = False

    def is_overdue(self, now: datetime) -> bool:
        return not self.status.is_terminal and self.due_date < now


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    pending: int
    in_progress: int
    completed: int
    cancelled: int
    overdue: int
    by_priority: dict[str, int]

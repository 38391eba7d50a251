# src/exec_assistant/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.ports import CalendarProvider, EmailSender, LLMClient
from ..email.service import EmailService
from ..nlp.assist import TextAssistant
from ..nlp.date_resolver import DateResolver
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore
from .assistant import Assistant


@dataclass
class AppState:
    """Everything the front-ends need, wired once in cli/bootstrap.py."""

    settings: Any

    llm: LLMClient
    calendar: CalendarProvider
    email_sender: EmailSender
    email: EmailService
    task_store: TaskStore
    dates: DateResolver
    assistant: Assistant
    text: TextAssistant
    scheduler: ReminderScheduler

    user_email: str | None = None

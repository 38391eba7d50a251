# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from exec_assistant.calendar.memory_calendar import InMemoryCalendar
from exec_assistant.cli.bootstrap import create_initial_state
from exec_assistant.core.state import AppState
from exec_assistant.tasks.task_store import TaskStore

from .fakes import FakeEmailSender, FakeLLMClient

# Monday, 12:00 UTC.
NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)


class MutableClock:
    """Clock that tests can move forward explicitly."""

    def __init__(self, start: datetime = NOW) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture()
def store(clock: MutableClock) -> TaskStore:
    return TaskStore(clock=clock)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="exec-assistant-test",
        data_dir=tmp_path / "data",
        llm_models=["test/model"],
        timezone="UTC",
        workday_start_hour=9,
        workday_end_hour=17,
        reminder_interval_seconds=3600,
        reminder_lookahead_hours=24,
        digest_hour=9,
    )


@pytest.fixture()
def llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture()
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture()
def state(settings: SimpleNamespace, llm: FakeLLMClient, email_sender: FakeEmailSender, store: TaskStore) -> AppState:
    """AppState wired with deterministic fakes (the task store and calendar are the real in-memory ones)."""
    return create_initial_state(
        settings=settings,
        llm=llm,
        calendar=InMemoryCalendar(),
        email_sender=email_sender,
        task_store=store,
    )

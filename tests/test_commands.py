# tests/test_commands.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from exec_assistant.cli.commands import CommandRegistry, registry
from exec_assistant.tasks.task_models import TaskPriority, TaskStatus

from .conftest import NOW


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a", aliases=["aa"])
    reg.register("b", h3, "b")

    assert await reg.handle(state, "/a x y") == "h2:x,y"
    assert await reg.handle(state, "/AA") == "h2:"
    assert await reg.handle(state, "/b", emit=notes.append) == "h3"
    assert called == {"h2": 2, "h3": 1}
    assert notes == ["note"]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_help_lists_builtin_commands(state) -> None:
    reply = await registry.handle(state, "/help")
    for name in ("/tasks", "/done", "/slots", "/remind", "/digest"):
        assert name in reply


@pytest.mark.asyncio
async def test_task_commands(state) -> None:
    store = state.task_store
    a = store.create_task(title="Review Q4 budget", due_date=NOW + timedelta(days=1), priority=TaskPriority.HIGH)
    b = store.create_task(title="Book offsite", due_date=NOW + timedelta(days=2))

    listing = await registry.handle(state, "/tasks")
    assert listing.index("Review Q4 budget") < listing.index("Book offsite")

    assert "Completed" in await registry.handle(state, f"/done {a.id}")
    assert store.get_task(a.id).status == TaskStatus.COMPLETED
    assert "Book offsite" not in await registry.handle(state, "/tasks completed")
    assert "Invalid task status" in await registry.handle(state, "/tasks someday")

    assert b.id in await registry.handle(state, f"/task {b.id}")
    assert "not found" in await registry.handle(state, "/task task_0_missing")

    await registry.handle(state, f"/rm {b.id}")
    assert store.count_tasks() == 1

    stats = await registry.handle(state, "/stats")
    assert "total=1" in stats
    assert "completed=1" in stats


@pytest.mark.asyncio
async def test_slots_command(state) -> None:
    reply = await registry.handle(state, "/slots 2025-03-14 30")
    assert reply == "Free slots on 2025-03-14 (>= 30 min):\n  09:00 - 17:00 (480 min)"
    assert (await registry.handle(state, "/slots 2025-03-14 0")).startswith("Cannot compute slots")
    assert (await registry.handle(state, "/slots not-a-date")).startswith("Cannot compute slots")


@pytest.mark.asyncio
async def test_remind_command_runs_a_pass(state, email_sender) -> None:
    state.task_store.create_task(
        title="Sign contract",
        due_date=datetime.now(UTC) + timedelta(hours=2),
        assigned_to="ceo@example.com",
    )
    notes: list[str] = []

    reply = await registry.handle(state, "/remind", emit=notes.append)

    assert reply == "Reminders sent: 1"
    assert notes
    assert email_sender.sent[0].subject == "Task Reminder: Sign contract"


@pytest.mark.asyncio
async def test_summarize_uses_the_model(state, llm) -> None:
    llm.default_reply = "Short version."
    assert await registry.handle(state, "/summarize a very long email thread") == "Short version."
    assert await registry.handle(state, "/summarize") == "Usage: /summarize <text>"

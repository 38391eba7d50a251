# tests/test_assistant.py

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from exec_assistant.dispatch.results import MeetingOutcome
from exec_assistant.nlp.intent_parser import IntentAction
from exec_assistant.tasks.task_models import TaskPriority, TaskStatus


@pytest.mark.asyncio
async def test_create_task_end_to_end(state, llm) -> None:
    llm.intent_reply = json.dumps(
        {
            "action": "create_task",
            "parameters": {"title": "Review Q4 budget", "priority": "high", "dueDate": "by Friday"},
            "confidence": 0.95,
        }
    )
    llm.date_replies["by Friday"] = "2025-03-14T17:00:00Z"

    outcome = await state.assistant.process_command(
        "Create a high priority task to review Q4 budget by Friday", "ceo@example.com"
    )

    assert outcome.success is True
    assert outcome.intent.action == IntentAction.CREATE_TASK
    assert outcome.result.type == "task_created"
    task = state.task_store.get_task(outcome.result.data.id)
    assert task.title == "Review Q4 budget"
    assert task.priority == TaskPriority.HIGH
    assert task.status == TaskStatus.PENDING
    assert task.reminder_sent is False
    assert task.due_date == datetime(2025, 3, 14, 17, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_unknown_intent_fails_without_side_effects(state, llm, email_sender) -> None:
    llm.intent_reply = "Sorry, I can't help with that."

    outcome = await state.assistant.process_command("Book a flight to NYC")

    assert outcome.success is False
    assert outcome.intent.action == IntentAction.UNKNOWN
    assert "Unsupported action" in outcome.error
    assert state.task_store.count_tasks() == 0
    assert email_sender.attempts == 0


@pytest.mark.asyncio
async def test_invite_failure_reports_partial_event(state, llm, email_sender) -> None:
    email_sender.fail_for.add("john@example.com")
    llm.intent_reply = json.dumps(
        {
            "action": "schedule_meeting",
            "parameters": {
                "title": "Project sync",
                "startTime": "next Tuesday at 2pm",
                "attendees": ["john@example.com"],
            },
            "confidence": 0.9,
        }
    )
    llm.date_replies["next Tuesday at 2pm"] = "2030-03-12T14:00:00+00:00"

    outcome = await state.assistant.process_command("Schedule a meeting with John next Tuesday at 2pm")

    assert outcome.success is False
    assert outcome.partial is not None
    events = await state.calendar.list_events(datetime(2030, 1, 1, tzinfo=UTC))
    assert [e.id for e in events] == [outcome.partial.id]


@pytest.mark.asyncio
async def test_meeting_without_attendees_succeeds(state, llm, email_sender) -> None:
    llm.intent_reply = json.dumps(
        {"action": "schedule_meeting", "parameters": {"startTime": "tomorrow 10am"}, "confidence": 0.8}
    )
    llm.date_replies["tomorrow 10am"] = "2030-03-11T10:00:00+00:00"

    outcome = await state.assistant.process_command("Block tomorrow 10am")

    assert outcome.success is True
    assert outcome.result.data.outcome == MeetingOutcome.SCHEDULED_WITHOUT_INVITES
    assert email_sender.attempts == 0


@pytest.mark.asyncio
async def test_model_outage_degrades_to_failure(state, llm) -> None:
    llm.error = RuntimeError("network down")

    outcome = await state.assistant.process_command("Show my tasks")

    assert outcome.success is False
    assert outcome.intent.action == IntentAction.UNKNOWN

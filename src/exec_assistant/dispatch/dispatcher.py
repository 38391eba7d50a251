# src/exec_assistant/dispatch/dispatcher.py

"""
Action dispatcher.

Pure routing on Intent.action:
- schedule_meeting -> calendar event (+ invite email when there are attendees)
- send_email       -> follow-up / meeting invite / plain email
- create_task      -> task store
- query_info       -> keyword router over calendar / tasks

Fail-loud: every error propagates to the caller. schedule_meeting is not atomic;
when the invite step fails the created event is reported via MeetingInviteError.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from ..calendar.models import CalendarEvent, EventDetails
from ..core.ports import CalendarProvider
from ..email.service import EmailService
from ..errors import (
    AssistantError,
    InvalidParametersError,
    MeetingInviteError,
    ProviderError,
    UnsupportedActionError,
)
from ..nlp.date_resolver import DateResolver
from ..nlp.intent_parser import Intent, IntentAction
from ..tasks.task_models import TaskPriority, TaskStatus
from ..tasks.task_store import TaskStore
from .results import ActionResult, MeetingOutcome, MeetingScheduled

logger = logging.getLogger(__name__)

DEFAULT_MEETING_MINUTES = 60

GENERAL_HELP_MESSAGE = "I can help with meetings, tasks, and emails. What would you like to know?"


def _attendee_list(raw: Any) -> list[str]:
    """Attendees may come back from the model as a string, a list, or nothing."""
    if raw is None:
        return []
    if isinstance(raw, str):
        return [a.strip() for a in raw.split(",") if a.strip()]
    if isinstance(raw, (list, tuple, set)):
        return [str(a).strip() for a in raw if a and str(a).strip()]
    return [str(raw)]


def _opt_str(raw: Any) -> str | None:
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None


class ActionDispatcher:
    def __init__(
        self,
        *,
        calendar: CalendarProvider,
        email: EmailService,
        tasks: TaskStore,
        dates: DateResolver,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._calendar = calendar
        self._email = email
        self._tasks = tasks
        self._dates = dates
        self._clock = clock or (lambda: datetime.now(UTC))

    async def dispatch(self, intent: Intent, actor_email: str | None = None) -> ActionResult:
        action = intent.action
        params: Mapping[str, Any] = intent.parameters or {}
        logger.info("Dispatching action=%s", getattr(action, "value", action))

        if action == IntentAction.SCHEDULE_MEETING:
            return await self.schedule_meeting(params)
        if action == IntentAction.SEND_EMAIL:
            return await self.send_email(params, actor_email)
        if action == IntentAction.CREATE_TASK:
            return await self.create_task(params, actor_email)
        if action == IntentAction.QUERY_INFO:
            return await self.query_info(params)

        raise UnsupportedActionError(action)

    # ---- schedule_meeting ----

    async def schedule_meeting(self, params: Mapping[str, Any]) -> ActionResult:
        now = self._clock()
        title = _opt_str(params.get("title")) or "Meeting"
        start = await self._dates.resolve(params.get("startTime"), now)
        if params.get("endTime"):
            end = await self._dates.resolve(params.get("endTime"), now)
        else:
            end = start + timedelta(minutes=DEFAULT_MEETING_MINUTES)
        if end < start:
            raise InvalidParametersError(f"Meeting ends ({end.isoformat()}) before it starts ({start.isoformat()})")

        attendees = _attendee_list(params.get("attendees"))
        location = _opt_str(params.get("location"))
        description = _opt_str(params.get("description"))

        # Step 1: the event. Nothing has happened yet if this fails.
        event = await self._create_event(
            EventDetails(
                summary=title,
                start=start,
                end=end,
                description=description,
                location=location,
                attendees=attendees,
            )
        )

        if not attendees:
            scheduled = MeetingScheduled(event=event, outcome=MeetingOutcome.SCHEDULED_WITHOUT_INVITES)
            return ActionResult("meeting_scheduled", "Meeting scheduled successfully", scheduled)

        # Step 2: invites. The event stays even if this fails.
        try:
            invite = await self._email.send_meeting_invite(
                attendees,
                {
                    "title": title,
                    "startTime": start.isoformat(),
                    "endTime": end.isoformat(),
                    "location": location,
                    "description": description,
                },
            )
        except Exception as e:
            logger.error("Meeting %s created but invites failed: %s", event.id, e)
            raise MeetingInviteError(event, MeetingOutcome.INVITE_FAILED, e) from e

        scheduled = MeetingScheduled(event=event, outcome=MeetingOutcome.SCHEDULED, invite=invite)
        return ActionResult("meeting_scheduled", "Meeting scheduled successfully", scheduled)

    async def _create_event(self, details: EventDetails) -> CalendarEvent:
        try:
            return await self._calendar.create_event(details)
        except AssistantError:
            raise
        except Exception as e:
            logger.exception("Error creating event %r", details.summary)
            raise ProviderError("calendar", "Failed to create calendar event") from e

    # ---- send_email ----

    async def send_email(self, params: Mapping[str, Any], actor_email: str | None = None) -> ActionResult:
        to = params.get("to")
        recipients = _attendee_list(to)
        if not recipients:
            raise InvalidParametersError("send_email requires a recipient ('to')")

        subject = _opt_str(params.get("subject")) or ""
        body = _opt_str(params.get("body")) or ""
        email_type = str(params.get("type") or "").strip().lower()

        if email_type == "follow_up":
            details = params.get("meetingDetails")
            if not isinstance(details, Mapping):
                details = {
                    "title": subject,
                    "date": self._clock().isoformat(),
                    "attendees": recipients,
                    "notes": body,
                }
            result = await self._email.send_follow_up(recipients, details)
            return ActionResult("email_sent", "Follow-up email sent", result)

        if email_type == "meeting_invite":
            details = params.get("meetingDetails")
            if not isinstance(details, Mapping):
                raise InvalidParametersError("meeting_invite email requires 'meetingDetails'")
            result = await self._email.send_meeting_invite(recipients, details)
            return ActionResult("email_sent", "Meeting invitation sent", result)

        result = await self._email.send_plain(recipients, subject, body)
        return ActionResult("email_sent", "Email sent", result)

    # ---- create_task ----

    async def create_task(self, params: Mapping[str, Any], actor_email: str | None = None) -> ActionResult:
        title = _opt_str(params.get("title"))
        if not title:
            raise InvalidParametersError("create_task requires a title")

        due_date = await self._dates.resolve(params.get("dueDate"), self._clock())
        tags = params.get("tags")

        task = self._tasks.create_task(
            title=title,
            description=_opt_str(params.get("description")),
            due_date=due_date,
            priority=TaskPriority.coerce(params.get("priority")),
            status=TaskStatus.PENDING,
            assigned_to=_opt_str(params.get("assignedTo")) or actor_email,
            tags=[str(t) for t in tags] if isinstance(tags, (list, tuple)) else None,
        )
        return ActionResult("task_created", "Task created successfully", task)

    # ---- query_info ----

    async def query_info(self, params: Mapping[str, Any]) -> ActionResult:
        """
        Keyword router, not a query language:
        "meeting"/"calendar" -> upcoming events, "task" -> tasks, else a help message.
        """
        query = str(params.get("query") or "").lower()

        if "meeting" in query or "calendar" in query:
            try:
                events = await self._calendar.list_events(self._clock(), None)
            except AssistantError:
                raise
            except Exception as e:
                logger.exception("Error fetching events")
                raise ProviderError("calendar", "Failed to fetch calendar events") from e
            return ActionResult("calendar_query", f"Found {len(events)} upcoming events", events)

        if "task" in query:
            tasks = self._tasks.list_tasks()
            return ActionResult("task_query", f"Found {len(tasks)} tasks", tasks)

        return ActionResult("general_query", GENERAL_HELP_MESSAGE)

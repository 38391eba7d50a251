# src/exec_assistant/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks concrete collaborators (OpenRouter or offline LLM, SendGrid or outbox email,
  Google or in-memory calendar) and wires them into AppState.
"""

from __future__ import annotations

import logging

from ..calendar.google_calendar import GoogleCalendarProvider
from ..calendar.memory_calendar import InMemoryCalendar
from ..config import get_settings
from ..core.assistant import Assistant
from ..core.ports import CalendarProvider, EmailSender, LLMClient
from ..core.state import AppState
from ..dispatch.dispatcher import ActionDispatcher
from ..email.senders import LoggingEmailSender, SendGridEmailSender
from ..email.service import EmailService
from ..errors import ProviderError
from ..llm.client import OpenRouterLLMClient
from ..llm.offline import OfflineLLMClient
from ..nlp.assist import TextAssistant
from ..nlp.date_resolver import DateResolver
from ..nlp.intent_parser import IntentParser
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def _make_llm(settings) -> LLMClient:
    try:
        return OpenRouterLLMClient(settings)
    except ProviderError as e:
        # Local runs without external services: parser degrades to "unknown",
        # dates go through the deterministic fallback.
        logger.warning("%s Using offline LLM client.", e)
        return OfflineLLMClient()


def _make_calendar(settings) -> CalendarProvider:
    refresh_token = getattr(settings, "google_refresh_token", None)
    if not refresh_token:
        logger.info("No Google Calendar credentials; using the in-memory calendar.")
        return InMemoryCalendar()
    try:
        return GoogleCalendarProvider(
            client_id=getattr(settings, "google_client_id", None),
            client_secret=getattr(settings, "google_client_secret", None),
            refresh_token=refresh_token,
            calendar_id=getattr(settings, "google_calendar_id", "primary"),
        )
    except ProviderError as e:
        logger.warning("%s Using the in-memory calendar.", e)
        return InMemoryCalendar()


def _make_email_sender(settings) -> EmailSender:
    if not getattr(settings, "sendgrid_api_key", None):
        logger.info("No email provider configured; emails go to the local outbox.")
        return LoggingEmailSender()
    try:
        return SendGridEmailSender(
            api_key=settings.sendgrid_api_key,
            from_email=settings.email_from,
            base_url=settings.sendgrid_base_url,
        )
    except ProviderError as e:
        logger.warning("%s Emails go to the local outbox.", e)
        return LoggingEmailSender()


def create_initial_state(
    *,
    settings=None,
    llm: LLMClient | None = None,
    calendar: CalendarProvider | None = None,
    email_sender: EmailSender | None = None,
    task_store: TaskStore | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Collaborators can be injected (tests, alternative backends); otherwise they are
    chosen from settings. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    llm_client = llm if llm is not None else _make_llm(settings)
    cal = calendar if calendar is not None else _make_calendar(settings)
    sender = email_sender if email_sender is not None else _make_email_sender(settings)
    store = task_store if task_store is not None else TaskStore()

    email = EmailService(sender)
    dates = DateResolver(llm_client, tz=settings.timezone)
    dispatcher = ActionDispatcher(calendar=cal, email=email, tasks=store, dates=dates)
    assistant = Assistant(IntentParser(llm_client), dispatcher)
    scheduler = ReminderScheduler(
        store,
        email,
        interval_seconds=settings.reminder_interval_seconds,
        lookahead_hours=settings.reminder_lookahead_hours,
        digest_hour=settings.digest_hour,
        tz=settings.timezone,
    )

    return AppState(
        settings=settings,
        llm=llm_client,
        calendar=cal,
        email_sender=sender,
        email=email,
        task_store=store,
        dates=dates,
        assistant=assistant,
        text=TextAssistant(llm_client),
        scheduler=scheduler,
    )


async def close_state(state: AppState) -> None:
    """Best-effort release of network clients (no exceptions should escape)."""
    for resource in (state.llm, state.email_sender):
        aclose = getattr(resource, "aclose", None)
        if aclose is None:
            continue
        try:
            await aclose()
        except Exception:
            logger.debug("Closing %s failed.", type(resource).__name__, exc_info=True)

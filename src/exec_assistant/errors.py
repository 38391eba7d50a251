# src/exec_assistant/errors.py

"""
Error taxonomy.

Propagation policy:
- the intent parser absorbs its own failures (ParseFailure never escapes it),
- dispatcher and task store raise to their caller,
- the reminder scheduler logs per-task / per-tick failures and keeps running.
"""

from __future__ import annotations

from typing import Any


class AssistantError(Exception):
    """Base class for all errors raised by the assistant core."""


class ParseFailure(AssistantError):
    """Model output could not be turned into an intent."""


class DateResolutionError(AssistantError):
    """Both the model path and the fallback parser failed to produce a timestamp."""

    def __init__(self, text: Any, message: str | None = None) -> None:
        self.text = text
        super().__init__(message or f"Could not resolve date/time: {text!r}")


class UnsupportedActionError(AssistantError):
    def __init__(self, action: Any) -> None:
        self.action = action
        super().__init__(f"Unsupported action: {action!r}")


class NotFoundError(AssistantError):
    pass


class TaskNotFoundError(NotFoundError):
    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task with ID {task_id} not found")


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Event with ID {event_id} not found")


class ProviderError(AssistantError):
    """
    A collaborator call (calendar / email / LLM) failed.

    The underlying exception is chained via `raise ProviderError(...) from exc`.
    """

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"[{provider}] {message}")


class LLMNotConfiguredError(ProviderError):
    def __init__(self, message: str) -> None:
        super().__init__("llm", message)


class MeetingInviteError(AssistantError):
    """
    schedule_meeting partially failed: the event exists, the invite email did not go out.

    Callers must treat the action as non-atomic; `event` is the created event.
    """

    def __init__(self, event: Any, outcome: Any, cause: BaseException | None = None) -> None:
        self.event = event
        self.outcome = outcome
        self.cause = cause
        event_id = getattr(event, "id", None)
        super().__init__(f"Meeting created (event_id={event_id}) but sending invites failed: {cause}")


class InvalidParametersError(AssistantError, ValueError):
    """An intent is missing parameters its action cannot do without."""

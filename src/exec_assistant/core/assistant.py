# src/exec_assistant/core/assistant.py

"""
Command pipeline: parse -> dispatch.

Command failures are fatal to that command only: they come back as
CommandOutcome(success=False, error=...) instead of propagating.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..dispatch.dispatcher import ActionDispatcher
from ..dispatch.results import ActionResult
from ..errors import AssistantError, MeetingInviteError
from ..nlp.intent_parser import Intent, IntentParser

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CommandOutcome:
    success: bool
    original_command: str
    intent: Intent | None = None
    result: ActionResult | None = None
    error: str | None = None
    # Set when the command partially succeeded (e.g. event created, invites not sent).
    partial: Any = None


class Assistant:
    def __init__(self, parser: IntentParser, dispatcher: ActionDispatcher) -> None:
        self._parser = parser
        self._dispatcher = dispatcher

    async def process_command(self, command: str, user_email: str | None = None) -> CommandOutcome:
        logger.info("Processing command: %s", command)
        intent = await self._parser.parse(command)

        try:
            result = await self._dispatcher.dispatch(intent, user_email)
        except MeetingInviteError as e:
            logger.warning("Command partially applied: %s", e)
            return CommandOutcome(
                success=False,
                original_command=command,
                intent=intent,
                error=str(e),
                partial=e.event,
            )
        except AssistantError as e:
            logger.info("Command failed (%s): %s", e.__class__.__name__, e)
            return CommandOutcome(success=False, original_command=command, intent=intent, error=str(e))
        except Exception as e:
            logger.exception("Error processing command: %s", command)
            return CommandOutcome(success=False, original_command=command, intent=intent, error=str(e) or "Internal error")

        return CommandOutcome(success=True, original_command=command, intent=intent, result=result)

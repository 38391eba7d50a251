# src/exec_assistant/nlp/intent_parser.py

"""
Intent parser.

Turns a command string into Intent{action, parameters, confidence} with the LLM.

Fail-soft: a malformed reply, a provider error or a missing model all
produce Intent(UNKNOWN, {}, 0.0). Nothing raises out of parse().
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Mapping

from ..core.ports import LLMClient
from ..errors import ParseFailure
from .json_extract import JsonExtractor, extract_first_json_object
from .prompts import INTENT_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)


class IntentAction(StrEnum):
    SCHEDULE_MEETING = "schedule_meeting"
    SEND_EMAIL = "send_email"
    CREATE_TASK = "create_task"
    QUERY_INFO = "query_info"
    UNKNOWN = "unknown"

    @classmethod
    def coerce(cls, raw: Any) -> IntentAction:
        s = str(raw or "").strip().lower()
        try:
            return cls(s)
        except ValueError:
            return cls.UNKNOWN


@dataclass(slots=True, frozen=True)
class Intent:
    action: IntentAction
    parameters: Mapping[str, Any] = field(default_factory=dict)
    confidence: float = 0.0

    def __post_init__(self) -> None:
        # Read-only view so a produced intent cannot be mutated downstream.
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @classmethod
    def unknown(cls) -> Intent:
        return cls(IntentAction.UNKNOWN, {}, 0.0)


def _clamp_confidence(raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def build_intent_prompt(command: str) -> str:
    return INTENT_PROMPT_TEMPLATE.format(command=json.dumps(command, ensure_ascii=False))


def intent_from_text(raw: str, extractor: JsonExtractor = extract_first_json_object) -> Intent:
    """Interpret a model reply. Raises ParseFailure if no JSON object can be read from it."""
    blob = extractor(raw or "")
    if blob is None:
        raise ParseFailure("No valid JSON found in response")

    try:
        data = json.loads(blob)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError is a ValueError; so are integer-digit limits.
        raise ParseFailure(f"Invalid JSON in response: {type(e).__name__}") from e

    if not isinstance(data, dict):
        raise ParseFailure("Response JSON is not an object")

    action = IntentAction.coerce(data.get("action"))
    params = data.get("parameters")
    if not isinstance(params, dict):
        params = {}

    return Intent(action=action, parameters=params, confidence=_clamp_confidence(data.get("confidence")))


class IntentParser:
    def __init__(self, llm: LLMClient, *, extractor: JsonExtractor = extract_first_json_object) -> None:
        self._llm = llm
        self._extractor = extractor

    async def parse(self, command: str) -> Intent:
        command = (command or "").strip()
        if not command:
            return Intent.unknown()

        prompt = build_intent_prompt(command)
        logger.debug("Intent prompt: %s", prompt)

        try:
            raw = await self._llm.generate(prompt)
        except Exception as e:
            logger.warning("Intent parsing failed (LLM call): %s", e)
            return Intent.unknown()

        try:
            intent = intent_from_text(raw, self._extractor)
            logger.info(
                "Parsed intent: action=%s confidence=%.2f params=%s",
                intent.action.value,
                intent.confidence,
                json.dumps(dict(intent.parameters), ensure_ascii=False, default=str)[:2000],
            )
        except ParseFailure as e:
            logger.warning("Intent parsing failed: %s raw=%r", e, (raw or "")[:2000])
            return Intent.unknown()
        except Exception:
            logger.exception("Intent parsing crashed; raw=%r", (raw or "")[:2000])
            return Intent.unknown()

        return intent

# src/exec_assistant/nlp/date_resolver.py

"""
Natural date resolver.

Primary path asks the LLM for an absolute ISO-8601 instant relative to `now`
(non-deterministic). If the reply does not parse, or the call fails, the original text
goes through a locale-naive dateutil parse. If that fails too: DateResolutionError.

Callers that need reproducible results should call parse_date_fallback() directly.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser

from ..core.ports import LLMClient
from ..errors import DateResolutionError
from .prompts import DATE_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)


def _zone(tz: tzinfo | str | None) -> tzinfo:
    if tz is None:
        return UTC
    return ZoneInfo(tz) if isinstance(tz, str) else tz


def _localize(dt: datetime, tz: tzinfo) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=tz)


def _clean_model_reply(raw: str) -> str:
    s = (raw or "").strip()
    if s.startswith("```"):
        s = s.strip("`").strip()
        if s.lower().startswith("iso"):
            s = s[3:].strip()
    return s.strip().strip("\"'`").strip()


def parse_iso_instant(raw: str, *, tz: tzinfo | str | None = None) -> datetime | None:
    """Strict ISO-8601 parse of a model reply; None if it is not a timestamp."""
    s = _clean_model_reply(raw)
    if not s:
        return None
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    return _localize(dt, _zone(tz))


def parse_date_fallback(text: str, *, tz: tzinfo | str | None = None) -> datetime:
    """Deterministic parse of `text`; naive results are placed in `tz` (UTC by default)."""
    if not text or not str(text).strip():
        raise DateResolutionError(text, "Empty date/time text")
    try:
        dt = date_parser.parse(str(text).strip())
    except (ValueError, OverflowError) as e:
        raise DateResolutionError(text) from e
    return _localize(dt, _zone(tz))


class DateResolver:
    def __init__(self, llm: LLMClient, *, tz: tzinfo | str | None = None) -> None:
        self._llm = llm
        self._tz = _zone(tz)

    @property
    def tz(self) -> tzinfo:
        return self._tz

    async def resolve(self, text: str | datetime | None, now: datetime | None = None) -> datetime:
        if isinstance(text, datetime):
            return _localize(text, self._tz)
        if text is None or not str(text).strip():
            raise DateResolutionError(text, "Empty date/time text")

        text = str(text).strip()
        ref = _localize(now, self._tz) if now is not None else datetime.now(self._tz)
        prompt = DATE_PROMPT_TEMPLATE.format(
            now=ref.isoformat(), tz=str(self._tz), text=json.dumps(text, ensure_ascii=False)
        )

        try:
            raw = await self._llm.generate(prompt)
        except Exception as e:
            logger.warning("Date resolution via LLM failed (%s); using fallback for %r", e, text)
        else:
            resolved = parse_iso_instant(raw, tz=self._tz)
            if resolved is not None:
                logger.debug("Resolved %r -> %s (llm)", text, resolved.isoformat())
                return resolved
            logger.info("LLM returned an invalid date %r for %r; using fallback", (raw or "")[:200], text)

        resolved = parse_date_fallback(text, tz=self._tz)
        logger.debug("Resolved %r -> %s (fallback)", text, resolved.isoformat())
        return resolved

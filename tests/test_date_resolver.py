# tests/test_date_resolver.py

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import pytest

from exec_assistant.errors import DateResolutionError, ProviderError
from exec_assistant.llm.offline import OfflineLLMClient
from exec_assistant.nlp.date_resolver import DateResolver, parse_date_fallback, parse_iso_instant

from .conftest import NOW
from .fakes import FakeLLMClient


@pytest.mark.asyncio
async def test_model_reply_is_used_when_valid() -> None:
    llm = FakeLLMClient(date_replies={"next Tuesday 2pm": "2025-03-18T14:00:00.000Z"})
    resolved = await DateResolver(llm).resolve("next Tuesday 2pm", NOW)

    assert resolved == datetime(2025, 3, 18, 14, 0, tzinfo=UTC)
    assert NOW.isoformat() in llm.prompts[0]


@pytest.mark.asyncio
async def test_model_reply_with_quotes_and_fences() -> None:
    llm = FakeLLMClient(date_replies={"friday": '```\n"2025-03-14T17:00:00+00:00"\n```'})
    assert await DateResolver(llm).resolve("friday", NOW) == datetime(2025, 3, 14, 17, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_invalid_model_reply_falls_back_to_parser() -> None:
    llm = FakeLLMClient(date_replies={"2025-04-01 10:30": "sometime soon"})
    resolved = await DateResolver(llm).resolve("2025-04-01 10:30", NOW)
    assert resolved == datetime(2025, 4, 1, 10, 30, tzinfo=UTC)


@pytest.mark.asyncio
async def test_provider_failure_falls_back_to_parser() -> None:
    llm = FakeLLMClient(error=ProviderError("llm", "down"))
    tz = ZoneInfo("Europe/Berlin")
    resolved = await DateResolver(llm, tz=tz).resolve("March 20 2025 9am", NOW)
    assert resolved == datetime(2025, 3, 20, 9, 0, tzinfo=tz)


@pytest.mark.asyncio
async def test_both_paths_failing_raises() -> None:
    with pytest.raises(DateResolutionError):
        await DateResolver(OfflineLLMClient()).resolve("the day after the thing", NOW)


@pytest.mark.asyncio
async def test_empty_text_raises_without_model_call() -> None:
    llm = FakeLLMClient()
    with pytest.raises(DateResolutionError):
        await DateResolver(llm).resolve(None, NOW)
    with pytest.raises(DateResolutionError):
        await DateResolver(llm).resolve("  ", NOW)
    assert llm.prompts == []


@pytest.mark.asyncio
async def test_datetime_passes_through() -> None:
    naive = datetime(2025, 5, 1, 8, 0)
    assert await DateResolver(FakeLLMClient()).resolve(naive) == naive.replace(tzinfo=UTC)


def test_fallback_is_deterministic() -> None:
    a = parse_date_fallback("2025-06-30T08:15:00Z")
    b = parse_date_fallback("2025-06-30T08:15:00Z")
    assert a == b == datetime(2025, 6, 30, 8, 15, tzinfo=UTC)


def test_parse_iso_instant_rejects_prose() -> None:
    assert parse_iso_instant("not a date") is None
    assert parse_iso_instant("") is None

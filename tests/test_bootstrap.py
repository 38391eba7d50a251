# tests/test_bootstrap.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from exec_assistant.calendar.memory_calendar import InMemoryCalendar
from exec_assistant.cli.bootstrap import close_state, create_initial_state
from exec_assistant.email.senders import LoggingEmailSender
from exec_assistant.errors import LLMNotConfiguredError
from exec_assistant.llm.client import OpenRouterLLMClient, friendly_llm_error_message
from exec_assistant.llm.offline import OfflineLLMClient
from exec_assistant.nlp.intent_parser import IntentAction


@pytest.mark.asyncio
async def test_unconfigured_providers_fall_back_to_offline(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    try:
        assert isinstance(state.llm, OfflineLLMClient)
        assert isinstance(state.email_sender, LoggingEmailSender)
        assert isinstance(state.calendar, InMemoryCalendar)
        assert settings.data_dir.is_dir()

        outcome = await state.assistant.process_command("Schedule a meeting tomorrow")
        assert outcome.success is False
        assert outcome.intent.action == IntentAction.UNKNOWN
    finally:
        await close_state(state)


def test_llm_client_requires_key(settings: SimpleNamespace) -> None:
    with pytest.raises(LLMNotConfiguredError) as exc_info:
        OpenRouterLLMClient(settings)
    assert "EXEC_OPENROUTER_API_KEY" in friendly_llm_error_message(exc_info.value)


def test_llm_client_requires_models(settings: SimpleNamespace) -> None:
    settings.openrouter_api_key = "sk-test"
    settings.openrouter_base_url = "https://openrouter.test/api/v1"
    settings.llm_models = []
    with pytest.raises(LLMNotConfiguredError):
        OpenRouterLLMClient(settings)

# tests/test_intent_parser.py

from __future__ import annotations

import pytest

from exec_assistant.errors import ProviderError
from exec_assistant.llm.offline import OfflineLLMClient
from exec_assistant.nlp.intent_parser import Intent, IntentAction, IntentParser
from exec_assistant.nlp.json_extract import extract_first_json_object

from .fakes import FakeLLMClient


def test_extract_plain_and_fenced_json() -> None:
    assert extract_first_json_object('{"a": 1}') == '{"a": 1}'
    raw = 'Sure! Here it is:\n```json\n{"action": "create_task", "parameters": {"x": {"y": 2}}}\n```\nBye {'
    assert extract_first_json_object(raw) == '{"action": "create_task", "parameters": {"x": {"y": 2}}}'


def test_extract_ignores_braces_in_strings() -> None:
    raw = 'noise {"body": "use } and { freely", "n": "\\"}"} trailing {"second": 1}'
    assert extract_first_json_object(raw) == '{"body": "use } and { freely", "n": "\\"}"}'


def test_extract_returns_none_without_object() -> None:
    assert extract_first_json_object("") is None
    assert extract_first_json_object("no json here") is None
    assert extract_first_json_object("{ unbalanced") is None


@pytest.mark.asyncio
async def test_parse_valid_reply() -> None:
    llm = FakeLLMClient(
        intent_reply='```json\n{"action": "create_task", "parameters": {"title": "Review Q4 budget", '
        '"priority": "high", "dueDate": "Friday"}, "confidence": 0.92}\n```'
    )
    intent = await IntentParser(llm).parse("Create a high priority task to review Q4 budget by Friday")

    assert intent.action == IntentAction.CREATE_TASK
    assert intent.parameters["priority"] == "high"
    assert intent.confidence == pytest.approx(0.92)
    assert '"Create a high priority task to review Q4 budget by Friday"' in llm.prompts[0]


@pytest.mark.asyncio
async def test_unrecognized_action_is_coerced_to_unknown() -> None:
    llm = FakeLLMClient(intent_reply={"action": "book_flight", "parameters": {"to": "NYC"}, "confidence": 0.9})
    intent = await IntentParser(llm).parse("book me a flight")

    assert intent.action == IntentAction.UNKNOWN
    assert intent.parameters["to"] == "NYC"


@pytest.mark.asyncio
async def test_confidence_is_clamped() -> None:
    high = await IntentParser(FakeLLMClient(intent_reply={"action": "query_info", "confidence": 7})).parse("q")
    bogus = await IntentParser(FakeLLMClient(intent_reply={"action": "query_info", "confidence": "very"})).parse("q")

    assert high.confidence == 1.0
    assert bogus.confidence == 0.0
    assert dict(high.parameters) == {}


@pytest.mark.parametrize(
    "llm",
    [
        FakeLLMClient(intent_reply="I could not understand that."),
        FakeLLMClient(intent_reply='{"action": "create_task", "parameters": '),
        FakeLLMClient(intent_reply="[1, 2, 3]"),
        FakeLLMClient(intent_reply='{"action": "create_task", "parameters": {}, "confidence": 1' + "0" * 400 + "}"),
        FakeLLMClient(intent_reply='{"action": "create_task", "parameters": {}, "confidence": 1' + "0" * 5000 + "}"),
        FakeLLMClient(intent_reply='{"a": ' * 100_000 + "1" + "}" * 100_000),
        FakeLLMClient(error=ProviderError("llm", "All LLM models failed.")),
        FakeLLMClient(error=TimeoutError("read timeout")),
    ],
)
@pytest.mark.asyncio
async def test_faults_degrade_to_unknown(llm: FakeLLMClient) -> None:
    intent = await IntentParser(llm).parse("schedule something")
    assert intent == Intent.unknown()
    assert intent.confidence == 0


@pytest.mark.asyncio
async def test_empty_command_skips_model() -> None:
    llm = FakeLLMClient()
    assert (await IntentParser(llm).parse("   ")).action == IntentAction.UNKNOWN
    assert llm.prompts == []


@pytest.mark.asyncio
async def test_offline_client_yields_unknown() -> None:
    intent = await IntentParser(OfflineLLMClient()).parse("Schedule a meeting with John Tuesday at 2pm")
    assert intent.action == IntentAction.UNKNOWN
    assert intent.confidence == 0


@pytest.mark.asyncio
async def test_custom_extractor_is_used() -> None:
    llm = FakeLLMClient(intent_reply="ACTION=query_info")
    parser = IntentParser(llm, extractor=lambda raw: '{"action": "query_info", "confidence": 0.5}')
    intent = await parser.parse("what's on my calendar")
    assert intent.action == IntentAction.QUERY_INFO


def test_intent_parameters_are_read_only() -> None:
    intent = Intent(IntentAction.QUERY_INFO, {"query": "tasks"}, 0.5)
    with pytest.raises(TypeError):
        intent.parameters["query"] = "meetings"  # type: ignore[index]


@pytest.mark.asyncio
async def test_crashing_extractor_degrades_to_unknown() -> None:
    def broken(raw: str) -> str | None:
        raise RuntimeError("extractor bug")

    parser = IntentParser(FakeLLMClient(intent_reply='{"action": "query_info"}'), extractor=broken)
    assert await parser.parse("what's on my calendar") == Intent.unknown()

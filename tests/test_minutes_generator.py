from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace

import pytest

from minutai.config import Settings
from minutai.services.notes.base import extract_text
from minutai.services.notes.minutes import MinutesGenerator, parse_minutes
from minutai.services.notes.openai_notes import OpenAIGenerationProvider
from minutai.services.prompts import MINUTES_SCHEMA, ChatPrompt

from .conftest import MEETING_MINUTES, MEETING_SUMMARY, FakeGeneration

PROMPT = ChatPrompt(system="system", user="user")


def test_extract_text_from_output_text() -> None:
    assert extract_text(SimpleNamespace(output_text="direct")) == "direct"


def test_extract_text_from_chat_choices() -> None:
    response = {"choices": [{"message": {"role": "assistant", "content": "from choices"}}]}
    assert extract_text(response) == "from choices"

    as_object = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content="object choices"))]
    )
    assert extract_text(as_object) == "object choices"


def test_extract_text_from_content_blocks() -> None:
    response = {"content": [{"type": "thinking"}, {"type": "text", "text": "block text"}]}
    assert extract_text(response) == "block text"

    nested_output = {"output": [{"content": [{"type": "output_text", "text": "nested"}]}]}
    assert extract_text(nested_output) == "nested"


@pytest.mark.parametrize("response", [None, {}, {"choices": []}, {"content": "x"}, 3])
def test_extract_text_unrecognised_shapes_are_empty(response) -> None:
    assert extract_text(response) == ""


def test_parse_minutes_keeps_raw_text_on_failure() -> None:
    assert parse_minutes('{"title": "ok"}') == {"title": "ok"}
    assert parse_minutes("Sure! Here are your minutes") == {"raw": "Sure! Here are your minutes"}
    assert parse_minutes('["a list"]') == {"raw": '["a list"]'}
    assert parse_minutes("") == {"raw": ""}


def test_generator_requests_schema_only_for_record() -> None:
    provider = FakeGeneration()
    generator = MinutesGenerator(provider)

    record = asyncio.run(generator.generate_record(PROMPT))
    summary = asyncio.run(generator.generate_summary(PROMPT))

    assert record == MEETING_MINUTES
    assert summary == MEETING_SUMMARY
    assert provider.schemas == [MINUTES_SCHEMA, None]
    assert generator.model == "fake-model"


def test_generator_malformed_json_does_not_raise() -> None:
    generator = MinutesGenerator(FakeGeneration(record="{not json"))

    record = asyncio.run(generator.generate_record(PROMPT))

    assert record == {"raw": "{not json"}


def test_generator_propagates_transport_errors() -> None:
    generator = MinutesGenerator(FakeGeneration(record_error=ConnectionError("quota exceeded")))

    with pytest.raises(ConnectionError):
        asyncio.run(generator.generate_record(PROMPT))


def _settings(style: str) -> Settings:
    return Settings(_env_file=None, openai_model="test-model", openai_api_style=style)


def test_openai_provider_responses_api_with_schema() -> None:
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(output_text=json.dumps({"title": "t"}))

    client = SimpleNamespace(responses=SimpleNamespace(create=create))
    provider = OpenAIGenerationProvider(_settings("responses"), client=client)

    text = asyncio.run(provider.generate(PROMPT, schema=MINUTES_SCHEMA))

    assert text == '{"title": "t"}'
    assert calls[0]["model"] == "test-model"
    assert calls[0]["input"] == PROMPT.messages()
    assert calls[0]["text"]["format"]["type"] == "json_schema"
    assert calls[0]["text"]["format"]["schema"] is MINUTES_SCHEMA


def test_openai_provider_chat_api_without_schema() -> None:
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        return {"choices": [{"message": {"content": "# Minutes"}}]}

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    provider = OpenAIGenerationProvider(_settings("chat"), client=client)

    text = asyncio.run(provider.generate(PROMPT))

    assert text == "# Minutes"
    assert calls[0]["messages"] == PROMPT.messages()
    assert "response_format" not in calls[0]

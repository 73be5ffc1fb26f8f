"""Tests for the OpenAI adapters."""

import asyncio
import json
from types import SimpleNamespace

import pytest

from glycemic_tracker.adapters.openai_analysis_client import OpenAIAnalysisClient
from glycemic_tracker.adapters.openai_plan_client import OpenAIPlanClient


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeCompletions:
    def __init__(self, content: str | None) -> None:
        self.content = content
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class _FakeOpenAI:
    def __init__(self, output_text: str = json.dumps({"foods": []})) -> None:
        self.responses = _FakeResponses(output_text)


class _FakeChatOpenAI:
    def __init__(self, content: str | None) -> None:
        self.chat = SimpleNamespace(completions=_FakeCompletions(content))


def test_openai_analysis_client_parses_output() -> None:
    fake = _FakeOpenAI()
    client = OpenAIAnalysisClient(client=fake)

    result = asyncio.run(
        client.complete(
            model="gpt-4o",
            system_prompt="You are a nutritionist",
            prompt="Analyze this meal",
            image_data_url="data:image/jpeg;base64,ZmFrZQ==",
            schema={"type": "object"},
            temperature=0.3,
            max_output_tokens=1500,
        )
    )

    payload = fake.responses.last_payload
    content = payload["input"][0]["content"]
    assert result == {"foods": []}
    assert content[1] == {
        "type": "input_image",
        "image_url": "data:image/jpeg;base64,ZmFrZQ==",
    }
    assert payload["text"]["format"]["strict"] is True
    assert payload["instructions"] == "You are a nutritionist"
    assert payload["temperature"] == 0.3


def test_openai_analysis_client_text_only() -> None:
    fake = _FakeOpenAI()
    client = OpenAIAnalysisClient(client=fake)

    asyncio.run(
        client.complete(
            model="gpt-4o",
            system_prompt="system",
            prompt="Rice: 1 cup",
            image_data_url=None,
            schema={"type": "object"},
            temperature=0.3,
            max_output_tokens=1500,
        )
    )

    content = fake.responses.last_payload["input"][0]["content"]
    assert content == [{"type": "input_text", "text": "Rice: 1 cup"}]


def test_openai_analysis_client_rejects_empty_output() -> None:
    client = OpenAIAnalysisClient(client=_FakeOpenAI(output_text=""))

    with pytest.raises(RuntimeError):
        asyncio.run(
            client.complete(
                model="gpt-4o",
                system_prompt="system",
                prompt="prompt",
                image_data_url=None,
                schema={"type": "object"},
                temperature=0.3,
                max_output_tokens=1500,
            )
        )


def test_plan_client_requests_json_object() -> None:
    fake = _FakeChatOpenAI(json.dumps({"greeting": "Hi"}))
    client = OpenAIPlanClient(client=fake, timeout_seconds=12)

    result = asyncio.run(
        client.complete_json(
            model="gpt-4o", system_prompt="system", prompt="plan", temperature=0.7
        )
    )

    payload = fake.chat.completions.last_payload
    assert result == {"greeting": "Hi"}
    assert payload["response_format"] == {"type": "json_object"}
    assert payload["temperature"] == 0.7
    assert payload["timeout"] == 12
    assert payload["messages"][0] == {"role": "system", "content": "system"}
    assert payload["messages"][1] == {"role": "user", "content": "plan"}


def test_plan_client_rejects_empty_content() -> None:
    client = OpenAIPlanClient(client=_FakeChatOpenAI(None))

    with pytest.raises(RuntimeError):
        asyncio.run(
            client.complete_json(
                model="gpt-4o", system_prompt="s", prompt="p", temperature=0.7
            )
        )


def test_plan_client_rejects_invalid_json() -> None:
    client = OpenAIPlanClient(client=_FakeChatOpenAI("not json"))

    with pytest.raises(json.JSONDecodeError):
        asyncio.run(
            client.complete_json(
                model="gpt-4o", system_prompt="s", prompt="p", temperature=0.7
            )
        )

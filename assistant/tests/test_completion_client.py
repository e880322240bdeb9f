import httpx
import openai
import pytest

from assistant.core.config import AssistantSettings
from assistant.core.exceptions import ConfigurationError, SerializationError, TransportError
from assistant.llm.schemas.chat import ChatMessage
from assistant.llm.services.completion_client import CompletionClient, parse_completion


class FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def model_dump(self):
        return self._payload


def _settings(**overrides):
    values = {"openai_api_key": "sk-test-0000", "openai_model": "gpt-test"}
    values.update(overrides)
    return AssistantSettings(_env_file=None, **values)


def test_missing_api_key_is_a_configuration_error(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(ConfigurationError):
        CompletionClient(AssistantSettings(_env_file=None))


@pytest.mark.asyncio
async def test_chat_completion_omits_tools_when_disabled(monkeypatch):
    client = CompletionClient(_settings())
    captured = []

    async def fake_create(**kwargs):
        captured.append(kwargs)
        return FakeResponse(
            {
                "id": "cmpl-1",
                "choices": [
                    {"index": 0, "finish_reason": "stop", "message": {"role": "assistant", "content": "hi", "refusal": None}}
                ],
                "usage": {"prompt_tokens": 3, "completion_tokens": 1, "total_tokens": 4},
            }
        )

    monkeypatch.setattr(client._client.chat.completions, "create", fake_create)

    response = await client.chat_completion([ChatMessage(role="user", content="hello")])

    assert captured == [{"model": "gpt-test", "messages": [{"role": "user", "content": "hello"}]}]
    assert response.choices[0].message.content == "hi"
    assert response.usage.total_tokens == 4


@pytest.mark.asyncio
async def test_chat_completion_sends_manifest_and_model_override(monkeypatch):
    client = CompletionClient(_settings())
    captured = {}
    manifest = [{"type": "function", "function": {"name": "shell_tool", "description": "", "parameters": {}}}]

    async def fake_create(**kwargs):
        captured.update(kwargs)
        return FakeResponse({"choices": [{"message": {"role": "assistant", "content": "ok"}}]})

    monkeypatch.setattr(client._client.chat.completions, "create", fake_create)

    await client.chat_completion([], tools=manifest, model="other-model")

    assert captured["tools"] == manifest
    assert captured["model"] == "other-model"


@pytest.mark.asyncio
async def test_sdk_failure_becomes_transport_error(monkeypatch):
    client = CompletionClient(_settings())

    async def fake_create(**kwargs):
        raise openai.APIConnectionError(
            request=httpx.Request("POST", "https://api.test/v1/chat/completions")
        )

    monkeypatch.setattr(client._client.chat.completions, "create", fake_create)

    with pytest.raises(TransportError):
        await client.chat_completion([ChatMessage(role="user", content="hello")])


@pytest.mark.parametrize(
    "payload",
    [
        {"choices": []},
        {"usage": {"total_tokens": 1}},
        {"choices": [{"message": {"role": "narrator", "content": "?"}}]},
    ],
)
def test_malformed_payload_is_a_serialization_error(payload):
    with pytest.raises(SerializationError):
        parse_completion(payload)


def test_tool_calls_are_parsed():
    response = parse_completion(
        {
            "choices": [
                {
                    "message": {
                        "role": "assistant",
                        "content": None,
                        "tool_calls": [
                            {
                                "id": "call-1",
                                "type": "function",
                                "function": {"name": "shell_tool", "arguments": '{"command": "ls"}'},
                            }
                        ],
                    }
                }
            ]
        }
    )

    call = response.choices[0].message.tool_calls[0]
    assert call.id == "call-1"
    assert call.function.name == "shell_tool"
    assert response.choices[0].message.content is None

import os

# Test runs log to stderr only.
os.environ["LOG_FILE"] = ""

import json
from typing import Any

import pytest

from assistant.llm.schemas.chat import ToolCall
from assistant.llm.services.completion_client import parse_completion
from assistant.tools.registry import ToolRegistry


class RecordingTool:
    """Returns a fixed output (or raises) and remembers every call."""

    parameters: dict[str, Any] = {"type": "object", "properties": {}}

    def __init__(self, name: str, output: str = "ok", error: Exception | None = None) -> None:
        self.name = name
        self.description = f"{name} for tests"
        self.output = output
        self.error = error
        self.calls: list[Any] = []

    def input_schema(self) -> dict[str, Any]:
        return {"type": "object"}

    async def execute(self, arguments: Any) -> str:
        self.calls.append(arguments)
        if self.error is not None:
            raise self.error
        return self.output


class EchoTool(RecordingTool):
    """Returns ``text`` verbatim, or the canonical JSON of its arguments."""

    async def execute(self, arguments: Any) -> str:
        self.calls.append(arguments)
        if isinstance(arguments, dict) and "text" in arguments:
            return arguments["text"]
        return json.dumps(arguments, sort_keys=True)


class FakeUI:
    def __init__(self, answers: list[Any] | None = None, lines: list[str] | None = None) -> None:
        self.answers = list(answers or [])
        self.lines = list(lines or [])
        self.prompts: list[str] = []
        self.confirmed: list[str] = []
        self.events: list[tuple[str, str]] = []

    async def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)

    async def confirm_tool_call(self, tool_call: ToolCall) -> bool:
        self.confirmed.append(tool_call.function.name)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    def show_assistant_reply(self, content: str) -> None:
        self.events.append(("reply", content))

    def show_tool_result(self, tool_call: ToolCall, result: str) -> None:
        self.events.append(("result", result))

    def show_tool_error(self, tool_call: ToolCall, error: str) -> None:
        self.events.append(("tool_error", error))

    def show_rejection(self, tool_call: ToolCall) -> None:
        self.events.append(("rejected", tool_call.function.name))

    def show_tools(self, listing: str) -> None:
        self.events.append(("tools", listing))

    def show_info(self, text: str) -> None:
        self.events.append(("info", text))

    def show_error(self, text: str) -> None:
        self.events.append(("error", text))


class ScriptedClient:
    """Replays canned completion payloads and records each request."""

    def __init__(self, responses: list[Any]) -> None:
        self.responses = list(responses)
        self.requests: list[dict[str, Any]] = []

    async def chat_completion(self, messages, *, tools=None, model=None):
        self.requests.append({"messages": list(messages), "tools": tools, "model": model})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return parse_completion(response)


def tool_call_payload(call_id: str, name: str, arguments: Any) -> dict[str, Any]:
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    return {"id": call_id, "type": "function", "function": {"name": name, "arguments": raw}}


def reply_payload(content: str | None = None, tool_calls=None, total_tokens: int | None = None):
    message: dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls:
        message["tool_calls"] = tool_calls
    return {
        "choices": [{"message": message, "finish_reason": "tool_calls" if tool_calls else "stop"}],
        "usage": {"total_tokens": total_tokens},
    }


@pytest.fixture
def recording_tool():
    return RecordingTool


@pytest.fixture
def echo_tool():
    return EchoTool("echo")


@pytest.fixture
def registry(echo_tool):
    return ToolRegistry([echo_tool])


@pytest.fixture
def fake_ui():
    return FakeUI


@pytest.fixture
def scripted_client():
    return ScriptedClient


@pytest.fixture
def payloads():
    return {"tool_call": tool_call_payload, "reply": reply_payload}

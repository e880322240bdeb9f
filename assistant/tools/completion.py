"""Sub-completion tool: lets the model consult a fresh chat completion."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

from ..core.exceptions import SerializationError, ToolExecutionError, TransportError
from ..llm.schemas.chat import ChatMessage
from .base import parse_input

if TYPE_CHECKING:
    from ..llm.services.completion_client import CompletionClient
    from .registry import ToolRegistry


class CompletionMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class CompletionToolInput(BaseModel):
    messages: list[CompletionMessage] = Field(..., min_length=1)
    model: str | None = Field(None, description="Overrides the session model")
    include_tools: bool = Field(False, description="Advertise the tool manifest to the sub-completion")


class CompletionTool:
    name = "gpt_tool"
    description = "Get a response from a new ChatCompletion via the OpenAI API"
    parameters: dict[str, Any] = {
        "type": "object",
        "properties": {
            "include_tools": {
                "type": "boolean",
                "description": "Whether or not to allow for tool calls, either `true` or `false`",
            },
            "model": {
                "type": "string",
                "description": "Model to use; defaults to the current session model",
            },
            "messages": {
                "type": "array",
                "description": (
                    "The array of messages in the ChatCompletion. Each message has a key `role` "
                    "with value in (`user`, `assistant`, `system`) and a key `content` with string value."
                ),
                "items": {
                    "type": "object",
                    "properties": {
                        "role": {"type": "string", "enum": ["system", "user", "assistant"]},
                        "content": {"type": "string"},
                    },
                    "required": ["role", "content"],
                },
            },
        },
        "required": ["messages"],
    }

    def __init__(self, client: CompletionClient, registry: ToolRegistry) -> None:
        self._client = client
        self._registry = registry

    def input_schema(self) -> dict[str, Any]:
        return CompletionToolInput.model_json_schema()

    async def execute(self, arguments: Any) -> str:
        tool_input = parse_input(CompletionToolInput, arguments, tool=self.name)
        messages = [ChatMessage(role=item.role, content=item.content) for item in tool_input.messages]
        tools = self._registry.manifest() if tool_input.include_tools else None

        try:
            response = await self._client.chat_completion(
                messages, tools=tools, model=tool_input.model
            )
        except (TransportError, SerializationError) as exc:
            raise ToolExecutionError(f"Sub-completion failed: {exc}") from exc

        return response.model_dump_json(exclude_none=True)

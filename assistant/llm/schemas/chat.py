"""Pydantic schema for LLM chat messages and completion responses."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

RoleLiteral = Literal["system", "user", "assistant", "tool"]


class FunctionCall(BaseModel):
    name: str
    arguments: str = Field("{}", description="JSON-encoded tool arguments")


class ToolCall(BaseModel):
    id: str
    type: Literal["function"] = "function"
    function: FunctionCall


class ChatMessage(BaseModel):
    role: RoleLiteral
    content: str | None = None
    tool_calls: list[ToolCall] | None = Field(
        default=None, description="Assistant-emitted tool calls"
    )
    tool_call_id: str | None = Field(None, description="Tool call identifier for tool messages")
    name: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Wire representation: unset fields are omitted rather than sent as null."""

        return self.model_dump(exclude_none=True)


class ChatChoice(BaseModel):
    message: ChatMessage
    finish_reason: str | None = None


class ChatUsage(BaseModel):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class CompletionResponse(BaseModel):
    choices: list[ChatChoice]
    usage: ChatUsage | None = None

"""Shared type definitions."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal, Mapping

InvocationStatus = Literal["ok", "error", "rejected"]


@dataclass(slots=True)
class ToolInvocationResult:
    """Represents the outcome returned to the LLM after handling one tool call."""

    tool_call_id: str
    name: str
    arguments: Mapping[str, Any] | None
    result: str
    status: InvocationStatus
    latency_ms: float
    timestamp: datetime

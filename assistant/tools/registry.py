"""Tool registry: advertises capabilities and dispatches execution by name."""

from __future__ import annotations

import json
import time
from typing import Any, Iterable

from ..core.exceptions import AssistantError, ToolExecutionError, ToolNotFound, ToolRegistrationError
from ..core.logging_config import get_logger
from .base import Tool

logger = get_logger(__name__)


class ToolRegistry:
    """Own the set of available tools, keyed by their unique name.

    Tools are registered once at startup and the registry is read-only
    afterwards, so one instance is shared by the orchestrator and by
    ``pipeline_tool``.
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ToolRegistrationError(f"Tool `{tool.name}` is already registered")
        self._tools[tool.name] = tool
        logger.debug("tool_registered", tool=tool.name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    async def execute(self, name: str, arguments: Any) -> str:
        """Run the tool registered under ``name`` and return its string output."""

        tool = self._tools.get(name)
        if tool is None:
            logger.warning("tool_not_found", tool=name)
            raise ToolNotFound(name)

        started = time.perf_counter()
        try:
            output = await tool.execute(arguments)
        except AssistantError:
            raise
        except Exception as exc:
            logger.exception("tool_unexpected_error", tool=name)
            raise ToolExecutionError(f"Tool `{name}` failed: {exc}") from exc

        logger.info(
            "tool_executed",
            tool=name,
            latency_ms=round((time.perf_counter() - started) * 1000, 2),
            output_preview=output[:200],
        )
        return output

    def manifest(self) -> list[dict[str, Any]]:
        """Tool definitions in the chat completions ``tools`` format."""

        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters,
                },
            }
            for tool in self._tools.values()
        ]

    def input_schemas(self) -> str:
        blocks = [
            f"{tool.name} schema:\n{json.dumps(tool.input_schema())}\n\n"
            for tool in self._tools.values()
        ]
        return "".join(blocks)

    def describe(self) -> str:
        listing = "Available Tools:\n\n"
        for tool in self._tools.values():
            listing += f"{tool.name} - {tool.description}\n"
        return listing

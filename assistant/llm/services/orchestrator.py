"""Conversation state machine interleaving model turns, tool calls and user input."""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ...core.exceptions import (
    CommandParseError,
    ConversationNotFound,
    SerializationError,
    ToolError,
    UserRejected,
)
from ...core.logging_config import get_logger
from ...core.types import ToolInvocationResult
from ...tools.registry import ToolRegistry
from ..console import ConsoleUI
from ..schemas.chat import ChatMessage, ToolCall
from .command_handler import CommandKind, parse_command
from .completion_client import CompletionClient
from .conversation_manager import ConversationManager

logger = get_logger(__name__)


class ConversationState(str, Enum):
    AWAITING_COMPLETION = "awaiting_completion"
    HANDLING_TOOL_CALLS = "handling_tool_calls"
    AWAITING_USER_INPUT = "awaiting_user_input"
    EXIT = "exit"


class Orchestrator:
    """Drive one interactive session until the user exits.

    Tool calls are handled strictly one at a time in the order the model
    returned them, and each is answered by exactly one tool message before
    the next completion request.
    """

    def __init__(
        self,
        client: CompletionClient,
        registry: ToolRegistry,
        conversations: ConversationManager,
        ui: ConsoleUI,
    ) -> None:
        self._client = client
        self._registry = registry
        self._conversations = conversations
        self._ui = ui
        self.state = ConversationState.AWAITING_COMPLETION
        self.tokens = 0
        self._input_closed = False

    async def run(self) -> None:
        """Run until ``exit``; completion service failures propagate to the caller."""

        reply: ChatMessage | None = None
        logger.info("session_started", conversation_id=self._conversations.conversation_id)

        while self.state is not ConversationState.EXIT:
            if self.state is ConversationState.AWAITING_COMPLETION:
                reply = await self.request_completion(include_tools=True)
                if reply.tool_calls:
                    self.state = ConversationState.HANDLING_TOOL_CALLS
                else:
                    self._show_reply(reply)
                    self.state = ConversationState.AWAITING_USER_INPUT

            elif self.state is ConversationState.HANDLING_TOOL_CALLS:
                for tool_call in reply.tool_calls if reply and reply.tool_calls else []:
                    await self.handle_tool_call(tool_call)
                if self._input_closed:
                    self.state = ConversationState.EXIT
                    continue
                reply = await self.request_completion(include_tools=False)
                self._show_reply(reply)
                self.state = ConversationState.AWAITING_USER_INPUT

            elif self.state is ConversationState.AWAITING_USER_INPUT:
                self.state = await self.await_user_input()

        logger.info("session_finished", conversation_id=self._conversations.conversation_id)

    async def request_completion(self, *, include_tools: bool) -> ChatMessage:
        tools = self._registry.manifest() if include_tools else None
        response = await self._client.chat_completion(self._conversations.messages, tools=tools)
        if response.usage and response.usage.total_tokens is not None:
            self.tokens = response.usage.total_tokens

        message = response.choices[0].message
        if not include_tools and message.tool_calls:
            # Nothing could answer these calls, so they are not recorded.
            logger.warning("unexpected_tool_calls_dropped", count=len(message.tool_calls))
            message = message.model_copy(update={"tool_calls": None})

        self._conversations.add_message(message)
        return message

    async def handle_tool_call(self, tool_call: ToolCall) -> ToolInvocationResult:
        """Gate, execute and record one tool call; tool failures never escape."""

        name = tool_call.function.name
        started = time.perf_counter()
        arguments: Any = None
        logger.info("tool_call_received", tool=name, tool_call_id=tool_call.id)

        try:
            arguments = decode_arguments(tool_call.function.arguments)
            if not await self._confirm(tool_call):
                raise UserRejected(name)
            result = await self._registry.execute(name, arguments)
        except UserRejected as exc:
            logger.warning("tool_call_rejected", tool=name, tool_call_id=tool_call.id)
            self._ui.show_rejection(tool_call)
            result, status = str(exc), "rejected"
        except (ToolError, SerializationError) as exc:
            logger.warning(
                "tool_call_failed",
                tool=name,
                tool_call_id=tool_call.id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            self._ui.show_tool_error(tool_call, str(exc))
            result, status = str(exc), "error"
        else:
            logger.info("tool_call_succeeded", tool=name, tool_call_id=tool_call.id)
            self._ui.show_tool_result(tool_call, result)
            status = "ok"

        self._conversations.add_message(
            ChatMessage(role="tool", content=result, tool_call_id=tool_call.id, name=name)
        )
        outcome = ToolInvocationResult(
            tool_call_id=tool_call.id,
            name=name,
            arguments=arguments if isinstance(arguments, dict) else None,
            result=result,
            status=status,
            latency_ms=round((time.perf_counter() - started) * 1000, 2),
            timestamp=datetime.now(tz=timezone.utc),
        )
        logger.info(
            "tool_call_completed",
            tool=name,
            tool_call_id=tool_call.id,
            status=outcome.status,
            latency_ms=outcome.latency_ms,
        )
        return outcome

    async def _confirm(self, tool_call: ToolCall) -> bool:
        # Once input has ended every remaining call in the batch is rejected.
        if self._input_closed:
            return False
        try:
            return await self._ui.confirm_tool_call(tool_call)
        except EOFError:
            logger.info("approval_input_closed", tool_call_id=tool_call.id)
            self._input_closed = True
            return False

    async def await_user_input(self) -> ConversationState:
        """Read lines until one becomes a prompt or the user exits."""

        while True:
            try:
                line = await self._ui.read_line(f"[{self.tokens}] User: ")
            except EOFError:
                return ConversationState.EXIT

            try:
                command = parse_command(line)
            except CommandParseError as exc:
                logger.warning("command_parse_failed", error=str(exc))
                self._ui.show_error(str(exc))
                continue

            if command.kind is CommandKind.EXIT:
                return ConversationState.EXIT
            if command.kind is CommandKind.LIST_TOOLS:
                self._ui.show_tools(self._registry.describe())
            elif command.kind is CommandKind.LOAD_CONVERSATION:
                self._load(command.argument or "")
            elif command.kind is CommandKind.PROMPT:
                self._conversations.add_user_prompt(command.argument or "")
                return ConversationState.AWAITING_COMPLETION

    def _load(self, conversation_id: str) -> None:
        try:
            self._conversations.load_conversation(conversation_id)
        except (ConversationNotFound, SerializationError) as exc:
            logger.warning("conversation_load_failed", conversation_id=conversation_id, error=str(exc))
            self._ui.show_error(str(exc))
            return
        self._ui.show_info(f"Successfully loaded conversation {conversation_id}")

    def _show_reply(self, message: ChatMessage) -> None:
        if message.content:
            self._ui.show_assistant_reply(message.content)


def decode_arguments(raw_arguments: str) -> Any:
    try:
        return json.loads(raw_arguments) if raw_arguments.strip() else {}
    except json.JSONDecodeError as exc:
        raise SerializationError(f"Invalid tool arguments: {exc}") from exc



"""Write-through conversation store backed by JSON files."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ...core.exceptions import ConversationNotFound, SerializationError, UserRejected
from ...core.logging_config import get_logger
from ..schemas.chat import ChatMessage

logger = get_logger(__name__)

_MESSAGES = TypeAdapter(list[ChatMessage])


def new_conversation_id() -> str:
    return datetime.now(tz=timezone.utc).strftime("%Y%m%d_%H%M%S")


@dataclass(slots=True)
class Conversation:
    id: str
    messages: list[ChatMessage] = field(default_factory=list)


class ConversationManager:
    """Own the active conversation and rewrite its file on every mutation."""

    def __init__(self, storage_dir: str | Path, conversation_id: str | None = None) -> None:
        self._storage_dir = Path(storage_dir)
        self._storage_dir.mkdir(parents=True, exist_ok=True)
        self._conversation = Conversation(id=conversation_id or new_conversation_id())

    @property
    def conversation_id(self) -> str:
        return self._conversation.id

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._conversation.messages)

    def path_for(self, conversation_id: str) -> Path:
        return self._storage_dir / f"{conversation_id}.json"

    def add_message(self, message: ChatMessage) -> None:
        logger.info(
            "conversation_message_added",
            conversation_id=self.conversation_id,
            role=message.role,
            tool_call_id=message.tool_call_id,
        )
        self._conversation.messages.append(message)
        self._persist()

    def add_user_prompt(self, prompt: str) -> None:
        self.add_message(ChatMessage(role="user", content=prompt))

    def initialize_conversation(self, system_prompt: str, initial_prompt: str) -> None:
        self.add_message(ChatMessage(role="system", content=system_prompt))
        self.add_user_prompt(initial_prompt)

    def load_conversation(self, conversation_id: str) -> None:
        """Replace the in-memory conversation with a persisted one."""

        path = self.path_for(conversation_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConversationNotFound(f"No conversation `{conversation_id}` at {path}") from exc

        try:
            messages = _MESSAGES.validate_json(raw)
        except ValidationError as exc:
            raise SerializationError(f"Conversation `{conversation_id}` is malformed: {exc}") from exc

        self._conversation = Conversation(id=conversation_id, messages=messages)
        if self.close_pending_tool_calls():
            self._persist()
        logger.info(
            "conversation_loaded",
            conversation_id=conversation_id,
            message_count=len(self._conversation.messages),
        )

    def close_pending_tool_calls(self, text: str = UserRejected.MESSAGE) -> int:
        """Answer tool calls that never got a tool message, e.g. after an interrupted session.

        Each missing answer is placed right after the tool messages that follow
        its assistant message. Returns how many answers were added.
        """

        repaired: list[ChatMessage] = []
        added = 0
        messages = self._conversation.messages
        index = 0
        while index < len(messages):
            message = messages[index]
            repaired.append(message)
            index += 1
            if message.role != "assistant" or not message.tool_calls:
                continue

            answered: set[str] = set()
            while index < len(messages) and messages[index].role == "tool":
                answered.add(messages[index].tool_call_id or "")
                repaired.append(messages[index])
                index += 1
            for tool_call in message.tool_calls:
                if tool_call.id not in answered:
                    repaired.append(
                        ChatMessage(
                            role="tool",
                            content=text,
                            tool_call_id=tool_call.id,
                            name=tool_call.function.name,
                        )
                    )
                    added += 1

        if added:
            logger.warning(
                "conversation_pending_tool_calls_closed",
                conversation_id=self.conversation_id,
                count=added,
            )
            self._conversation.messages = repaired
        return added

    def _persist(self) -> None:
        path = self.path_for(self.conversation_id)
        payload = json.dumps(
            [message.to_payload() for message in self._conversation.messages],
            ensure_ascii=False,
            indent=2,
        )
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)

"""Parsing of console input into control commands or prompts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ...core.exceptions import CommandParseError


class CommandKind(str, Enum):
    EXIT = "exit"
    LIST_TOOLS = "list_tools"
    LOAD_CONVERSATION = "load_conversation"
    PROMPT = "prompt"
    EMPTY = "empty"


@dataclass(frozen=True, slots=True)
class Command:
    kind: CommandKind
    argument: str | None = None


def parse_command(line: str) -> Command:
    """Classify one line of user input.

    ``exit``/``quit`` and ``list tools`` are matched case-insensitively.
    ``load <id>`` needs exactly one argument after the keyword.
    """

    text = line.strip()
    lowered = text.lower()

    if not text:
        return Command(CommandKind.EMPTY)
    if lowered in ("exit", "quit"):
        return Command(CommandKind.EXIT)
    if " ".join(lowered.split()) == "list tools":
        return Command(CommandKind.LIST_TOOLS)

    keyword, _, remainder = text.partition(" ")
    if keyword.lower() == "load":
        conversation_id = remainder.strip()
        if not conversation_id or len(conversation_id.split()) != 1:
            raise CommandParseError("Invalid load command, expected `load <conversation id>`")
        # Ids name files directly inside the conversations directory.
        if "/" in conversation_id or "\\" in conversation_id or conversation_id.startswith("."):
            raise CommandParseError(f"Invalid conversation id `{conversation_id}`")
        return Command(CommandKind.LOAD_CONVERSATION, conversation_id)

    return Command(CommandKind.PROMPT, text)

"""Service layer exports."""

from .command_handler import Command, CommandKind, parse_command
from .completion_client import CompletionClient
from .conversation_manager import ConversationManager
from .orchestrator import ConversationState, Orchestrator
from .prompts import build_system_prompt

__all__ = [
    "Command",
    "CommandKind",
    "CompletionClient",
    "ConversationManager",
    "ConversationState",
    "Orchestrator",
    "build_system_prompt",
    "parse_command",
]

"""Console entry point."""

from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from ..core.config import get_settings
from ..core.exceptions import AssistantError
from ..core.http_client import async_http_client
from ..core.logging_config import configure_logging, get_logger
from ..tools import build_registry
from .console import ConsoleUI
from .services.completion_client import CompletionClient
from .services.conversation_manager import ConversationManager
from .services.orchestrator import Orchestrator
from .services.prompts import build_system_prompt

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assistant",
        description="Console interface for an AI-powered assistant that can run local tools.",
    )
    parser.add_argument("initial_prompt", help="Sets the initial prompt for the assistant")
    parser.add_argument("-m", "--model", help="Sets the model to use with the completion API")
    parser.add_argument(
        "-l",
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Sets the log level",
    )
    parser.add_argument(
        "-s",
        "--state",
        action="store_true",
        help="Appends the contents of the state file to the initial system prompt",
    )
    return parser


async def run_session(args: argparse.Namespace, ui: ConsoleUI) -> None:
    settings = get_settings()
    async with async_http_client(timeout=settings.request_timeout_seconds) as http_client:
        client = CompletionClient(settings, model=args.model, http_client=http_client)
        registry = build_registry(settings, client)
        conversations = ConversationManager(settings.conversations_dir)

        logger.info(
            "assistant_startup",
            model=client.model,
            tools=registry.names,
            conversation_id=conversations.conversation_id,
            include_state=args.state,
        )
        ui.show_info(f"Conversation {conversations.conversation_id}")

        system_prompt = build_system_prompt(settings, registry, include_state=args.state)
        conversations.initialize_conversation(system_prompt, args.initial_prompt)

        await Orchestrator(client, registry, conversations, ui).run()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, force=True)
    ui = ConsoleUI()

    try:
        asyncio.run(run_session(args, ui))
    except AssistantError as exc:
        logger.error("assistant_fatal_error", error_type=type(exc).__name__, error=str(exc))
        ui.show_error(f"Fatal error: {exc}")
        return 1
    except KeyboardInterrupt:
        logger.info("assistant_interrupted")
        return 130

    logger.info("assistant_shutdown")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

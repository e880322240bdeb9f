"""Rich-powered console surface: replies, tool output and the approval gate."""

from __future__ import annotations

import asyncio
import json

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from ..core.logging_config import get_logger
from .schemas.chat import ToolCall

logger = get_logger(__name__)


def pretty_arguments(raw_arguments: str) -> str:
    """Pretty-print tool arguments, falling back to the raw text when not JSON."""

    try:
        return json.dumps(json.loads(raw_arguments), indent=2, ensure_ascii=False)
    except json.JSONDecodeError:
        return raw_arguments


class ConsoleUI:
    """Terminal I/O for the conversation loop.

    Blocking reads run in a worker thread so the event loop stays free while
    the user is typing.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    async def read_line(self, prompt: str) -> str:
        return await asyncio.to_thread(self.console.input, f"[yellow]{escape(prompt)}[/yellow]")

    async def confirm_tool_call(self, tool_call: ToolCall) -> bool:
        logger.info("tool_call_approval_requested", tool=tool_call.function.name, tool_call_id=tool_call.id)
        arguments = pretty_arguments(tool_call.function.arguments)
        self.console.print(
            f"\n[blue]{escape(tool_call.function.name)}({escape(arguments)}) ? (y/n)[/blue]"
        )
        answer = await self.read_line("> ")
        return answer.strip().lower() == "y"

    def show_assistant_reply(self, content: str) -> None:
        self.console.print(f"[cyan]Assistant: {escape(content)}[/cyan]")

    def show_tool_result(self, tool_call: ToolCall, result: str) -> None:
        self.console.print(
            Panel(escape(result), title=escape(tool_call.function.name), border_style="magenta")
        )

    def show_tool_error(self, tool_call: ToolCall, error: str) -> None:
        self.console.print(
            f"[red]Error executing tool call `{escape(tool_call.function.name)}`:\n{escape(error)}[/red]"
        )

    def show_rejection(self, tool_call: ToolCall) -> None:
        self.console.print(f"[dark_red]User rejected tool call: {escape(tool_call.function.name)}[/dark_red]")

    def show_tools(self, listing: str) -> None:
        self.console.print(f"[green]{escape(listing)}[/green]")

    def show_info(self, text: str) -> None:
        self.console.print(f"[magenta]{escape(text)}[/magenta]")

    def show_error(self, text: str) -> None:
        self.console.print(f"[bold red]{escape(text)}[/bold red]")

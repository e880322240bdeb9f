"""Process-spawning tool."""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import BaseModel, Field, model_validator

from ..core.exceptions import ToolExecutionError
from ..core.logging_config import get_logger
from .base import parse_input

logger = get_logger(__name__)


class ShellCommand(BaseModel):
    command: str = Field(..., description="Executable to run, resolved through PATH")
    args: list[str] | None = Field(None, description="Arguments passed verbatim, no shell expansion")


class ShellToolInput(BaseModel):
    commands: list[ShellCommand] = Field(..., description="Commands executed in order")

    @model_validator(mode="before")
    @classmethod
    def accept_single_command(cls, data: Any) -> Any:
        # {"command": "ls", "args": [...]} is shorthand for a one-element list.
        if isinstance(data, dict) and "commands" not in data and "command" in data:
            return {"commands": [{"command": data["command"], "args": data.get("args")}]}
        return data


class ShellTool:
    name = "shell_tool"
    description = "Executes a list of Linux shell commands and returns their concatenated output."
    parameters: dict[str, Any] = {
        "type": "object",
        "properties": {
            "commands": {
                "type": "array",
                "description": (
                    "The list of Linux commands to execute. Each command has a key `command` "
                    "with a string value and an optional key `args` with an array of strings. "
                    "For example `ls -ltrah` is {\"command\": \"ls\", \"args\": [\"-ltrah\"]}."
                ),
                "items": {
                    "type": "object",
                    "properties": {
                        "command": {"type": "string"},
                        "args": {"type": "array", "items": {"type": "string"}},
                    },
                    "required": ["command"],
                },
            }
        },
        "required": ["commands"],
    }

    def input_schema(self) -> dict[str, Any]:
        return ShellToolInput.model_json_schema()

    async def execute(self, arguments: Any) -> str:
        tool_input = parse_input(ShellToolInput, arguments, tool=self.name)
        return await run_commands(tool_input.commands)


async def run_commands(commands: list[ShellCommand]) -> str:
    """Run each command in sequence and join their trimmed stdout with newlines."""

    results: list[str] = []
    for shell_command in commands:
        results.append(await _run_command(shell_command))
    return "\n".join(results)


async def _run_command(shell_command: ShellCommand) -> str:
    command = shell_command.command
    logger.info("shell_command_started", command=command, args=shell_command.args)
    try:
        process = await asyncio.create_subprocess_exec(
            command,
            *(shell_command.args or []),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
    except FileNotFoundError as exc:
        raise ToolExecutionError(
            f"Command `{command}` not found. Please ensure the command exists and is in the PATH."
        ) from exc
    except OSError as exc:
        raise ToolExecutionError(f"Failed to execute command `{command}` due to error: {exc}") from exc

    if process.returncode != 0:
        error_text = stderr.decode("utf-8", errors="replace").strip()
        logger.warning("shell_command_failed", command=command, returncode=process.returncode)
        raise ToolExecutionError(f"Command `{command}` failed with error: {error_text}")

    return stdout.decode("utf-8", errors="replace").strip()

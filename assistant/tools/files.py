"""File editing tool."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from ..core.exceptions import ToolExecutionError
from ..core.logging_config import get_logger
from .base import parse_input

logger = get_logger(__name__)

FileOpType = Literal["create", "delete", "insertline", "deleteline", "updateline"]


class FileOperation(BaseModel):
    op: FileOpType = Field(..., description="Type of file operation")
    file_path: str = Field(..., description="Path of the file to operate upon")
    content: str | None = Field(None, description="New file contents or line text")
    line: int | None = Field(None, ge=1, description="1-based line number for line operations")


class FileToolInput(BaseModel):
    operations: list[FileOperation]


class FileTool:
    name = "file_tool"
    description = "Performs file operations such as create, delete, and update on files."
    parameters: dict[str, Any] = {
        "type": "object",
        "properties": {
            "operations": {
                "type": "array",
                "description": "The list of file operations to execute, in order",
                "items": {
                    "type": "object",
                    "properties": {
                        "op": {
                            "type": "string",
                            "enum": ["create", "delete", "insertline", "deleteline", "updateline"],
                            "description": "type of file operation",
                        },
                        "file_path": {"type": "string", "description": "path of file to operate upon"},
                        "content": {"type": "string", "description": "new file contents"},
                        "line": {
                            "type": "integer",
                            "description": "line number for insertline, updateline, and deleteline operations",
                        },
                    },
                    "required": ["op", "file_path"],
                },
            }
        },
        "required": ["operations"],
    }

    def input_schema(self) -> dict[str, Any]:
        return FileToolInput.model_json_schema()

    async def execute(self, arguments: Any) -> str:
        tool_input = parse_input(FileToolInput, arguments, tool=self.name)
        for operation in tool_input.operations:
            await asyncio.to_thread(apply_operation, operation)
        return "File operations completed successfully."


def apply_operation(operation: FileOperation) -> None:
    path = Path(operation.file_path)
    logger.info("file_operation", op=operation.op, file_path=str(path), line=operation.line)
    try:
        if operation.op == "create":
            if operation.content is None:
                raise ToolExecutionError("Missing file content for create operation")
            create_file(path, operation.content)
        elif operation.op == "delete":
            path.unlink()
        elif operation.op == "insertline":
            if operation.content is None or operation.line is None:
                raise ToolExecutionError(
                    "Missing line content or line number for insert line operation"
                )
            insert_line(path, operation.line, operation.content)
        elif operation.op == "deleteline":
            if operation.line is None:
                raise ToolExecutionError("Missing line number for delete line operation")
            delete_line(path, operation.line)
        elif operation.op == "updateline":
            if operation.content is None or operation.line is None:
                raise ToolExecutionError(
                    "Missing line content or line number for update line operation"
                )
            update_line(path, operation.line, operation.content)
    except OSError as exc:
        raise ToolExecutionError(f"File operation `{operation.op}` on {path} failed: {exc}") from exc


def create_file(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")


def _read_lines(path: Path) -> list[str]:
    with path.open(encoding="utf-8") as handle:
        return [line.rstrip("\n") for line in handle]


def _write_lines(path: Path, lines: list[str]) -> None:
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")


def insert_line(path: Path, line_number: int, text: str) -> None:
    """Insert ``text`` before ``line_number``; past the end it is appended."""

    lines = _read_lines(path)
    index = min(line_number - 1, len(lines))
    lines.insert(index, text)
    _write_lines(path, lines)


def delete_line(path: Path, line_number: int) -> None:
    lines = _read_lines(path)
    if line_number <= len(lines):
        del lines[line_number - 1]
    _write_lines(path, lines)


def update_line(path: Path, line_number: int, text: str) -> None:
    lines = _read_lines(path)
    if line_number <= len(lines):
        lines[line_number - 1] = text
    _write_lines(path, lines)

"""Project snapshot tool."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict

from ..core.exceptions import ToolExecutionError
from ..core.logging_config import get_logger
from .base import parse_input

logger = get_logger(__name__)


class SnapshotToolInput(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SnapshotTool:
    """Render the project's packaging files and Python sources as one text blob.

    The snapshot is also written to ``state_file`` so a later session can
    embed it in the system prompt with ``--state``.
    """

    name = "snap_tool"
    description = (
        "Return the source code of the current project, including pyproject.toml "
        "and all .py files"
    )
    parameters: dict[str, Any] = {"type": "object", "properties": {}}

    def __init__(
        self,
        root: str | Path,
        *,
        sources: Sequence[str] = ("assistant",),
        manifests: Sequence[str] = ("pyproject.toml",),
        state_file: str | Path = "state.txt",
        suffix: str = ".py",
    ) -> None:
        self._root = Path(root)
        self._sources = tuple(sources)
        self._manifests = tuple(manifests)
        self._state_file = Path(state_file)
        self._suffix = suffix

    def input_schema(self) -> dict[str, Any]:
        return SnapshotToolInput.model_json_schema()

    async def execute(self, arguments: Any) -> str:
        parse_input(SnapshotToolInput, arguments, tool=self.name)
        return await asyncio.to_thread(self.create_snapshot)

    def create_snapshot(self) -> str:
        parts: list[str] = []
        for manifest in self._manifests:
            parts.append(self._entry(self._root / manifest))

        for source in self._sources:
            source_dir = self._root / source
            if not source_dir.is_dir():
                raise ToolExecutionError(f"Error reading directory: {source_dir} does not exist")
            for path in sorted(source_dir.rglob(f"*{self._suffix}")):
                if path.is_file():
                    parts.append(self._entry(path))

        snapshot = "".join(parts)
        try:
            self._state_file.write_text(snapshot, encoding="utf-8")
        except OSError as exc:
            raise ToolExecutionError(f"Error writing to file: {exc}") from exc

        logger.info(
            "snapshot_created",
            files=len(parts),
            chars=len(snapshot),
            state_file=str(self._state_file),
        )
        return snapshot

    def _entry(self, path: Path) -> str:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ToolExecutionError(f"Error reading file: {exc}") from exc
        return f"File: {path.relative_to(self._root).as_posix()}\n{content}\n\n"

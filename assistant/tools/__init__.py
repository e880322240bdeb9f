"""Tool implementations and explicit startup registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import Tool
from .completion import CompletionTool
from .files import FileTool
from .pipeline import PipelineTool
from .registry import ToolRegistry
from .shell import ShellTool
from .snapshot import SnapshotTool

if TYPE_CHECKING:
    from ..core.config import AssistantSettings
    from ..llm.services.completion_client import CompletionClient


def build_registry(settings: AssistantSettings, client: CompletionClient) -> ToolRegistry:
    """Register every built-in tool once; the result is read-only afterwards."""

    registry = ToolRegistry()
    registry.register(ShellTool())
    registry.register(FileTool())
    registry.register(
        SnapshotTool(
            settings.snapshot_root,
            sources=settings.snapshot_sources,
            manifests=settings.snapshot_manifests,
            state_file=settings.state_file,
        )
    )
    registry.register(CompletionTool(client, registry))
    registry.register(PipelineTool(registry))
    return registry


__all__ = [
    "CompletionTool",
    "FileTool",
    "PipelineTool",
    "ShellTool",
    "SnapshotTool",
    "Tool",
    "ToolRegistry",
    "build_registry",
]

"""System prompt assembly."""

from __future__ import annotations

import json
from pathlib import Path

from ...core.config import AssistantSettings
from ...core.logging_config import get_logger
from ...tools.registry import ToolRegistry

logger = get_logger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are a versatile assistant. You have the ability to call various tools to help the user."
)


def build_system_prompt(
    settings: AssistantSettings, registry: ToolRegistry, *, include_state: bool = False
) -> str:
    prompt_path = Path(settings.system_prompt_file)
    if prompt_path.is_file():
        system_prompt = prompt_path.read_text(encoding="utf-8")
    else:
        logger.warning("system_prompt_missing", path=str(prompt_path))
        system_prompt = DEFAULT_SYSTEM_PROMPT

    if include_state:
        state_path = Path(settings.state_file)
        if state_path.is_file():
            system_prompt += "\nHere is the current project source code:\n"
            system_prompt += state_path.read_text(encoding="utf-8")
        else:
            logger.warning(
                "state_file_missing",
                path=str(state_path),
                hint="run snap_tool to generate it",
            )

    system_prompt += "\ntools JSON:\n"
    system_prompt += json.dumps(registry.manifest(), ensure_ascii=False)
    system_prompt += "\ntools JSON schemas:\n"
    system_prompt += registry.input_schemas()
    return system_prompt

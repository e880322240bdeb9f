"""Pipeline interpreter: runs registry tools in order with ``${stepId}`` substitution."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any, Mapping

from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.logging_config import get_logger
from .base import parse_input

if TYPE_CHECKING:
    from .registry import ToolRegistry

logger = get_logger(__name__)

_PLACEHOLDER = re.compile(r"\$\{([^}]*)\}")


class PipelineStep(BaseModel):
    id: str = Field(..., description="Step id, referenced later as ${id}")
    tool: str = Field(..., description="Name of the registered tool to call")
    parameters: Any = Field(default_factory=dict, description="JSON arguments for the tool")

    @field_validator("id")
    @classmethod
    def ensure_referenceable(cls, value: str) -> str:
        # `${id}` ends at the first closing brace.
        if "}" in value:
            raise ValueError(f"Pipeline step id `{value}` must not contain `}}`")
        return value


class PipelineToolInput(BaseModel):
    steps: list[PipelineStep]

    @model_validator(mode="after")
    def ensure_unique_ids(self) -> "PipelineToolInput":
        seen: set[str] = set()
        for step in self.steps:
            if step.id in seen:
                raise ValueError(f"Duplicate pipeline step id `{step.id}`")
            seen.add(step.id)
        return self


def substitute_placeholders(value: str, context: Mapping[str, str]) -> str:
    """Replace ``${key}`` with ``context[key]``; unknown keys stay as literal text."""

    return _PLACEHOLDER.sub(lambda match: context.get(match.group(1), match.group(0)), value)


def resolve_placeholders(value: Any, context: Mapping[str, str]) -> Any:
    """Walk a JSON value and substitute placeholders in string leaves only."""

    if isinstance(value, dict):
        return {key: resolve_placeholders(item, context) for key, item in value.items()}
    if isinstance(value, list):
        return [resolve_placeholders(item, context) for item in value]
    if isinstance(value, str):
        return substitute_placeholders(value, context)
    return value


class PipelineTool:
    name = "pipeline_tool"
    description = (
        "Executes a series of tool calls, passing the output of one as the input to another "
        "using substitutions `${priorStepId}`. Pass `steps` and each step's `parameters` as "
        "JSON values, never as JSON-encoded strings."
    )
    parameters: dict[str, Any] = {
        "type": "object",
        "properties": {
            "steps": {
                "type": "array",
                "description": "The list of pipeline steps to execute, with possible substitutions",
                "items": {
                    "type": "object",
                    "properties": {
                        "id": {
                            "type": "string",
                            "description": (
                                "the id of the pipeline step. can be subsequently referenced "
                                "in pipeline with ${thisId} for result substitution"
                            ),
                        },
                        "tool": {
                            "type": "string",
                            "description": "name of tool (in snake case) to call",
                        },
                        "parameters": {
                            "type": "object",
                            "description": "JSON arguments to pass to tool",
                        },
                    },
                    "required": ["id", "tool", "parameters"],
                },
            }
        },
        "required": ["steps"],
    }

    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry

    def input_schema(self) -> dict[str, Any]:
        return PipelineToolInput.model_json_schema()

    async def execute(self, arguments: Any) -> str:
        tool_input = parse_input(PipelineToolInput, arguments, tool=self.name)
        context: dict[str, str] = {}

        for position, step in enumerate(tool_input.steps, start=1):
            resolved = resolve_placeholders(step.parameters, context)
            logger.info(
                "pipeline_step_started",
                step=step.id,
                tool=step.tool,
                position=position,
                total=len(tool_input.steps),
            )
            # Any failure propagates and discards the partial context.
            context[step.id] = await self._registry.execute(step.tool, resolved)

        logger.info("pipeline_completed", steps=len(context))
        return json.dumps(context, ensure_ascii=False)

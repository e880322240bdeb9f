"""Tool contract shared by the registry, the pipeline and the orchestrator."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.exceptions import SerializationError

InputModel = TypeVar("InputModel", bound=BaseModel)


class Tool(Protocol):
    """A named capability invocable with JSON arguments.

    ``parameters`` is the JSON schema advertised to the model in the tool
    manifest; ``input_schema()`` is the schema of the validated input model
    and is embedded verbatim in the system prompt.
    """

    name: str
    description: str
    parameters: dict[str, Any]

    def input_schema(self) -> dict[str, Any]: ...

    async def execute(self, arguments: Any) -> str: ...


def parse_input(model: type[InputModel], arguments: Any, *, tool: str) -> InputModel:
    """Validate raw tool arguments, reporting failures as SerializationError."""

    try:
        return model.model_validate(arguments if arguments is not None else {})
    except ValidationError as exc:
        raise SerializationError(f"Invalid arguments for `{tool}`: {exc}") from exc

"""Chat completion client abstraction backed by the OpenAI SDK."""

from __future__ import annotations

from typing import Any, Iterable

import httpx
from openai import APIError as OpenAIError
from openai import AsyncOpenAI
from pydantic import ValidationError

from ...core.config import AssistantSettings
from ...core.exceptions import ConfigurationError, SerializationError, TransportError
from ...core.logging_config import get_logger
from ..schemas.chat import ChatMessage, CompletionResponse

logger = get_logger(__name__)


class CompletionClient:
    """Thin wrapper around an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        settings: AssistantSettings,
        *,
        model: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if settings.openai_api_key is None:
            raise ConfigurationError("OPENAI_API_KEY is not set")

        api_key = settings.openai_api_key.get_secret_value()
        masked_key = f"{api_key[:4]}***{api_key[-4:]}"
        base_url = str(settings.openai_api_base).rstrip("/")
        self.model = model or settings.openai_model
        logger.info(
            "completion_client_init",
            base_url=base_url,
            model=self.model,
            api_key_masked=masked_key,
        )
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=settings.request_timeout_seconds,
            http_client=http_client,
        )

    async def chat_completion(
        self,
        messages: Iterable[ChatMessage],
        *,
        tools: list[dict[str, Any]] | None = None,
        model: str | None = None,
    ) -> CompletionResponse:
        """Issue one chat completion request; ``tools`` is omitted when not given."""

        payload_messages = [message.to_payload() for message in messages]
        request: dict[str, Any] = {
            "model": model or self.model,
            "messages": payload_messages,
        }
        if tools:
            request["tools"] = tools

        logger.info(
            "completion_request",
            model=request["model"],
            message_count=len(payload_messages),
            tool_count=len(tools or []),
        )
        logger.debug("completion_request_payload", preview=payload_messages[-1:] or None)

        try:
            response = await self._client.chat.completions.create(**request)
        except OpenAIError as exc:
            logger.error(
                "completion_sdk_error",
                error_type=type(exc).__name__,
                message=str(exc),
            )
            raise TransportError(f"Completion service error: {exc}") from exc

        return parse_completion(response.model_dump())


def parse_completion(blob: Any) -> CompletionResponse:
    """Validate a raw completion payload, requiring at least one choice."""

    try:
        parsed = CompletionResponse.model_validate(blob)
    except ValidationError as exc:
        raise SerializationError(f"Malformed completion response: {exc}") from exc

    if not parsed.choices:
        raise SerializationError("Completion response contained no choices")

    logger.info(
        "completion_response",
        finish_reason=parsed.choices[0].finish_reason,
        tool_calls=len(parsed.choices[0].message.tool_calls or []),
        tokens_total=parsed.usage.total_tokens if parsed.usage else None,
    )
    return parsed

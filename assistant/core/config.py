"""Configuration management for the console assistant."""

from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AnyHttpUrl, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

_REPO_ROOT = Path(__file__).resolve().parents[2]
_PACKAGE_DIR = Path(__file__).resolve().parents[1]
# Repo root .env first, then the package directory and the working directory.
_ENV_FILE_CANDIDATES: tuple[str, ...] = (
    str(_REPO_ROOT / ".env"),
    str(_PACKAGE_DIR / ".env"),
    ".env",
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


def _default_log_file() -> str:
    stamp = datetime.now(tz=timezone.utc).strftime("%Y%m%d_%H%M%S")
    return str(Path("logs") / f"{stamp}.log")


class AssistantSettings(BaseSettings):
    """Centralised configuration derived from environment variables."""

    log_level: LogLevel = "INFO"
    log_file: str | None = Field(
        default_factory=_default_log_file,
        description="Log file path; an empty value disables file output",
    )
    log_to_console: bool = Field(
        False, description="Mirror log records to stderr next to the interactive console"
    )

    openai_api_key: SecretStr | None = Field(None, description="Completion service API key")
    openai_api_base: AnyHttpUrl = Field(
        "https://api.openai.com/v1", description="OpenAI-compatible API endpoint"
    )
    openai_model: str = Field("gpt-4-1106-preview", description="Default completion model")
    request_timeout_seconds: float = Field(120.0, description="Transport timeout per request")

    conversations_dir: str = Field("conversations", description="Where conversations are persisted")
    system_prompt_file: str = Field("system.txt", description="Base system prompt")
    state_file: str = Field("state.txt", description="Project snapshot embedded by --state")

    snapshot_root: str = Field(".", description="Directory snap_tool reads from")
    snapshot_sources: list[str] = Field(
        default_factory=lambda: ["assistant"],
        description="Source directories included in a snapshot",
    )
    snapshot_manifests: list[str] = Field(
        default_factory=lambda: ["pyproject.toml"],
        description="Packaging files prepended to a snapshot",
    )

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_CANDIDATES,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> AssistantSettings:
    """Return a cached AssistantSettings instance."""

    return AssistantSettings()


def resolved_env_file() -> str | None:
    """Return the first readable .env file from the candidate list."""

    for candidate in _ENV_FILE_CANDIDATES:
        path = Path(candidate).expanduser()
        if path.is_file():
            return str(path)
    return None


def env_file_candidates() -> tuple[str, ...]:
    """Expose configured env file search order for diagnostics."""

    return _ENV_FILE_CANDIDATES

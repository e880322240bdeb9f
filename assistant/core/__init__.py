"""Core infrastructure utilities."""

from .config import AssistantSettings, get_settings
from .logging_config import configure_logging, get_logger

__all__ = [
    "AssistantSettings",
    "configure_logging",
    "get_logger",
    "get_settings",
]

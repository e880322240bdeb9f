import os

import pytest

from assistant.core.config import AssistantSettings


@pytest.fixture(autouse=True)
def _restore_env():
    original = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original)


def test_assistant_settings_reads_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-test")
    monkeypatch.setenv("CONVERSATIONS_DIR", "/tmp/conversations")
    monkeypatch.setenv("SNAPSHOT_SOURCES", '["src", "lib"]')

    settings = AssistantSettings(_env_file=None)

    assert settings.openai_api_key.get_secret_value() == "sk-test-key"
    assert settings.openai_model == "gpt-test"
    assert settings.conversations_dir == "/tmp/conversations"
    assert settings.snapshot_sources == ["src", "lib"]


def test_defaults_without_env(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("LOG_FILE", raising=False)

    settings = AssistantSettings(_env_file=None)

    assert settings.openai_api_key is None
    assert settings.log_file.startswith("logs")
    assert settings.log_file.endswith(".log")
    assert settings.state_file == "state.txt"


def test_empty_log_file_disables_file_logging(monkeypatch):
    monkeypatch.setenv("LOG_FILE", "")

    assert AssistantSettings(_env_file=None).log_file == ""

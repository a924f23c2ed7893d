"""Tests for EmailitSettings validation and environment loading."""

from __future__ import annotations

import pydantic
import pytest

from emailit.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, EmailitSettings


def test_defaults():
    settings = EmailitSettings(api_key="k")
    assert settings.base_url == DEFAULT_BASE_URL == "https://api.emailit.com"
    assert settings.timeout == DEFAULT_TIMEOUT == 30.0
    assert settings.log_format == "text"
    assert settings.log_level == "INFO"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"api_key": ""},
        {"api_key": "  "},
        {"api_key": "k", "base_url": ""},
        {"api_key": "k", "timeout": 0},
        {"api_key": "k", "timeout": -1},
        {"api_key": "k", "log_format": "xml"},
    ],
)
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        EmailitSettings(**kwargs)


def test_missing_key_message_names_env_var():
    with pytest.raises(ValueError, match="EMAILIT_API_KEY"):
        EmailitSettings()


def test_environment_variables(monkeypatch):
    monkeypatch.setenv("EMAILIT_API_KEY", "env-key")
    monkeypatch.setenv("EMAILIT_BASE_URL", "https://eu.api.test")
    monkeypatch.setenv("EMAILIT_TIMEOUT", "5")
    settings = EmailitSettings()
    assert settings.api_key == "env-key"
    assert settings.base_url == "https://eu.api.test"
    assert settings.timeout == 5.0


def test_explicit_value_beats_environment(monkeypatch):
    monkeypatch.setenv("EMAILIT_API_KEY", "env-key")
    assert EmailitSettings(api_key="explicit").api_key == "explicit"


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("EMAILIT_API_KEY=from-dotenv\n")
    assert EmailitSettings().api_key == "from-dotenv"


def test_log_format_normalized():
    assert EmailitSettings(api_key="k", log_format="JSON").log_format == "json"


def test_frozen():
    settings = EmailitSettings(api_key="k")
    with pytest.raises(pydantic.ValidationError):
        settings.api_key = "other"

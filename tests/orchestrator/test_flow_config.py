"""Tests for generator configuration accessors."""

from src.orchestrator.flow.config import (
    DEFAULT_MODEL,
    get_model,
    get_temperature,
    get_timeout,
    is_generator_enabled,
)


def test_model_default(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_MODEL", raising=False)
    assert get_model() == DEFAULT_MODEL


def test_model_override(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_MODEL", "claude-haiku-4-5-20251001")
    assert get_model() == "claude-haiku-4-5-20251001"


def test_temperature_and_timeout_defaults(monkeypatch):
    monkeypatch.delenv("SALOMAO_GENERATOR_TEMPERATURE", raising=False)
    monkeypatch.delenv("SALOMAO_GENERATOR_TIMEOUT", raising=False)
    assert get_temperature() == 0.7
    assert get_timeout() == 30.0


def test_invalid_float_uses_default(monkeypatch, caplog):
    monkeypatch.setenv("SALOMAO_GENERATOR_TIMEOUT", "soon")
    with caplog.at_level("WARNING"):
        assert get_timeout() == 30.0
    assert "SALOMAO_GENERATOR_TIMEOUT" in caplog.text


def test_generator_toggle(monkeypatch):
    for value in ("0", "false", "No", "off"):
        monkeypatch.setenv("SALOMAO_GENERATOR_ENABLED", value)
        assert is_generator_enabled() is False
    monkeypatch.setenv("SALOMAO_GENERATOR_ENABLED", "true")
    assert is_generator_enabled() is True

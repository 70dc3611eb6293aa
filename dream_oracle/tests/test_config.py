"""Tests for environment-driven settings."""

import pytest

from dream_oracle.config import Settings, settings


@pytest.fixture
def clean_settings(monkeypatch):
    for var in ("OPENAI_API_KEY", "TRANSCRIPTION_API_KEY", "TRANSCRIPTION_PROVIDER", "RESET_POLICY"):
        monkeypatch.delenv(var, raising=False)
    settings.cache_clear()
    yield
    settings.cache_clear()


def test_defaults(clean_settings):
    cfg = Settings(_env_file=None)

    assert cfg.openai_api_key is None
    assert cfg.interpretation_temperature == 0.8
    assert cfg.interpretation_top_p == 0.95
    assert cfg.transcription_provider == "gpt4o"
    assert cfg.transcription_language == "pt"
    assert cfg.speech_lang == "pt-BR"
    assert cfg.speech_rate == 0.9
    assert cfg.reset_policy == "keep_identity"


def test_environment_overrides(clean_settings, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-chat")
    monkeypatch.setenv("TRANSCRIPTION_PROVIDER", "whisper")
    monkeypatch.setenv("RESET_POLICY", "clear_all")

    cfg = settings()

    assert cfg.openai_api_key == "sk-chat"
    assert cfg.transcription_provider == "whisper"
    assert cfg.reset_policy == "clear_all"
    # cached until cleared
    assert settings() is cfg


def test_transcription_key_falls_back_to_openai_key(clean_settings):
    assert Settings(_env_file=None, openai_api_key="sk-chat").effective_transcription_api_key == "sk-chat"
    assert Settings(
        _env_file=None, openai_api_key="sk-chat", transcription_api_key="sk-audio"
    ).effective_transcription_api_key == "sk-audio"


def test_unknown_provider_is_rejected(clean_settings, monkeypatch):
    monkeypatch.setenv("TRANSCRIPTION_PROVIDER", "carrier-pigeon")

    with pytest.raises(ValueError):
        Settings(_env_file=None)

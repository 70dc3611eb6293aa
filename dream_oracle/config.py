# dream_oracle/config.py
"""
Process-wide settings.

Values come from the environment (and a local ``.env`` during development).
``settings()`` is cached; tests that tweak the environment call
``settings.cache_clear()`` before reading it again.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Credential shared by the default providers. Left optional so the app can
    # boot without it; the first service call raises MissingCredentialError.
    openai_api_key: Optional[str] = None

    # Interpretation (any OpenAI-compatible chat completion endpoint)
    llm_base_url: Optional[str] = None
    interpretation_model: str = "gpt-4o"
    interpretation_temperature: float = 0.8
    interpretation_top_p: float = 0.95

    # Transcription
    transcription_provider: Literal["gpt4o", "whisper"] = "gpt4o"
    transcription_model: Optional[str] = None      # provider default when unset
    transcription_base_url: Optional[str] = None
    transcription_api_key: Optional[str] = None   # falls back to openai_api_key
    transcription_language: str = "pt"

    request_timeout_s: float = 60.0

    # Browser speech synthesis parameters sent with every utterance
    speech_lang: str = "pt-BR"
    speech_rate: float = 0.9
    speech_pitch: float = 1.0
    speech_volume: float = 1.0

    # "keep_identity" keeps name/gender on "new dream"; "clear_all" wipes them
    reset_policy: Literal["keep_identity", "clear_all"] = "keep_identity"

    log_level: str = "INFO"

    @property
    def effective_transcription_api_key(self) -> Optional[str]:
        return self.transcription_api_key or self.openai_api_key


@lru_cache
def settings() -> Settings:
    return Settings()

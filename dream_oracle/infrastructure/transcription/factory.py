"""Picks the transcription adapter named by configuration."""
from __future__ import annotations

from dream_oracle.config import Settings
from dream_oracle.context.dream.prompts import InterpreterPrompts
from dream_oracle.domain.ports.transcription import TranscriptionService
from .gpt4o import GPT4oTranscriptionService
from .whisper import WhisperTranscriptionService


def build_transcription_service(cfg: Settings) -> TranscriptionService:
    if cfg.transcription_provider == "whisper":
        return WhisperTranscriptionService(
            api_key=cfg.effective_transcription_api_key,
            model=cfg.transcription_model or "whisper-1",
            base_url=cfg.transcription_base_url,
            timeout=cfg.request_timeout_s,
        )
    if cfg.transcription_provider == "gpt4o":
        return GPT4oTranscriptionService(
            api_key=cfg.effective_transcription_api_key,
            model=cfg.transcription_model,
            base_url=cfg.transcription_base_url,
            prompt=InterpreterPrompts.TRANSCRIPTION_INSTRUCTION,
        )
    raise ValueError(f"Unknown transcription provider: {cfg.transcription_provider!r}")

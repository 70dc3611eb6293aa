# dream_oracle/dependencies.py

"""
Centralised FastAPI dependency providers.

Lifetimes
---------
* module-level singletons → created once at import time
* per-tab objects         → one DreamSessionController per SessionRegistry entry
"""

from __future__ import annotations

from uuid import uuid4

from fastapi import Depends, HTTPException

from dream_oracle.config import settings
from dream_oracle.context.dream.builder import InterpretationContextBuilder
from dream_oracle.domain.errors import SessionNotFoundError
from dream_oracle.domain.session.entities import ResetPolicy
from dream_oracle.infrastructure.llm.openai_llm import OpenAILLM
from dream_oracle.infrastructure.session.registry import SessionRegistry
from dream_oracle.infrastructure.speech.browser_speech import BrowserSpeechEngine
from dream_oracle.infrastructure.sse.hub import EventStreamHub
from dream_oracle.infrastructure.transcription.factory import build_transcription_service
from dream_oracle.services.interpretation.service import InterpretationService
from dream_oracle.services.session.controller import DreamSessionController, SpeechSettings

# ────────────────────────── singletons ─────────────────────────── #

_hub = EventStreamHub()
_llm = OpenAILLM(
    api_key=settings().openai_api_key,
    model=settings().interpretation_model,
    base_url=settings().llm_base_url,
    timeout=settings().request_timeout_s,
)
_context_builder = InterpretationContextBuilder(
    temperature=settings().interpretation_temperature,
    top_p=settings().interpretation_top_p,
)
_interpretation_service = InterpretationService(_llm, _context_builder)
_transcribe = build_transcription_service(settings())
_speech_settings = SpeechSettings(
    lang=settings().speech_lang,
    rate=settings().speech_rate,
    pitch=settings().speech_pitch,
    volume=settings().speech_volume,
)


def _new_controller() -> DreamSessionController:
    session_id = uuid4().hex
    return DreamSessionController(
        interpreter=_interpretation_service,
        transcriber=_transcribe,
        speech_engine=BrowserSpeechEngine(_hub, session_id),
        hub=_hub,
        session_id=session_id,
        speech_settings=_speech_settings,
        reset_policy=ResetPolicy(settings().reset_policy),
        transcription_language=settings().transcription_language,
    )


_registry = SessionRegistry(_new_controller)

# ─────────────────────── DI provider helpers ───────────────────── #

def get_event_hub() -> EventStreamHub:
    """Return the process-wide in-memory hub (singleton)."""
    return _hub

def get_session_registry() -> SessionRegistry:
    return _registry

def get_controller(
    sid: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> DreamSessionController:
    """Resolve the path's session id to its live controller; 404 if unknown."""
    try:
        return registry.get(sid)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")

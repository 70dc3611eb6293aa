"""Whisper-style multipart transcription adapter (any OpenAI-compatible host)."""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from dream_oracle.domain.audio.payload import AudioPayload
from dream_oracle.domain.errors import MissingCredentialError, TranscriptionError
from dream_oracle.domain.ports.transcription import TranscriptionService

logger = logging.getLogger(__name__)


class WhisperTranscriptionService(TranscriptionService):
    _DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "whisper-1",
        base_url: Optional[str] = None,
        timeout: float = 300,                # Whisper can take a while
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._endpoint = f"{(base_url or self._DEFAULT_BASE_URL).rstrip('/')}/audio/transcriptions"
        self._timeout = timeout
        self._transport = transport

    async def transcribe(self, payload: AudioPayload) -> str:
        if not self._api_key:
            raise MissingCredentialError("transcription", "TRANSCRIPTION_API_KEY or OPENAI_API_KEY")

        # 1️⃣  decode the transport-safe payload back into bytes
        try:
            audio_bytes = payload.to_bytes()
        except ValueError as e:
            raise TranscriptionError(str(e)) from e

        files = {
            # name, bytes-like-obj, MIME-type
            "file": (payload.filename, audio_bytes, payload.mime_type),
            "model": (None, self._model),
            "language": (None, payload.language),
        }

        # 2️⃣  post it as multipart
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.post(
                self._endpoint,
                headers={"Authorization": f"Bearer {self._api_key}"},
                files=files,
            )

        if resp.status_code != 200:
            raise TranscriptionError(f"Whisper error {resp.status_code}: {resp.text}")

        try:
            transcription = resp.json().get("text")
        except ValueError as e:
            raise TranscriptionError(f"Whisper returned a non-JSON body: {resp.text[:200]}") from e
        logger.debug(f"Whisper transcript length: {len(transcription or '')} chars")
        return (transcription or "").strip()

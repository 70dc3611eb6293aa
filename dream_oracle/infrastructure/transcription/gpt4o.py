"""GPT-4o-based transcription adapter implementing the TranscriptionService port."""
from __future__ import annotations

import io
import logging
import time
from typing import Optional

from openai import AsyncOpenAI

from dream_oracle.domain.audio.payload import AudioPayload
from dream_oracle.domain.errors import MissingCredentialError, TranscriptionError
from dream_oracle.domain.ports.transcription import TranscriptionService

logger = logging.getLogger(__name__)


class GPT4oTranscriptionService(TranscriptionService):
    """Send the recorded dream to GPT-4o-Transcribe and return the text."""

    _MODEL = "gpt-4o-transcribe"        # full-accuracy model (use *-mini* for cheaper)
    _ENDPOINT_TIMEOUT_S = 60            # network + OpenAI request timeout

    # Pricing constants (USD per million tokens)
    _AUDIO_IN_RATE = 6.00
    _TEXT_OUT_RATE = 10.00

    def __init__(
        self,
        api_key: Optional[str],
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        prompt: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model or self._MODEL
        self._base_url = base_url
        self._prompt = prompt
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise MissingCredentialError("transcription", "TRANSCRIPTION_API_KEY or OPENAI_API_KEY")
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._ENDPOINT_TIMEOUT_S,
            )
        return self._client

    # ───────────────────────── public API (port impl) ───────────────────────── #

    def _calculate_cost(self, usage) -> float:
        """Calculate the transcription cost based on token usage."""
        audio_in = usage.input_token_details.audio_tokens
        text_out = usage.output_tokens
        return (audio_in / 1_000_000) * self._AUDIO_IN_RATE + \
               (text_out / 1_000_000) * self._TEXT_OUT_RATE

    async def transcribe(self, payload: AudioPayload) -> str:
        """Return the transcript of the base64 audio in *payload*."""
        client = self._get_client()
        start_time = time.time()
        logger.info("GPT-4o Transcription Starting")

        try:
            audio_bytes = payload.to_bytes()
        except ValueError as e:
            raise TranscriptionError(str(e)) from e
        logger.debug(f"Audio payload: {len(audio_bytes) / 1024:.1f} KB ({payload.mime_type})")

        # OpenAI requires a file-like object; BytesIO keeps everything in-memory
        audio_file = io.BytesIO(audio_bytes)

        kwargs = {"language": payload.language}
        if self._prompt:
            kwargs["prompt"] = self._prompt

        api_start = time.time()
        response = await client.audio.transcriptions.create(
            model=self._model,
            file=(payload.filename, audio_file, payload.mime_type),
            **kwargs,
        )
        api_time = time.time() - api_start

        usage = getattr(response, "usage", None)
        if usage:
            try:
                cost = self._calculate_cost(usage)
                logger.info(f"Transcription metrics - API time: {api_time:.2f}s, Cost: ${cost:.6f}")
            except AttributeError as e:
                logger.warning(f"Error calculating cost: {e}")

        text = (getattr(response, "text", None) or "").strip()
        # Log transcript info (not the full text for privacy)
        logger.debug(f"Transcript generated, length: {len(text)} chars")
        logger.info(f"GPT-4o Transcription Complete - Total time: {time.time() - start_time:.2f} seconds")
        return text

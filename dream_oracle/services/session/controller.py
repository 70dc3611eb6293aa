# dream_oracle/services/session/controller.py
"""
Dream session controller.

One controller exists per browser tab.  It owns the session snapshot, the
open microphone capture (if any) and the active utterance (if any), and it
drives the interpretation and transcription services.  Every state change goes
through ``reducer.reduce`` and is pushed to the tab's event stream.

Failures never leave the session loading: every path that bumps the pending
call counter releases it in a ``finally``.  Nothing is retried.
"""
from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Optional, Set
from uuid import uuid4

from dream_oracle.domain.audio.payload import AudioBlob, AudioPayload
from dream_oracle.domain.errors import (
    MicrophoneUnavailableError,
    MissingCredentialError,
    SessionBusyError,
    SessionClosedError,
    SessionValidationError,
    TranscriptionError,
)
from dream_oracle.domain.ports.audio_capture import AudioCaptureDevice, CaptureSession
from dream_oracle.domain.ports.speech import SpeechEngine
from dream_oracle.domain.ports.transcription import TranscriptionService
from dream_oracle.domain.session import events as ev
from dream_oracle.domain.session.entities import (
    Gender,
    RecordingState,
    ResetPolicy,
    SessionState,
    SpeechState,
    Utterance,
)
from dream_oracle.domain.session.messages import (
    ALREADY_RECORDING,
    BUSY,
    INTERPRETATION_APOLOGY,
    MICROPHONE_UNAVAILABLE,
    MISSING_FIELDS,
    NOTHING_TO_SPEAK,
    SESSION_CLOSED,
    TRANSCRIPTION_FAILED,
)
from dream_oracle.domain.session.reducer import reduce
from dream_oracle.infrastructure.sse.hub import EventStreamHub
from dream_oracle.services.interpretation.service import InterpretationService

logger = logging.getLogger(__name__)

_MARKDOWN = re.compile(r"(\*\*|__|[*_`#>])")
_WHITESPACE = re.compile(r"[ \t]+")


def spoken_text(text: str) -> str:
    """Strip markdown emphasis so the engine does not read the markers aloud."""
    return _WHITESPACE.sub(" ", _MARKDOWN.sub("", text)).strip()


@dataclass(frozen=True)
class SpeechSettings:
    lang: str = "pt-BR"
    rate: float = 0.9
    pitch: float = 1.0
    volume: float = 1.0


class DreamSessionController:
    def __init__(
        self,
        interpreter: InterpretationService,
        transcriber: TranscriptionService,
        speech_engine: SpeechEngine,
        microphone: Optional[AudioCaptureDevice] = None,
        hub: Optional[EventStreamHub] = None,
        session_id: Optional[str] = None,
        speech_settings: SpeechSettings = SpeechSettings(),
        reset_policy: ResetPolicy = ResetPolicy.KEEP_IDENTITY,
        transcription_language: str = "pt",
    ) -> None:
        self.session_id = session_id or uuid4().hex
        self._interpreter = interpreter
        self._transcriber = transcriber
        self._engine = speech_engine
        self._microphone = microphone
        self._hub = hub
        self._speech = speech_settings
        self._reset_policy = ResetPolicy(reset_policy)
        self._language = transcription_language

        self._state = SessionState()
        self._capture: Optional[CaptureSession] = None
        self._inflight: Set[asyncio.Future] = set()
        self._closed = False

    # ─────────────────────────────── state ───────────────────────────────── #

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    async def _apply(self, event: ev.SessionEvent) -> SessionState:
        self._state = reduce(self._state, event)
        await self._publish()
        return self._state

    async def _publish(self) -> None:
        if self._hub is None:
            return
        chunk = json.dumps({"type": "state", "state": self._state.snapshot()}, ensure_ascii=False)
        await self._hub.publish(stream_id=self.session_id, chunk=chunk)

    async def _notify(self, message: str) -> None:
        await self._apply(ev.Notified(message))

    def _track(self, future: asyncio.Future) -> asyncio.Future:
        self._inflight.add(future)
        future.add_done_callback(self._inflight.discard)
        return future

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(SESSION_CLOSED)

    def _cancel_inflight(self) -> int:
        pending = [f for f in self._inflight if not f.done()]
        for future in pending:
            future.cancel()
        return len(pending)

    # ──────────────────────────── form fields ────────────────────────────── #

    async def update_fields(
        self,
        user_name: Optional[str] = None,
        user_gender: Optional[Gender] = None,
        dream_text: Optional[str] = None,
    ) -> SessionState:
        gender = Gender(user_gender) if user_gender is not None else None
        return await self._apply(ev.FieldsChanged(user_name, gender, dream_text))

    # ─────────────────────────── interpretation ──────────────────────────── #

    async def interpret(self) -> SessionState:
        """Submit the current dream for interpretation.

        Raises SessionValidationError (no network call) when the name or the
        dream text is blank, SessionBusyError while another call is running.
        SessionClosedError once the session was torn down.
        Service failures are turned into the fixed apology message, except a
        missing credential which is re-raised after the session is settled.
        """
        self._ensure_open()
        state = self._state
        if state.loading:
            await self._notify(BUSY)
            raise SessionBusyError(BUSY)
        if not state.user_name.strip() or not state.dream_text.strip():
            await self._notify(MISSING_FIELDS)
            raise SessionValidationError(MISSING_FIELDS)

        generation = state.generation
        await self._apply(ev.SubmitAccepted(state.dream_text))
        logger.info(f"[session {self.session_id}] interpretation requested")

        call = self._track(asyncio.ensure_future(
            self._interpreter.interpret(state.user_name, state.user_gender, state.dream_text)
        ))
        try:
            text = await call
        except asyncio.CancelledError:
            if asyncio.current_task().cancelling():
                raise
            # cancelled by reset/teardown; the session already moved on
            logger.info(f"[session {self.session_id}] interpretation cancelled")
        except MissingCredentialError as e:
            logger.critical(str(e))
            await self._apply(ev.InterpretationFailed(INTERPRETATION_APOLOGY, generation))
            raise
        except Exception as e:
            logger.error(f"[session {self.session_id}] Error interpreting dream: {e!r}")
            await self._apply(ev.InterpretationFailed(INTERPRETATION_APOLOGY, generation))
        else:
            await self._apply(ev.InterpretationResolved(text, generation, state.dream_text))
        finally:
            await self._apply(ev.LoadingFinished(generation))
        return self._state

    # ──────────────────────── recording / transcription ──────────────────── #

    async def start_recording(self, device: Optional[AudioCaptureDevice] = None) -> SessionState:
        self._ensure_open()
        if self._state.loading:
            await self._notify(BUSY)
            raise SessionBusyError(BUSY)
        if self._state.recording_state is RecordingState.RECORDING or self._capture is not None:
            raise SessionBusyError(ALREADY_RECORDING)

        device = device or self._microphone
        try:
            if device is None:
                raise MicrophoneUnavailableError(MICROPHONE_UNAVAILABLE)
            capture = await device.open()
        except MicrophoneUnavailableError as e:
            await self._notify(e.user_message)
            raise
        except Exception as e:
            logger.error(f"[session {self.session_id}] Error starting recording: {e!r}")
            await self._notify(MICROPHONE_UNAVAILABLE)
            raise MicrophoneUnavailableError(MICROPHONE_UNAVAILABLE) from e

        self._capture = capture
        logger.info(f"[session {self.session_id}] recording started")
        return await self._apply(ev.RecordingStarted())

    def feed_audio(self, chunk: bytes) -> None:
        if self._capture is None:
            logger.debug(f"[session {self.session_id}] audio chunk ignored, not recording")
            return
        self._capture.feed(chunk)

    async def stop_recording(self) -> Optional[asyncio.Future]:
        """Finish the recording and start transcribing it in the background.

        Returns the transcription task, or None when nothing was recording.
        """
        if self._state.recording_state is not RecordingState.RECORDING or self._capture is None:
            return None

        capture, self._capture = self._capture, None
        try:
            blob = capture.finalize()
        except Exception as e:
            logger.error(f"[session {self.session_id}] Error finalizing recording: {e!r}")
            blob = None
        finally:
            await capture.release()
            await self._apply(ev.RecordingStopped())

        if blob is None:
            await self._notify(TRANSCRIPTION_FAILED)
            return None

        logger.info(f"[session {self.session_id}] recording stopped ({len(blob)} bytes)")
        generation = self._state.generation
        await self._apply(ev.TranscriptionStarted(generation))
        return self._track(asyncio.ensure_future(self._transcribe(blob, generation)))

    async def _transcribe(self, blob: AudioBlob, generation: int) -> None:
        try:
            if not len(blob):
                raise TranscriptionError("Recording is empty")
            loop = asyncio.get_running_loop()
            payload = await loop.run_in_executor(
                None, lambda: AudioPayload.from_blob(blob, self._language)
            )
            text = await self._transcriber.transcribe(payload)
            if not text or not text.strip():
                raise TranscriptionError("Transcription returned no text")
        except asyncio.CancelledError:
            logger.info(f"[session {self.session_id}] transcription cancelled")
            raise
        except MissingCredentialError as e:
            logger.critical(str(e))
            await self._apply(ev.TranscriptionFailed(TRANSCRIPTION_FAILED, generation))
        except Exception as e:
            logger.error(f"[session {self.session_id}] Error transcribing audio: {e!r}")
            await self._apply(ev.TranscriptionFailed(TRANSCRIPTION_FAILED, generation))
        else:
            await self._apply(ev.TranscriptionResolved(text.strip(), generation))
        finally:
            await self._apply(ev.LoadingFinished(generation))

    # ───────────────────────────── playback ──────────────────────────────── #

    async def speak(self, text: Optional[str] = None) -> Optional[Utterance]:
        """Start reading *text* (default: the displayed interpretation) aloud.

        Any utterance already active is cancelled first.
        """
        self._ensure_open()
        if text is None:
            displayed = self._state.displayed_interpretation
            if displayed is None:
                raise SessionValidationError(NOTHING_TO_SPEAK)
            text = displayed.content

        if self._state.utterance is not None:
            await self._engine.cancel()
            await self._apply(ev.SpeechCancelled())

        spoken = spoken_text(text)
        if not spoken:
            return None

        utterance = Utterance(
            id=uuid4().hex,
            text=spoken,
            lang=self._speech.lang,
            rate=self._speech.rate,
            pitch=self._speech.pitch,
            volume=self._speech.volume,
        )
        await self._apply(ev.UtteranceRequested(utterance))
        try:
            await self._engine.speak(utterance)
        except Exception as e:
            logger.error(f"[session {self.session_id}] Speech engine failed: {e!r}")
            await self._apply(ev.SpeechFailed(utterance.id))
            return None
        return utterance

    async def handle_speech_signal(self, utterance_id: str, kind: str) -> SessionState:
        """Apply a start/end/error signal reported by the speech engine."""
        if kind == "start":
            event = ev.SpeechStarted(utterance_id)
        elif kind == "end":
            event = ev.SpeechEnded(utterance_id)
        elif kind == "error":
            logger.warning(f"[session {self.session_id}] speech engine reported an error")
            event = ev.SpeechFailed(utterance_id)
        else:
            raise ValueError(f"Unknown speech signal: {kind!r}")
        return await self._apply(event)

    async def toggle_pause(self) -> SessionState:
        speech_state = self._state.speech_state
        if speech_state is SpeechState.SPEAKING:
            await self._engine.pause()
            return await self._apply(ev.SpeechPaused())
        if speech_state is SpeechState.PAUSED:
            await self._engine.resume()
            return await self._apply(ev.SpeechResumed())
        return self._state

    async def stop_speech(self) -> SessionState:
        try:
            await self._engine.cancel()
        finally:
            await self._apply(ev.SpeechCancelled())
        return self._state

    # ───────────────────────────── lifecycle ─────────────────────────────── #

    async def new_dream(self) -> SessionState:
        """Stop playback, drop the conversation and go back to the form."""
        await self.stop_speech()
        cancelled = self._cancel_inflight()
        if cancelled:
            logger.info(f"[session {self.session_id}] reset cancelled {cancelled} in-flight call(s)")
        return await self._apply(ev.SessionReset(self._reset_policy))

    async def teardown(self) -> None:
        """Release everything the session owns (page unload)."""
        if self._closed:
            return
        self._closed = True
        try:
            await self.stop_speech()
        except Exception as e:
            logger.warning(f"[session {self.session_id}] could not cancel speech on teardown: {e!r}")

        if self._capture is not None:
            capture, self._capture = self._capture, None
            await capture.release()
            await self._apply(ev.RecordingStopped())

        pending = [f for f in self._inflight if not f.done()]
        self._cancel_inflight()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        if self._hub is not None:
            await self._hub.close(self.session_id)
        logger.info(f"[session {self.session_id}] torn down")

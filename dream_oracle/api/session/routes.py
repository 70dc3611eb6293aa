# dream_oracle/api/session/routes.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import StreamingResponse

from dream_oracle.dependencies import get_controller, get_event_hub, get_session_registry
from dream_oracle.domain.errors import (
    MicrophoneUnavailableError,
    MissingCredentialError,
    SessionBusyError,
    SessionClosedError,
    SessionError,
    SessionValidationError,
)
from dream_oracle.infrastructure.audio.browser_capture import BrowserMicrophone
from dream_oracle.infrastructure.session.registry import SessionRegistry
from dream_oracle.infrastructure.sse.hub import EventStreamHub
from dream_oracle.services.session.controller import DreamSessionController
from .schemas import (
    FieldsUpdate,
    RecordingStart,
    RecordingStopped,
    SessionRead,
    SpeakRequest,
    SpeechSignal,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sessions",
    tags=["sessions"],
)

_STATUS_FOR = {
    SessionValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    SessionBusyError: status.HTTP_409_CONFLICT,
    MicrophoneUnavailableError: status.HTTP_403_FORBIDDEN,
    SessionClosedError: status.HTTP_410_GONE,
}


def _http_error(e: SessionError) -> HTTPException:
    code = _STATUS_FOR.get(type(e), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=e.user_message)


def _credential_error(e: MissingCredentialError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

# ─────────────────────────────── sessions ─────────────────────────────── #

@router.post("/", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(registry: SessionRegistry = Depends(get_session_registry)):
    """Called once on page load."""
    controller = await registry.create()
    return SessionRead.from_controller(controller)

@router.get("/{sid}", response_model=SessionRead)
async def read_session(controller: DreamSessionController = Depends(get_controller)):
    return SessionRead.from_controller(controller)

@router.patch("/{sid}", response_model=SessionRead)
async def update_fields(
    patch: FieldsUpdate,
    controller: DreamSessionController = Depends(get_controller),
):
    await controller.update_fields(
        user_name=patch.user_name,
        user_gender=patch.user_gender,
        dream_text=patch.dream_text,
    )
    return SessionRead.from_controller(controller)

@router.delete("/{sid}", status_code=status.HTTP_204_NO_CONTENT)
async def teardown_session(
    sid: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Page unload: stop audio, release the microphone, cancel in-flight calls."""
    if not await registry.discard(sid):
        raise HTTPException(404, "Session not found")

@router.post("/{sid}/reset", response_model=SessionRead)
async def new_dream(controller: DreamSessionController = Depends(get_controller)):
    await controller.new_dream()
    return SessionRead.from_controller(controller)

# ─────────────────────────── interpretation ──────────────────────────── #

@router.post("/{sid}/interpret", response_model=SessionRead)
async def interpret(controller: DreamSessionController = Depends(get_controller)):
    try:
        await controller.interpret()
    except SessionError as e:
        raise _http_error(e)
    except MissingCredentialError as e:
        raise _credential_error(e)
    return SessionRead.from_controller(controller)

# ───────────────────────────── recording ─────────────────────────────── #

@router.post("/{sid}/recording/start", response_model=SessionRead)
async def start_recording(
    body: RecordingStart,
    controller: DreamSessionController = Depends(get_controller),
):
    device = BrowserMicrophone(permission=body.permission, mime_type=body.mime_type, error=body.error)
    try:
        await controller.start_recording(device)
    except SessionError as e:
        raise _http_error(e)
    return SessionRead.from_controller(controller)

@router.post("/{sid}/recording/chunks", status_code=status.HTTP_204_NO_CONTENT)
async def upload_chunk(
    request: Request,
    controller: DreamSessionController = Depends(get_controller),
):
    controller.feed_audio(await request.body())
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{sid}/recording/stop", response_model=RecordingStopped)
async def stop_recording(controller: DreamSessionController = Depends(get_controller)):
    # transcription continues in the background; progress arrives on the stream
    task = await controller.stop_recording()
    return RecordingStopped(
        session_id=controller.session_id,
        transcribing=task is not None and not task.done(),
        **controller.state.snapshot(),
    )

# ───────────────────────────── playback ──────────────────────────────── #

@router.post("/{sid}/speech", response_model=SessionRead)
async def speak(
    body: SpeakRequest,
    controller: DreamSessionController = Depends(get_controller),
):
    try:
        await controller.speak(body.text)
    except SessionError as e:
        raise _http_error(e)
    return SessionRead.from_controller(controller)

@router.post("/{sid}/speech/toggle", response_model=SessionRead)
async def toggle_pause(controller: DreamSessionController = Depends(get_controller)):
    await controller.toggle_pause()
    return SessionRead.from_controller(controller)

@router.delete("/{sid}/speech", response_model=SessionRead)
async def stop_speech(controller: DreamSessionController = Depends(get_controller)):
    await controller.stop_speech()
    return SessionRead.from_controller(controller)

@router.post("/{sid}/speech/signals", response_model=SessionRead)
async def speech_signal(
    signal: SpeechSignal,
    controller: DreamSessionController = Depends(get_controller),
):
    """Start/end/error events reported by window.speechSynthesis."""
    await controller.handle_speech_signal(signal.utterance_id, signal.kind)
    return SessionRead.from_controller(controller)

# --------------------------- session stream ------------------------------ #

@router.get("/{sid}/stream")
async def stream(
    controller: DreamSessionController = Depends(get_controller),
    hub: EventStreamHub = Depends(get_event_hub),
):
    async def event_source():
        async for chunk in hub.register_consumer(controller.session_id):
            yield f"data: {chunk}\n\n"
    return StreamingResponse(event_source(), media_type="text/event-stream")

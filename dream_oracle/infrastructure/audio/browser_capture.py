"""Microphone capture performed by the browser, buffered server-side.

The page calls getUserMedia itself and reports the outcome when it asks to
start recording; MediaRecorder chunks are then uploaded and accumulated here
until the recording is stopped.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from dream_oracle.domain.audio.payload import DEFAULT_MIME_TYPE, AudioBlob
from dream_oracle.domain.errors import MicrophoneUnavailableError
from dream_oracle.domain.ports.audio_capture import AudioCaptureDevice, CaptureSession
from dream_oracle.domain.session.messages import MICROPHONE_UNAVAILABLE

logger = logging.getLogger(__name__)


class BufferedCaptureSession(CaptureSession):
    def __init__(self, mime_type: str = DEFAULT_MIME_TYPE, max_bytes: int = 25 * 1024 * 1024) -> None:
        self._mime_type = mime_type
        self._chunks: List[bytes] = []
        self._size = 0
        self._max_bytes = max_bytes
        self._closed = False

    def feed(self, chunk: bytes) -> None:
        if self._closed or not chunk:
            return
        if self._size + len(chunk) > self._max_bytes:
            # providers reject uploads above 25 MB anyway
            logger.warning(f"Recording exceeds {self._max_bytes} bytes, dropping chunk")
            return
        self._chunks.append(bytes(chunk))
        self._size += len(chunk)

    def finalize(self) -> AudioBlob:
        return AudioBlob(b"".join(self._chunks), self._mime_type)

    async def release(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._chunks = []
        logger.debug("Capture session released")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def size(self) -> int:
        return self._size


class BrowserMicrophone(AudioCaptureDevice):
    """Device whose permission outcome was decided by the browser."""

    def __init__(
        self,
        permission: str = "granted",
        mime_type: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        self._permission = permission
        self._mime_type = mime_type or DEFAULT_MIME_TYPE
        self._error = error

    async def open(self) -> CaptureSession:
        if self._permission != "granted":
            logger.info(f"Microphone unavailable: permission={self._permission} error={self._error}")
            raise MicrophoneUnavailableError(MICROPHONE_UNAVAILABLE)
        return BufferedCaptureSession(self._mime_type)

"""Recorded audio as it moves from the capture session to the transcription port."""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

DEFAULT_MIME_TYPE = "audio/webm"


@dataclass(frozen=True)
class AudioBlob:
    """A finalized recording: raw bytes plus the container MIME type."""
    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class AudioPayload:
    """Transport-safe audio handed to a TranscriptionService.

    ``data`` is plain base64 (no ``data:`` prefix).
    """
    data: str
    mime_type: str
    language: str = "pt"

    @classmethod
    def from_blob(cls, blob: AudioBlob, language: str = "pt") -> "AudioPayload":
        return cls(
            data=base64.b64encode(blob.data).decode("ascii"),
            mime_type=blob.mime_type,
            language=language,
        )

    def to_bytes(self) -> bytes:
        try:
            return base64.b64decode(self.data, validate=True)
        except binascii.Error as e:
            raise ValueError(f"invalid base64 audio payload: {e}") from e

    @property
    def filename(self) -> str:
        """Upload name whose extension matches the MIME subtype (providers sniff it)."""
        subtype = self.mime_type.split("/", 1)[-1].split(";", 1)[0] or "webm"
        return f"dream.{subtype}"

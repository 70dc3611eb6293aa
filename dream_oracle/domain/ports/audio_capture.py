"""Port interfaces for microphone capture."""
from abc import ABC, abstractmethod

from dream_oracle.domain.audio.payload import AudioBlob


class CaptureSession(ABC):
    """An open recording. Owned by exactly one controller until released."""

    @abstractmethod
    def feed(self, chunk: bytes) -> None:
        """Accumulate one chunk delivered by the recorder."""

    @abstractmethod
    def finalize(self) -> AudioBlob:
        """Join every chunk received so far into a single blob."""

    @abstractmethod
    async def release(self) -> None:
        """Stop the hardware tracks. Must be safe to call more than once."""

    @property
    @abstractmethod
    def closed(self) -> bool: ...


class AudioCaptureDevice(ABC):
    @abstractmethod
    async def open(self) -> CaptureSession:
        """Ask for microphone access and start capturing.

        Raises MicrophoneUnavailableError when access is denied or the device
        cannot be opened.
        """

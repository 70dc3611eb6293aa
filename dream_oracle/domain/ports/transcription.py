"""Port interface for speech-to-text providers."""
from abc import ABC, abstractmethod

from dream_oracle.domain.audio.payload import AudioPayload


class TranscriptionService(ABC):
    """Hexagonal port: return the text spoken in *payload*.

    Implementations raise on transport or provider errors; an empty string is
    a legal return value and the caller decides what it means.
    """

    @abstractmethod
    async def transcribe(self, payload: AudioPayload) -> str: ...

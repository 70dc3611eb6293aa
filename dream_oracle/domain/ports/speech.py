"""Port interface for the speech-synthesis engine.

The engine reports progress (start, end, error) asynchronously; whoever
observes those signals forwards them to
``DreamSessionController.handle_speech_signal``.
"""
from abc import ABC, abstractmethod

from dream_oracle.domain.session.entities import Utterance


class SpeechEngine(ABC):
    @abstractmethod
    async def speak(self, utterance: Utterance) -> None: ...

    @abstractmethod
    async def pause(self) -> None: ...

    @abstractmethod
    async def resume(self) -> None: ...

    @abstractmethod
    async def cancel(self) -> None: ...

# dream_oracle/domain/session/entities.py
"""
Immutable session snapshot.

A ``SessionState`` is never mutated; ``reducer.reduce`` returns a new one for
every event.  History is a tuple so snapshots can be shared freely between the
controller, the HTTP layer and the event stream.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Gender(str, Enum):
    MASCULINE = "masculino"
    FEMININE = "feminino"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class RecordingState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"


class SpeechState(str, Enum):
    IDLE = "idle"
    SPEAKING = "speaking"
    PAUSED = "paused"


class View(str, Enum):
    FORM = "form"
    RESULT = "result"


class ResetPolicy(str, Enum):
    KEEP_IDENTITY = "keep_identity"   # "new dream" returns to the form
    CLEAR_ALL = "clear_all"           # "new dream" wipes name and gender too


@dataclass(frozen=True)
class Message:
    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class Utterance:
    """One speech-synthesis request with its fixed voice parameters."""
    id: str
    text: str
    lang: str
    rate: float
    pitch: float
    volume: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "lang": self.lang,
            "rate": self.rate,
            "pitch": self.pitch,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class SessionState:
    user_name: str = ""
    user_gender: Gender = Gender.MASCULINE
    dream_text: str = ""
    history: Tuple[Message, ...] = field(default_factory=tuple)
    # outstanding service calls; `loading` is derived from it
    pending_calls: int = 0
    recording_state: RecordingState = RecordingState.IDLE
    speech_state: SpeechState = SpeechState.IDLE
    utterance: Optional[Utterance] = None
    notice: str = ""
    # Bumped on every reset; async completions carry the generation they
    # started in and are dropped when it no longer matches.
    generation: int = 0

    def evolve(self, **changes: Any) -> "SessionState":
        return replace(self, **changes)

    @property
    def loading(self) -> bool:
        return self.pending_calls > 0

    @property
    def view(self) -> View:
        return View.RESULT if self.history else View.FORM

    @property
    def displayed_interpretation(self) -> Optional[Message]:
        """The newest assistant message; the one rendered with playback controls."""
        for message in reversed(self.history):
            if message.role is Role.ASSISTANT:
                return message
        return None

    @property
    def can_submit(self) -> bool:
        return (
            not self.loading
            and bool(self.user_name.strip())
            and bool(self.dream_text.strip())
        )

    @property
    def can_record(self) -> bool:
        return not self.loading

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the state for the HTTP layer and event stream."""
        displayed = self.displayed_interpretation
        return {
            "user_name": self.user_name,
            "user_gender": self.user_gender.value,
            "dream_text": self.dream_text,
            "history": [m.to_dict() for m in self.history],
            "loading": self.loading,
            "recording_state": self.recording_state.value,
            "speech_state": self.speech_state.value,
            "utterance": self.utterance.to_dict() if self.utterance else None,
            "notice": self.notice,
            "view": self.view.value,
            "displayed_interpretation": displayed.content if displayed else None,
            "can_submit": self.can_submit,
            "can_record": self.can_record,
        }

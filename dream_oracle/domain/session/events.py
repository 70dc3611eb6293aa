"""Events accepted by ``reducer.reduce``.

Events that complete asynchronous work carry the session generation they were
started in so that completions arriving after a reset can be ignored.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .entities import Gender, ResetPolicy, Utterance


class SessionEvent:
    """Marker base class."""


# ───────────────────────────── form fields ───────────────────────────── #

@dataclass(frozen=True)
class FieldsChanged(SessionEvent):
    user_name: Optional[str] = None
    user_gender: Optional[Gender] = None
    dream_text: Optional[str] = None


@dataclass(frozen=True)
class Notified(SessionEvent):
    message: str


# ─────────────────────────── interpretation ──────────────────────────── #

@dataclass(frozen=True)
class SubmitAccepted(SessionEvent):
    dream_text: str


@dataclass(frozen=True)
class InterpretationResolved(SessionEvent):
    content: str
    generation: int
    submitted: str = ""


@dataclass(frozen=True)
class InterpretationFailed(SessionEvent):
    apology: str
    generation: int


@dataclass(frozen=True)
class LoadingFinished(SessionEvent):
    generation: int


# ───────────────────────── recording / transcription ─────────────────── #

@dataclass(frozen=True)
class RecordingStarted(SessionEvent):
    pass


@dataclass(frozen=True)
class RecordingStopped(SessionEvent):
    pass


@dataclass(frozen=True)
class TranscriptionStarted(SessionEvent):
    generation: int


@dataclass(frozen=True)
class TranscriptionResolved(SessionEvent):
    text: str
    generation: int


@dataclass(frozen=True)
class TranscriptionFailed(SessionEvent):
    message: str
    generation: int


# ───────────────────────────── speech ────────────────────────────────── #

@dataclass(frozen=True)
class UtteranceRequested(SessionEvent):
    utterance: Utterance


@dataclass(frozen=True)
class SpeechStarted(SessionEvent):
    utterance_id: str


@dataclass(frozen=True)
class SpeechEnded(SessionEvent):
    utterance_id: str


@dataclass(frozen=True)
class SpeechFailed(SessionEvent):
    utterance_id: str


@dataclass(frozen=True)
class SpeechPaused(SessionEvent):
    pass


@dataclass(frozen=True)
class SpeechResumed(SessionEvent):
    pass


@dataclass(frozen=True)
class SpeechCancelled(SessionEvent):
    pass


# ───────────────────────────── reset ─────────────────────────────────── #

@dataclass(frozen=True)
class SessionReset(SessionEvent):
    policy: ResetPolicy = ResetPolicy.KEEP_IDENTITY

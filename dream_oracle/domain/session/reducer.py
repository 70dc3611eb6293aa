# dream_oracle/domain/session/reducer.py
"""
Pure state transitions for the dream session.

``reduce`` never performs I/O and never raises for an event that does not
apply to the current state: such events return the state unchanged.  All
guarding of *user* actions (validation, disabled controls) happens in the
controller before an event is produced.
"""
from __future__ import annotations

from typing import Callable, Dict, Type, Union

from .entities import (
    Gender,
    Message,
    RecordingState,
    ResetPolicy,
    Role,
    SessionState,
    SpeechState,
)
from . import events as ev


def _fields_changed(state: SessionState, e: ev.FieldsChanged) -> SessionState:
    changes = {}
    if e.user_name is not None:
        changes["user_name"] = e.user_name
    if e.user_gender is not None:
        changes["user_gender"] = e.user_gender
    if e.dream_text is not None:
        changes["dream_text"] = e.dream_text
    return state.evolve(**changes) if changes else state


def _notified(state: SessionState, e: ev.Notified) -> SessionState:
    return state.evolve(notice=e.message)


def _submit_accepted(state: SessionState, e: ev.SubmitAccepted) -> SessionState:
    return state.evolve(
        history=state.history + (Message(Role.USER, e.dream_text),),
        pending_calls=state.pending_calls + 1,
        notice="",
    )


def _interpretation_resolved(state: SessionState, e: ev.InterpretationResolved) -> SessionState:
    if e.generation != state.generation:
        return state
    return state.evolve(
        history=state.history + (Message(Role.ASSISTANT, e.content),),
        # text written while the call ran (a transcript, typing) survives
        dream_text="" if state.dream_text == e.submitted else state.dream_text,
    )


def _interpretation_failed(state: SessionState, e: ev.InterpretationFailed) -> SessionState:
    if e.generation != state.generation:
        return state
    # the dream text is kept so the user can resubmit it
    return state.evolve(history=state.history + (Message(Role.ASSISTANT, e.apology),))


def _loading_finished(state: SessionState, e: ev.LoadingFinished) -> SessionState:
    if e.generation != state.generation:
        return state
    return state.evolve(pending_calls=max(0, state.pending_calls - 1))


def _recording_started(state: SessionState, e: ev.RecordingStarted) -> SessionState:
    return state.evolve(recording_state=RecordingState.RECORDING, notice="")


def _recording_stopped(state: SessionState, e: ev.RecordingStopped) -> SessionState:
    return state.evolve(recording_state=RecordingState.IDLE)


def _transcription_started(state: SessionState, e: ev.TranscriptionStarted) -> SessionState:
    if e.generation != state.generation:
        return state
    return state.evolve(pending_calls=state.pending_calls + 1)


def _transcription_resolved(state: SessionState, e: ev.TranscriptionResolved) -> SessionState:
    if e.generation != state.generation:
        return state
    # destructive: whatever was typed is replaced
    return state.evolve(dream_text=e.text)


def _transcription_failed(state: SessionState, e: ev.TranscriptionFailed) -> SessionState:
    if e.generation != state.generation:
        return state
    return state.evolve(notice=e.message)


def _utterance_requested(state: SessionState, e: ev.UtteranceRequested) -> SessionState:
    # stays idle until the engine reports that playback actually started
    return state.evolve(utterance=e.utterance, speech_state=SpeechState.IDLE)


def _is_current(state: SessionState, utterance_id: str) -> bool:
    return state.utterance is not None and state.utterance.id == utterance_id


def _speech_started(state: SessionState, e: ev.SpeechStarted) -> SessionState:
    if not _is_current(state, e.utterance_id):
        return state
    return state.evolve(speech_state=SpeechState.SPEAKING)


def _speech_finished(state: SessionState, e: Union[ev.SpeechEnded, ev.SpeechFailed]) -> SessionState:
    if not _is_current(state, e.utterance_id):
        return state
    return state.evolve(speech_state=SpeechState.IDLE, utterance=None)


def _speech_paused(state: SessionState, e: ev.SpeechPaused) -> SessionState:
    if state.speech_state is not SpeechState.SPEAKING:
        return state
    return state.evolve(speech_state=SpeechState.PAUSED)


def _speech_resumed(state: SessionState, e: ev.SpeechResumed) -> SessionState:
    if state.speech_state is not SpeechState.PAUSED:
        return state
    return state.evolve(speech_state=SpeechState.SPEAKING)


def _speech_cancelled(state: SessionState, e: ev.SpeechCancelled) -> SessionState:
    return state.evolve(speech_state=SpeechState.IDLE, utterance=None)


def _session_reset(state: SessionState, e: ev.SessionReset) -> SessionState:
    changes = dict(
        dream_text="",
        history=(),
        pending_calls=0,
        speech_state=SpeechState.IDLE,
        utterance=None,
        notice="",
        generation=state.generation + 1,
    )
    if e.policy is ResetPolicy.CLEAR_ALL:
        changes.update(user_name="", user_gender=Gender.MASCULINE)
    return state.evolve(**changes)


_HANDLERS: Dict[Type[ev.SessionEvent], Callable[[SessionState, ev.SessionEvent], SessionState]] = {
    ev.FieldsChanged: _fields_changed,
    ev.Notified: _notified,
    ev.SubmitAccepted: _submit_accepted,
    ev.InterpretationResolved: _interpretation_resolved,
    ev.InterpretationFailed: _interpretation_failed,
    ev.LoadingFinished: _loading_finished,
    ev.RecordingStarted: _recording_started,
    ev.RecordingStopped: _recording_stopped,
    ev.TranscriptionStarted: _transcription_started,
    ev.TranscriptionResolved: _transcription_resolved,
    ev.TranscriptionFailed: _transcription_failed,
    ev.UtteranceRequested: _utterance_requested,
    ev.SpeechStarted: _speech_started,
    ev.SpeechEnded: _speech_finished,
    ev.SpeechFailed: _speech_finished,
    ev.SpeechPaused: _speech_paused,
    ev.SpeechResumed: _speech_resumed,
    ev.SpeechCancelled: _speech_cancelled,
    ev.SessionReset: _session_reset,
}


def reduce(state: SessionState, event: ev.SessionEvent) -> SessionState:
    try:
        handler = _HANDLERS[type(event)]
    except KeyError:
        raise TypeError(f"Unknown session event: {type(event).__name__}") from None
    return handler(state, event)

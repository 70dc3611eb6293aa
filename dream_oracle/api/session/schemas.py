from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from dream_oracle.domain.session.entities import Gender, RecordingState, SpeechState, View


class FieldsUpdate(BaseModel):
    user_name: Optional[str] = None
    user_gender: Optional[Gender] = None
    dream_text: Optional[str] = None


class MessageRead(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class UtteranceRead(BaseModel):
    id: str
    text: str
    lang: str
    rate: float
    pitch: float
    volume: float


class SessionRead(BaseModel):
    session_id: str
    user_name: str
    user_gender: Gender
    dream_text: str
    history: List[MessageRead] = []
    loading: bool
    recording_state: RecordingState
    speech_state: SpeechState
    utterance: Optional[UtteranceRead] = None
    notice: str = ""
    view: View
    displayed_interpretation: Optional[str] = None
    can_submit: bool
    can_record: bool

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def from_controller(cls, controller) -> "SessionRead":
        return cls(session_id=controller.session_id, **controller.state.snapshot())


class RecordingStart(BaseModel):
    # outcome of navigator.mediaDevices.getUserMedia in the browser
    permission: Literal["granted", "denied", "unavailable"] = "granted"
    mime_type: Optional[str] = None
    error: Optional[str] = None


class RecordingStopped(SessionRead):
    transcribing: bool = False


class SpeakRequest(BaseModel):
    text: Optional[str] = None


class SpeechSignal(BaseModel):
    utterance_id: str
    kind: Literal["start", "end", "error"]

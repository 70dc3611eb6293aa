# tests/conftest.py
import logging

import pytest
import pytest_asyncio

from dream_oracle.context.dream.builder import InterpretationContextBuilder
from dream_oracle.infrastructure.audio.browser_capture import BrowserMicrophone
from dream_oracle.infrastructure.sse.hub import EventStreamHub
from dream_oracle.services.interpretation.service import InterpretationService
from dream_oracle.services.session.controller import DreamSessionController
from doubles import MockLLMService, MockTranscriptionService, RecordingSpeechEngine

for name in (
    "asyncio",      # selector_events etc.
    "httpx",
    "httpcore",
    "openai",
):
    logging.getLogger(name).setLevel(logging.WARNING)

# leave the application namespace free to speak at INFO
logging.getLogger("dream_oracle").setLevel(logging.INFO)


@pytest.fixture
def mock_llm():
    return MockLLMService()


@pytest.fixture
def mock_transcriber():
    return MockTranscriptionService()


@pytest.fixture
def speech_engine():
    return RecordingSpeechEngine()


@pytest.fixture
def hub():
    return EventStreamHub()


@pytest.fixture
def interpretation_service(mock_llm):
    return InterpretationService(mock_llm, InterpretationContextBuilder())


@pytest_asyncio.fixture
async def controller(interpretation_service, mock_transcriber, speech_engine, hub):
    """A controller wired to doubles; torn down after the test."""
    c = DreamSessionController(
        interpreter=interpretation_service,
        transcriber=mock_transcriber,
        speech_engine=speech_engine,
        microphone=BrowserMicrophone(),
        hub=hub,
        session_id="test-session",
    )
    yield c
    await c.teardown()

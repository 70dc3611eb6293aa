"""Tests for the Whisper and GPT-4o transcription adapters."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from dream_oracle.config import Settings
from dream_oracle.domain.audio.payload import AudioBlob, AudioPayload
from dream_oracle.domain.errors import MissingCredentialError, TranscriptionError
from dream_oracle.infrastructure.transcription.factory import build_transcription_service
from dream_oracle.infrastructure.transcription.gpt4o import GPT4oTranscriptionService
from dream_oracle.infrastructure.transcription.whisper import WhisperTranscriptionService


@pytest.fixture
def payload():
    return AudioPayload.from_blob(AudioBlob(b"fake-webm-bytes", "audio/webm"))


# ───────────────────────────── whisper ───────────────────────────────── #

@pytest.mark.asyncio
async def test_whisper_posts_multipart(payload):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = request.read()
        return httpx.Response(200, json={"text": "  Sonhei com um rio  "})

    service = WhisperTranscriptionService(
        api_key="sk-test",
        base_url="https://api.groq.com/openai/v1/",
        model="whisper-large-v3",
        transport=httpx.MockTransport(handler),
    )

    text = await service.transcribe(payload)

    assert text == "Sonhei com um rio"
    assert seen["url"] == "https://api.groq.com/openai/v1/audio/transcriptions"
    assert seen["auth"] == "Bearer sk-test"
    assert b'filename="dream.webm"' in seen["body"]
    assert b"fake-webm-bytes" in seen["body"]
    assert b"whisper-large-v3" in seen["body"]
    assert b'name="language"' in seen["body"]


@pytest.mark.asyncio
async def test_whisper_error_status(payload):
    transport = httpx.MockTransport(lambda request: httpx.Response(429, text="rate limited"))
    service = WhisperTranscriptionService(api_key="sk-test", transport=transport)

    with pytest.raises(TranscriptionError, match="429"):
        await service.transcribe(payload)


@pytest.mark.asyncio
async def test_whisper_missing_text_returns_empty(payload):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
    service = WhisperTranscriptionService(api_key="sk-test", transport=transport)

    assert await service.transcribe(payload) == ""


@pytest.mark.asyncio
async def test_whisper_rejects_corrupt_payload():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"text": "x"}))
    service = WhisperTranscriptionService(api_key="sk-test", transport=transport)

    with pytest.raises(TranscriptionError):
        await service.transcribe(AudioPayload(data="@@not base64@@", mime_type="audio/webm"))


@pytest.mark.asyncio
async def test_whisper_without_key(payload):
    service = WhisperTranscriptionService(api_key=None)

    with pytest.raises(MissingCredentialError):
        await service.transcribe(payload)


# ───────────────────────────── gpt-4o ────────────────────────────────── #

def _openai_client(text, usage=None):
    client = MagicMock()
    client.audio.transcriptions.create = AsyncMock(return_value=SimpleNamespace(text=text, usage=usage))
    return client


@pytest.mark.asyncio
async def test_gpt4o_sends_file_and_prompt(payload):
    client = _openai_client(" Sonhei que voava ")
    service = GPT4oTranscriptionService(api_key="sk-test", prompt="Transcreva o sonho.", client=client)

    text = await service.transcribe(payload)

    assert text == "Sonhei que voava"
    kwargs = client.audio.transcriptions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-transcribe"
    assert kwargs["language"] == "pt"
    assert kwargs["prompt"] == "Transcreva o sonho."
    filename, audio_file, mime = kwargs["file"]
    assert (filename, mime) == ("dream.webm", "audio/webm")
    assert audio_file.read() == b"fake-webm-bytes"


@pytest.mark.asyncio
async def test_gpt4o_logs_cost_when_usage_present(payload, caplog):
    usage = SimpleNamespace(input_token_details=SimpleNamespace(audio_tokens=1_000_000), output_tokens=0)
    service = GPT4oTranscriptionService(api_key="sk-test", client=_openai_client("ok", usage))

    await service.transcribe(payload)

    assert any("Cost: $6.000000" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_gpt4o_model_override(payload):
    client = _openai_client("ok")
    service = GPT4oTranscriptionService(api_key="sk-test", model="gpt-4o-mini-transcribe", client=client)

    await service.transcribe(payload)

    assert client.audio.transcriptions.create.call_args.kwargs["model"] == "gpt-4o-mini-transcribe"
    assert "prompt" not in client.audio.transcriptions.create.call_args.kwargs


@pytest.mark.asyncio
async def test_gpt4o_without_key(payload):
    service = GPT4oTranscriptionService(api_key=None)

    with pytest.raises(MissingCredentialError, match="OPENAI_API_KEY"):
        await service.transcribe(payload)


# ───────────────────────────── factory ───────────────────────────────── #

def test_factory_builds_whisper_with_its_default_model():
    cfg = Settings(_env_file=None, openai_api_key="sk-test", transcription_provider="whisper")

    service = build_transcription_service(cfg)

    assert isinstance(service, WhisperTranscriptionService)
    assert service._model == "whisper-1"


def test_factory_builds_gpt4o_with_dedicated_key():
    cfg = Settings(_env_file=None, openai_api_key="sk-chat", transcription_api_key="sk-audio")

    service = build_transcription_service(cfg)

    assert isinstance(service, GPT4oTranscriptionService)
    assert service._api_key == "sk-audio"
    assert service._prompt

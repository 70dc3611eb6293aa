"""Tests for the OpenAI chat-completion adapter with a mocked SDK client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from dream_oracle.domain.errors import InterpretationError, MissingCredentialError
from dream_oracle.infrastructure.llm.openai_llm import OpenAILLM


def _client(*contents):
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
    )
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


@pytest.mark.asyncio
async def test_generate_response_passes_sampling_parameters():
    client = _client("Prezado João...")
    llm = OpenAILLM(api_key="sk-test", model="gpt-4o", client=client)
    messages = [{"role": "user", "content": "oi"}]

    text = await llm.generate_response(messages, temperature=0.8, top_p=0.95)

    assert text == "Prezado João..."
    client.chat.completions.create.assert_awaited_once_with(
        model="gpt-4o", messages=messages, temperature=0.8, top_p=0.95
    )


@pytest.mark.asyncio
async def test_unset_sampling_parameters_are_not_sent():
    client = _client("ok")
    llm = OpenAILLM(api_key="sk-test", model="llama-3-70b", client=client)

    await llm.generate_response([{"role": "user", "content": "oi"}])

    kwargs = client.chat.completions.create.call_args.kwargs
    assert "temperature" not in kwargs
    assert "top_p" not in kwargs
    assert kwargs["model"] == "llama-3-70b"


@pytest.mark.asyncio
@pytest.mark.parametrize("contents", [(), ("",), (None,)])
async def test_unusable_completion_raises(contents):
    llm = OpenAILLM(api_key="sk-test", model="gpt-4o", client=_client(*contents))

    with pytest.raises(InterpretationError):
        await llm.generate_response([{"role": "user", "content": "oi"}])


@pytest.mark.asyncio
async def test_missing_key_fails_on_first_call():
    # constructing without a key is allowed so the app can boot
    llm = OpenAILLM(api_key=None, model="gpt-4o")

    with pytest.raises(MissingCredentialError) as exc:
        await llm.generate_response([{"role": "user", "content": "oi"}])
    assert exc.value.env_var == "OPENAI_API_KEY"
    assert "OPENAI_API_KEY" in str(exc.value)

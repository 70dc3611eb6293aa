"""OpenAI-compatible chat-completion adapter implementing the LLMService port."""
from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional

from openai import AsyncOpenAI

from dream_oracle.domain.errors import InterpretationError, MissingCredentialError
from dream_oracle.domain.ports.llm import LLMService

logger = logging.getLogger(__name__)


class OpenAILLM(LLMService):
    """Chat completions against OpenAI or any host speaking the same API.

    Switching provider is a matter of ``base_url``, ``api_key`` and ``model``.
    The SDK client is created on first use so a missing key only fails when a
    call is actually attempted.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise MissingCredentialError("interpretation", "OPENAI_API_KEY")
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
            )
        return self._client

    async def generate_response(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        top_p: Optional[float] = None,
    ) -> str:
        client = self._get_client()

        kwargs = {}
        if temperature is not None:
            kwargs["temperature"] = temperature
        if top_p is not None:
            kwargs["top_p"] = top_p

        start_time = time.time()
        logger.debug(f"Calling chat completions with model: {self._model}")
        response = await client.chat.completions.create(
            model=self._model,
            messages=messages,
            **kwargs,
        )
        logger.info(f"Chat completion finished in {time.time() - start_time:.2f}s (model={self._model})")

        if not response.choices:
            raise InterpretationError("Chat completion returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise InterpretationError("Chat completion returned empty content")
        return content

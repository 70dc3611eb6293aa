"""Interpretation service: the persona-conditioned call to the LLM port."""
from __future__ import annotations

import logging
import time

from dream_oracle.context.dream.builder import InterpretationContextBuilder
from dream_oracle.domain.errors import InterpretationError
from dream_oracle.domain.ports.llm import LLMService
from dream_oracle.domain.session.entities import Gender

logger = logging.getLogger(__name__)


class InterpretationService:
    """Asks the configured LLM to interpret a dream in the José do Egito voice."""

    def __init__(self, llm: LLMService, context_builder: InterpretationContextBuilder) -> None:
        self._llm = llm
        self._context_builder = context_builder

    async def interpret(self, name: str, gender: Gender, dream_text: str) -> str:
        window, messages = self._context_builder.build_messages(name, gender, dream_text)

        start_time = time.time()
        logger.info(f"Interpreting dream ({len(window.dream_text)} chars) for gender={window.gender.value}")
        text = await self._llm.generate_response(
            messages,
            temperature=window.temperature,
            top_p=window.top_p,
        )
        if not text or not text.strip():
            raise InterpretationError("The model returned an empty interpretation")

        logger.info(f"Interpretation generated in {time.time() - start_time:.2f}s ({len(text)} chars)")
        return text.strip()

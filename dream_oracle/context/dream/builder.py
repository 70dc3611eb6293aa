"""Builds persona-conditioned prompts for dream interpretation."""

import logging
from typing import Dict, List, Tuple

from dream_oracle.domain.session.entities import Gender
from .context_window import InterpretationContextWindow
from .prompts import InterpreterPrompts

logger = logging.getLogger(__name__)


class InterpretationContextBuilder:
    """Turns (name, gender, dream) into the message list sent to the LLM."""

    def __init__(self, temperature: float = 0.8, top_p: float = 0.95):
        self._temperature = temperature
        self._top_p = top_p

    def build(self, name: str, gender: Gender, dream_text: str) -> InterpretationContextWindow:
        window = InterpretationContextWindow(
            name=name.strip(),
            gender=Gender(gender),
            dream_text=dream_text.strip(),
            temperature=self._temperature,
            top_p=self._top_p,
            metadata={"persona": InterpreterPrompts.PERSONA_NAME},
        )
        logger.debug(f"Built interpretation context, ~{window.estimate_tokens()} tokens")
        return window

    def build_messages(
        self, name: str, gender: Gender, dream_text: str
    ) -> Tuple[InterpretationContextWindow, List[Dict[str, str]]]:
        window = self.build(name, gender, dream_text)
        messages = window.to_llm_messages(
            InterpreterPrompts.system_prompt(window.name, window.gender),
            InterpreterPrompts.user_prompt(window.dream_text),
        )
        return window, messages

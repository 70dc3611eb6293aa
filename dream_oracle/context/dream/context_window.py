"""Interpretation context window data structure."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from dream_oracle.domain.session.entities import Gender


@dataclass
class InterpretationContextWindow:
    """Everything the persona needs to interpret one dream."""

    name: str
    gender: Gender
    dream_text: str

    temperature: float = 0.8
    top_p: float = 0.95

    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_llm_messages(self, system_prompt: str, user_prompt: str) -> List[Dict[str, str]]:
        """Convert context window to LLM-ready messages."""
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ]

    def estimate_tokens(self) -> int:
        """Rough estimate of token count (~4 characters per token)."""
        return (len(self.name) + len(self.dream_text)) // 4

"""Port interface for chat-completion providers."""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class LLMService(ABC):
    """Hexagonal port: turn a list of chat messages into generated text."""

    @abstractmethod
    async def generate_response(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        top_p: Optional[float] = None,
    ) -> str: ...

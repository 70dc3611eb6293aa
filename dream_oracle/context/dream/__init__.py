"""Dream interpretation prompt context."""

from .builder import InterpretationContextBuilder
from .prompts import InterpreterPrompts
from .context_window import InterpretationContextWindow

__all__ = [
    "InterpretationContextBuilder",
    "InterpreterPrompts",
    "InterpretationContextWindow",
]

"""Protocol definitions split one-per-module; import via ``base.interfaces``."""

from .callbacks_handler import CallbacksHandler
from .llm_provider import LLMProvider

__all__ = ["CallbacksHandler", "LLMProvider"]

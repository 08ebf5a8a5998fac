"""LLMProvider Protocol (single-class module).

Defines the minimal generation contract shared by provider facades.
"""

from __future__ import annotations

from typing import Any, List, Protocol, runtime_checkable

from ..models import ContentResponse, MessageContent


@runtime_checkable
class LLMProvider(Protocol):
    """Minimal interface for Large Language Model providers.

    Implementations map :class:`MessageContent` items to their wire format and
    normalize results to :class:`ContentResponse`. Failures are raised, never
    encoded in the response.
    """

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier, e.g. ``"lingyi"``."""
        ...

    def generate_content(self, messages: List[MessageContent], **options: Any) -> ContentResponse:
        """Generate a response for a conversation."""
        ...

    def call(self, prompt: str, **options: Any) -> str:
        """Generate text for a single human prompt."""
        ...

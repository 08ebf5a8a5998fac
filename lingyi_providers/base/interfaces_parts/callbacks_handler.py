"""CallbacksHandler Protocol (single-class module).

Observers notified around each ``generate_content`` call. Handlers run on the
caller's thread; an exception raised by a handler propagates to the caller.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from ..cancellation import CancellationToken
from ..models import ContentResponse, MessageContent


@runtime_checkable
class CallbacksHandler(Protocol):
    """Lifecycle hooks for LLM generation."""

    def handle_llm_generate_content_start(
        self, token: CancellationToken, messages: List[MessageContent]
    ) -> None:
        ...

    def handle_llm_generate_content_end(self, token: CancellationToken, response: ContentResponse) -> None:
        ...

    def handle_llm_error(self, token: CancellationToken, error: Exception) -> None:
        ...

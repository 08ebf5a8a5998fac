"""lingyi_providers package

Client library for the Lingyi (01.AI) chat-completions API with incremental
streaming support.

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode`,
      :class:`CancelledError`
    - Cancellation: :class:`CancellationToken`
    - Low-level client: :class:`LingyiClient` with :class:`CompletionRequest`
      and :class:`Message`
    - High-level model: :class:`LingyiLLM` with :class:`MessageContent`,
      :class:`ChatMessageType` and :class:`TextContent`

Example::

    from lingyi_providers import CompletionRequest, LingyiClient, Message

    client = LingyiClient(api_key="...")
    result = client.create_completion(
        CompletionRequest(
            messages=[Message(role="user", content="Hello")],
            streaming_func=lambda token, chunk: print(chunk.decode(), end=""),
        )
    )
"""

from .base.cancellation import CancellationToken, CancelledError
from .base.errors import ErrorCode, ProviderError
from .base.models import ChatMessageType, ContentResponse, MessageContent, TextContent
from .config import CompletionDefaults
from .lingyi import (
    Completion,
    CompletionRequest,
    CompletionResponse,
    LingyiClient,
    LingyiLLM,
    Message,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CancellationToken",
    "CancelledError",
    "ErrorCode",
    "ProviderError",
    "ChatMessageType",
    "ContentResponse",
    "MessageContent",
    "TextContent",
    "CompletionDefaults",
    "Completion",
    "CompletionRequest",
    "CompletionResponse",
    "LingyiClient",
    "LingyiLLM",
    "Message",
]

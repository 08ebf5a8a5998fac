"""
Providers Base Package

Provider-agnostic building blocks shared by provider adapters:

- Errors: normalized ``ErrorCode`` taxonomy and ``ProviderError``
- Cancellation: cooperative ``CancellationToken``
- Models (DTOs): message content parts and generation results
- Interfaces: ``LLMProvider`` and ``CallbacksHandler`` protocols
- Streaming: worker/consumer ``ChunkChannel`` and SSE line helpers
- HTTP and timeouts: pooled ``httpx`` clients
"""

from .cancellation import CancellationToken, CancelledError
from .errors import ErrorCode, ProviderError, classify_exception
from .interfaces import CallbacksHandler, LLMProvider
from .models import (
    BinaryContent,
    ChatMessageType,
    ContentChoice,
    ContentPart,
    ContentResponse,
    ImageURLContent,
    MessageContent,
    TextContent,
)
from .streaming import ChunkChannel
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "CancellationToken",
    "CancelledError",
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "CallbacksHandler",
    "LLMProvider",
    "BinaryContent",
    "ChatMessageType",
    "ContentChoice",
    "ContentPart",
    "ContentResponse",
    "ImageURLContent",
    "MessageContent",
    "TextContent",
    "ChunkChannel",
    "TimeoutConfig",
    "get_timeout_config",
]

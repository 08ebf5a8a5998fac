"""Lingyi (01.AI) provider: wire schema, HTTP client, stream combiner and LLM facade."""

from .client import LingyiClient
from .llm import CallOptions, LingyiLLM, to_wire_message, type_to_role
from .schema import (
    Completion,
    CompletionRequest,
    CompletionResponse,
    Message,
    StreamedChunk,
)
from .stream_helpers import combine_stream, parse_stream

__all__ = [
    "LingyiClient",
    "LingyiLLM",
    "CallOptions",
    "to_wire_message",
    "type_to_role",
    "Completion",
    "CompletionRequest",
    "CompletionResponse",
    "Message",
    "StreamedChunk",
    "combine_stream",
    "parse_stream",
]

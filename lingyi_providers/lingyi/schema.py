"""
Pydantic wire models for the Lingyi chat-completions API.

Purpose
-------
Describe the JSON documents exchanged with ``POST /chat/completions``:
the request body, the non-streaming response, one streamed chunk, and the
error envelope returned with non-200 statuses. Decoding goes through
``model_validate_json`` so malformed payloads surface as
``pydantic.ValidationError``.

Design
------
- Unknown keys sent by the server are ignored.
- Response-side models read JSON ``null`` as "field absent", so every field
  falls back to its default (servers send ``"finish_reason": null`` on
  intermediate chunks, ``"delta": null`` on terminal ones). Request-side
  models stay strict.
- ``CompletionRequest.streaming_func`` and ``StreamedChunk.error`` are
  process-local and never serialized.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..base.cancellation import CancellationToken


Role = Literal["system", "user", "assistant", "function", "tool"]

# Per-chunk callback: receives the call's token and the raw delta bytes.
# Raising aborts the stream.
StreamingFunc = Callable[[CancellationToken, bytes], None]


class Message(BaseModel):
    """One chat message; serializes to exactly ``{"role", "content"}``."""

    role: Role
    content: str = ""


class CompletionRequest(BaseModel):
    """A request to the chat-completions endpoint.

    Attributes:
        model: Target model; empty means "use the client's default".
        messages: Ordered conversation history.
        temperature: Sampling temperature (always sent).
        max_tokens: Completion budget; ``0`` means "use the default".
        top_p: Nucleus sampling; omitted from the payload when ``0``.
        stream: Ask the server for an SSE response.
        streaming_func: Optional per-chunk callback. When set, ``stream`` is
            forced to ``True`` before the request is serialized.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    model: str = ""
    messages: List[Message] = Field(default_factory=list)
    temperature: float = 0.0
    max_tokens: int = 0
    top_p: float = 0.0
    stream: bool = False
    streaming_func: Optional[StreamingFunc] = Field(default=None, exclude=True)

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON body sent on the wire."""
        payload = self.model_dump(mode="json")
        if not payload.get("max_tokens"):
            payload.pop("max_tokens", None)
        if not payload.get("top_p"):
            payload.pop("top_p", None)
        return payload


class _ResponseModel(BaseModel):
    """Base for server-sent documents: ``null`` values decode as the field default."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Usage(_ResponseModel):
    """Token accounting reported by the service."""

    completion_tokens: int = 0
    prompt_tokens: int = 0
    total_tokens: int = 0


class ResponseMessage(_ResponseModel):
    """Message as returned by the service; ``role`` may be omitted."""

    role: str = "assistant"
    content: str = ""


class CompletionResponseChoice(_ResponseModel):
    finish_reason: str = ""
    index: int = 0
    message: ResponseMessage = Field(default_factory=ResponseMessage)


class CompletionResponse(_ResponseModel):
    """Non-streaming response document (also synthesized by the stream combiner)."""

    id: str = ""
    created: int = 0
    choices: List[CompletionResponseChoice] = Field(default_factory=list)
    model: str = ""
    object: str = ""
    usage: Usage = Field(default_factory=Usage)


class StreamDelta(_ResponseModel):
    content: Optional[str] = None


class StreamChoice(_ResponseModel):
    delta: StreamDelta = Field(default_factory=StreamDelta)
    finish_reason: Optional[str] = None
    index: Optional[int] = None


class StreamedChunk(_ResponseModel):
    """One decoded ``data:`` event.

    ``error`` is set only on chunks synthesized by the stream worker to carry a
    decode or read failure to the consumer; such chunks carry nothing else.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    choices: Optional[List[StreamChoice]] = None
    content: Optional[str] = None
    created: Optional[int] = None
    id: Optional[str] = None
    last_one: Optional[bool] = Field(default=None, alias="lastOne")
    model: Optional[str] = None
    object: Optional[str] = None
    usage: Optional[Usage] = None
    error: Optional[Exception] = Field(default=None, exclude=True)


class ErrorDetail(_ResponseModel):
    code: Optional[Union[str, int]] = None
    message: str = ""
    param: Optional[Any] = None
    type: Optional[str] = None


class ErrorEnvelope(_ResponseModel):
    """Body returned alongside non-200 statuses: ``{"error": {...}}``."""

    error: ErrorDetail


@dataclass
class Completion:
    """Simplified result of :meth:`LingyiClient.create_completion`."""

    content: str
    finish_reason: str = ""
    completion_tokens: int = 0
    prompt_tokens: int = 0
    total_tokens: int = 0


__all__ = [
    "Role",
    "StreamingFunc",
    "Message",
    "CompletionRequest",
    "Usage",
    "ResponseMessage",
    "CompletionResponseChoice",
    "CompletionResponse",
    "StreamDelta",
    "StreamChoice",
    "StreamedChunk",
    "ErrorDetail",
    "ErrorEnvelope",
    "Completion",
]

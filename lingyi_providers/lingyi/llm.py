"""Lingyi LLM facade.

Maps provider-agnostic :class:`MessageContent` conversations onto
:class:`CompletionRequest` wire messages, runs them through
:class:`LingyiClient`, and returns a :class:`ContentResponse`.

Message mapping rules:
- Roles: system→``system``, human and generic→``user``, ai→``assistant``,
  function→``function``, tool→``tool``.
- Each message must carry exactly one :class:`TextContent` part. A second text
  part, a missing text part, or any non-text part raises ``ProviderError``
  (``VALIDATION`` / ``UNSUPPORTED``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

import httpx

from ..base.cancellation import CancellationToken
from ..base.errors import ErrorCode, ProviderError
from ..base.interfaces import CallbacksHandler
from ..base.models import (
    BinaryContent,
    ChatMessageType,
    ContentChoice,
    ContentResponse,
    ImageURLContent,
    MessageContent,
    TextContent,
)
from ..config import CompletionDefaults
from .client import LingyiClient
from .schema import CompletionRequest, Message, Role, StreamingFunc
from .stream_helpers import PROVIDER_NAME


_ROLE_MAP = {
    ChatMessageType.SYSTEM: "system",
    ChatMessageType.HUMAN: "user",
    ChatMessageType.GENERIC: "user",
    ChatMessageType.AI: "assistant",
    ChatMessageType.FUNCTION: "function",
    ChatMessageType.TOOL: "tool",
}


def type_to_role(typ: ChatMessageType) -> Role:
    """Map a message type to its wire role string."""
    try:
        return _ROLE_MAP[ChatMessageType(typ)]  # type: ignore[return-value]
    except (KeyError, ValueError) as exc:
        raise ProviderError(
            code=ErrorCode.VALIDATION,
            message=f"unknown message type: {typ!r}",
            provider=PROVIDER_NAME,
        ) from exc


def _part_error(code: ErrorCode, message: str) -> ProviderError:
    return ProviderError(code=code, message=message, provider=PROVIDER_NAME)


def to_wire_message(mc: MessageContent) -> Message:
    """Convert one :class:`MessageContent` into a wire :class:`Message`."""
    text: Optional[str] = None
    for part in mc.parts:
        if isinstance(part, TextContent):
            if text is not None:
                raise _part_error(ErrorCode.VALIDATION, "expecting a single Text content")
            text = part.text
        elif isinstance(part, (ImageURLContent, BinaryContent)):
            raise _part_error(
                ErrorCode.UNSUPPORTED,
                f"only support Text parts right now (got {type(part).__name__})",
            )
        else:
            raise _part_error(
                ErrorCode.UNSUPPORTED,
                f"only support Text parts right now (unknown part {type(part).__name__})",
            )
    if text is None:
        raise _part_error(ErrorCode.VALIDATION, "expecting a single Text content, found none")
    return Message(role=type_to_role(mc.role), content=text)


@dataclass
class CallOptions:
    """Per-call generation options for :meth:`LingyiLLM.generate_content`."""

    model: str = ""
    max_tokens: int = 0
    temperature: float = 0.0
    top_p: float = 0.0
    streaming_func: Optional[StreamingFunc] = None


class LingyiLLM:
    """High-level Lingyi model implementing the ``LLMProvider`` protocol.

    Parameters:
        api_key, model, base_url, http_client, defaults: forwarded to
            :class:`LingyiClient`.
        callbacks_handler: Optional observer notified on start, end and error.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        defaults: Optional[CompletionDefaults] = None,
        callbacks_handler: Optional[CallbacksHandler] = None,
    ) -> None:
        self.client = LingyiClient(
            api_key=api_key,
            model=model,
            base_url=base_url,
            http_client=http_client,
            defaults=defaults,
        )
        self.callbacks_handler = callbacks_handler

    @property
    def provider_name(self) -> str:
        return PROVIDER_NAME

    def call(self, prompt: str, token: Optional[CancellationToken] = None, **options: Any) -> str:
        """Generate a completion for a single human prompt and return its text."""
        response = self.generate_content(
            [MessageContent.from_text(ChatMessageType.HUMAN, prompt)], token=token, **options
        )
        return response.choices[0].content

    def generate_content(
        self,
        messages: List[MessageContent],
        token: Optional[CancellationToken] = None,
        **options: Any,
    ) -> ContentResponse:
        """Run one completion over ``messages``.

        Keyword options are the fields of :class:`CallOptions` (``model``,
        ``max_tokens``, ``temperature``, ``top_p``, ``streaming_func``).
        A ``streaming_func`` switches the request to streaming mode.

        Raises:
            ProviderError: for invalid message parts and for every failure
                reported by :class:`LingyiClient`.
            TypeError: for unknown option names.
        """
        token = token or CancellationToken()
        opts = CallOptions(**options)
        if self.callbacks_handler is not None:
            self.callbacks_handler.handle_llm_generate_content_start(token, messages)

        try:
            request = CompletionRequest(
                model=opts.model,
                messages=[to_wire_message(mc) for mc in messages],
                temperature=opts.temperature,
                max_tokens=opts.max_tokens,
                top_p=opts.top_p,
                stream=opts.streaming_func is not None,
                streaming_func=opts.streaming_func,
            )
            completion = self.client.create_completion(request, token)
        except Exception as exc:
            if self.callbacks_handler is not None:
                self.callbacks_handler.handle_llm_error(token, exc)
            raise

        response = ContentResponse(
            choices=[
                ContentChoice(
                    content=completion.content,
                    stop_reason=completion.finish_reason,
                    generation_info={
                        "completion_tokens": completion.completion_tokens,
                        "prompt_tokens": completion.prompt_tokens,
                        "total_tokens": completion.total_tokens,
                    },
                )
            ]
        )
        if self.callbacks_handler is not None:
            self.callbacks_handler.handle_llm_generate_content_end(token, response)
        return response


__all__ = [
    "CallOptions",
    "LingyiLLM",
    "to_wire_message",
    "type_to_role",
]

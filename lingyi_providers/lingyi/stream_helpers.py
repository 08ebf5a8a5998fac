"""Streaming decode and combine for Lingyi chat completions.

Pipeline
--------
One call to :func:`parse_stream` runs a two-stage producer/consumer pipeline:

* a background worker thread (:func:`_decode_lines`) owns the body iterator,
  turns each ``data:`` line into a :class:`StreamedChunk` and sends it through
  a :class:`ChunkChannel`;
* the calling thread (:func:`combine_stream`) receives chunks in order, folds
  them into a single :class:`CompletionResponse` and invokes the request's
  ``streaming_func`` once per chunk with choices.

The worker always closes the channel on exit; that close is the consumer's
only end-of-stream signal. Decode and read failures travel as chunks carrying
only ``error``. When the consumer stops early it abandons the channel, which
releases a worker blocked on send; a worker blocked on a body read is released
when the caller closes the HTTP response.

Failure modes
-------------
- Undecodable event: ``ProviderError(code=DECODE)``; no partial response.
- Body read failure: ``ProviderError`` classified from the transport error.
- Any other worker failure: ``ProviderError(code=INTERNAL)``.
- Callback raised: ``ProviderError(code=CALLBACK)`` chained to the original.
- More than one choice in a chunk: ``ProviderError(code=UNSUPPORTED)``.
- Cancelled token: ``CancelledError``.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional, Union

import httpx
from pydantic import ValidationError

from ..base.cancellation import CancellationToken
from ..base.errors import ErrorCode, ProviderError, classify_exception
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.streaming import ChunkChannel, extract_data_payload, is_done
from .schema import (
    CompletionRequest,
    CompletionResponse,
    CompletionResponseChoice,
    ResponseMessage,
    StreamedChunk,
    Usage,
)

PROVIDER_NAME = "lingyi"

_logger = get_logger("providers.lingyi.stream")


def _send_error(  # noqa: PLR0913
    channel: ChunkChannel[StreamedChunk],
    ctx: LogContext,
    logger: logging.Logger,
    event: str,
    phase: str,
    code: ErrorCode,
    message: str,
    exc: Exception,
) -> None:
    normalized_log_event(logger, event, ctx, phase=phase, error_code=code.value, error=str(exc))
    err = ProviderError(code=code, message=message, provider=PROVIDER_NAME, model=ctx.model, raw=exc)
    channel.send(StreamedChunk(error=err))


def _decode_lines(
    lines: Iterable[Union[str, bytes]],
    channel: ChunkChannel[StreamedChunk],
    ctx: LogContext,
    logger: logging.Logger,
) -> None:
    """Worker body: decode event lines into chunks until done, error or EOF.

    Every failure is handed to the consumer as an error chunk. The channel close
    alone reads as a clean end of stream, so nothing may escape this function.
    """
    try:
        for line in lines:
            payload = extract_data_payload(line)
            if payload is None:
                continue
            if is_done(payload):
                return
            try:
                chunk = StreamedChunk.model_validate_json(payload)
            except ValidationError as exc:
                _send_error(
                    channel, ctx, logger, "stream.decode_error", "decode", ErrorCode.DECODE,
                    f"error decoding streaming response: {exc}", exc,
                )
                return
            if not channel.send(chunk):
                return
    except (httpx.HTTPError, httpx.StreamError, OSError, UnicodeDecodeError) as exc:
        _send_error(
            channel, ctx, logger, "stream.read_error", "read", classify_exception(exc),
            f"error reading streaming response: {exc}", exc,
        )
    except Exception as exc:
        _send_error(
            channel, ctx, logger, "stream.worker_error", "decode", ErrorCode.INTERNAL,
            f"stream worker failed: {exc!r}", exc,
        )
    finally:
        channel.close()


def _merge_metadata(response: CompletionResponse, chunk: StreamedChunk) -> None:
    """Copy identifiers and usage mirrored on a chunk onto the running response."""
    if chunk.id:
        response.id = chunk.id
    if chunk.created:
        response.created = chunk.created
    if chunk.model:
        response.model = chunk.model
    if chunk.object:
        response.object = chunk.object
    if chunk.usage is not None:
        response.usage = chunk.usage.model_copy()


def combine_stream(
    channel: Iterable[StreamedChunk],
    request: CompletionRequest,
    token: Optional[CancellationToken] = None,
    *,
    model: Optional[str] = None,
) -> CompletionResponse:
    """Fold received chunks into one response, invoking the callback per chunk.

    Parameters:
        channel: Chunks in arrival order; iteration ends when the producer closes.
        request: The originating request (only ``streaming_func`` is used).
        token: Passed to the callback and checked before each chunk.
        model: Model name for error context.

    Returns:
        A response with exactly one choice holding the concatenated content and
        the finish reason of the last chunk that carried a choice.
    """
    token = token or CancellationToken()
    choice = CompletionResponseChoice(message=ResponseMessage(role="assistant", content=""))
    response = CompletionResponse(choices=[choice], usage=Usage())
    parts = []

    for chunk in channel:
        token.raise_if_cancelled()
        if chunk.error is not None:
            raise chunk.error
        _merge_metadata(response, chunk)
        if not chunk.choices:
            continue
        if len(chunk.choices) > 1 or (chunk.choices[0].index or 0) > 0:
            raise ProviderError(
                code=ErrorCode.UNSUPPORTED,
                message="multiple choices in a streaming response are not supported",
                provider=PROVIDER_NAME,
                model=model,
            )
        delta = chunk.choices[0]
        text = delta.delta.content or ""
        parts.append(text)
        choice.finish_reason = delta.finish_reason or ""

        if request.streaming_func is not None:
            try:
                request.streaming_func(token, text.encode("utf-8"))
            except Exception as exc:
                raise ProviderError(
                    code=ErrorCode.CALLBACK,
                    message=f"streaming func returned an error: {exc}",
                    provider=PROVIDER_NAME,
                    model=model,
                    raw=exc,
                ) from exc

    choice.message.content = "".join(parts)
    return response


def parse_stream(
    lines: Iterable[Union[str, bytes]],
    request: CompletionRequest,
    token: Optional[CancellationToken] = None,
    *,
    ctx: Optional[LogContext] = None,
    logger: Optional[logging.Logger] = None,
) -> CompletionResponse:
    """Decode an SSE body on a worker thread and combine it on this one.

    Parameters:
        lines: Line iterator over the response body (e.g.
            ``httpx.Response.iter_lines()``). Only the worker reads from it.
        request: The originating request carrying ``streaming_func``.
        token: Cancellation token handed to the callback.
        ctx: Logging context; defaults to provider/model from ``request``.
        logger: Logger override.

    Returns:
        The combined :class:`CompletionResponse`.

    Raises:
        ProviderError: on decode, read, callback or multi-choice failures.
        CancelledError: when ``token`` is cancelled mid-stream.
    """
    ctx = ctx or LogContext(provider=PROVIDER_NAME, model=request.model or None, stream=True)
    logger = logger or _logger
    channel: ChunkChannel[StreamedChunk] = ChunkChannel()
    worker = threading.Thread(
        target=_decode_lines,
        args=(lines, channel, ctx, logger),
        name="lingyi-stream-decoder",
        daemon=True,
    )
    worker.start()
    try:
        response = combine_stream(channel, request, token, model=ctx.model)
    except BaseException:
        channel.abandon()
        raise
    worker.join()
    return response


__all__ = [
    "combine_stream",
    "parse_stream",
]

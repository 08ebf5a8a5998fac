"""Lingyi (01.AI) chat-completions client.

Summary:
- One ``POST {base_url}/chat/completions`` per call via ``httpx``; no retries.
- Non-streaming responses are decoded as a single JSON document.
- Streaming responses (requests carrying ``streaming_func``) are handed to
  :func:`parse_stream`, which decodes on a worker thread and combines here.

Configuration:
- ``api_key``, ``model``, ``base_url`` and ``http_client`` are independently
  overridable. Each constructor argument wins over
  ``get_provider_config("lingyi")`` (config file / ``LINGYI_*`` env vars).
- Anything still missing is filled at request time from the injected
  :class:`CompletionDefaults`: ``max_tokens`` 256, model ``yi-large``, base URL
  ``https://api.lingyiwanwu.com/v1``, and a pooled default ``httpx.Client``.

Errors:
- Transport failures and non-streaming decode failures propagate unchanged
  (``httpx.HTTPError`` / ``pydantic.ValidationError``).
- Non-200 statuses raise ``ProviderError`` with the status code and, when the
  body holds an error envelope, the service's message.
- An empty choice list raises ``ProviderError(code=EMPTY_RESPONSE)`` from
  :meth:`LingyiClient.create_completion`.
"""

from __future__ import annotations

import time
from contextlib import closing
from typing import Dict, Optional

import httpx
from pydantic import ValidationError

from ..base.cancellation import CancellationToken
from ..base.errors import ErrorCode, ProviderError, classify_exception, code_for_status
from ..base.http import get_httpx_client
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config import CompletionDefaults, get_provider_config
from .schema import Completion, CompletionRequest, CompletionResponse, ErrorEnvelope
from .stream_helpers import PROVIDER_NAME, parse_stream


class LingyiClient:
    """Low-level client for the Lingyi chat-completions endpoint.

    Parameters:
        api_key: Bearer token; falls back to ``LINGYI_API_KEY`` / config.
        model: Client-level default model; falls back to config, then to
            ``defaults.model`` at request time.
        base_url: API root; falls back to config, then ``defaults.base_url``.
        http_client: Transport used for the exchange; falls back to a pooled
            ``httpx.Client``.
        defaults: Fallback values; ``CompletionDefaults()`` when omitted.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        defaults: Optional[CompletionDefaults] = None,
    ) -> None:
        cfg = get_provider_config(PROVIDER_NAME)
        self._api_key = api_key or cfg.get("api_key") or ""
        self._model = model or cfg.get("model") or ""
        self._base_url = base_url or cfg.get("base_url") or ""
        self._http_client = http_client
        self._defaults = defaults or CompletionDefaults()
        self._logger = get_logger("providers.lingyi")

    @property
    def provider_name(self) -> str:
        return PROVIDER_NAME

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_url(self) -> str:
        return self._base_url

    # ---- Public API ----
    def create_completion(
        self, request: CompletionRequest, token: Optional[CancellationToken] = None
    ) -> Completion:
        """Run one completion and return the simplified result.

        Raises:
            ProviderError: ``EMPTY_RESPONSE`` when the service returned no
                choices, or any error raised by the exchange itself.
        """
        response = self._create_completion(request, token)
        if not response.choices:
            raise ProviderError(
                code=ErrorCode.EMPTY_RESPONSE,
                message="empty response",
                provider=PROVIDER_NAME,
                model=request.model or None,
            )
        return Completion(
            content=response.choices[0].message.content,
            finish_reason=response.choices[0].finish_reason or "",
            completion_tokens=response.usage.completion_tokens,
            prompt_tokens=response.usage.prompt_tokens,
            total_tokens=response.usage.total_tokens,
        )

    # ---- Request dispatch ----
    def _set_completion_defaults(self, request: CompletionRequest) -> None:
        """Fill unset request fields and the transport; never overrides set values."""
        if request.max_tokens == 0:
            request.max_tokens = self._defaults.max_tokens
        if not request.model:
            request.model = self._model or self._defaults.model
        if self._http_client is None:
            self._http_client = get_httpx_client(None, purpose="lingyi.chat")

    def _resolve_base_url(self) -> str:
        if not self._base_url:
            self._base_url = self._defaults.base_url
        return self._base_url

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    def _create_completion(
        self, request: CompletionRequest, token: Optional[CancellationToken] = None
    ) -> CompletionResponse:
        """Send the request and decode the (possibly streamed) response.

        The HTTP response is opened in streaming mode so the body is not read
        eagerly, and is closed exactly once when this method exits, whichever
        branch runs.
        """
        self._set_completion_defaults(request)
        if request.streaming_func is not None:
            request.stream = True
        if token is not None:
            token.raise_if_cancelled()

        url = f"{self._resolve_base_url().rstrip('/')}/chat/completions"
        ctx = LogContext(provider=PROVIDER_NAME, model=request.model, stream=request.stream)
        self._log_start(ctx, request)

        http_request = self._http_client.build_request(
            "POST", url, json=request.to_payload(), headers=self._build_headers()
        )
        t0 = time.perf_counter()
        try:
            http_response = self._http_client.send(http_request, stream=True)
        except httpx.HTTPError as exc:
            self._log_error(ctx, exc)
            raise

        with closing(http_response):
            if http_response.status_code != httpx.codes.OK:
                err = self._status_error(http_response, request.model)
                self._log_error(ctx, err)
                raise err
            try:
                if request.streaming_func is not None:
                    response = parse_stream(http_response.iter_lines(), request, token, ctx=ctx, logger=self._logger)
                else:
                    http_response.read()
                    response = CompletionResponse.model_validate_json(http_response.content)
            except (ProviderError, httpx.HTTPError, ValidationError) as exc:
                self._log_error(ctx, exc)
                raise

        ctx.response_id = response.id or None
        self._log_end(ctx, response, (time.perf_counter() - t0) * 1000.0)
        return response

    def _status_error(self, http_response: httpx.Response, model: str) -> ProviderError:
        """Build the error for a non-200 response.

        The body is decoded as an error envelope when possible; any read or
        decode failure degrades to the generic status message.
        """
        status = http_response.status_code
        msg = f"API returned unexpected status code: {status}"
        try:
            http_response.read()
            envelope = ErrorEnvelope.model_validate_json(http_response.content)
        except (ValidationError, httpx.HTTPError, httpx.StreamError):
            envelope = None
        # An envelope without "error", or with an empty message, adds nothing
        # worth appending, so the generic message stands.
        if envelope is not None and envelope.error.message:
            msg = f"{msg}: {envelope.error.message}"
        return ProviderError(
            code=code_for_status(status),
            message=msg,
            provider=PROVIDER_NAME,
            model=model,
            status_code=status,
        )

    # ---- Logging ----
    def _log_start(self, ctx: LogContext, request: CompletionRequest) -> None:
        normalized_log_event(
            self._logger,
            "stream.start" if request.stream else "chat.start",
            ctx,
            phase="start",
            emitted=None,
            tokens=None,
            messages=len(request.messages),
            max_tokens=request.max_tokens,
            temperature=request.temperature,
            top_p=request.top_p or None,
        )

    def _log_end(self, ctx: LogContext, response: CompletionResponse, latency_ms: float) -> None:
        usage = response.usage
        normalized_log_event(
            self._logger,
            "stream.end" if ctx.stream else "chat.end",
            ctx,
            phase="finalize",
            emitted=bool(response.choices),
            tokens={
                "prompt": usage.prompt_tokens,
                "completion": usage.completion_tokens,
                "total": usage.total_tokens,
            },
            latency_ms=latency_ms,
            finish_reason=response.choices[0].finish_reason if response.choices else None,
        )

    def _log_error(self, ctx: LogContext, exc: Exception) -> None:
        normalized_log_event(
            self._logger,
            "stream.error" if ctx.stream else "chat.error",
            ctx,
            phase="finalize",
            emitted=False,
            tokens=None,
            error=str(exc),
            error_code=classify_exception(exc).value,
        )


__all__ = ["LingyiClient"]

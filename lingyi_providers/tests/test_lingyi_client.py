"""LingyiClient request dispatch against an ``httpx.MockTransport``.

Covers:
- Defaults filled only where unset, and idempotently
- URL, headers and payload of the outgoing request
- Non-200 handling with and without a parseable error envelope
- Non-streaming and streaming decode paths
- Transport and decode errors propagate unchanged
- Response body closed on every path
- Constructor, env var and config file precedence
"""
from __future__ import annotations

import json
from typing import List

import httpx
import pytest
from pydantic import ValidationError

from lingyi_providers.base.cancellation import CancellationToken, CancelledError
from lingyi_providers.base.errors import ErrorCode, ProviderError
from lingyi_providers.config import CompletionDefaults, reset_config_cache
from lingyi_providers.lingyi.client import LingyiClient
from lingyi_providers.lingyi.schema import CompletionRequest, Message
from lingyi_providers.tests.utils import TrackingStream, delta_event, sse_body

_OK_BODY = {
    "id": "cmpl-1",
    "object": "chat.completion",
    "created": 1700000000,
    "model": "yi-large",
    "choices": [{"index": 0, "message": {"role": "assistant", "content": "pong"}, "finish_reason": "stop"}],
    "usage": {"prompt_tokens": 4, "completion_tokens": 1, "total_tokens": 5},
}


def _request(**kw) -> CompletionRequest:
    return CompletionRequest(messages=[Message(role="user", content="ping")], **kw)


def _ok(_: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=_OK_BODY)


def test_defaults_applied_only_when_unset(mock_http):
    client = LingyiClient(api_key="k", http_client=mock_http(_ok))

    req = _request()
    client._set_completion_defaults(req)
    assert req.max_tokens == 256  # nosec B101
    assert req.model == "yi-large"  # nosec B101

    req2 = _request(model="yi-lightning", max_tokens=10)
    client._set_completion_defaults(req2)
    assert req2.model == "yi-lightning"  # nosec B101
    assert req2.max_tokens == 10  # nosec B101

    # applying twice changes nothing
    client._set_completion_defaults(req)
    assert (req.model, req.max_tokens) == ("yi-large", 256)  # nosec B101


def test_injected_defaults_and_client_model_win_over_builtins(mock_http):
    defaults = CompletionDefaults(model="yi-medium", base_url="https://example.invalid/v9", max_tokens=32)
    client = LingyiClient(api_key="k", http_client=mock_http(_ok), defaults=defaults)
    req = _request()
    client._set_completion_defaults(req)
    assert (req.model, req.max_tokens) == ("yi-medium", 32)  # nosec B101

    client2 = LingyiClient(api_key="k", model="yi-spark", http_client=mock_http(_ok), defaults=defaults)
    req2 = _request()
    client2._set_completion_defaults(req2)
    assert req2.model == "yi-spark"  # nosec B101


def test_missing_transport_falls_back_to_pooled_client():
    client = LingyiClient(api_key="k")
    req = _request()
    client._set_completion_defaults(req)
    assert isinstance(client._http_client, httpx.Client)  # nosec B101


def test_request_url_headers_and_payload(mock_http):
    http = mock_http(_ok)
    client = LingyiClient(api_key="secret", base_url="https://api.example.test/v1/", http_client=http)

    result = client.create_completion(_request(temperature=0.3))

    sent = http._transport.requests[-1]
    assert sent.method == "POST"  # nosec B101
    assert str(sent.url) == "https://api.example.test/v1/chat/completions"  # nosec B101
    assert sent.headers["Authorization"] == "Bearer secret"  # nosec B101
    assert sent.headers["Content-Type"] == "application/json"  # nosec B101
    body = http._transport.last_json()
    assert body["model"] == "yi-large"  # nosec B101
    assert body["max_tokens"] == 256  # nosec B101
    assert body["temperature"] == 0.3  # nosec B101
    assert body["stream"] is False  # nosec B101
    assert "top_p" not in body  # nosec B101
    assert "streaming_func" not in body  # nosec B101

    assert result.content == "pong"  # nosec B101
    assert result.finish_reason == "stop"  # nosec B101
    assert (result.prompt_tokens, result.completion_tokens, result.total_tokens) == (4, 1, 5)  # nosec B101


def test_default_base_url_used_when_unconfigured(mock_http):
    http = mock_http(_ok)
    client = LingyiClient(api_key="k", http_client=http)
    client.create_completion(_request())
    assert str(http._transport.requests[-1].url) == "https://api.lingyiwanwu.com/v1/chat/completions"  # nosec B101


def test_non_200_with_envelope_includes_provider_message(mock_http):
    def _handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "invalid api key", "type": "auth_error"}})

    client = LingyiClient(api_key="bad", http_client=mock_http(_handler))
    with pytest.raises(ProviderError) as ei:
        client.create_completion(_request())

    err = ei.value
    assert err.status_code == 401  # nosec B101
    assert err.code is ErrorCode.AUTH  # nosec B101
    assert err.message == "API returned unexpected status code: 401: invalid api key"  # nosec B101


def test_non_200_with_unparseable_body_uses_generic_message(mock_http):
    def _handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    client = LingyiClient(api_key="k", http_client=mock_http(_handler))
    with pytest.raises(ProviderError) as ei:
        client.create_completion(_request())

    assert ei.value.message == "API returned unexpected status code: 502"  # nosec B101
    assert ei.value.status_code == 502  # nosec B101


def test_non_200_with_empty_envelope_message_uses_generic_message(mock_http):
    def _handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": ""}})

    client = LingyiClient(api_key="k", http_client=mock_http(_handler))
    with pytest.raises(ProviderError) as ei:
        client.create_completion(_request())
    assert ei.value.message == "API returned unexpected status code: 429"  # nosec B101
    assert ei.value.code is ErrorCode.RATE_LIMIT  # nosec B101


def test_non_200_with_empty_object_body_uses_generic_message(mock_http):
    client = LingyiClient(api_key="k", http_client=mock_http(lambda _r: httpx.Response(401, content=b"{}")))
    with pytest.raises(ProviderError) as ei:
        client.create_completion(_request())
    assert ei.value.message == "API returned unexpected status code: 401"  # nosec B101


def test_ok_response_with_nulls_is_returned(mock_http):
    body = b'{"id":"cmpl-3","choices":[{"message":{"content":"hi"},"finish_reason":null}],"usage":null}'
    client = LingyiClient(api_key="k", http_client=mock_http(lambda _r: httpx.Response(200, content=body)))
    result = client.create_completion(_request())
    assert result.content == "hi"  # nosec B101
    assert result.finish_reason == ""  # nosec B101
    assert result.total_tokens == 0  # nosec B101


def test_non_streaming_decode_error_propagates_unchanged(mock_http):
    def _handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    client = LingyiClient(api_key="k", http_client=mock_http(_handler))
    with pytest.raises(ValidationError):
        client.create_completion(_request())


def test_transport_error_propagates_unchanged(mock_http):
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = LingyiClient(api_key="k", http_client=mock_http(_handler))
    with pytest.raises(httpx.ConnectError):
        client.create_completion(_request())


def test_empty_choices_raise_empty_response(mock_http):
    def _handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "x", "choices": []})

    client = LingyiClient(api_key="k", http_client=mock_http(_handler))
    with pytest.raises(ProviderError) as ei:
        client.create_completion(_request())
    assert ei.value.code is ErrorCode.EMPTY_RESPONSE  # nosec B101
    assert ei.value.message == "empty response"  # nosec B101


def test_streaming_forces_stream_flag_and_combines(mock_http):
    body = sse_body(delta_event("po"), delta_event("ng", finish_reason="stop"))

    def _handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body, headers={"Content-Type": "text/event-stream"})

    http = mock_http(_handler)
    received: List[bytes] = []
    req = _request(streaming_func=lambda _t, chunk: received.append(chunk))
    assert req.stream is False  # nosec B101

    result = LingyiClient(api_key="k", http_client=http).create_completion(req)

    assert http._transport.last_json()["stream"] is True  # nosec B101
    assert req.stream is True  # nosec B101
    assert result.content == "pong"  # nosec B101
    assert result.finish_reason == "stop"  # nosec B101
    assert received == [b"po", b"ng"]  # nosec B101


def test_stream_flag_without_callback_uses_non_streaming_decode(mock_http):
    http = mock_http(_ok)
    result = LingyiClient(api_key="k", http_client=http).create_completion(_request(stream=True))
    assert http._transport.last_json()["stream"] is True  # nosec B101
    assert result.content == "pong"  # nosec B101


@pytest.mark.parametrize("streaming", [False, True])
def test_response_body_closed_on_success(mock_http, streaming):
    streams: List[TrackingStream] = []
    body = sse_body(delta_event("x")) if streaming else json.dumps(_OK_BODY).encode()

    def _handler(_: httpx.Request) -> httpx.Response:
        s = TrackingStream(body)
        streams.append(s)
        return httpx.Response(200, stream=s)

    req = _request(streaming_func=lambda _t, _b: None) if streaming else _request()
    LingyiClient(api_key="k", http_client=mock_http(_handler)).create_completion(req)
    assert streams[0].closed  # nosec B101


def test_response_body_closed_when_callback_fails(mock_http):
    streams: List[TrackingStream] = []
    body = sse_body(*[delta_event(str(i)) for i in range(4)])

    def _handler(_: httpx.Request) -> httpx.Response:
        s = TrackingStream(body)
        streams.append(s)
        return httpx.Response(200, stream=s)

    def _cb(_t: CancellationToken, _b: bytes) -> None:
        raise RuntimeError("stop")

    with pytest.raises(ProviderError) as ei:
        LingyiClient(api_key="k", http_client=mock_http(_handler)).create_completion(_request(streaming_func=_cb))
    assert ei.value.code is ErrorCode.CALLBACK  # nosec B101
    assert streams[0].closed  # nosec B101


def test_response_body_closed_on_error_status(mock_http):
    streams: List[TrackingStream] = []

    def _handler(_: httpx.Request) -> httpx.Response:
        s = TrackingStream(b'{"error":{"message":"boom"}}')
        streams.append(s)
        return httpx.Response(500, stream=s)

    with pytest.raises(ProviderError):
        LingyiClient(api_key="k", http_client=mock_http(_handler)).create_completion(_request())
    assert streams[0].closed  # nosec B101


def test_cancelled_token_prevents_request(mock_http):
    http = mock_http(_ok)
    token = CancellationToken()
    token.cancel("early")
    with pytest.raises(CancelledError):
        LingyiClient(api_key="k", http_client=http).create_completion(_request(), token)
    assert http._transport.requests == []  # nosec B101


def test_env_vars_configure_client(monkeypatch):
    monkeypatch.setenv("LINGYI_API_KEY", "env-key")
    monkeypatch.setenv("LINGYI_MODEL", "yi-lightning")
    monkeypatch.setenv("LINGYI_BASE_URL", "https://env.example.test/v1")
    client = LingyiClient()
    assert client._api_key == "env-key"  # nosec B101
    assert client.model == "yi-lightning"  # nosec B101
    assert client.base_url == "https://env.example.test/v1"  # nosec B101

    explicit = LingyiClient(api_key="arg", model="yi-large")
    assert explicit._api_key == "arg"  # nosec B101
    assert explicit.model == "yi-large"  # nosec B101


def test_config_file_is_lowest_precedence(monkeypatch, tmp_path):
    cfg = tmp_path / "providers.yaml"
    cfg.write_text("lingyi:\n  model: yi-from-file\n  base_url: https://file.example.test/v1\n", encoding="utf-8")
    monkeypatch.setenv("PROVIDERS_CONFIG_FILE", str(cfg))
    monkeypatch.setenv("LINGYI_BASE_URL", "https://env.example.test/v1")
    reset_config_cache()

    client = LingyiClient(api_key="k")
    assert client.model == "yi-from-file"  # nosec B101
    assert client.base_url == "https://env.example.test/v1"  # nosec B101

"""Pytest configuration for the providers test suite.

Every test runs with a clean provider environment: ``LINGYI_*`` variables,
``PROVIDERS_CONFIG_FILE`` and ``PROVIDERS_LOG_LEVEL`` are removed, the cached
config file is forgotten and pooled HTTP clients are closed afterwards.

``mock_http`` builds an ``httpx.Client`` backed by ``httpx.MockTransport`` and
records every request it receives.
"""

from __future__ import annotations

import json
from typing import Callable, Iterator, List

import httpx
import pytest

from lingyi_providers.base.http import close_all_clients
from lingyi_providers.config import reset_config_cache

_ENV_VARS = (
    "LINGYI_API_KEY",
    "YI_API_KEY",
    "LINGYI_MODEL",
    "LINGYI_BASE_URL",
    "PROVIDERS_CONFIG_FILE",
    "PROVIDERS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from the developer's shell and from each other."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
    close_all_clients()


class RecordingTransport(httpx.MockTransport):
    """``MockTransport`` that keeps the requests it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            request.read()
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture()
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    """Return a factory building a mock-backed ``httpx.Client``.

    The transport is reachable as ``client._transport`` for request assertions.
    """
    clients: List[httpx.Client] = []

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=RecordingTransport(handler))
        clients.append(client)
        return client

    yield _factory
    for c in clients:
        c.close()

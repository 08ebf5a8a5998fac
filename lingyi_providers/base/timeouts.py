"""Centralized timeout configuration for provider HTTP traffic.

``get_timeout_config()`` returns a process-cached :class:`TimeoutConfig`,
parsing environment overrides on first use (and again only when the relevant
variables change). Supported variables, all optional and in seconds:

    PROVIDERS_TIMEOUT_CONNECT_SECONDS
    PROVIDERS_TIMEOUT_HTTP_SECONDS
    PROVIDERS_TIMEOUT_STREAM_SECONDS

Non-positive or unparsable values fall back to the defaults.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Limit for establishing the TCP/TLS connection.
        http_timeout_seconds: Baseline timeout for write and pool acquisition,
            and for reads of non-streaming responses.
        stream_timeout_seconds: Idle read timeout between two chunks of a
            streaming response body.
    """

    connect_timeout_seconds: float = 10.0
    http_timeout_seconds: float = 30.0
    stream_timeout_seconds: float = 60.0

    def to_httpx(self) -> httpx.Timeout:
        """Return the equivalent ``httpx.Timeout``.

        Reads use the streaming idle timeout, which is the longer of the two
        and is what a chunked body needs between events.
        """
        return httpx.Timeout(
            self.http_timeout_seconds,
            connect=self.connect_timeout_seconds,
            read=max(self.http_timeout_seconds, self.stream_timeout_seconds),
        )


_ENV_NAMES = (
    "PROVIDERS_TIMEOUT_CONNECT_SECONDS",
    "PROVIDERS_TIMEOUT_HTTP_SECONDS",
    "PROVIDERS_TIMEOUT_STREAM_SECONDS",
)

_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float, returning ``default`` otherwise."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED

    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.connect_timeout_seconds),
        http_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.http_timeout_seconds),
        stream_timeout_seconds=_parse_env_float(_ENV_NAMES[2], defaults.stream_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]

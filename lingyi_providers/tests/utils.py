"""Shared builders for streaming test payloads."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, Optional

import httpx


def delta_event(content: Optional[str], finish_reason: Optional[str] = None, **extra: Any) -> str:
    """JSON for one streamed chunk carrying a single choice."""
    body: Dict[str, Any] = {
        "id": "cmpl-1",
        "object": "chat.completion.chunk",
        "created": 1700000000,
        "model": "yi-large",
        "choices": [{"index": 0, "delta": {"content": content}, "finish_reason": finish_reason}],
    }
    body.update(extra)
    return json.dumps(body)


def sse_lines(*events: str, done: bool = True) -> List[str]:
    """Event lines as ``iter_lines`` yields them (blank separators included)."""
    lines: List[str] = []
    for e in events:
        lines.extend([f"data: {e}", ""])
    if done:
        lines.append("data: [DONE]")
    return lines


def sse_body(*events: str, done: bool = True) -> bytes:
    """The same events rendered as a raw response body."""
    return ("\n".join(sse_lines(*events, done=done)) + "\n").encode("utf-8")


class TrackingStream(httpx.SyncByteStream):
    """Response body that records whether it was closed."""

    def __init__(self, body: bytes, chunk_size: int = 16) -> None:
        self._body = body
        self._chunk_size = chunk_size
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        for i in range(0, len(self._body), self._chunk_size):
            yield self._body[i : i + self._chunk_size]

    def close(self) -> None:
        self.closed = True

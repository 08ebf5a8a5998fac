"""Server-sent event line helpers.

Pure functions shared by stream decoders: strip the ``data:`` field prefix
and recognise the ``[DONE]`` terminator. No I/O happens here.
"""
from __future__ import annotations

from typing import Optional, Union

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


def extract_data_payload(line: Union[str, bytes]) -> Optional[str]:
    """Return the trimmed payload of one event line, or ``None`` if blank.

    Only ``data:`` (without the trailing space) is matched so that both
    ``data: {...}`` and ``data:{...}`` are accepted. Lines without the prefix
    are returned trimmed as-is.
    """
    if isinstance(line, bytes):
        line = line.decode("utf-8")
    if not line.strip():
        return None
    if line.startswith(DATA_PREFIX):
        line = line[len(DATA_PREFIX):]
    return line.strip()


def is_done(payload: str) -> bool:
    """Whether ``payload`` is the end-of-stream sentinel."""
    return payload == DONE_SENTINEL


__all__ = ["DATA_PREFIX", "DONE_SENTINEL", "extract_data_payload", "is_done"]

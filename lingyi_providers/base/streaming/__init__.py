"""Streaming package for the provider layer.

Provider-agnostic building blocks for SSE decoding: the worker/consumer
handoff channel and event-line helpers.
"""

from .channel import ChunkChannel
from .sse import DATA_PREFIX, DONE_SENTINEL, extract_data_payload, is_done

__all__ = [
    "ChunkChannel",
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "extract_data_payload",
    "is_done",
]

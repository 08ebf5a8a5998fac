"""Single-producer / single-consumer handoff channel for streaming workers.

A streaming call runs one background worker that reads and decodes the
response body, and one consumer (the calling thread) that folds decoded
chunks into a response. :class:`ChunkChannel` is the only object shared
between them.

Semantics:
    - ``send`` blocks until the consumer has room (capacity defaults to one
      item, a handoff).
    - ``close`` is the sole end-of-stream signal; iteration over the channel
      stops when it is observed.
    - ``abandon`` is called by a consumer that stops early. A worker blocked
      in ``send`` then returns ``False`` instead of waiting forever, and every
      later ``send``/``close`` is a no-op.
"""
from __future__ import annotations

import queue
import threading
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")

_CLOSED = object()

# How often a blocked sender re-checks the abandoned flag.
_SEND_POLL_SECONDS = 0.05


class ChunkChannel(Generic[T]):
    """Blocking handoff queue with explicit close and abandon."""

    def __init__(self, capacity: int = 1) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=capacity)
        self._abandoned = threading.Event()

    @property
    def abandoned(self) -> bool:
        return self._abandoned.is_set()

    def _put(self, item: object) -> bool:
        while not self._abandoned.is_set():
            try:
                self._queue.put(item, timeout=_SEND_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def send(self, item: T) -> bool:
        """Hand ``item`` to the consumer; ``False`` if the consumer left."""
        return self._put(item)

    def close(self) -> None:
        """Signal end of stream to the consumer."""
        self._put(_CLOSED)

    def abandon(self) -> None:
        """Mark the consumer as gone so a blocked producer can exit."""
        self._abandoned.set()

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]


__all__ = ["ChunkChannel"]

"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` plays the role of the per-call context: it is passed to
streaming callbacks and checked by the combiner between chunks.
``CancelledError`` is raised when a cancelled token is observed.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]

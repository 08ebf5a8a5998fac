"""Cancellation error type."""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a completion call observes a cancelled token."""


__all__ = ["CancelledError"]

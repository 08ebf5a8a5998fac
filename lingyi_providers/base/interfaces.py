"""
Provider-agnostic interfaces (Protocols) for the providers layer.

Re-exports the single-class modules under
``lingyi_providers.base.interfaces_parts`` behind one stable import path.
"""

from __future__ import annotations

from .interfaces_parts import CallbacksHandler, LLMProvider

__all__ = [
    "CallbacksHandler",
    "LLMProvider",
]

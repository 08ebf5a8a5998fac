"""lingyi_providers.config.defaults
===============================

Small, stable default values used by the Lingyi client. They are not read as
hidden globals at request time: the client receives them as a
:class:`CompletionDefaults` value when it is constructed, so tests and callers
can inject their own.

This module intentionally avoids importing from other provider packages to
prevent circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---- Lingyi (01.AI) ----
LINGYI_DEFAULT_MODEL = "yi-large"
LINGYI_DEFAULT_BASE_URL = "https://api.lingyiwanwu.com/v1"
# Used when a request leaves max_tokens unset (zero).
LINGYI_DEFAULT_MAX_TOKENS = 256


@dataclass(frozen=True)
class CompletionDefaults:
    """Fallback values applied to completion requests.

    Attributes:
        model: Model used when neither the request nor the client names one.
        base_url: API root used when the client has no base URL configured.
        max_tokens: Token budget used when the request leaves it at zero.
    """

    model: str = LINGYI_DEFAULT_MODEL
    base_url: str = LINGYI_DEFAULT_BASE_URL
    max_tokens: int = LINGYI_DEFAULT_MAX_TOKENS


__all__ = [
    "LINGYI_DEFAULT_MODEL",
    "LINGYI_DEFAULT_BASE_URL",
    "LINGYI_DEFAULT_MAX_TOKENS",
    "CompletionDefaults",
]

"""
Provider-agnostic generation result.

``ContentResponse`` holds one ``ContentChoice`` per generated alternative.
``generation_info`` carries provider accounting such as token usage under
stable snake_case keys.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ContentChoice:
    """A single generated alternative."""

    content: str
    stop_reason: str = ""
    generation_info: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ContentResponse:
    """Result of a ``generate_content`` call."""

    choices: List[ContentChoice] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation."""
        return {
            "choices": [
                {
                    "content": c.content,
                    "stop_reason": c.stop_reason,
                    "generation_info": dict(c.generation_info),
                }
                for c in self.choices
            ]
        }


__all__ = [
    "ContentChoice",
    "ContentResponse",
]

"""
Provider-agnostic chat message DTOs.

``ChatMessageType`` names who produced a message independently of any wire
format; each provider adapter maps it onto its own role strings.
``MessageContent`` pairs that type with an ordered list of content parts.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .content_part import ContentPart, TextContent


class ChatMessageType(str, Enum):
    """Author of a chat message."""

    SYSTEM = "system"
    HUMAN = "human"
    GENERIC = "generic"
    AI = "ai"
    FUNCTION = "function"
    TOOL = "tool"


@dataclass
class MessageContent:
    """A role-tagged message made of one or more content parts.

    Attributes:
        role: The :class:`ChatMessageType` of the author.
        parts: Ordered content parts.
    """

    role: ChatMessageType
    parts: List[ContentPart] = field(default_factory=list)

    @classmethod
    def from_text(cls, role: ChatMessageType, text: str) -> "MessageContent":
        """Build a single-text-part message."""
        return cls(role=role, parts=[TextContent(text=text)])


__all__ = [
    "ChatMessageType",
    "MessageContent",
]

"""
Provider-agnostic domain models (DTOs) public surface.

Re-exports the one-class-per-file implementations under
``lingyi_providers.base.models_parts``.
"""

from .models_parts.content_part import BinaryContent, ContentPart, ImageURLContent, TextContent
from .models_parts.message import ChatMessageType, MessageContent
from .models_parts.chat_response import ContentChoice, ContentResponse

__all__ = [
    "BinaryContent",
    "ContentPart",
    "ImageURLContent",
    "TextContent",
    "ChatMessageType",
    "MessageContent",
    "ContentChoice",
    "ContentResponse",
]

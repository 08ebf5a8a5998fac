"""Models parts package public surface.

Re-exports individual DTOs; `lingyi_providers.base.models` remains the
primary stable import path.
"""

from .content_part import BinaryContent, ContentPart, ImageURLContent, TextContent
from .message import ChatMessageType, MessageContent
from .chat_response import ContentChoice, ContentResponse

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

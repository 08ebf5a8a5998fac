"""
Content part variants carried by a :class:`MessageContent`.

``ContentPart`` is a closed union: adapters dispatch on it with an exhaustive
``isinstance`` chain and must reject any variant they do not handle with a
descriptive error rather than skipping it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TextContent:
    """Plain text."""

    text: str


@dataclass(frozen=True)
class ImageURLContent:
    """An image referenced by URL (or data URL)."""

    url: str
    detail: str = ""


@dataclass(frozen=True)
class BinaryContent:
    """Raw bytes with a MIME type (images, audio, documents)."""

    mime_type: str
    data: bytes


ContentPart = Union[TextContent, ImageURLContent, BinaryContent]


__all__ = [
    "TextContent",
    "ImageURLContent",
    "BinaryContent",
    "ContentPart",
]

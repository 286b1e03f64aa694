"""Public API for XML formatting.

Key Components:
    parse: Raw text to document tree
    XMLFormatter / format_document: Document text to a replacement edit or failure
    format_document_async: Awaitable variant for event-loop callers
    format_text: Document text to formatted text, raising on failure
    Position / Range / TextEdit: Editor-facing edit types
"""

from .formatter import (
    FormatResult,
    Position,
    Range,
    TextEdit,
    XMLFormatter,
    document_range,
    format_document,
    format_document_async,
    format_text,
)
from .parser import parse

__all__ = [
    "FormatResult",
    "Position",
    "Range",
    "TextEdit",
    "XMLFormatter",
    "document_range",
    "format_document",
    "format_document_async",
    "format_text",
    "parse",
]

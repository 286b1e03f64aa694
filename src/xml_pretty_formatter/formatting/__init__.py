"""Pretty-printing for XML formatting.

Key Components:
    XMLPrettyPrinter: Renders a document tree with a given line break and indent unit
    render: Module-level shortcut around XMLPrettyPrinter
    detect_line_break: Picks CRLF or LF from the source text
"""

from .linebreaks import CRLF, LF, count_line_breaks, detect_line_break
from .printer import XMLPrettyPrinter, format_attributes, render

__all__ = [
    "CRLF",
    "LF",
    "XMLPrettyPrinter",
    "count_line_breaks",
    "detect_line_break",
    "format_attributes",
    "render",
]

"""XML Pretty Formatter.

Re-indents XML documents for editor surfaces: the whole document is parsed
into a tree and regenerated with one element per line, using the indentation
preferences of the caller and the line-break convention of the source.

Progressive API Disclosure:
- Level 1: Simple functions - format_text(), format_document()
- Level 2: Configured formatter - XMLFormatter class with FormatterConfig
- Level 3: Building blocks - parse() and render() over the node tree

Documents nested more than 512 elements deep are rejected with
ResourceExhaustionError. Raise ``ParserConfig.max_depth`` and
``FormatterConfig.max_render_depth`` together (and the interpreter's recursion
limit) to accept deeper documents.
"""

__version__ = "0.1.0"
__author__ = "XML Pretty Formatter Team"

# Progressive API disclosure - Level 1 and 2
from .api import (
    FormatResult,
    Position,
    Range,
    TextEdit,
    XMLFormatter,
    format_document,
    format_document_async,
    format_text,
    parse,
)
from .formatting import render

# Configuration classes for advanced usage
from .shared.config import FormatterConfig, FormattingOptions, ParserConfig
from .shared.errors import (
    ResourceExhaustionError,
    XMLFormatError,
    XMLParseError,
)

# Document tree
from .tree import DeclarationNode, ElementNode

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple formatting functions
    "format_text",
    "format_document",
    "format_document_async",

    # Level 2: Configured formatter and edit types
    "XMLFormatter",
    "FormatResult",
    "Position",
    "Range",
    "TextEdit",

    # Level 3: Parse and render
    "parse",
    "render",
    "DeclarationNode",
    "ElementNode",

    # Configuration classes
    "FormatterConfig",
    "FormattingOptions",
    "ParserConfig",

    # Errors
    "XMLFormatError",
    "XMLParseError",
    "ResourceExhaustionError",
]

"""Parser entry point: raw text to document tree."""

import time
from typing import Optional

from xml_pretty_formatter.shared import (
    ParserConfig,
    XMLFormatError,
    XMLParseError,
    get_logger,
)
from xml_pretty_formatter.tokenization import XMLTokenizer
from xml_pretty_formatter.tree import XMLTreeBuilder, XmlNode

BYTE_ORDER_MARK = "\ufeff"
PREVIEW_LENGTH = 100  # Max length for content preview in logs


def parse(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> XmlNode:
    """Parse an XML document into a node tree.

    Args:
        text: XML content as string
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The root ElementNode, or a DeclarationNode wrapping it when the
        document starts with ``<?xml ...?>``

    Raises:
        XMLParseError: If the document is empty or not well-formed
        ResourceExhaustionError: If nesting exceeds ``config.max_depth``

    Examples:
        >>> tree = parse('<root><item id="1">value</item></root>')
        >>> tree.name
        'root'
        >>> tree.children[0].attributes
        {'id': '1'}

        >>> parse('<?xml version="1.0"?><root/>').attributes
        {'version': '1.0'}
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected str, got {type(text).__name__}")

    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse")

    bom_length = 0
    if text.startswith(BYTE_ORDER_MARK):
        bom_length = len(BYTE_ORDER_MARK)
        text = text[bom_length:]

    if not text.strip():
        raise XMLParseError("Document is empty")

    logger.debug(
        "Starting parse",
        extra={
            "content_length": len(text),
            "preview": (
                text[:PREVIEW_LENGTH] + "..."
                if len(text) > PREVIEW_LENGTH else text
            ),
        }
    )

    try:
        tokenization_result = XMLTokenizer(correlation_id=correlation_id).tokenize(text)
        tree = XMLTreeBuilder(config, correlation_id).build(tokenization_result)
    except XMLFormatError as e:
        # Columns on the first line are relative to the caller's text
        if bom_length and e.line == 1 and e.column is not None:
            e.column += bom_length
        raise

    logger.debug(
        "Parse completed",
        extra={
            "token_count": tokenization_result.token_count,
            "processing_time_ms": (time.time() - start_time) * 1000,
        }
    )
    return tree

"""XML tokenization with precise position tracking.

This module implements a strict XML scanner that converts raw text into
positioned tokens. Unlike a lenient tokenizer it stops at the first
malformation and reports it as an ``XMLParseError`` carrying the 1-based line
and column of the fault.
"""

import logging
import re
import time
from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

from xml_pretty_formatter.shared.errors import XMLParseError

# Markup openers and closers
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
DOCTYPE_OPEN = "<!DOCTYPE"
PI_OPEN = "<?"
PI_CLOSE = "?>"
DECLARATION_TARGET = "xml"

NAME_PATTERN = re.compile(r"(?:[^\W\d]|:)[\w.:-]*")
WHITESPACE_PATTERN = re.compile(r"\s*")

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """XML token types produced by the tokenizer."""

    DECLARATION = auto()             # <?xml version="1.0"?>
    START_TAG = auto()               # <name attr="value">
    END_TAG = auto()                 # </name>
    EMPTY_TAG = auto()               # <name attr="value"/>
    TEXT = auto()                    # Character data between tags
    CDATA = auto()                   # <![CDATA[ ... ]]>, kept with its markup
    COMMENT = auto()                 # <!-- ... -->
    PROCESSING_INSTRUCTION = auto()  # <?target ... ?>
    DOCTYPE = auto()                 # <!DOCTYPE ...>


@dataclass
class TokenPosition:
    """Position information for XML tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def to_dict(self) -> Dict[str, int]:
        """Convert position to dictionary representation."""
        return {"line": self.line, "column": self.column, "offset": self.offset}


@dataclass
class Token:
    """A single XML token.

    ``value`` holds the tag name for tags, the target for processing
    instructions and the raw text for character data, CDATA and comments.
    """

    type: TokenType
    value: str
    position: TokenPosition
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    raw: str = ""

    @property
    def is_tag(self) -> bool:
        """Check if this token opens or closes an element."""
        return self.type in (TokenType.START_TAG, TokenType.END_TAG, TokenType.EMPTY_TAG)

    @property
    def is_whitespace(self) -> bool:
        """Check if this is a text token made only of whitespace."""
        return self.type == TokenType.TEXT and not self.value.strip()


@dataclass
class TokenizationResult:
    """Result of tokenization with basic statistics."""

    tokens: List[Token]
    character_count: int = 0
    processing_time_ms: float = 0.0

    @property
    def token_count(self) -> int:
        """Get the total number of tokens."""
        return len(self.tokens)

    def count_by_type(self) -> Dict[str, int]:
        """Count tokens per token type name."""
        distribution: Dict[str, int] = {}
        for token in self.tokens:
            distribution[token.type.name] = distribution.get(token.type.name, 0) + 1
        return distribution


class XMLTokenizer:
    """Strict XML tokenizer.

    Scans the input once from left to right. Each ``tokenize`` call is
    independent; an instance holds no state between calls beyond its
    configuration.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the XML tokenizer.

        Args:
            correlation_id: Optional correlation ID for tracking requests
        """
        self.correlation_id = correlation_id
        self._reset_state("")

    def _reset_state(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._tokens: List[Token] = []
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def tokenize(self, text: str) -> TokenizationResult:
        """Tokenize raw XML text.

        Args:
            text: XML document text

        Returns:
            TokenizationResult with tokens in document order

        Raises:
            XMLParseError: If the text contains malformed markup
        """
        start_time = time.time()
        self._reset_state(text)

        logger.debug(
            "Starting tokenization",
            extra={
                "component": "xml_tokenizer",
                "correlation_id": self.correlation_id,
                "char_count": len(text),
            }
        )

        length = len(text)
        while self._pos < length:
            if text.startswith("<", self._pos):
                self._scan_markup()
            else:
                self._scan_text()

        processing_time = (time.time() - start_time) * 1000
        result = TokenizationResult(
            tokens=self._tokens,
            character_count=length,
            processing_time_ms=processing_time,
        )

        logger.debug(
            "Tokenization completed",
            extra={
                "component": "xml_tokenizer",
                "correlation_id": self.correlation_id,
                "token_count": result.token_count,
                "processing_time_ms": processing_time,
            }
        )

        return result

    def position_at(self, offset: int) -> TokenPosition:
        """Translate a character offset of the current input into a position."""
        line = bisect_right(self._line_starts, offset)
        column = offset - self._line_starts[line - 1] + 1
        return TokenPosition(line, column, offset)

    def _error(self, message: str, offset: int) -> XMLParseError:
        position = self.position_at(min(offset, len(self._text)))
        return XMLParseError(message, position.line, position.column)

    def _emit(
        self,
        token_type: TokenType,
        value: str,
        start: int,
        attributes: Optional[List[Tuple[str, str]]] = None,
    ) -> None:
        self._tokens.append(Token(
            type=token_type,
            value=value,
            position=self.position_at(start),
            attributes=attributes or [],
            raw=self._text[start:self._pos],
        ))

    def _scan_text(self) -> None:
        start = self._pos
        end = self._text.find("<", start)
        if end == -1:
            end = len(self._text)
        self._pos = end
        self._emit(TokenType.TEXT, self._text[start:end], start)

    def _scan_markup(self) -> None:
        text = self._text
        start = self._pos

        if text.startswith(COMMENT_OPEN, start):
            body = self._scan_until(
                start + len(COMMENT_OPEN), COMMENT_CLOSE, "Unterminated comment", start
            )
            self._emit(TokenType.COMMENT, body, start)
        elif text.startswith(CDATA_OPEN, start):
            self._scan_until(
                start + len(CDATA_OPEN), CDATA_CLOSE, "Unterminated CDATA section", start
            )
            self._emit(TokenType.CDATA, text[start:self._pos], start)
        elif text.startswith(DOCTYPE_OPEN, start):
            self._scan_doctype(start)
        elif text.startswith("<!", start):
            raise self._error("Unsupported markup declaration", start)
        elif text.startswith(PI_OPEN, start):
            self._scan_processing_instruction(start)
        elif text.startswith("</", start):
            self._scan_end_tag(start)
        else:
            self._scan_start_tag(start)

    def _scan_until(self, body_start: int, terminator: str, message: str, start: int) -> str:
        end = self._text.find(terminator, body_start)
        if end == -1:
            raise self._error(message, start)
        self._pos = end + len(terminator)
        return self._text[body_start:end]

    def _scan_doctype(self, start: int) -> None:
        # Internal subsets may contain '>' inside brackets or quotes
        text = self._text
        pos = start + len(DOCTYPE_OPEN)
        bracket_depth = 0
        quote: Optional[str] = None
        while pos < len(text):
            char = text[pos]
            if quote:
                if char == quote:
                    quote = None
            elif bracket_depth > 0 and text.startswith(COMMENT_OPEN, pos):
                pos = self._skip_subset_markup(pos, COMMENT_CLOSE, "Unterminated comment")
                continue
            elif bracket_depth > 0 and text.startswith(PI_OPEN, pos):
                pos = self._skip_subset_markup(
                    pos, PI_CLOSE, "Unterminated processing instruction"
                )
                continue
            elif char in ("'", '"'):
                quote = char
            elif char == "[":
                bracket_depth += 1
            elif char == "]":
                bracket_depth -= 1
            elif char == ">" and bracket_depth <= 0:
                self._pos = pos + 1
                self._emit(TokenType.DOCTYPE, text[start + len(DOCTYPE_OPEN):pos].strip(), start)
                return
            pos += 1
        raise self._error("Unterminated DOCTYPE declaration", start)

    def _skip_subset_markup(self, start: int, terminator: str, message: str) -> int:
        """Return the offset just past a comment or PI inside a DOCTYPE subset."""
        end = self._text.find(terminator, start + 2)
        if end == -1:
            raise self._error(message, start)
        return end + len(terminator)

    def _scan_processing_instruction(self, start: int) -> None:
        self._pos = start + len(PI_OPEN)
        target = self._scan_name("Invalid processing instruction target")

        if target == DECLARATION_TARGET:
            attributes, _ = self._scan_attributes(start, (PI_CLOSE,))
            self._emit(TokenType.DECLARATION, target, start, attributes)
            return

        self._scan_until(self._pos, PI_CLOSE, "Unterminated processing instruction", start)
        self._emit(TokenType.PROCESSING_INSTRUCTION, target, start)

    def _scan_end_tag(self, start: int) -> None:
        self._pos = start + 2
        name = self._scan_name("Invalid closing tag name")
        self._skip_whitespace()
        if not self._text.startswith(">", self._pos):
            raise self._error(f"Expected '>' to end closing tag </{name}>", self._pos)
        self._pos += 1
        self._emit(TokenType.END_TAG, name, start)

    def _scan_start_tag(self, start: int) -> None:
        self._pos = start + 1
        name = self._scan_name("Invalid tag name")
        attributes, terminator = self._scan_attributes(start, (">", "/>"))
        token_type = TokenType.EMPTY_TAG if terminator == "/>" else TokenType.START_TAG
        self._emit(token_type, name, start, attributes)

    def _scan_name(self, message: str) -> str:
        match = NAME_PATTERN.match(self._text, self._pos)
        if not match:
            raise self._error(message, self._pos)
        self._pos = match.end()
        return match.group()

    def _skip_whitespace(self) -> bool:
        match = WHITESPACE_PATTERN.match(self._text, self._pos)
        skipped = match.end() > self._pos
        self._pos = match.end()
        return skipped

    def _scan_attributes(
        self, start: int, terminators: Tuple[str, ...]
    ) -> Tuple[List[Tuple[str, str]], str]:
        """Scan ``name="value"`` pairs up to one of ``terminators``.

        Returns:
            The attributes in source order and the terminator that ended them
        """
        text = self._text
        attributes: List[Tuple[str, str]] = []
        seen = set()

        while True:
            separated = self._skip_whitespace()
            if self._pos >= len(text):
                raise self._error("Unterminated tag", start)

            for terminator in terminators:
                if text.startswith(terminator, self._pos):
                    self._pos += len(terminator)
                    return attributes, terminator

            if attributes and not separated:
                raise self._error("Missing whitespace between attributes", self._pos)

            attr_start = self._pos
            attr_name = self._scan_name("Invalid attribute name")
            if attr_name in seen:
                raise self._error(f"Duplicate attribute '{attr_name}'", attr_start)

            self._skip_whitespace()
            if not text.startswith("=", self._pos):
                raise self._error(f"Expected '=' after attribute '{attr_name}'", self._pos)
            self._pos += 1
            self._skip_whitespace()

            quote = text[self._pos:self._pos + 1]
            if quote not in ("'", '"'):
                raise self._error(
                    f"Attribute value for '{attr_name}' must be quoted", self._pos
                )
            value_end = text.find(quote, self._pos + 1)
            if value_end == -1:
                raise self._error(
                    f"Unterminated value for attribute '{attr_name}'", self._pos
                )
            value = text[self._pos + 1:value_end]
            if "<" in value:
                raise self._error(
                    f"Attribute '{attr_name}' value contains '<'",
                    self._pos + 1 + value.index("<"),
                )

            self._pos = value_end + 1
            seen.add(attr_name)
            attributes.append((attr_name, value))

"""Tree building from token streams.

This module assembles the tokens produced by ``XMLTokenizer`` into a single
document tree. Construction is iterative (an explicit stack of open
elements), so deep documents are bounded by ``ParserConfig.max_depth`` rather
than by the interpreter's recursion limit.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from xml_pretty_formatter.shared import (
    ParserConfig,
    ResourceExhaustionError,
    XMLParseError,
    get_logger,
)
from xml_pretty_formatter.tokenization import (
    Token,
    TokenizationResult,
    TokenPosition,
    TokenType,
)
from xml_pretty_formatter.tree.nodes import DeclarationNode, ElementNode, XmlNode


def _parse_error(message: str, position: TokenPosition) -> XMLParseError:
    return XMLParseError(message, position.line, position.column)


@dataclass
class _OpenElement:
    """An element whose closing tag has not been seen yet."""

    name: str
    attributes: Dict[str, str]
    position: TokenPosition
    text_parts: List[str] = field(default_factory=list)
    children: List[ElementNode] = field(default_factory=list)
    has_text: bool = False

    def close(self) -> ElementNode:
        content = "".join(self.text_parts) if self.has_text else None
        return ElementNode(
            name=self.name,
            attributes=self.attributes,
            content=content,
            children=self.children,
        )


class XMLTreeBuilder:
    """Builds a document tree from a token stream.

    Enforces well-formedness: matching end tags, a single root element, no
    character data outside the root, and no mixed content.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser configuration (depth limit, DOCTYPE policy)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder")
        self._reset_state()

    def _reset_state(self) -> None:
        self._stack: List[_OpenElement] = []
        self._root: Optional[ElementNode] = None
        self._declaration: Optional[Dict[str, str]] = None
        self._seen_markup = False
        self._skipped: Dict[str, int] = {}
        self._elements_created = 0
        self._max_depth = 0

    def build(self, tokens: Union[TokenizationResult, List[Token]]) -> XmlNode:
        """Build document tree from token stream.

        Args:
            tokens: Either TokenizationResult or list of tokens to process

        Returns:
            The root ElementNode, or a DeclarationNode wrapping it

        Raises:
            XMLParseError: If the token stream is not a well-formed document
            ResourceExhaustionError: If nesting exceeds the configured depth
        """
        start_time = time.time()
        token_list = tokens.tokens if isinstance(tokens, TokenizationResult) else tokens

        self.logger.debug(
            "Starting tree building",
            extra={"token_count": len(token_list)}
        )

        self._reset_state()
        for token in token_list:
            self._process_token(token)

        if self._stack:
            unclosed = self._stack[-1]
            raise _parse_error(f"Unclosed element <{unclosed.name}>", unclosed.position)
        if self._root is None:
            raise XMLParseError("Document has no root element")

        self.logger.debug(
            "Tree building completed",
            extra={
                "element_count": self._elements_created,
                "max_depth": self._max_depth,
                "skipped_tokens": dict(self._skipped),
                "processing_time_ms": (time.time() - start_time) * 1000,
            }
        )

        if self._declaration is not None:
            return DeclarationNode(attributes=self._declaration, root=self._root)
        return self._root

    def _process_token(self, token: Token) -> None:
        if token.type == TokenType.START_TAG:
            self._open_element(token)
        elif token.type == TokenType.EMPTY_TAG:
            self._open_element(token)
            self._close_element(token)
        elif token.type == TokenType.END_TAG:
            self._handle_end_tag(token)
        elif token.type in (TokenType.TEXT, TokenType.CDATA):
            self._handle_character_data(token)
        elif token.type == TokenType.DECLARATION:
            self._handle_declaration(token)
        elif token.type == TokenType.DOCTYPE:
            self._handle_doctype(token)
        else:
            # Comments and processing instructions are not re-emitted
            self._skipped[token.type.name] = self._skipped.get(token.type.name, 0) + 1
            self._seen_markup = True

    def _handle_declaration(self, token: Token) -> None:
        if self._declaration is not None:
            raise _parse_error("Duplicate XML declaration", token.position)
        if self._seen_markup:
            raise _parse_error(
                "XML declaration must be the first construct in the document",
                token.position,
            )
        self._declaration = dict(token.attributes)
        self._seen_markup = True

    def _handle_doctype(self, token: Token) -> None:
        if not self.config.allow_doctype:
            raise _parse_error("DOCTYPE declarations are not allowed", token.position)
        if self._root is not None or self._stack:
            raise _parse_error(
                "DOCTYPE declaration must precede the root element", token.position
            )
        self._skipped[token.type.name] = self._skipped.get(token.type.name, 0) + 1
        self._seen_markup = True

    def _open_element(self, token: Token) -> None:
        if not self._stack and self._root is not None:
            raise _parse_error(
                f"Unexpected element <{token.value}> after the root element",
                token.position,
            )

        depth = len(self._stack) + 1
        if depth > self.config.max_depth:
            raise ResourceExhaustionError(
                f"Document nesting exceeds the maximum depth of {self.config.max_depth}",
                token.position.line,
                token.position.column,
            )

        if self._stack:
            parent = self._stack[-1]
            if parent.has_text:
                raise _parse_error(
                    f"Mixed content is not supported: element <{parent.name}> "
                    "contains both text and child elements",
                    token.position,
                )

        self._seen_markup = True
        self._max_depth = max(self._max_depth, depth)
        self._stack.append(_OpenElement(
            name=token.value,
            attributes=dict(token.attributes),
            position=token.position,
        ))

    def _handle_end_tag(self, token: Token) -> None:
        if not self._stack:
            raise _parse_error(f"Unexpected closing tag </{token.value}>", token.position)

        current = self._stack[-1]
        if current.name != token.value:
            raise _parse_error(
                f"Mismatched closing tag: expected </{current.name}> "
                f"but found </{token.value}>",
                token.position,
            )
        self._close_element(token)

    def _close_element(self, token: Token) -> None:
        element = self._stack.pop().close()
        self._elements_created += 1

        if self._stack:
            self._stack[-1].children.append(element)
        else:
            self._root = element

    def _handle_character_data(self, token: Token) -> None:
        significant = token.type == TokenType.CDATA or not token.is_whitespace

        if not self._stack:
            if significant:
                raise _parse_error(
                    "Text content is not allowed outside the root element",
                    token.position,
                )
            return

        current = self._stack[-1]
        current.text_parts.append(token.value)
        if not significant:
            return

        if current.children:
            raise _parse_error(
                f"Mixed content is not supported: element <{current.name}> "
                "contains both text and child elements",
                token.position,
            )
        current.has_text = True

"""Tests for the strict XML tokenizer."""

import pytest

from xml_pretty_formatter.shared import XMLParseError
from xml_pretty_formatter.tokenization import (
    Token,
    TokenizationResult,
    TokenPosition,
    TokenType,
    XMLTokenizer,
)


def _types(text: str):
    return [token.type for token in XMLTokenizer().tokenize(text).tokens]


class TestTokenPosition:
    """Test TokenPosition validation."""

    def test_valid_position(self) -> None:
        """Valid positions convert to dictionaries."""
        position = TokenPosition(line=2, column=5, offset=12)
        assert position.to_dict() == {"line": 2, "column": 5, "offset": 12}

    @pytest.mark.parametrize("line,column,offset", [(0, 1, 0), (1, 0, 0), (1, 1, -1)])
    def test_invalid_position(self, line, column, offset) -> None:
        """Out-of-range values raise ValueError."""
        with pytest.raises(ValueError):
            TokenPosition(line, column, offset)


class TestTokenizationResult:
    """Test result statistics."""

    def test_counts(self) -> None:
        """Token counts are reported in total and per type."""
        result = XMLTokenizer().tokenize("<a><b/><b/></a>")
        assert isinstance(result, TokenizationResult)
        assert result.token_count == 4
        assert result.character_count == 15
        assert result.count_by_type() == {"START_TAG": 1, "EMPTY_TAG": 2, "END_TAG": 1}


class TestXMLTokenizer:
    """Test tokenization of well-formed markup."""

    def test_simple_element(self) -> None:
        """Start tag, text and end tag."""
        tokens = XMLTokenizer().tokenize("<a>x</a>").tokens
        assert [t.type for t in tokens] == [TokenType.START_TAG, TokenType.TEXT, TokenType.END_TAG]
        assert [t.value for t in tokens] == ["a", "x", "a"]
        assert tokens[0].is_tag
        assert not tokens[1].is_tag

    def test_attributes_keep_source_order(self) -> None:
        """Attributes are returned in the order written."""
        token = XMLTokenizer().tokenize('<a zeta="1" alpha=\'2\' mid = "3"/>').tokens[0]
        assert token.type == TokenType.EMPTY_TAG
        assert token.attributes == [("zeta", "1"), ("alpha", "2"), ("mid", "3")]

    def test_attribute_values_are_not_unescaped(self) -> None:
        """Entity references stay exactly as written."""
        token = XMLTokenizer().tokenize('<a href="?x=1&amp;y=2"/>').tokens[0]
        assert token.attributes == [("href", "?x=1&amp;y=2")]

    def test_qualified_names_are_opaque(self) -> None:
        """Namespace prefixes are part of the name."""
        tokens = XMLTokenizer().tokenize('<ns:a xmlns:ns="urn:x"></ns:a>').tokens
        assert tokens[0].value == "ns:a"
        assert tokens[0].attributes == [("xmlns:ns", "urn:x")]
        assert tokens[1].value == "ns:a"

    def test_end_tag_allows_trailing_whitespace(self) -> None:
        """Whitespace before '>' in a closing tag is accepted."""
        assert _types("<a></a  >") == [TokenType.START_TAG, TokenType.END_TAG]

    def test_declaration(self) -> None:
        """The xml processing instruction becomes a declaration token."""
        token = XMLTokenizer().tokenize('<?xml version="1.0" encoding="UTF-8"?><a/>').tokens[0]
        assert token.type == TokenType.DECLARATION
        assert token.attributes == [("version", "1.0"), ("encoding", "UTF-8")]

    def test_other_processing_instruction(self) -> None:
        """Other targets are plain processing instructions."""
        token = XMLTokenizer().tokenize('<?xml-stylesheet href="a.xsl"?><a/>').tokens[0]
        assert token.type == TokenType.PROCESSING_INSTRUCTION
        assert token.value == "xml-stylesheet"

    def test_comment_cdata_and_doctype(self) -> None:
        """Comments, CDATA sections and DOCTYPE are recognized."""
        text = '<!DOCTYPE a [<!ENTITY e "x>y">]><!-- c --><a><![CDATA[<raw>]]></a>'
        tokens = XMLTokenizer().tokenize(text).tokens
        assert [t.type for t in tokens] == [
            TokenType.DOCTYPE,
            TokenType.COMMENT,
            TokenType.START_TAG,
            TokenType.CDATA,
            TokenType.END_TAG,
        ]
        assert tokens[1].value == " c "
        assert tokens[3].value == "<![CDATA[<raw>]]>"

    @pytest.mark.parametrize("subset", [
        "<!-- it's a comment -->",
        '<!-- say "hi" ] > -->',
        "<?pi don't ]>?>",
        "<!ENTITY e 'x'><!-- a > b -->",
    ])
    def test_doctype_subset_comments_and_pis(self, subset) -> None:
        """Quotes and brackets inside subset comments and PIs are not markup."""
        tokens = XMLTokenizer().tokenize(f"<!DOCTYPE r [{subset}]><r/>").tokens
        assert [t.type for t in tokens] == [TokenType.DOCTYPE, TokenType.EMPTY_TAG]
        assert tokens[0].value == f"r [{subset}]"

    def test_doctype_subset_unterminated_comment(self) -> None:
        """An unterminated comment inside the subset is reported where it starts."""
        with pytest.raises(XMLParseError) as exc_info:
            XMLTokenizer().tokenize("<!DOCTYPE r [<!-- open ]><r/>")
        assert exc_info.value.message == "Unterminated comment"
        assert exc_info.value.column == 14

    def test_whitespace_text(self) -> None:
        """Whitespace-only text tokens are flagged."""
        tokens = XMLTokenizer().tokenize("<a>\n  <b/>\n</a>").tokens
        assert tokens[1].is_whitespace
        assert tokens[1].value == "\n  "

    def test_positions_track_lines_and_columns(self) -> None:
        """Positions are 1-based lines and columns."""
        tokens = XMLTokenizer().tokenize("<a>\n  <b/>\n</a>").tokens
        b_token = tokens[2]
        assert b_token.value == "b"
        assert (b_token.position.line, b_token.position.column) == (2, 3)
        assert b_token.position.offset == 6
        assert tokens[-1].position.line == 3

    def test_raw_text_is_kept(self) -> None:
        """Each token records the source slice it came from."""
        tokens = XMLTokenizer().tokenize('<a x="1" ></a>').tokens
        assert tokens[0].raw == '<a x="1" >'

    def test_instance_is_reusable(self) -> None:
        """Each call starts from a clean state."""
        tokenizer = XMLTokenizer()
        tokenizer.tokenize("<a/>")
        assert tokenizer.tokenize("<b/>").tokens[0].value == "b"

    def test_token_defaults(self) -> None:
        """Tokens default to no attributes."""
        token = Token(TokenType.TEXT, "x", TokenPosition(1, 1, 0))
        assert token.attributes == []
        assert not token.is_tag


class TestTokenizerErrors:
    """Test that malformed markup is reported with a location."""

    @pytest.mark.parametrize("text,message,line,column", [
        ("<a><!-- open", "Unterminated comment", 1, 4),
        ("<a><![CDATA[x", "Unterminated CDATA section", 1, 4),
        ("<!DOCTYPE a [", "Unterminated DOCTYPE declaration", 1, 1),
        ("<?pi data", "Unterminated processing instruction", 1, 1),
        ("<!ELEMENT a ANY>", "Unsupported markup declaration", 1, 1),
        ("<1a/>", "Invalid tag name", 1, 2),
        ("<a></ a>", "Invalid closing tag name", 1, 6),
        ("<a></a b>", "Expected '>' to end closing tag </a>", 1, 8),
        ('<a x="1"y="2"/>', "Missing whitespace between attributes", 1, 9),
        ('<a x="1" x="2"/>', "Duplicate attribute 'x'", 1, 10),
        ("<a x/>", "Expected '=' after attribute 'x'", 1, 5),
        ("<a x=1/>", "Attribute value for 'x' must be quoted", 1, 6),
        ('<a x="1/>', "Unterminated value for attribute 'x'", 1, 6),
        ('<a x="<"/>', "Attribute 'x' value contains '<'", 1, 7),
        ("<a", "Unterminated tag", 1, 1),
        ('<?xml version="1.0"', "Unterminated tag", 1, 1),
    ])
    def test_malformed_markup(self, text, message, line, column) -> None:
        """Each malformation names the fault and where it is."""
        with pytest.raises(XMLParseError) as exc_info:
            XMLTokenizer().tokenize(text)
        error = exc_info.value
        assert error.message == message
        assert (error.line, error.column) == (line, column)

    def test_error_on_later_line(self) -> None:
        """Line numbers account for preceding newlines."""
        with pytest.raises(XMLParseError) as exc_info:
            XMLTokenizer().tokenize("<a>\n\n  <b x=1/>\n</a>")
        assert (exc_info.value.line, exc_info.value.column) == (3, 8)

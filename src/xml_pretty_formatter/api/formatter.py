"""Editor-facing format entry point.

This module turns a raw document plus indentation preferences into a single
replacement edit, or into a structured failure that an editor can show to the
user. No exception escapes ``XMLFormatter.format``; the caller's document is
never modified here.
"""

import asyncio
import functools
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from xml_pretty_formatter.api.parser import BYTE_ORDER_MARK, parse
from xml_pretty_formatter.formatting import XMLPrettyPrinter, detect_line_break
from xml_pretty_formatter.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    FormatMetrics,
    FormatterConfig,
    FormattingOptions,
    InternalFormatError,
    XMLFormatError,
    get_logger,
)
from xml_pretty_formatter.tree import root_element

OptionsInput = Union[None, FormattingOptions, Mapping[str, Any]]


@dataclass(frozen=True)
class Position:
    """Zero-based line and character offset inside a document."""

    line: int
    character: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 0:
            raise ValueError("Line must be >= 0")
        if self.character < 0:
            raise ValueError("Character must be >= 0")


@dataclass(frozen=True)
class Range:
    """Span between two positions, start inclusive and end exclusive."""

    start: Position
    end: Position

    def __post_init__(self) -> None:
        """Validate range ordering."""
        if (self.end.line, self.end.character) < (self.start.line, self.start.character):
            raise ValueError("Range end must not precede range start")

    @classmethod
    def from_coordinates(
        cls, start_line: int, start_character: int, end_line: int, end_character: int
    ) -> "Range":
        """Create a range from four integers."""
        return cls(Position(start_line, start_character), Position(end_line, end_character))


@dataclass(frozen=True)
class TextEdit:
    """Instruction to replace ``range`` with ``new_text``."""

    range: Range
    new_text: str


def document_range(text: str) -> Range:
    """Range covering the whole of ``text``."""
    lines = text.split("\n")
    last_line = lines[-1]
    if last_line.endswith("\r"):
        last_line = last_line[:-1]
    return Range(Position(0, 0), Position(len(lines) - 1, len(last_line)))


@dataclass
class FormatResult:
    """Outcome of one format request.

    On success ``edits`` holds exactly one TextEdit; on failure it is empty
    and ``error`` describes what went wrong.
    """

    success: bool = True
    edits: List[TextEdit] = field(default_factory=list)
    error: Optional[XMLFormatError] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: FormatMetrics = field(default_factory=FormatMetrics)
    correlation_id: Optional[str] = None

    @property
    def new_text(self) -> Optional[str]:
        """Formatted text, or None if formatting failed."""
        if not self.edits:
            return None
        return self.edits[0].new_text

    @property
    def user_message(self) -> Optional[str]:
        """One-line failure notification, or None on success."""
        if self.error is None:
            return None
        return self.error.user_message

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id
        ))

    def fail(self, error: XMLFormatError, severity: DiagnosticSeverity) -> None:
        """Mark the result failed and drop any edits."""
        self.success = False
        self.edits = []
        self.error = error
        position = None
        if error.has_location:
            position = {"line": error.line, "column": error.column}
        self.add_diagnostic(
            severity,
            error.message,
            "xml_formatter",
            position=position,
            details={"kind": error.kind},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        return {
            "success": self.success,
            "new_text": self.new_text,
            "error": self.error.to_dict() if self.error else None,
            "processing_time_ms": self.metrics.processing_time_ms,
            "elements_rendered": self.metrics.elements_rendered,
            "line_break": self.metrics.line_break_name,
        }


class XMLFormatter:
    """Formats one document.

    The line break is sniffed from the full document text once per
    ``format`` call and passed to the printer explicitly.
    """

    def __init__(
        self,
        text: str,
        options: OptionsInput = None,
        config: Optional[FormatterConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            text: Full text of the document
            options: Indentation preferences; malformed values fall back to
                defaults. When omitted, ``config.options`` is used.
            config: Formatter configuration
            correlation_id: Optional correlation ID for request tracking
        """
        self.text = text
        self.config = config or FormatterConfig()
        if options is None:
            self.options = self.config.options
        else:
            self.options = FormattingOptions.normalize(options)
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_formatter").bind(
            insert_spaces=self.options.insert_spaces,
            tab_size=self.options.tab_size,
        )

    @classmethod
    def format_document(
        cls,
        text: str,
        text_range: Optional[Range] = None,
        options: OptionsInput = None,
        config: Optional[FormatterConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> FormatResult:
        """Format ``text`` and return an edit for ``text_range``."""
        return cls(text, options, config, correlation_id).format(text_range)

    def format(self, text_range: Optional[Range] = None) -> FormatResult:
        """Format the document.

        The whole document is always re-formatted. The returned edit targets
        ``text_range`` when given, otherwise the full document range.

        Args:
            text_range: Span the editor asked to format

        Returns:
            FormatResult with one edit on success or an error on failure
        """
        start_time = time.time()
        result = FormatResult(correlation_id=self.correlation_id)
        result.metrics.characters_processed = len(self.text)

        self.logger.info(
            "Starting format operation",
            extra={
                "content_length": len(self.text),
                "has_range": text_range is not None,
            }
        )

        try:
            target = text_range or document_range(self.text)
            new_text = self._format_text(result.metrics)
        except XMLFormatError as e:
            self.logger.warning(
                "Format operation failed",
                extra={"kind": e.kind, "line": e.line, "column": e.column, "reason": e.message}
            )
            result.fail(e, DiagnosticSeverity.ERROR)
        except Exception as e:
            self.logger.exception(
                "Unexpected error during format operation",
                extra={"exception_type": type(e).__name__}
            )
            result.fail(
                InternalFormatError(f"Unexpected {type(e).__name__}: {e}"),
                DiagnosticSeverity.CRITICAL,
            )
        else:
            result.edits = [TextEdit(target, new_text)]
        finally:
            result.metrics.processing_time_ms = (time.time() - start_time) * 1000

        if result.success:
            self.logger.info(
                "Format operation completed",
                extra={
                    "elements_rendered": result.metrics.elements_rendered,
                    "processing_time_ms": result.metrics.processing_time_ms,
                }
            )
        return result

    def _format_text(self, metrics: FormatMetrics) -> str:
        line_break = detect_line_break(self.text)
        metrics.line_break = line_break

        tree = parse(self.text, self.config.parser, self.correlation_id)

        printer = XMLPrettyPrinter(
            line_break=line_break,
            indent_unit=self.options.indent_unit,
            max_depth=self.config.max_render_depth,
            correlation_id=self.correlation_id,
        )
        output = printer.render(tree)
        if self.text.startswith(BYTE_ORDER_MARK):
            output = BYTE_ORDER_MARK + output

        metrics.elements_rendered = printer.elements_rendered
        metrics.max_depth = printer.max_depth_reached
        self.logger.debug(
            "Document rendered",
            extra={
                "root_name": root_element(tree).name,
                "line_break": metrics.line_break_name,
            }
        )
        return output


def format_document(
    text: str,
    text_range: Optional[Range] = None,
    options: OptionsInput = None,
    config: Optional[FormatterConfig] = None,
    correlation_id: Optional[str] = None,
) -> FormatResult:
    """Format a document and return a FormatResult.

    Examples:
        >>> result = format_document("<a><b>x</b></a>")
        >>> result.new_text
        '<a>\\n\\t<b>x</b>\\n</a>'

        >>> format_document("<a><b></a>").user_message.startswith("XML formatting failed")
        True
    """
    return XMLFormatter.format_document(text, text_range, options, config, correlation_id)


async def format_document_async(
    text: str,
    text_range: Optional[Range] = None,
    options: OptionsInput = None,
    config: Optional[FormatterConfig] = None,
    correlation_id: Optional[str] = None,
) -> FormatResult:
    """Run ``format_document`` in the default executor and await the result."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None,
        functools.partial(
            format_document, text, text_range, options, config, correlation_id
        ),
    )


def format_text(
    text: str,
    options: OptionsInput = None,
    config: Optional[FormatterConfig] = None,
) -> str:
    """Format ``text`` and return the new text.

    Raises:
        XMLFormatError: If the document cannot be formatted
    """
    result = format_document(text, options=options, config=config)
    if result.error is not None:
        raise result.error
    return result.new_text

"""Error taxonomy for XML formatting.

Every failure that can abort a format request derives from ``XMLFormatError``
so that the format entry point can turn it into a single user-facing message.
"""

from typing import Any, Dict, Optional


class XMLFormatError(Exception):
    """Base exception for failures that abort a format request."""

    kind = "FormatError"

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    @property
    def has_location(self) -> bool:
        """Check if the error points at a line and column of the input."""
        return self.line is not None and self.column is not None

    @property
    def user_message(self) -> str:
        """One-line description suitable for an editor notification."""
        if self.has_location:
            return (
                f"XML formatting failed: {self.kind} at line {self.line}, "
                f"column {self.column}: {self.message}"
            )
        return f"XML formatting failed: {self.kind}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "kind": self.kind,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }

    def __str__(self) -> str:
        if self.has_location:
            return f"{self.message} (line {self.line}, column {self.column})"
        return self.message


class XMLParseError(XMLFormatError):
    """Raised when the input is not well-formed XML."""

    kind = "ParseError"


class ResourceExhaustionError(XMLFormatError):
    """Raised when a document nests deeper than the configured limits allow."""

    kind = "ResourceExhaustion"


class InternalFormatError(XMLFormatError):
    """Wraps an unexpected exception caught at the format entry point."""

    kind = "InternalError"

"""Shared utilities for XML formatting.

This module provides configuration objects, the error taxonomy, result types
and logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    FormatterConfig,
    FormattingOptions,
    ParserConfig,
)
from .errors import (
    InternalFormatError,
    ResourceExhaustionError,
    XMLFormatError,
    XMLParseError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    FormatMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "FormatterConfig",
    "FormattingOptions",
    "ParserConfig",
    "InternalFormatError",
    "ResourceExhaustionError",
    "XMLFormatError",
    "XMLParseError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "FormatMetrics",
]

"""Diagnostic and metrics types for XML formatting results."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()      # Request aborted, input at fault
    CRITICAL = auto()   # Request aborted, formatter at fault


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class FormatMetrics:
    """Performance and shape metrics for one format request."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    elements_rendered: int = 0
    max_depth: int = 0
    line_break: Optional[str] = None

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def line_break_name(self) -> Optional[str]:
        """Human readable name of the line break used for output."""
        if self.line_break is None:
            return None
        return "CRLF" if self.line_break == "\r\n" else "LF"

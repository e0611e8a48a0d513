"""Result objects and diagnostic types for robust EDIFACT parsing.

This module defines the diagnostic entries produced while tokenizing an
interchange, the append-only log that collects them, and the performance
metrics attached to every parse result.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Data problems that parsing worked around
    ERROR = auto()      # Error conditions that were recovered
    CRITICAL = auto()   # Failures that prevented a parse result


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with line and context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    line_number: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")
        if self.line_number is not None and self.line_number < 1:
            raise ValueError("Line number must be >= 1")

    @property
    def text(self) -> str:
        """Diagnostic message text."""
        return self.message


class DiagnosticLog:
    """Append-only, ordered sink for diagnostics raised during one parse.

    Entries are never removed or reordered; iteration order is detection
    order. An optional limit stops recording once reached, counting the
    entries that were dropped.
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        max_entries: Optional[int] = None
    ) -> None:
        self.correlation_id = correlation_id
        self.max_entries = max_entries
        self.dropped = 0
        self._entries: List[DiagnosticEntry] = []

    def add(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        line_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> Optional[DiagnosticEntry]:
        """Append a diagnostic, returning it or None when the limit is hit."""
        if self.max_entries is not None and len(self._entries) >= self.max_entries:
            self.dropped += 1
            return None

        entry = DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            line_number=line_number,
            details=details,
            correlation_id=self.correlation_id
        )
        self._entries.append(entry)
        return entry

    def warning(
        self,
        message: str,
        component: str,
        line_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> Optional[DiagnosticEntry]:
        """Append a WARNING diagnostic."""
        return self.add(
            DiagnosticSeverity.WARNING, message, component, line_number, details
        )

    @property
    def entries(self) -> List[DiagnosticEntry]:
        """Snapshot of the recorded entries in detection order."""
        return list(self._entries)

    def __iter__(self) -> Iterator[DiagnosticEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class PerformanceMetrics:
    """Performance metrics for parsing operations."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    lines_processed: int = 0
    lines_skipped: int = 0
    segments_parsed: int = 0
    elements_parsed: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def segments_per_second(self) -> float:
        """Calculate segments parsed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.segments_parsed * 1000.0) / self.processing_time_ms

    @property
    def elements_per_segment(self) -> float:
        """Average number of data elements per parsed segment."""
        if self.segments_parsed == 0:
            return 0.0
        return self.elements_parsed / self.segments_parsed

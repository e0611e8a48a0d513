"""Interchange building: the single pass from raw text to a parse result.

Every build creates its own delimiter set, encoding selection and
diagnostic log, so one builder may be reused and several builders may run
concurrently without sharing mutable state.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from robust_edifact_parser.character.delimiters import DelimiterSet
from robust_edifact_parser.character.encoding import (
    DEFAULT_REGISTRY,
    EncodingRegistry,
    EncodingSelection,
)
from robust_edifact_parser.character.sanitization import LineSanitizer
from robust_edifact_parser.shared.config import ParserConfig
from robust_edifact_parser.shared.logging import get_logger
from robust_edifact_parser.shared.result import (
    DiagnosticEntry,
    DiagnosticLog,
    DiagnosticSeverity,
    PerformanceMetrics,
)
from robust_edifact_parser.tokenization.elements import Segment
from robust_edifact_parser.tokenization.segments import SegmentSplitter
from robust_edifact_parser.tokenization.unwrapper import TAG_LENGTH, Unwrapper

from .analyzer import (
    INTERCHANGE_HEADER_TAG,
    MESSAGE_HEADER_TAG,
    SERVICE_STRING_TAG,
    InterchangeAnalyzer,
)
from .model import Interchange

MS_PER_SECOND = 1000


@dataclass
class ParseResult:
    """Result of one parse: the interchange, its diagnostics and metrics.

    Follows the never-fail philosophy: problems in the data are WARNING
    diagnostics on a successful result, and a parse that could not run at
    all is an unsuccessful result with a CRITICAL diagnostic.
    """

    interchange: Interchange = field(default_factory=Interchange)
    success: bool = True
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    diagnostics_dropped: int = 0
    correlation_id: Optional[str] = None

    @property
    def segments(self) -> List[Segment]:
        return self.interchange.segments

    @property
    def segment_count(self) -> int:
        return self.interchange.segment_count

    @property
    def message_format(self) -> Optional[str]:
        return self.interchange.message_format

    @property
    def message_directory(self) -> Optional[str]:
        return self.interchange.message_directory

    @property
    def raw_segments(self) -> List[str]:
        return self.interchange.raw_segments

    @property
    def processing_time_ms(self) -> float:
        return self.performance.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        line_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            line_number=line_number,
            details=details,
            correlation_id=self.correlation_id
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def has_warnings(self) -> bool:
        """Check if result contains any warning diagnostics."""
        return any(
            diag.severity == DiagnosticSeverity.WARNING for diag in self.diagnostics
        )

    def errors(self) -> List[str]:
        """Diagnostic messages in detection order."""
        return [diag.message for diag in self.diagnostics]

    def to_dict(self, include_raw_segments: bool = True) -> Dict[str, Any]:
        """JSON-compatible representation of the result."""
        data = self.interchange.to_dict()
        data.update({
            "success": self.success,
            "segment_count": self.segment_count,
            "processing_time_ms": self.processing_time_ms,
            "diagnostics": [
                {
                    "severity": diag.severity.name,
                    "line_number": diag.line_number,
                    "message": diag.message,
                    "component": diag.component,
                }
                for diag in self.diagnostics
            ],
        })
        if include_raw_segments:
            data["raw_segments"] = list(self.raw_segments)
        return data


class InterchangeBuilder:
    """Runs the parse pass: sanitization, tag dispatch and splitting."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        registry: EncodingRegistry = DEFAULT_REGISTRY,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.registry = registry
        self.correlation_id = correlation_id or self.config.tokenization.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "interchange_builder")

    def build_from_text(self, text: str) -> ParseResult:
        """Unwrap interchange text into segments and parse them."""
        start_time = time.time()
        delimiters, encoding = self._new_configuration()
        lines = Unwrapper(delimiters, encoding).unwrap(text)
        return self._build(lines, delimiters, encoding, start_time, len(text))

    def build_from_segments(self, lines: Sequence[str]) -> ParseResult:
        """Parse segment strings the caller has already split.

        A single string is treated as a whole interchange and unwrapped.
        """
        if len(lines) == 1:
            return self.build_from_text(lines[0])

        start_time = time.time()
        delimiters, encoding = self._new_configuration()
        characters = sum(len(line) for line in lines)
        return self._build(list(lines), delimiters, encoding, start_time, characters)

    def _new_configuration(self) -> Tuple[DelimiterSet, EncodingSelection]:
        character_config = self.config.character
        if character_config.strip_pattern:
            encoding = EncodingSelection.with_custom_pattern(
                character_config.strip_pattern, self.registry
            )
        else:
            initial = None
            if character_config.default_encoding:
                initial = self.registry.lookup(character_config.default_encoding)
            encoding = EncodingSelection(self.registry, initial=initial)
        return DelimiterSet.with_defaults(), encoding

    def _build(
        self,
        lines: List[str],
        delimiters: DelimiterSet,
        encoding: EncodingSelection,
        start_time: float,
        characters: int
    ) -> ParseResult:
        tokenization = self.config.tokenization
        diagnostics = DiagnosticLog(self.correlation_id, tokenization.max_diagnostics)
        sanitizer = LineSanitizer(encoding, diagnostics, tokenization.bypass_sanitization)
        splitter = SegmentSplitter(delimiters, diagnostics, tokenization.strict_tag_length)
        analyzer = InterchangeAnalyzer(delimiters, encoding, self.correlation_id)

        performance = PerformanceMetrics(characters_processed=characters)
        segments: List[Segment] = []
        first_line = True

        for line_number, raw_line in enumerate(lines, start=1):
            performance.lines_processed += 1
            line = sanitizer.sanitize(raw_line, line_number)
            if line is None:
                performance.lines_skipped += 1
                continue

            tag = line[:TAG_LENGTH]
            if tag == SERVICE_STRING_TAG:
                analyzer.analyse_service_string(line, first_line)
                first_line = False
                continue
            first_line = False

            segment = splitter.split(line, line_number)
            if tag == INTERCHANGE_HEADER_TAG:
                analyzer.analyse_interchange_header(segment)
            elif tag == MESSAGE_HEADER_TAG:
                analyzer.analyse_message_header(segment)

            segments.append(segment)
            performance.elements_parsed += len(segment.elements)

        performance.segments_parsed = len(segments)
        performance.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND

        metadata = analyzer.metadata
        interchange = Interchange(
            segments=segments,
            message_format=metadata.message_format,
            message_directory=metadata.message_directory,
            message_reference=metadata.message_reference,
            message_version=metadata.message_version,
            controlling_agency=metadata.controlling_agency,
            syntax_identifier=encoding.declared_identifier,
            delimiters=delimiters,
            encoding=encoding.profile,
            raw_segments=lines,
        )
        result = ParseResult(
            interchange=interchange,
            diagnostics=diagnostics.entries,
            performance=performance,
            diagnostics_dropped=diagnostics.dropped,
            correlation_id=self.correlation_id,
        )

        self.logger.info(
            "Interchange built",
            extra={
                "segment_count": performance.segments_parsed,
                "diagnostic_count": len(result.diagnostics),
                "message_format": interchange.message_format,
                "processing_time_ms": performance.processing_time_ms,
            }
        )
        return result

"""Tests for diagnostic entries, the diagnostic log and performance metrics."""

import pytest

from robust_edifact_parser.shared.result import (
    DiagnosticEntry,
    DiagnosticLog,
    DiagnosticSeverity,
    PerformanceMetrics,
)


class TestDiagnosticEntry:
    """Test DiagnosticEntry validation."""

    def test_valid_entry(self):
        """Test creating a valid diagnostic entry."""
        entry = DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message="There's a ' not escaped in the data on line 2; string FTX+it's",
            component="segment_splitter",
            line_number=2,
        )

        assert entry.text == entry.message
        assert entry.line_number == 2
        assert entry.timestamp > 0

    def test_empty_message_rejected(self):
        """Test that an empty message is rejected."""
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.WARNING, "", "sanitizer")

    def test_empty_component_rejected(self):
        """Test that an empty component is rejected."""
        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.WARNING, "message", "")

    def test_line_number_must_be_positive(self):
        """Test that line numbers start at 1."""
        with pytest.raises(ValueError, match="Line number must be >= 1"):
            DiagnosticEntry(DiagnosticSeverity.WARNING, "message", "sanitizer", line_number=0)


class TestDiagnosticLog:
    """Test the append-only diagnostic log."""

    def test_preserves_detection_order(self):
        """Test that entries are kept in the order they were added."""
        log = DiagnosticLog(correlation_id="abc")
        log.warning("first", "sanitizer", line_number=3)
        log.warning("second", "segment_splitter", line_number=3)
        log.add(DiagnosticSeverity.INFO, "third", "builder", line_number=5)

        assert [entry.message for entry in log] == ["first", "second", "third"]
        assert len(log) == 3
        assert all(entry.correlation_id == "abc" for entry in log.entries)

    def test_entries_is_snapshot(self):
        """Test that mutating the returned list does not affect the log."""
        log = DiagnosticLog()
        log.warning("first", "sanitizer")

        entries = log.entries
        entries.clear()

        assert len(log) == 1

    def test_limit_counts_dropped_entries(self):
        """Test that entries beyond the limit are dropped and counted."""
        log = DiagnosticLog(max_entries=2)

        assert log.warning("one", "sanitizer") is not None
        assert log.warning("two", "sanitizer") is not None
        assert log.warning("three", "sanitizer") is None

        assert len(log) == 2
        assert log.dropped == 1


class TestPerformanceMetrics:
    """Test derived performance metrics."""

    def test_defaults(self):
        """Test that fresh metrics are zero and rates are safe."""
        metrics = PerformanceMetrics()

        assert metrics.processing_time_ms == 0.0
        assert metrics.characters_per_second == 0.0
        assert metrics.segments_per_second == 0.0
        assert metrics.elements_per_segment == 0.0

    def test_rates(self):
        """Test rate calculations."""
        metrics = PerformanceMetrics(
            processing_time_ms=500.0,
            characters_processed=1000,
            segments_parsed=10,
            elements_parsed=25,
        )

        assert metrics.characters_per_second == 2000.0
        assert metrics.segments_per_second == 20.0
        assert metrics.elements_per_segment == 2.5

"""Integration adapters for handing parsed interchanges to other tools.

This module provides the adapter framework and the adapters for plain Python
data and pandas DataFrames. Adapters follow the never-fail philosophy: a
failed conversion is an unsuccessful ConversionResult, not an exception.
"""

import json
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Type

from robust_edifact_parser.interchange import ParseResult
from robust_edifact_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    get_logger,
)

MS_PER_SECOND = 1000
MAX_RECORDED_CONVERSIONS = 1000

# Columns of the one-row-per-component table
ROW_COLUMNS = (
    "line_number",
    "segment_index",
    "tag",
    "element_index",
    "component_index",
    "value",
)


class AdapterType(Enum):
    """Types of integration adapters."""

    PLAIN_DATA = auto()     # Built-in Python structures and JSON
    DATA_FRAME = auto()     # DataFrame libraries (pandas)


class ConversionDirection(Enum):
    """Direction of data conversion."""

    TO_TARGET = auto()      # Convert from ParseResult to target format
    FROM_TARGET = auto()    # Convert from target format to ParseResult


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    adapter_type: AdapterType
    target_library: str
    description: str
    author: str = "robust-edifact-parser"


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


def interchange_rows(parse_result: ParseResult) -> List[Dict[str, Any]]:
    """Flatten a parse result into one row per element component.

    Segments without data elements still produce one row with empty
    element and component positions so that every segment is represented.
    """
    rows: List[Dict[str, Any]] = []
    for segment_index, segment in enumerate(parse_result.segments):
        if not segment.elements:
            rows.append({
                "line_number": segment.line_number,
                "segment_index": segment_index,
                "tag": segment.tag,
                "element_index": None,
                "component_index": None,
                "value": None,
            })
            continue

        for element_index, element in enumerate(segment.elements):
            for component_index, value in enumerate(element.components):
                rows.append({
                    "line_number": segment.line_number,
                    "segment_index": segment_index,
                    "tag": segment.tag,
                    "element_index": element_index,
                    "component_index": component_index,
                    "value": value,
                })
    return rows


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    Defines the conversion interface from ParseResult objects to a target
    representation, with consistent error handling and timing.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)
        self._conversion_times: List[float] = []

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library is available."""

    @abstractmethod
    def to_target(self, parse_result: ParseResult) -> ConversionResult:
        """Convert ParseResult to target format."""

    def from_target(self, target_data: Any) -> ConversionResult:
        """Converting back to an interchange is not supported."""
        return self._create_error_result(
            f"{self.metadata.name} adapter does not convert back to an interchange",
            target_data
        )

    def get_performance_stats(self) -> Dict[str, float]:
        """Get conversion timing statistics for this adapter."""
        times = self._conversion_times
        if not times:
            return {}
        return {
            "count": len(times),
            "average_ms": sum(times) / len(times),
            "min_ms": min(times),
            "max_ms": max(times),
            "total_ms": sum(times),
        }

    def _record_performance(self, operation_time_ms: float) -> None:
        self._conversion_times.append(operation_time_ms)
        if len(self._conversion_times) > MAX_RECORDED_CONVERSIONS:
            self._conversion_times = self._conversion_times[-MAX_RECORDED_CONVERSIONS:]

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        self._logger.warning(error_message)
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id
                )
            ]
        )


class AdapterRegistry:
    """Registry for managing integration adapters."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}
        self._lock = threading.RLock()

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        with self._lock:
            metadata = adapter_class().metadata
            self._adapters[metadata.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        """Get an adapter instance by name.

        Returns:
            Adapter instance if registered and available, None otherwise
        """
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None

        instance = adapter_class(correlation_id)
        return instance if instance.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """List metadata of the registered adapters whose library is installed."""
        with self._lock:
            adapter_classes = list(self._adapters.values())

        available = []
        for adapter_class in adapter_classes:
            instance = adapter_class()
            if instance.is_available():
                available.append(instance.metadata)
        return available


class DictAdapter(IntegrationAdapter):
    """Adapter producing plain dictionaries, lists and strings."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        include_raw_segments: bool = True,
        as_json: bool = False
    ) -> None:
        super().__init__(correlation_id)
        self.include_raw_segments = include_raw_segments
        self.as_json = as_json

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="dict",
            version="1.0.0",
            adapter_type=AdapterType.PLAIN_DATA,
            target_library="builtins",
            description="Conversion of ParseResult to plain Python data or JSON"
        )

    def is_available(self) -> bool:
        return True

    def to_target(self, parse_result: ParseResult) -> ConversionResult:
        start_time = time.time()

        data = parse_result.to_dict(include_raw_segments=self.include_raw_segments)
        converted = json.dumps(data, indent=2) if self.as_json else data

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._record_performance(processing_time)

        warnings = [] if parse_result.success else ["ParseResult is not successful"]
        return ConversionResult(
            success=True,
            converted_data=converted,
            original_data=parse_result,
            conversion_time_ms=processing_time,
            warnings=warnings,
            metadata={
                "segment_count": parse_result.segment_count,
                "format": "json" if self.as_json else "dict",
            }
        )


class PandasAdapter(IntegrationAdapter):
    """Adapter producing a pandas DataFrame with one row per component."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="pandas",
            version="1.0.0",
            adapter_type=AdapterType.DATA_FRAME,
            target_library="pandas",
            description="Conversion of ParseResult to a pandas DataFrame"
        )

    def is_available(self) -> bool:
        """Check if pandas is available."""
        try:
            import pandas  # noqa: F401
            return True
        except ImportError:
            return False

    def to_target(self, parse_result: ParseResult) -> ConversionResult:
        """Convert ParseResult to a DataFrame with the ``ROW_COLUMNS`` columns."""
        start_time = time.time()

        try:
            import pandas as pd
        except ImportError:
            return self._create_error_result(
                "pandas is not installed; install the 'dataframe' extra",
                parse_result
            )

        if not parse_result.success:
            return self._create_error_result(
                "ParseResult is not successful",
                parse_result,
                (time.time() - start_time) * MS_PER_SECOND
            )

        df = pd.DataFrame(interchange_rows(parse_result), columns=list(ROW_COLUMNS))

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._record_performance(processing_time)

        return ConversionResult(
            success=True,
            converted_data=df,
            original_data=parse_result,
            conversion_time_ms=processing_time,
            metadata={
                "dataframe_shape": df.shape,
                "row_count": len(df),
                "columns": list(df.columns),
                "segment_count": parse_result.segment_count,
            }
        )


# Global adapter registry instance
_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an integration adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance, or None if unknown or unavailable."""
    return _adapter_registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available adapters."""
    return _adapter_registry.list_available_adapters()


register_adapter(DictAdapter)
register_adapter(PandasAdapter)

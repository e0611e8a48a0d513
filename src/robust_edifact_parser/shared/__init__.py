"""Shared utilities for robust EDIFACT parsing.

This module provides shared data structures, configuration objects, result types,
and utility functions used across all processing layers.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticLog,
    DiagnosticSeverity,
    PerformanceMetrics,
)
from .config import (
    ApiConfig,
    CharacterConfig,
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ParserConfig,
    TokenizationConfig,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticLog",
    "DiagnosticSeverity",
    "PerformanceMetrics",
    "ApiConfig",
    "CharacterConfig",
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "ParserConfig",
    "TokenizationConfig",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
]

"""Interchange layer for the robust EDIFACT parser.

This module drives the parse pass over the tokenizer, analyses the UNA, UNB
and UNH service segments, and assembles the parse result.
"""

from .analyzer import InterchangeAnalyzer, MessageMetadata
from .builder import InterchangeBuilder, ParseResult
from .model import Interchange

__all__ = [
    "Interchange",
    "InterchangeAnalyzer",
    "InterchangeBuilder",
    "MessageMetadata",
    "ParseResult",
]

"""Character layer for the robust EDIFACT parser.

This module provides the self-declared service characters (UNA), the syntax
identifier profiles (UNB) and the line sanitization pass built on them.
"""

from .delimiters import ConfigState, DelimiterSet
from .encoding import (
    DEFAULT_REGISTRY,
    EncodingProfile,
    EncodingRegistry,
    EncodingSelection,
)
from .sanitization import LineSanitizer, strip_line_noise

__all__ = [
    "ConfigState",
    "DelimiterSet",
    "DEFAULT_REGISTRY",
    "EncodingProfile",
    "EncodingRegistry",
    "EncodingSelection",
    "LineSanitizer",
    "strip_line_noise",
]

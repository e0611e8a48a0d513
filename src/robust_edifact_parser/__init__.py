"""Robust EDIFACT Parser.

A never-fail UN/EDIFACT interchange parser that honours the service string
advice, sanitizes lines against the declared character repertoire and
reports unescaped data as diagnostics instead of failing.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_segments(), parse_file()
- Level 2: Configured parser - EdifactParser class
- Level 3: Integration adapters - DictAdapter, PandasAdapter
"""

__version__ = "0.1.0"
__author__ = "Robust EDIFACT Parser Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Advanced configuration
from .api import EdifactParser, parse, parse_file, parse_segments, parse_string

# Configuration classes for advanced usage
from .character.encoding import DEFAULT_REGISTRY, EncodingProfile, EncodingRegistry
from .shared.config import ParserConfig

# Core result objects for all API levels
from .interchange import Interchange, ParseResult
from .tokenization import Composite, Scalar, Segment

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_segments",
    "parse_file",

    # Level 2: Advanced parser class
    "EdifactParser",

    # Result objects and data structures
    "ParseResult",
    "Interchange",
    "Segment",
    "Scalar",
    "Composite",

    # Configuration classes for advanced usage
    "ParserConfig",
    "EncodingProfile",
    "EncodingRegistry",
    "DEFAULT_REGISTRY",
]

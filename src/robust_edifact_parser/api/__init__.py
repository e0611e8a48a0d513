"""Public parsing API and integration adapters."""

from .adapters import (
    AdapterMetadata,
    AdapterRegistry,
    AdapterType,
    ConversionDirection,
    ConversionResult,
    DictAdapter,
    IntegrationAdapter,
    PandasAdapter,
    get_adapter,
    interchange_rows,
    list_available_adapters,
    register_adapter,
)
from .parser import (
    EdifactParser,
    InputType,
    parse,
    parse_file,
    parse_segments,
    parse_string,
)

__all__ = [
    "AdapterMetadata",
    "AdapterRegistry",
    "AdapterType",
    "ConversionDirection",
    "ConversionResult",
    "DictAdapter",
    "EdifactParser",
    "InputType",
    "IntegrationAdapter",
    "PandasAdapter",
    "get_adapter",
    "interchange_rows",
    "list_available_adapters",
    "parse",
    "parse_file",
    "parse_segments",
    "parse_string",
    "register_adapter",
]

"""Configuration classes for robust EDIFACT parsing.

This module provides configuration objects for the parser layers, enabling
control over sanitization, diagnostics collection, output and logging.
"""

import json
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

VALID_OUTPUT_FORMATS = ["dict", "json", "text"]
VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
COMPONENT_FIELDS = ["character", "tokenization", "api", "global_"]


@dataclass
class TokenizationConfig:
    """Configuration for the escape-aware tokenizer."""

    bypass_sanitization: bool = False
    strict_tag_length: bool = False
    max_diagnostics: Optional[int] = None
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate tokenization configuration."""
        if self.max_diagnostics is not None and self.max_diagnostics < 0:
            raise ValueError("max_diagnostics must be >= 0 or None")

    @classmethod
    def balanced(cls) -> "TokenizationConfig":
        """Default configuration: sanitize, record every diagnostic."""
        return cls()

    @classmethod
    def conservative(cls) -> "TokenizationConfig":
        """Configuration that reports every irregularity it can detect."""
        return cls(strict_tag_length=True)

    @classmethod
    def trusted(cls) -> "TokenizationConfig":
        """Configuration for input known to be clean: no sanitization pass."""
        return cls(bypass_sanitization=True)

    def validate(self) -> None:
        """Validate the configuration."""
        self.__post_init__()


@dataclass
class CharacterConfig:
    """Configuration for character repertoire handling and file loading."""

    default_encoding: Optional[str] = None
    strip_pattern: Optional[str] = None
    file_encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Validate character configuration."""
        if self.default_encoding is not None and not self.default_encoding.strip():
            raise ValueError("default_encoding must be a non-empty identifier or None")
        if self.strip_pattern is not None:
            try:
                re.compile(self.strip_pattern)
            except re.error as e:
                raise ValueError(f"strip_pattern is not a valid regex: {e}") from e
        if not self.file_encoding:
            raise ValueError("file_encoding must not be empty")


@dataclass
class ApiConfig:
    """Configuration for API layer behavior."""

    default_output_format: str = "dict"
    never_fail_mode: bool = True
    include_raw_segments: bool = True

    def __post_init__(self) -> None:
        """Validate API configuration."""
        if self.default_output_format not in VALID_OUTPUT_FORMATS:
            raise ValueError(
                f"default_output_format must be one of {VALID_OUTPUT_FORMATS}"
            )


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "WARNING"
    max_input_size_bytes: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {VALID_LOGGING_LEVELS}")
        if self.max_input_size_bytes is not None and self.max_input_size_bytes <= 0:
            raise ValueError("max_input_size_bytes must be > 0 or None")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def _split_override_key(key: str) -> Tuple[str, str]:
    """Split ``component__field``, allowing the ``global_`` component name."""
    for component in COMPONENT_FIELDS:
        prefix = component + "__"
        if key.startswith(prefix):
            return component, key[len(prefix):]
    component, field_name = key.split("__", 1)
    return component, field_name


@dataclass(frozen=True)
class ParserConfig:
    """Comprehensive configuration for all EDIFACT parser components.

    Immutable; derive variants with :meth:`override`. Thread-safe due to the
    frozen dataclass implementation, so one instance can be shared by any
    number of concurrent parses.
    """

    character: CharacterConfig = field(default_factory=CharacterConfig)
    tokenization: TokenizationConfig = field(default_factory=TokenizationConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        try:
            self.character.__post_init__()
            self.tokenization.validate()
            self.api.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        self._validate_cross_component_dependencies()

    def _validate_cross_component_dependencies(self) -> None:
        """Validate dependencies between different component configurations."""
        if self.tokenization.bypass_sanitization and self.character.strip_pattern:
            raise ConfigValidationError(
                "A custom strip pattern has no effect when sanitization is bypassed",
                field_name="character.strip_pattern",
                suggestions=[
                    "Remove character.strip_pattern",
                    "Set tokenization.bypass_sanitization to False",
                ],
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig()
            >>> new_config = config.override(
            ...     tokenization__bypass_sanitization=True,
            ...     api__default_output_format="json"
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = _split_override_key(key)
                if component not in COMPONENT_FIELDS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=COMPONENT_FIELDS,
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for field_name in COMPONENT_FIELDS:
            current_config = getattr(self, field_name)
            if field_name in nested_overrides:
                try:
                    new_fields[field_name] = replace(
                        current_config, **nested_overrides[field_name]
                    )
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=field_name) from e
            else:
                new_fields[field_name] = current_config

        for key, value in nested_overrides.items():
            if key not in COMPONENT_FIELDS:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            if isinstance(obj, (list, tuple, set)):
                return [_dataclass_to_dict(item) for item in obj]
            if isinstance(obj, dict):
                return {key: _dataclass_to_dict(value) for key, value in obj.items()}
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are ignored so that files written by newer versions
        still load.
        """
        component_classes = {
            "character": CharacterConfig,
            "tokenization": TokenizationConfig,
            "api": ApiConfig,
            "global_": GlobalConfig,
        }

        field_values: Dict[str, Any] = {}
        try:
            for field_name in cls.__dataclass_fields__:
                if field_name not in data:
                    continue
                value = data[field_name]
                if field_name in component_classes:
                    target_class = component_classes[field_name]
                    known = {
                        key: item for key, item in value.items()
                        if key in target_class.__dataclass_fields__
                    }
                    field_values[field_name] = target_class(**known)
                else:
                    field_values[field_name] = value
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigValidationError(f"Invalid configuration data: {e}") from e

        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "ParserConfig":
        """Preset that reports every irregularity in the interchange."""
        return cls(
            tokenization=TokenizationConfig.conservative(),
            api=ApiConfig(never_fail_mode=False),
            name="strict",
            description="Report every irregularity, raise on unexpected failures"
        )

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Preset for noisy partner data: sanitize and cap the diagnostics."""
        return cls(
            tokenization=TokenizationConfig(max_diagnostics=1000),
            name="lenient",
            description="Sanitize input and keep at most 1000 diagnostics"
        )

    @classmethod
    def trusted_partner(cls) -> "ParserConfig":
        """Preset for clean input from a trusted trading partner."""
        return cls(
            tokenization=TokenizationConfig.trusted(),
            api=ApiConfig(include_raw_segments=False),
            name="trusted_partner",
            description="Skip the sanitization pass for known-clean interchanges"
        )

"""Core parser API with progressive disclosure for robust EDIFACT parsing.

This module provides the main parsing API, from simple module-level functions
to a configurable parser class, following the never-fail philosophy: the
functions return a ParseResult and do not raise for bad input.
"""

import json
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Sequence, TextIO, Union

from robust_edifact_parser.character.encoding import DEFAULT_REGISTRY, EncodingRegistry
from robust_edifact_parser.interchange import InterchangeBuilder, ParseResult
from robust_edifact_parser.shared import (
    DiagnosticSeverity,
    ParserConfig,
    get_logger,
)

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path, Sequence[str]]

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion
MAX_PATH_LENGTH = 4096  # Longer strings are always interchange text


class InputTooLargeError(ValueError):
    """Raised internally when input exceeds the configured size limit."""


def parse(
    input_data: InputType,
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None
) -> ParseResult:
    """Parse an EDIFACT interchange from various input sources.

    A string that names an existing file is loaded from that file; any
    other string is parsed as interchange text. Use :func:`parse_string` to
    skip the file check.

    Args:
        input_data: Interchange text or a file path, bytes, a file-like
            object, a Path, or a list of segment strings that were already
            split
        correlation_id: Optional correlation ID for request tracking
        config: Optional parser configuration

    Returns:
        ParseResult with the interchange, diagnostics and metrics

    Examples:
        >>> result = parse("UNA:+.? 'UNB+UNOB:1'UNH+1+ORDERS:D:96A:UN'")
        >>> result.message_format
        'ORDERS'
        >>> result.segments[0].tag
        'UNB'
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse")
    config = config or ParserConfig()

    logger.info(
        "Starting universal parse operation",
        extra={
            "input_type": type(input_data).__name__,
            "has_correlation_id": correlation_id is not None
        }
    )

    try:
        if isinstance(input_data, str) and _names_existing_file(input_data):
            return parse_file(input_data, correlation_id=correlation_id, config=config)
        if isinstance(input_data, (str, bytes)):
            return _parse_direct_content(input_data, correlation_id, config)
        if isinstance(input_data, Path):
            return parse_file(input_data, correlation_id=correlation_id, config=config)
        if hasattr(input_data, "read"):
            return _parse_file_like_object(input_data, correlation_id, config)
        if isinstance(input_data, (list, tuple)):
            return parse_segments(input_data, correlation_id, config)

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        return _create_error_result(
            f"Unable to process input type {type(input_data).__name__}",
            correlation_id,
            processing_time
        )

    except Exception as e:
        if not config.api.never_fail_mode:
            raise
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.exception(
            "Parse operation failed",
            extra={"processing_time_ms": processing_time}
        )
        return _create_error_result(
            f"Parse operation failed: {e}",
            correlation_id,
            processing_time
        )


def parse_string(
    edifact_string: str,
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None
) -> ParseResult:
    """Parse an interchange held in a string.

    Examples:
        >>> result = parse_string("UNH+1+ORDERS:D:96A:UN'FTX+AAA+10?+10'")
        >>> result.segments[1].value(1)
        '10+10'
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_string")
    config = config or ParserConfig()

    logger.info(
        "Starting string parse operation",
        extra={
            "content_length": len(edifact_string),
            "preview": (
                edifact_string[:PREVIEW_LENGTH] + "..."
                if len(edifact_string) > PREVIEW_LENGTH else edifact_string
            )
        }
    )

    try:
        return _parse_direct_content(edifact_string, correlation_id, config)

    except Exception as e:
        if not config.api.never_fail_mode:
            raise
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.exception(
            "String parse operation failed",
            extra={"processing_time_ms": processing_time}
        )
        return _create_error_result(
            f"String parse failed: {e}",
            correlation_id,
            processing_time
        )


def parse_segments(
    segments: Sequence[str],
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None
) -> ParseResult:
    """Parse segment strings that the caller has already split.

    A one-item sequence is treated as a whole interchange and unwrapped.
    Segment strings may keep or omit their trailing terminator.
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_segments")
    config = config or ParserConfig()

    logger.info(
        "Starting segment list parse operation",
        extra={"line_count": len(segments)}
    )

    try:
        _check_input_size(sum(len(line) for line in segments), config)
        builder = InterchangeBuilder(config=config, correlation_id=correlation_id)
        return builder.build_from_segments([str(line) for line in segments])

    except InputTooLargeError as e:
        return _create_error_result(
            str(e), correlation_id, (time.time() - start_time) * MS_PER_SECOND
        )
    except Exception as e:
        if not config.api.never_fail_mode:
            raise
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.exception(
            "Segment list parse operation failed",
            extra={"processing_time_ms": processing_time}
        )
        return _create_error_result(
            f"Segment list parse failed: {e}",
            correlation_id,
            processing_time
        )


def parse_file(
    file_path: Union[str, Path],
    encoding: Optional[str] = None,
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None,
    registry: EncodingRegistry = DEFAULT_REGISTRY
) -> ParseResult:
    """Load an interchange from a file and parse it.

    A file that cannot be read produces an unsuccessful result with a
    CRITICAL diagnostic instead of an exception. ``registry`` supplies the
    sanitization profiles, as for in-memory input.

    Examples:
        >>> result = parse_file('missing.edi')
        >>> result.success
        False
        >>> 'not found' in result.diagnostics[0].message.lower()
        True
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_file")
    config = config or ParserConfig()
    file_encoding = encoding or config.character.file_encoding

    path_obj = Path(file_path) if isinstance(file_path, str) else file_path

    logger.info(
        "Starting file parse operation",
        extra={
            "file_path": str(path_obj),
            "file_exists": path_obj.exists(),
            "encoding": file_encoding
        }
    )

    error_message = None
    if not path_obj.exists():
        error_message = f"File not found: {path_obj}"
    elif not path_obj.is_file():
        error_message = f"Path is not a file: {path_obj}"

    if error_message:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        return _create_error_result(error_message, correlation_id, processing_time)

    try:
        with path_obj.open("rb") as file:
            raw_data = file.read()
        content = raw_data.decode(file_encoding)

    except PermissionError:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        return _create_error_result(
            f"Permission denied accessing file: {path_obj}",
            correlation_id,
            processing_time
        )
    except (UnicodeDecodeError, LookupError) as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.warning(
            "File could not be decoded",
            extra={"error": str(e), "encoding": file_encoding}
        )
        return _create_error_result(
            f"File is not valid {file_encoding}: {e}",
            correlation_id,
            processing_time
        )
    except OSError as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        return _create_error_result(
            f"Unable to read file {path_obj}: {e}",
            correlation_id,
            processing_time
        )

    result = _parse_direct_content(content, correlation_id, config, registry)
    if result.success:
        result.add_diagnostic(
            DiagnosticSeverity.INFO,
            f"File parsed with encoding: {file_encoding}",
            "file_parser",
            details={"file_path": str(path_obj), "encoding": file_encoding}
        )
    return result


def _names_existing_file(text: str) -> bool:
    """Check whether a string argument is the path of an existing file."""
    if not text or len(text) > MAX_PATH_LENGTH or "\n" in text:
        return False
    try:
        return Path(text).is_file()
    except (OSError, ValueError):
        return False


def _check_input_size(size: int, config: ParserConfig) -> None:
    limit = config.global_.max_input_size_bytes
    if limit is not None and size > limit:
        raise InputTooLargeError(
            f"Input size {size} exceeds configured limit of {limit}"
        )


def _parse_direct_content(
    content: Union[str, bytes],
    correlation_id: Optional[str],
    config: ParserConfig,
    registry: EncodingRegistry = DEFAULT_REGISTRY
) -> ParseResult:
    """Parse direct content (string or bytes).

    Bytes are decoded with the configured file encoding; undecodable bytes
    produce an error result.
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_direct")

    try:
        _check_input_size(len(content), config)
        if isinstance(content, bytes):
            content = content.decode(config.character.file_encoding)
    except InputTooLargeError as e:
        return _create_error_result(
            str(e), correlation_id, (time.time() - start_time) * MS_PER_SECOND
        )
    except UnicodeDecodeError as e:
        return _create_error_result(
            f"Content is not valid {config.character.file_encoding}: {e}",
            correlation_id,
            (time.time() - start_time) * MS_PER_SECOND
        )

    builder = InterchangeBuilder(config, registry, correlation_id)
    parse_result = builder.build_from_text(content)

    logger.info(
        "Direct content parsing completed",
        extra={
            "segment_count": parse_result.segment_count,
            "diagnostic_count": len(parse_result.diagnostics),
            "processing_time_ms": parse_result.processing_time_ms
        }
    )
    return parse_result


def _parse_file_like_object(
    file_obj: Union[BinaryIO, TextIO],
    correlation_id: Optional[str],
    config: ParserConfig
) -> ParseResult:
    """Read a file-like object and parse its content."""
    logger = get_logger(__name__, correlation_id, "parse_filelike")

    content = file_obj.read()

    logger.info(
        "File-like object read",
        extra={
            "content_length": len(content) if content else 0,
            "content_type": type(content).__name__
        }
    )

    return _parse_direct_content(content, correlation_id, config)


def _create_error_result(
    error_message: str,
    correlation_id: Optional[str],
    processing_time: float
) -> ParseResult:
    """Create error result following never-fail philosophy."""
    result = ParseResult(correlation_id=correlation_id)
    result.success = False
    result.performance.processing_time_ms = processing_time

    result.add_diagnostic(
        DiagnosticSeverity.CRITICAL,
        error_message,
        "api_parser"
    )

    return result


class EdifactParser:
    """Configurable EDIFACT parser for repeated use.

    The parser holds configuration and statistics only; every call to
    :meth:`parse` runs with fresh delimiter, encoding and diagnostic state,
    so results never leak configuration from one interchange to the next.

    Examples:
        >>> parser = EdifactParser(config=ParserConfig.trusted_partner())
        >>> results = [parser.parse(text) for text in interchanges]
        >>> parser.statistics["total_parses"] == len(interchanges)
        True
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        registry: EncodingRegistry = DEFAULT_REGISTRY,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.registry = registry
        self.correlation_id = correlation_id or self.config.tokenization.correlation_id

        self.logger = get_logger(__name__, self.correlation_id, "edifact_parser")

        self._parse_count = 0
        self._total_processing_time = 0.0
        self._successful_parses = 0
        self._diagnostic_count = 0

        self.logger.info(
            "EdifactParser initialized",
            extra={"config_name": self.config.name}
        )

    def parse(
        self,
        input_data: InputType,
        config_override: Optional[ParserConfig] = None,
        correlation_id_override: Optional[str] = None
    ) -> ParseResult:
        """Parse one interchange with this parser's configuration."""
        start_time = time.time()
        config = config_override or self.config
        correlation_id = correlation_id_override or self.correlation_id

        try:
            if isinstance(input_data, Path) or (
                isinstance(input_data, str) and _names_existing_file(input_data)
            ):
                parse_result = parse_file(
                    input_data,
                    correlation_id=correlation_id,
                    config=config,
                    registry=self.registry
                )
            else:
                if hasattr(input_data, "read"):
                    input_data = input_data.read()
                if isinstance(input_data, (str, bytes, list, tuple)):
                    builder = InterchangeBuilder(config, self.registry, correlation_id)
                    parse_result = self._build(builder, input_data, config)
                else:
                    parse_result = _create_error_result(
                        f"Unable to process input type {type(input_data).__name__}",
                        correlation_id,
                        (time.time() - start_time) * MS_PER_SECOND
                    )

        except (InputTooLargeError, UnicodeDecodeError) as e:
            parse_result = _create_error_result(
                str(e), correlation_id, (time.time() - start_time) * MS_PER_SECOND
            )
        except Exception as e:
            if not config.api.never_fail_mode:
                raise
            self.logger.exception("Configured parse failed")
            parse_result = _create_error_result(
                f"Configured parse failed: {e}",
                correlation_id,
                (time.time() - start_time) * MS_PER_SECOND
            )

        self._record(parse_result, (time.time() - start_time) * MS_PER_SECOND)
        return parse_result

    def _build(
        self,
        builder: InterchangeBuilder,
        input_data: Any,
        config: ParserConfig
    ) -> ParseResult:
        if isinstance(input_data, (list, tuple)):
            lines: List[str] = [str(line) for line in input_data]
            _check_input_size(sum(len(line) for line in lines), config)
            return builder.build_from_segments(lines)

        if isinstance(input_data, bytes):
            input_data = input_data.decode(config.character.file_encoding)
        text = str(input_data)
        _check_input_size(len(text), config)
        return builder.build_from_text(text)

    def _record(self, parse_result: ParseResult, processing_time: float) -> None:
        self._parse_count += 1
        self._total_processing_time += processing_time
        self._diagnostic_count += len(parse_result.diagnostics)
        if parse_result.success:
            self._successful_parses += 1

        self.logger.info(
            "Configured parse completed",
            extra={
                "success": parse_result.success,
                "segment_count": parse_result.segment_count,
                "processing_time_ms": processing_time,
                "total_parses": self._parse_count,
            }
        )

    def render(
        self,
        parse_result: ParseResult,
        output_format: Optional[str] = None
    ) -> Union[Dict[str, Any], str]:
        """Render a result in the configured output format.

        ``dict`` returns plain data, ``json`` a JSON document and ``text`` a
        one-line summary followed by the diagnostics.
        """
        output_format = output_format or self.config.api.default_output_format
        data = parse_result.to_dict(
            include_raw_segments=self.config.api.include_raw_segments
        )
        if output_format == "dict":
            return data
        if output_format == "json":
            return json.dumps(data, indent=2)
        if output_format == "text":
            lines = [
                f"{parse_result.message_format or '-'}: "
                f"{parse_result.segment_count} segments, "
                f"{len(parse_result.diagnostics)} diagnostics"
            ]
            lines.extend(
                f"{diag.severity.name} line {diag.line_number}: {diag.message}"
                for diag in parse_result.diagnostics
            )
            return "\n".join(lines)
        raise ValueError(f"Unsupported output format: {output_format}")

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the parser configuration for subsequent parses."""
        self.config = config
        self.logger.info("Parser reconfigured", extra={"config_name": config.name})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_diagnostics": self._diagnostic_count,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._total_processing_time = 0.0
        self._successful_parses = 0
        self._diagnostic_count = 0

        self.logger.info("Parser statistics reset")

"""Main CLI entry point for the robust-edifact command-line tool.

Provides a command-line interface for parsing EDIFACT interchange files and
validating them against the parser's diagnostics.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from robust_edifact_parser import __version__
from robust_edifact_parser.api import EdifactParser
from robust_edifact_parser.shared.config import ConfigError, ParserConfig
from robust_edifact_parser.shared.logging import configure_logging, get_logger

EDIFACT_SUFFIXES = {".edi", ".edifact", ".txt"}
PRESETS = ["default", "strict", "lenient", "trusted_partner"]
MAX_SHOWN_DIAGNOSTICS = 3


def preset_config(preset: str) -> ParserConfig:
    """Return the ParserConfig for a named preset."""
    if preset == "strict":
        return ParserConfig.strict()
    if preset == "lenient":
        return ParserConfig.lenient()
    if preset == "trusted_partner":
        return ParserConfig.trusted_partner()
    return ParserConfig()


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.parser_config = ParserConfig()
        self.output_format = "json"
        self.verbose = False
        self.quiet = False

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Recognised keys are ``parser_preset``, ``parser_config`` (a
        ParserConfig dictionary, applied after the preset) and
        ``output_format``.
        """
        config = cls()
        if config_path.exists():
            try:
                with config_path.open() as f:
                    data = json.load(f)

                if "parser_preset" in data:
                    config.parser_config = preset_config(data["parser_preset"])
                if "parser_config" in data:
                    config.parser_config = ParserConfig.from_dict(data["parser_config"])

                config.output_format = data.get("output_format", config.output_format)

            except (OSError, ValueError, ConfigError) as e:
                print(f"Warning: Could not load config file: {e}", file=sys.stderr)

        return config


class EdifactProcessor:
    """Core interchange processing logic for CLI operations."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.parser = EdifactParser(config=config.parser_config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def process_single_file(self, file_path: Path) -> Dict[str, Any]:
        """Parse a single interchange file and summarise the result."""
        result = self.parser.parse(Path(file_path))
        interchange = result.interchange

        return {
            "file": str(file_path),
            "success": result.success,
            "segment_count": result.segment_count,
            "message_format": interchange.message_format,
            "message_directory": interchange.message_directory,
            "syntax_identifier": interchange.syntax_identifier,
            "warning_count": sum(
                1 for diag in result.diagnostics if diag.severity.name == "WARNING"
            ),
            "processing_time_ms": result.performance.processing_time_ms,
            "diagnostics": [
                {
                    "severity": diag.severity.name,
                    "line_number": diag.line_number,
                    "message": diag.message,
                    "component": diag.component
                } for diag in result.diagnostics
            ],
        }

    def find_edifact_files(self, path: Path, recursive: bool = True) -> Iterator[Path]:
        """Find interchange files in path."""
        if path.is_file():
            yield path
        elif path.is_dir():
            pattern = "**/*" if recursive else "*"
            for candidate in sorted(path.glob(pattern)):
                if candidate.is_file() and candidate.suffix.lower() in EDIFACT_SUFFIXES:
                    yield candidate
        else:
            self.logger.warning("Path does not exist", extra={"path": str(path)})

    def batch_process(self, paths: List[Path], recursive: bool = True) -> List[Dict[str, Any]]:
        """Process every interchange file found under ``paths``."""
        results = []
        for path in paths:
            for file_path in self.find_edifact_files(path, recursive):
                results.append(self.process_single_file(file_path))
        return results


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="robust-edifact",
        description="Robust UN/EDIFACT interchange parser"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse EDIFACT files")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Interchange files or directories to parse"
    )
    parse_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=["json", "csv", "text"],
        default="json",
        help="Output format (default: json)"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    parse_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    parse_parser.add_argument(
        "--preset",
        choices=PRESETS,
        help="Parser configuration preset"
    )
    parse_parser.add_argument(
        "--bypass-sanitization",
        action="store_true",
        help="Skip removal of characters outside the declared repertoire"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate EDIFACT files")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Interchange files to validate"
    )
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Also report segment tags that are not three characters long"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format processing results for output."""
    if format_type == "csv":
        if not results:
            return ""

        lines = ["file,success,message_format,segments,warnings,time_ms"]
        for result in results:
            lines.append(
                f"{result['file']},{result['success']},"
                f"{result.get('message_format') or ''},"
                f"{result.get('segment_count', 0)},{result.get('warning_count', 0)},"
                f"{result.get('processing_time_ms', 0):.1f}"
            )
        return "\n".join(lines)

    elif format_type == "text":
        if not results:
            return "No results to display."

        lines = []
        successful = sum(1 for r in results if r.get("success", False))

        lines.append(f"Processed {len(results)} files, {successful} successful")
        lines.append("-" * 60)

        for result in results:
            status = "✓" if result.get("success", False) else "✗"
            lines.append(f"{status} {result['file']}")
            lines.append(
                f"   Message: {result.get('message_format') or '-'} "
                f"({result.get('message_directory') or '-'}), "
                f"Segments: {result.get('segment_count', 0)}, "
                f"Time: {result.get('processing_time_ms', 0):.1f}ms"
            )

            diagnostics = result.get("diagnostics", [])
            for diag in diagnostics[:MAX_SHOWN_DIAGNOSTICS]:
                lines.append(f"   {diag['severity'].title()}: {diag['message']}")
            if len(diagnostics) > MAX_SHOWN_DIAGNOSTICS:
                lines.append(
                    f"   ... and {len(diagnostics) - MAX_SHOWN_DIAGNOSTICS} more diagnostics"
                )

            lines.append("")

        return "\n".join(lines)

    return json.dumps(results, indent=2)


def _apply_logging_level(args: argparse.Namespace, config: CLIConfig) -> None:
    """Use the configured logging level unless --verbose or --quiet was given."""
    if not (args.verbose or args.quiet):
        configure_logging(config.parser_config.global_.logging_level)


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    config = CLIConfig()
    if args.config and args.config.exists():
        config = CLIConfig.from_file(args.config)

    # Apply command-line overrides
    if args.preset:
        config.parser_config = preset_config(args.preset)
    if args.bypass_sanitization:
        config.parser_config = config.parser_config.override(
            character__strip_pattern=None,
            tokenization__bypass_sanitization=True
        )

    config.output_format = args.format
    _apply_logging_level(args, config)

    processor = EdifactProcessor(config)
    results = processor.batch_process(args.paths, args.recursive)

    formatted_output = format_results(results, args.format)

    if args.output:
        try:
            args.output.write_text(formatted_output)
            print(f"Results written to {args.output}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(formatted_output)

    if not results:
        return 1

    successful = sum(1 for r in results if r.get("success", False))
    return 0 if successful == len(results) else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command.

    A file is valid when it loads and parses without any diagnostic of
    WARNING severity or above.
    """
    config = CLIConfig()
    if args.strict:
        config.parser_config = config.parser_config.override(
            tokenization__strict_tag_length=True
        )

    _apply_logging_level(args, config)

    processor = EdifactProcessor(config)
    results = []

    for path in args.paths:
        if not path.exists():
            results.append({
                "file": str(path),
                "valid": False,
                "error_details": ["File not found"]
            })
            continue

        result = processor.process_single_file(path)
        problems = [
            diag["message"] for diag in result["diagnostics"]
            if diag["severity"] in ("WARNING", "ERROR", "CRITICAL")
        ]
        validation_result = {
            "file": str(path),
            "valid": result["success"] and not problems,
            "warnings": result["warning_count"],
            "segment_count": result["segment_count"],
        }
        if problems:
            validation_result["error_details"] = problems[:5]

        results.append(validation_result)

    if args.format == "json":
        print(json.dumps(results, indent=2))
    else:
        valid_count = sum(1 for r in results if r.get("valid", False))
        print(f"Validated {len(results)} files, {valid_count} valid")
        print("-" * 50)

        for result in results:
            status = "✓" if result.get("valid", False) else "✗"
            print(f"{status} {result['file']}")

            for error in result.get("error_details", [])[:MAX_SHOWN_DIAGNOSTICS]:
                print(f"   Error: {error}")

    valid_count = sum(1 for r in results if r.get("valid", False))
    return 0 if valid_count == len(results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")

    try:
        if args.command == "parse":
            return cmd_parse(args)
        elif args.command == "validate":
            return cmd_validate(args)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())

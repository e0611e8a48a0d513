"""Tests for the CLI main module."""

import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from robust_edifact_parser.cli.main import (
    CLIConfig,
    EdifactProcessor,
    create_argument_parser,
    format_results,
    main,
    preset_config,
)
from robust_edifact_parser.shared.config import ParserConfig

CLEAN_INTERCHANGE = "UNB+UNOA:3+SENDER+RECEIVER'UNH+1+ORDERS:D:96A:UN'UNT+2+1'UNZ+1+1'"
NOISY_INTERCHANGE = "UNB+UNOA:3+SENDER+RECEIVER'UNH+1+ORDERS:D:96A:UN'FTX+AAA+caf\xe9'"


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self):
        """Test default configuration values."""
        config = CLIConfig()

        assert config.parser_config == ParserConfig()
        assert config.output_format == "json"
        assert config.verbose is False
        assert config.quiet is False

    def test_config_from_file(self):
        """Test loading configuration from file."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump({"parser_preset": "strict", "output_format": "csv"}, f)
            config_path = Path(f.name)

        try:
            config = CLIConfig.from_file(config_path)
            assert config.parser_config.name == "strict"
            assert config.output_format == "csv"
        finally:
            config_path.unlink()

    def test_config_from_file_parser_config(self):
        """Test loading an explicit parser configuration."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.json"
            config_path.write_text(json.dumps({
                "parser_config": {"character": {"default_encoding": "UNOA"}}
            }))

            config = CLIConfig.from_file(config_path)

        assert config.parser_config.character.default_encoding == "UNOA"

    def test_config_from_invalid_file(self):
        """Test that an unreadable config file falls back to defaults."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.json"
            config_path.write_text("{not json")

            with patch("builtins.print") as mock_print:
                config = CLIConfig.from_file(config_path)

        assert config.parser_config == ParserConfig()
        assert "Could not load config file" in mock_print.call_args[0][0]

    def test_config_from_nonexistent_file(self):
        """Test handling non-existent config file."""
        config = CLIConfig.from_file(Path("nonexistent.json"))

        assert config.output_format == "json"

    def test_presets(self):
        """Test preset name resolution."""
        assert preset_config("strict").name == "strict"
        assert preset_config("lenient").name == "lenient"
        assert preset_config("trusted_partner").name == "trusted_partner"
        assert preset_config("default") == ParserConfig()


class TestEdifactProcessor:
    """Test the file processing logic."""

    def test_process_single_file_success(self):
        """Test summarising a clean file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "orders.edi"
            path.write_text(CLEAN_INTERCHANGE, encoding="utf-8")

            result = EdifactProcessor(CLIConfig()).process_single_file(path)

        assert result["success"] is True
        assert result["segment_count"] == 4
        assert result["message_format"] == "ORDERS"
        assert result["message_directory"] == "96A"
        assert result["syntax_identifier"] == "UNOA"
        assert result["warning_count"] == 0

    def test_process_noisy_file(self):
        """Test that sanitization warnings are counted."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "noisy.edi"
            path.write_text(NOISY_INTERCHANGE, encoding="utf-8")

            result = EdifactProcessor(CLIConfig()).process_single_file(path)

        assert result["warning_count"] == 1
        assert result["diagnostics"][0]["line_number"] == 3

    def test_process_nonexistent_file(self):
        """Test that a missing file is an unsuccessful result."""
        result = EdifactProcessor(CLIConfig()).process_single_file(Path("missing.edi"))

        assert result["success"] is False
        assert result["diagnostics"][0]["severity"] == "CRITICAL"

    def test_find_edifact_files_directory(self):
        """Test discovering interchange files by suffix."""
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            (root / "a.edi").write_text(CLEAN_INTERCHANGE)
            (root / "b.edifact").write_text(CLEAN_INTERCHANGE)
            (root / "notes.md").write_text("ignore")
            (root / "nested").mkdir()
            (root / "nested" / "c.txt").write_text(CLEAN_INTERCHANGE)

            processor = EdifactProcessor(CLIConfig())
            flat = {p.name for p in processor.find_edifact_files(root, recursive=False)}
            deep = {p.name for p in processor.find_edifact_files(root, recursive=True)}

        assert flat == {"a.edi", "b.edifact"}
        assert deep == {"a.edi", "b.edifact", "c.txt"}

    def test_find_edifact_files_single_file(self):
        """Test that an explicit file is used whatever its suffix."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "orders.dat"
            path.write_text(CLEAN_INTERCHANGE)

            files = list(EdifactProcessor(CLIConfig()).find_edifact_files(path))

        assert files == [path]


class TestFormatResults:
    """Test result formatting."""

    RESULTS = [{
        "file": "orders.edi",
        "success": True,
        "segment_count": 4,
        "message_format": "ORDERS",
        "message_directory": "96A",
        "warning_count": 1,
        "processing_time_ms": 1.5,
        "diagnostics": [{
            "severity": "WARNING",
            "line_number": 3,
            "message": "There's a non printable character on line 3: FTX+AAA+caf\xe9'",
            "component": "sanitizer",
        }],
    }]

    def test_format_json(self):
        """Test JSON output."""
        assert json.loads(format_results(self.RESULTS, "json"))[0]["file"] == "orders.edi"

    def test_format_csv(self):
        """Test CSV output."""
        lines = format_results(self.RESULTS, "csv").splitlines()

        assert lines[0] == "file,success,message_format,segments,warnings,time_ms"
        assert lines[1] == "orders.edi,True,ORDERS,4,1,1.5"

    def test_format_text(self):
        """Test text output."""
        output = format_results(self.RESULTS, "text")

        assert "Processed 1 files, 1 successful" in output
        assert "Message: ORDERS (96A), Segments: 4" in output
        assert "Warning: There's a non printable character on line 3" in output

    def test_format_empty_results(self):
        """Test formatting without results."""
        assert format_results([], "csv") == ""
        assert format_results([], "text") == "No results to display."
        assert format_results([], "json") == "[]"


class TestMain:
    """Test argument parsing and command dispatch."""

    def test_create_parser(self):
        """Test parsing parse command options."""
        args = create_argument_parser().parse_args([
            "parse", "orders.edi", "--format", "csv", "--preset", "lenient",
            "--bypass-sanitization",
        ])

        assert args.command == "parse"
        assert args.paths == [Path("orders.edi")]
        assert args.format == "csv"
        assert args.preset == "lenient"
        assert args.bypass_sanitization is True

    def test_main_no_args(self):
        """Test that running without a command prints help."""
        with patch("builtins.print"):
            assert main([]) == 1

    @patch("robust_edifact_parser.cli.main.cmd_parse")
    def test_main_parse_command(self, mock_cmd_parse):
        """Test dispatching to the parse command."""
        mock_cmd_parse.return_value = 0

        assert main(["parse", "orders.edi"]) == 0
        mock_cmd_parse.assert_called_once()

    def test_main_keyboard_interrupt(self):
        """Test the exit code on interruption."""
        with patch("robust_edifact_parser.cli.main.cmd_parse", side_effect=KeyboardInterrupt):
            with patch("builtins.print"):
                assert main(["parse", "orders.edi"]) == 130

    def test_invalid_preset_rejected(self):
        """Test that argparse rejects unknown presets."""
        with pytest.raises(SystemExit):
            with patch("sys.stderr"):
                main(["parse", "orders.edi", "--preset", "aggressive"])


class TestCommands:
    """Integration tests for the parse and validate commands."""

    def test_cli_parse_integration(self, capsys):
        """Test parsing a file to JSON on stdout."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "orders.edi"
            path.write_text(CLEAN_INTERCHANGE, encoding="utf-8")

            exit_code = main(["parse", str(path)])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert output[0]["message_format"] == "ORDERS"

    def test_cli_parse_output_file(self):
        """Test writing results to an output file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "orders.edi"
            path.write_text(NOISY_INTERCHANGE, encoding="utf-8")
            output_path = Path(temp_dir) / "results.csv"

            with patch("builtins.print"):
                exit_code = main([
                    "parse", str(path), "--format", "csv", "--output", str(output_path),
                ])
            lines = output_path.read_text().splitlines()

        assert exit_code == 0
        assert lines[1].startswith(f"{path},True,ORDERS,3,1,")

    def test_cli_parse_bypass_sanitization(self, capsys):
        """Test that bypassing sanitization suppresses repertoire warnings."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "noisy.edi"
            path.write_text(NOISY_INTERCHANGE, encoding="utf-8")

            main(["parse", str(path), "--bypass-sanitization"])

        output = json.loads(capsys.readouterr().out)
        assert output[0]["warning_count"] == 0

    def test_cli_parse_configured_logging_level(self, capsys):
        """Test that the config file's logging level is applied."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "orders.edi"
            path.write_text(CLEAN_INTERCHANGE, encoding="utf-8")
            config_path = Path(temp_dir) / "config.json"
            config_path.write_text(json.dumps({
                "parser_config": {"global_": {"logging_level": "ERROR"}}
            }))

            with patch("robust_edifact_parser.cli.main.configure_logging") as mock_configure:
                main(["parse", str(path), "--config", str(config_path)])

        mock_configure.assert_called_once_with("ERROR")
        assert json.loads(capsys.readouterr().out)[0]["success"] is True

    def test_cli_verbose_overrides_logging_level(self, capsys):
        """Test that --verbose wins over the configured logging level."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "orders.edi"
            path.write_text(CLEAN_INTERCHANGE, encoding="utf-8")

            with patch("robust_edifact_parser.cli.main.configure_logging") as mock_configure:
                main(["--verbose", "validate", str(path)])

        mock_configure.assert_called_once_with("DEBUG")
        assert "1 valid" in capsys.readouterr().out

    def test_cli_parse_no_files(self, capsys):
        """Test that finding no files is a failure."""
        with tempfile.TemporaryDirectory() as temp_dir:
            exit_code = main(["parse", temp_dir])

        assert exit_code == 1
        assert json.loads(capsys.readouterr().out) == []

    def test_cli_validate_integration(self, capsys):
        """Test validating clean and noisy files."""
        with tempfile.TemporaryDirectory() as temp_dir:
            clean = Path(temp_dir) / "clean.edi"
            clean.write_text(CLEAN_INTERCHANGE, encoding="utf-8")
            noisy = Path(temp_dir) / "noisy.edi"
            noisy.write_text(NOISY_INTERCHANGE, encoding="utf-8")

            clean_code = main(["validate", str(clean)])
            capsys.readouterr()
            noisy_code = main(["validate", str(noisy), "--format", "json"])

        output = json.loads(capsys.readouterr().out)
        assert clean_code == 0
        assert noisy_code == 1
        assert output[0]["valid"] is False
        assert output[0]["warnings"] == 1
        assert output[0]["error_details"][0].startswith("There's a non printable character")

    def test_cli_validate_missing_file(self, capsys):
        """Test validating a path that does not exist."""
        exit_code = main(["validate", "missing.edi"])

        assert exit_code == 1
        assert "Error: File not found" in capsys.readouterr().out

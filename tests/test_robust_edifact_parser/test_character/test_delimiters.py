"""Tests for the service string advice and per-parse delimiter set."""

import pytest

from robust_edifact_parser.character.delimiters import (
    DECLARATION_LENGTH,
    ConfigState,
    DelimiterSet,
)


class TestDelimiterDefaults:
    """Test the EDIFACT default service characters."""

    def test_defaults(self):
        """Test that defaults are the standard EDIFACT characters."""
        delimiters = DelimiterSet.with_defaults()

        assert delimiters.component_separator == ":"
        assert delimiters.data_separator == "+"
        assert delimiters.decimal_notation == "."
        assert delimiters.release_character == "?"
        assert delimiters.repetition_character == "*"
        assert delimiters.segment_terminator == "'"
        assert delimiters.state is ConfigState.UNSET
        assert delimiters.is_declared is False

    def test_declaration_order(self):
        """Test rendering the characters in UNA order."""
        assert DelimiterSet().as_declaration() == ":+.?*'"
        assert DECLARATION_LENGTH == 6

    def test_single_character_required(self):
        """Test that multi-character delimiters are rejected."""
        with pytest.raises(ValueError, match="segment_terminator must be a single character"):
            DelimiterSet(segment_terminator="''")

        with pytest.raises(ValueError, match="data_separator"):
            DelimiterSet(data_separator="")

    def test_escapable_characters(self):
        """Test the characters a release character may precede."""
        assert DelimiterSet().escapable == frozenset("?+:'")


class TestApplyDeclaration:
    """Test UNA service string advice handling."""

    def test_full_declaration(self):
        """Test applying all six characters."""
        delimiters = DelimiterSet()

        assert delimiters.apply_declaration(":+.? '") is True

        assert delimiters.repetition_character == " "
        assert delimiters.component_separator == ":"
        assert delimiters.segment_terminator == "'"
        assert delimiters.is_declared is True

    def test_custom_characters(self):
        """Test a declaration that replaces every character."""
        delimiters = DelimiterSet()
        delimiters.apply_declaration("|^,\\#~")

        assert delimiters.as_declaration() == "|^,\\#~"
        assert delimiters.escapable == frozenset("\\^|~")

    def test_short_declaration_keeps_trailing_defaults(self):
        """Test that a short declaration only replaces leading characters."""
        delimiters = DelimiterSet()
        delimiters.apply_declaration("|^")

        assert delimiters.component_separator == "|"
        assert delimiters.data_separator == "^"
        assert delimiters.decimal_notation == "."
        assert delimiters.release_character == "?"
        assert delimiters.repetition_character == "*"
        assert delimiters.segment_terminator == "'"
        assert delimiters.state is ConfigState.SET

    def test_extra_characters_ignored(self):
        """Test that characters past the sixth are ignored."""
        delimiters = DelimiterSet()
        delimiters.apply_declaration(":+,? 'UNB")

        assert delimiters.as_declaration() == ":+,? '"

    def test_applied_once(self):
        """Test that a second declaration is ignored."""
        delimiters = DelimiterSet()
        delimiters.apply_declaration(":+.? '")

        assert delimiters.apply_declaration("|^,\\#~") is False
        assert delimiters.as_declaration() == ":+.? '"

    def test_empty_declaration_ignored(self):
        """Test that an empty declaration leaves the defaults open."""
        delimiters = DelimiterSet()

        assert delimiters.apply_declaration("") is False
        assert delimiters.state is ConfigState.UNSET


class TestEscape:
    """Test escaping values with the release character."""

    def test_escape_structural_characters(self):
        """Test that separators, terminator and release are escaped."""
        assert DelimiterSet().escape("10+10") == "10?+10"
        assert DelimiterSet().escape("it's a:b?") == "it?'s a?:b??"

    def test_escape_leaves_other_characters(self):
        """Test that ordinary characters are left alone."""
        assert DelimiterSet().escape("ORDERS 1.5*2") == "ORDERS 1.5*2"

    def test_escape_uses_declared_characters(self):
        """Test escaping with declared delimiters."""
        delimiters = DelimiterSet()
        delimiters.apply_declaration("|^,\\#~")

        assert delimiters.escape("a^b~") == "a\\^b\\~"

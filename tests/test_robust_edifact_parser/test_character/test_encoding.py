"""Tests for syntax identifier profiles and the per-parse selection."""

import pytest

from robust_edifact_parser.character.delimiters import ConfigState
from robust_edifact_parser.character.encoding import (
    CUSTOM_IDENTIFIER,
    DEFAULT_REGISTRY,
    EncodingProfile,
    EncodingRegistry,
    EncodingSelection,
)


class TestEncodingProfile:
    """Test the sanitization behaviour of individual profiles."""

    def test_level_a_strips_high_and_control_characters(self):
        """Test that UNOA removes control characters and anything above 0x7E."""
        profile = DEFAULT_REGISTRY.lookup("UNOA")

        assert profile.sanitize("caf\xe9\x01 ok") == "caf ok"
        assert profile.sanitize("PLAIN TEXT 123") == "PLAIN TEXT 123"

    def test_unob_matches_unoa(self):
        """Test that UNOB uses the same repertoire rule as UNOA."""
        unoa = DEFAULT_REGISTRY.lookup("UNOA")
        unob = DEFAULT_REGISTRY.lookup("UNOB")

        assert unoa.sanitize("a\x7fb\xffc") == unob.sanitize("a\x7fb\xffc") == "abc"

    def test_iso_8859_profiles_keep_latin_letters(self):
        """Test that UNOC keeps Latin-1 letters but removes C1 controls."""
        profile = DEFAULT_REGISTRY.lookup("UNOC")

        assert profile.sanitize("caf\xe9") == "caf\xe9"
        assert profile.sanitize("a\x85b\xa0c") == "abc"

    def test_unicode_profile_is_permissive(self):
        """Test that UNOW only removes control characters."""
        profile = DEFAULT_REGISTRY.lookup("UNOW")

        assert profile.sanitize("Gr\xfc\xdfe €\x1f") == "Gr\xfc\xdfe €"

    def test_from_pattern(self):
        """Test building a profile from a pattern string."""
        profile = EncodingProfile.from_pattern("DIGITS", r"[0-9]")

        assert profile.sanitize("a1b2") == "ab"


class TestEncodingRegistry:
    """Test the immutable identifier lookup."""

    def test_lookup_is_case_insensitive(self):
        """Test that identifiers are normalized on lookup."""
        assert DEFAULT_REGISTRY.lookup(" unob ").identifier == "UNOB"

    def test_unknown_identifier(self):
        """Test that unknown identifiers are not found."""
        assert DEFAULT_REGISTRY.lookup("XXXX") is None
        assert DEFAULT_REGISTRY.lookup("UNOK") is not None

    def test_permissive_profile(self):
        """Test the permissive default profile."""
        assert DEFAULT_REGISTRY.permissive.identifier == "UNOW"

    def test_registered_identifiers(self):
        """Test that every supported syntax identifier has a profile."""
        for identifier in ("UNOA", "UNOB", "UNOC", "UNOK", "UNOW", "UNOY"):
            assert DEFAULT_REGISTRY.lookup(identifier).identifier == identifier

    def test_missing_permissive_profile(self):
        """Test that a registry must contain its permissive profile."""
        with pytest.raises(ValueError, match="Permissive profile"):
            EncodingRegistry([EncodingProfile.from_pattern("UNOA", r"[\x80-\xff]")])


class TestEncodingSelection:
    """Test the one-shot per-parse profile selection."""

    def test_starts_permissive(self):
        """Test the initial state of a selection."""
        selection = EncodingSelection()

        assert selection.profile.identifier == "UNOW"
        assert selection.is_selected is False
        assert selection.declared_identifier is None

    def test_select_known_identifier(self):
        """Test selecting a registered profile."""
        selection = EncodingSelection()

        assert selection.select("UNOA") is True
        assert selection.profile.identifier == "UNOA"
        assert selection.declared_identifier == "UNOA"
        assert selection.state is ConfigState.SET

    def test_select_only_once(self):
        """Test that the selection is fixed after the first call."""
        selection = EncodingSelection()
        selection.select("UNOA")

        assert selection.select("UNOC") is False
        assert selection.profile.identifier == "UNOA"

    def test_unknown_identifier_keeps_profile(self):
        """Test that an unknown identifier fixes the selection without a profile change."""
        selection = EncodingSelection()

        assert selection.select("ABCD") is True
        assert selection.profile.identifier == "UNOW"
        assert selection.declared_identifier == "ABCD"
        assert selection.select("UNOA") is False

    def test_custom_pattern_is_pinned(self):
        """Test that a custom pattern survives a declared identifier."""
        selection = EncodingSelection.with_custom_pattern(r"[#]")
        selection.select("UNOA")

        assert selection.profile.identifier == CUSTOM_IDENTIFIER
        assert selection.declared_identifier == "UNOA"
        assert selection.sanitize("a#b\xe9") == "ab\xe9"

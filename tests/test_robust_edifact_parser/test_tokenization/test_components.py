"""Tests for splitting data elements into scalars and composites."""

from robust_edifact_parser.character.delimiters import DelimiterSet
from robust_edifact_parser.tokenization.components import ComponentSplitter
from robust_edifact_parser.tokenization.elements import Composite, Scalar


class TestComponentSplitter:
    """Test ComponentSplitter."""

    def test_scalar(self):
        """Test an element without component separators."""
        assert ComponentSplitter(DelimiterSet()).split("ORDERS") == Scalar("ORDERS")

    def test_escaped_data_separator(self):
        """Test that an escaped data separator is unescaped."""
        assert ComponentSplitter(DelimiterSet()).split("10?+10") == Scalar("10+10")

    def test_composite(self):
        """Test an element with components."""
        element = ComponentSplitter(DelimiterSet()).split("A:B:C")

        assert element == Composite(("A", "B", "C"))
        assert element.is_composite is True

    def test_escaped_component_separator_is_scalar(self):
        """Test that a single component after unescaping is a Scalar."""
        assert ComponentSplitter(DelimiterSet()).split("12?:30") == Scalar("12:30")

    def test_empty_components_kept(self):
        """Test that empty components keep their position."""
        element = ComponentSplitter(DelimiterSet()).split("A::C:")

        assert element.components == ("A", "", "C", "")

    def test_empty_element(self):
        """Test an empty element."""
        assert ComponentSplitter(DelimiterSet()).split("") == Scalar("")

    def test_components_are_unescaped(self):
        """Test that each component is unescaped separately."""
        element = ComponentSplitter(DelimiterSet()).split("a?+b:c?:d:e??")

        assert element == Composite(("a+b", "c:d", "e?"))

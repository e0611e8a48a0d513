"""Splitting of a raw data element into a scalar or a composite."""

from robust_edifact_parser.character.delimiters import DelimiterSet

from .elements import Element, Scalar, make_element
from .scanner import EscapeScanner


class ComponentSplitter:
    """Turns one raw data element into a :class:`Scalar` or :class:`Composite`.

    Component separators escaped by a release character are data. Every
    resulting value is unescaped; a split that yields a single piece is
    returned as a Scalar.
    """

    def __init__(self, delimiters: DelimiterSet) -> None:
        self.delimiters = delimiters
        self.scanner = EscapeScanner(delimiters)

    def split(self, raw: str) -> Element:
        if raw == "":
            return Scalar("")

        separator = self.delimiters.component_separator
        if separator not in raw:
            return Scalar(self.scanner.unescape(raw))

        pieces = self.scanner.split(raw, separator)
        return make_element([self.scanner.unescape(piece) for piece in pieces])

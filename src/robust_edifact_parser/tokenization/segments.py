"""Splitting of one segment string into its tag and data elements.

Data separators escaped by a single release character are data. Every raw
element is audited before it is split into components: an unescaped segment
terminator, or a release character that does not precede a release
character, separator or terminator, is recorded as a WARNING diagnostic and
the element is still parsed.
"""

from typing import List

from robust_edifact_parser.character.delimiters import DelimiterSet
from robust_edifact_parser.character.sanitization import TRIM_CHARACTERS
from robust_edifact_parser.shared.result import DiagnosticLog

from .components import ComponentSplitter
from .elements import Element, Segment
from .scanner import EscapeScanner

TAG_LENGTH = 3


class SegmentSplitter:
    """Splits segment strings into :class:`Segment` objects."""

    component = "segment_splitter"

    def __init__(
        self,
        delimiters: DelimiterSet,
        diagnostics: DiagnosticLog,
        strict_tag_length: bool = False
    ) -> None:
        self.delimiters = delimiters
        self.diagnostics = diagnostics
        self.strict_tag_length = strict_tag_length
        self.scanner = EscapeScanner(delimiters)
        self.components = ComponentSplitter(delimiters)

    def split(self, segment: str, line_number: int) -> Segment:
        """Split one segment string (with or without its trailing terminator)."""
        body = self._strip_terminator(segment)
        raw_elements = self.scanner.split(body, self.delimiters.data_separator)

        for raw in raw_elements:
            if raw:
                self._audit(raw, body, line_number)

        tag = self.scanner.unescape(raw_elements[0])
        if self.strict_tag_length and len(tag) != TAG_LENGTH:
            self.diagnostics.warning(
                f"Segment tag {tag!r} on line {line_number} is not {TAG_LENGTH} characters",
                self.component,
                line_number=line_number,
                details={"tag": tag}
            )

        elements: List[Element] = [
            self.components.split(raw) for raw in raw_elements[1:]
        ]
        return Segment(tag=tag, elements=tuple(elements), line_number=line_number)

    def _strip_terminator(self, segment: str) -> str:
        terminator = self.delimiters.segment_terminator
        if segment.endswith(terminator):
            segment = segment[:-len(terminator)]
        return segment.strip(TRIM_CHARACTERS)

    def _audit(self, raw: str, body: str, line_number: int) -> None:
        audit = self.scanner.audit(raw)
        if audit.is_clean:
            return

        if audit.unescaped_terminator:
            terminator = self.delimiters.segment_terminator
            self.diagnostics.warning(
                f"There's a {terminator} not escaped in the data on line "
                f"{line_number}; string {body}",
                self.component,
                line_number=line_number,
                details={"kind": "unescaped_terminator", "element": raw}
            )

        if audit.dangling_release:
            release = self.delimiters.release_character
            self.diagnostics.warning(
                f"There's a character not escaped with {release} in the data on line "
                f"{line_number}; string {raw}",
                self.component,
                line_number=line_number,
                details={"kind": "dangling_release", "element": raw}
            )

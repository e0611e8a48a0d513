"""Splitting of a raw interchange into segment strings.

A segment terminator ends a segment unless it is preceded by an odd number
of consecutive release characters: ``?'`` is an escaped terminator while
``??'`` is a literal release character followed by a structural terminator.
Every returned segment string ends with the terminator in effect.
"""

import logging
from typing import List, Optional

from robust_edifact_parser.character.delimiters import DECLARATION_LENGTH, DelimiterSet
from robust_edifact_parser.character.encoding import EncodingSelection
from robust_edifact_parser.character.sanitization import TRIM_CHARACTERS

logger = logging.getLogger(__name__)

SERVICE_STRING_TAG = "UNA"
INTERCHANGE_HEADER_TAG = "UNB"
TAG_LENGTH = 3
# "UNA" followed by the six service characters
SERVICE_STRING_LENGTH = TAG_LENGTH + DECLARATION_LENGTH


class Unwrapper:
    """Splits interchange text into raw segment strings.

    Before splitting, a leading UNA applies its service characters and a
    leading UNB selects its syntax identifier, so the split itself already
    uses the declared terminator and release character.
    """

    def __init__(self, delimiters: DelimiterSet, encoding: EncodingSelection) -> None:
        self.delimiters = delimiters
        self.encoding = encoding

    def unwrap(self, text: str) -> List[str]:
        """Split ``text`` into segment strings, dropping blank ones."""
        segments: List[str] = []
        start = 0

        if text.startswith(SERVICE_STRING_TAG) and not self.delimiters.is_declared:
            self.delimiters.apply_declaration(text[TAG_LENGTH:SERVICE_STRING_LENGTH])
            if len(text) >= SERVICE_STRING_LENGTH:
                segments.append(text[:SERVICE_STRING_LENGTH])
                start = SERVICE_STRING_LENGTH

        if text.startswith(INTERCHANGE_HEADER_TAG) and not self.encoding.is_selected:
            identifier = self._leading_syntax_identifier(text)
            if identifier:
                self.encoding.select(identifier)

        segments.extend(self._split(text[start:]))

        logger.debug(
            "Interchange unwrapped",
            extra={"component": "unwrapper", "segment_count": len(segments)}
        )
        return segments

    def _split(self, text: str) -> List[str]:
        release = self.delimiters.release_character
        terminator = self.delimiters.segment_terminator

        pieces: List[str] = []
        current: List[str] = []
        release_run = 0

        for character in text:
            if character == terminator and release_run % 2 == 0:
                pieces.append("".join(current))
                current = []
                release_run = 0
                continue

            current.append(character)
            release_run = release_run + 1 if character == release else 0

        pieces.append("".join(current))

        return [
            piece + terminator
            for piece in pieces
            if piece.strip(TRIM_CHARACTERS)
        ]

    def _leading_syntax_identifier(self, text: str) -> Optional[str]:
        """Read the first component of the first UNB element, unescaped."""
        delimiters = self.delimiters
        rest = text[TAG_LENGTH:]
        if rest.startswith(delimiters.data_separator):
            rest = rest[1:]

        stops = (
            delimiters.component_separator,
            delimiters.data_separator,
            delimiters.segment_terminator,
        )
        identifier: List[str] = []
        for character in rest:
            if character in stops:
                break
            identifier.append(character)

        return "".join(identifier).strip() or None

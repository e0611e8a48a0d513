"""Line-level sanitization applied before a segment is tokenized."""

import logging
from typing import Optional

from robust_edifact_parser.shared.result import DiagnosticLog

from .encoding import EncodingSelection

logger = logging.getLogger(__name__)

# Characters removed anywhere in a line before any other processing
LINE_NOISE = ("\x00", "\r", "\n")
# Characters trimmed from both ends of a line
TRIM_CHARACTERS = " \t\n\r\x00\x0b"
MIN_LINE_LENGTH = 2


def strip_line_noise(line: str) -> str:
    """Remove NUL bytes and line terminators."""
    for character in LINE_NOISE:
        line = line.replace(character, "")
    return line


class LineSanitizer:
    """Trims lines and removes code points invalid for the active profile.

    The active profile is read from the shared :class:`EncodingSelection` on
    every call, so a selection made by the interchange header applies to all
    lines that follow it.
    """

    component = "sanitizer"

    def __init__(
        self,
        encoding: EncodingSelection,
        diagnostics: DiagnosticLog,
        bypass: bool = False
    ) -> None:
        self.encoding = encoding
        self.diagnostics = diagnostics
        self.bypass = bypass

    def sanitize(self, line: str, line_number: int) -> Optional[str]:
        """Clean one raw line.

        Returns:
            The cleaned line, or None when it is too short to hold a segment.
        """
        line = strip_line_noise(line)

        if not self.bypass:
            trimmed = line.strip(TRIM_CHARACTERS)
            fixed = self.encoding.sanitize(trimmed)
            if len(fixed) != len(trimmed):
                self.diagnostics.warning(
                    f"There's a non printable character on line {line_number}: {trimmed}",
                    self.component,
                    line_number=line_number,
                    details={
                        "profile": self.encoding.profile.identifier,
                        "removed": len(trimmed) - len(fixed),
                    }
                )
            line = fixed

        if len(line) < MIN_LINE_LENGTH:
            logger.debug("Skipping line %d shorter than a segment", line_number)
            return None
        return line

"""Single-pass scanner implementing the EDIFACT release character rules.

Inside a segment a release character escapes exactly the character that
follows it, so a doubled release character is one literal release character
and does not escape anything after it. The scanner walks the text once,
carrying only whether the previous character was an unconsumed release
character; there is no backtracking.
"""

from dataclasses import dataclass
from typing import List

from robust_edifact_parser.character.delimiters import DelimiterSet


@dataclass(frozen=True)
class EscapeAudit:
    """Structural problems found in one raw data element."""

    unescaped_terminator: bool = False
    dangling_release: bool = False

    @property
    def is_clean(self) -> bool:
        return not (self.unescaped_terminator or self.dangling_release)


class EscapeScanner:
    """Escape-aware splitting, unescaping and auditing for one delimiter set.

    The delimiter set is read on every call, so a scanner created before the
    service string advice was applied sees the declared characters.
    """

    def __init__(self, delimiters: DelimiterSet) -> None:
        self.delimiters = delimiters

    def split(self, text: str, separator: str) -> List[str]:
        """Split ``text`` on every ``separator`` not escaped by a release character.

        Pieces keep their release characters; unescaping is a separate step.
        """
        release = self.delimiters.release_character
        pieces: List[str] = []
        current: List[str] = []
        escaped = False

        for character in text:
            if escaped:
                current.append(character)
                escaped = False
            elif character == release:
                current.append(character)
                escaped = True
            elif character == separator:
                pieces.append("".join(current))
                current = []
            else:
                current.append(character)

        pieces.append("".join(current))
        return pieces

    def contains_unescaped(self, text: str, target: str) -> bool:
        """Check whether ``target`` occurs in ``text`` without a release character."""
        release = self.delimiters.release_character
        escaped = False
        for character in text:
            if escaped:
                escaped = False
            elif character == release:
                escaped = True
            elif character == target:
                return True
        return False

    def unescape(self, text: str) -> str:
        """Resolve escapes in a final value.

        A release character is dropped when it precedes a release character,
        data separator, component separator or segment terminator; any other
        release character is kept literally.
        """
        release = self.delimiters.release_character
        if release not in text:
            return text

        escapable = self.delimiters.escapable
        result: List[str] = []
        index = 0
        length = len(text)
        while index < length:
            character = text[index]
            if (
                character == release
                and index + 1 < length
                and text[index + 1] in escapable
            ):
                result.append(text[index + 1])
                index += 2
            else:
                result.append(character)
                index += 1
        return "".join(result)

    def audit(self, text: str) -> EscapeAudit:
        """Find unescaped terminators and dangling release characters in ``text``."""
        release = self.delimiters.release_character
        terminator = self.delimiters.segment_terminator
        escapable = self.delimiters.escapable

        unescaped_terminator = False
        dangling_release = False
        index = 0
        length = len(text)
        while index < length:
            character = text[index]
            if character == release:
                if index + 1 < length and text[index + 1] in escapable:
                    index += 2
                    continue
                dangling_release = True
            elif character == terminator:
                unescaped_terminator = True
            index += 1

        return EscapeAudit(unescaped_terminator, dangling_release)

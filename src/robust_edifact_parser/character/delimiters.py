"""Service string advice (UNA) handling and the per-parse delimiter set.

An interchange may open with a UNA pseudo-segment declaring the six service
characters it uses. Until such a declaration is seen, the EDIFACT defaults
``:+.?*'`` apply. The override happens at most once per parse.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import FrozenSet, Tuple

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT_SEPARATOR = ":"
DEFAULT_DATA_SEPARATOR = "+"
DEFAULT_DECIMAL_NOTATION = "."
DEFAULT_RELEASE_CHARACTER = "?"
DEFAULT_REPETITION_CHARACTER = "*"
DEFAULT_SEGMENT_TERMINATOR = "'"

# Positional order of the characters in a UNA declaration
DECLARATION_FIELDS: Tuple[str, ...] = (
    "component_separator",
    "data_separator",
    "decimal_notation",
    "release_character",
    "repetition_character",
    "segment_terminator",
)
DECLARATION_LENGTH = len(DECLARATION_FIELDS)


class ConfigState(Enum):
    """Whether a self-declared configuration value has been fixed for the parse."""

    UNSET = auto()  # Defaults in effect, declaration still accepted
    SET = auto()    # Declaration applied, later declarations ignored


@dataclass
class DelimiterSet:
    """The six service characters in effect for one parse."""

    component_separator: str = DEFAULT_COMPONENT_SEPARATOR
    data_separator: str = DEFAULT_DATA_SEPARATOR
    decimal_notation: str = DEFAULT_DECIMAL_NOTATION
    release_character: str = DEFAULT_RELEASE_CHARACTER
    repetition_character: str = DEFAULT_REPETITION_CHARACTER
    segment_terminator: str = DEFAULT_SEGMENT_TERMINATOR
    state: ConfigState = ConfigState.UNSET

    def __post_init__(self) -> None:
        """Validate that every service character is a single code point."""
        for name in DECLARATION_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str) or len(value) != 1:
                raise ValueError(f"{name} must be a single character, got {value!r}")

    @classmethod
    def with_defaults(cls) -> "DelimiterSet":
        """Return the EDIFACT standard delimiters, open for one declaration."""
        return cls()

    @property
    def is_declared(self) -> bool:
        """True once a UNA declaration has been applied."""
        return self.state is ConfigState.SET

    @property
    def escapable(self) -> FrozenSet[str]:
        """Characters a release character may legitimately precede."""
        return frozenset((
            self.release_character,
            self.data_separator,
            self.component_separator,
            self.segment_terminator,
        ))

    def apply_declaration(self, declaration: str) -> bool:
        """Apply a UNA service string advice.

        Up to six leading code points are read positionally; a short
        declaration leaves the trailing characters at their current values.

        Args:
            declaration: Text following the ``UNA`` tag

        Returns:
            True if the declaration was applied, False if it was ignored
            because a declaration is already in effect or it is empty.
        """
        if self.state is ConfigState.SET:
            logger.debug("Ignoring repeated service string advice")
            return False

        characters = declaration[:DECLARATION_LENGTH]
        if not characters:
            return False

        for name, character in zip(DECLARATION_FIELDS, characters):
            setattr(self, name, character)
        self.state = ConfigState.SET

        logger.debug(
            "Service string advice applied",
            extra={"component": "delimiters", "declaration": self.as_declaration()}
        )
        return True

    def as_declaration(self) -> str:
        """Render the six characters in UNA order."""
        return "".join(getattr(self, name) for name in DECLARATION_FIELDS)

    def escape(self, value: str) -> str:
        """Prefix every structurally significant character with the release character."""
        escapable = self.escapable
        return "".join(
            self.release_character + character if character in escapable else character
            for character in value
        )

"""Syntax identifier profiles used to sanitize interchange lines.

The UNB interchange header names a syntax identifier (``UNOA``, ``UNOB``,
``UNOC`` ...) that fixes the character repertoire of the interchange. Each
profile here maps such an identifier to the set of code points that are not
valid for it; the sanitization pass removes those code points.

The registry is immutable and may be shared between parses. The choice of
profile for one interchange lives in an :class:`EncodingSelection`, owned by
that parse.
"""

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Pattern

from .delimiters import ConfigState

logger = logging.getLogger(__name__)

# Control characters plus everything above 7-bit ASCII
LEVEL_AB_INVALID = r"[\x01-\x1F\x7F-\xFF]"
# Control characters, DEL and the C1 range of the ISO 8859 family
ISO_8859_INVALID = r"[\x01-\x1F\x7F-\xA0]"
# Control characters and DEL only
UNICODE_INVALID = r"[\x01-\x1F\x7F]"

ISO_8859_IDENTIFIERS = (
    "UNOC", "UNOD", "UNOE", "UNOF", "UNOG", "UNOH", "UNOI", "UNOJ", "UNOK",
)
UNICODE_IDENTIFIERS = ("UNOW", "UNOY")

PERMISSIVE_IDENTIFIER = "UNOW"
CUSTOM_IDENTIFIER = "CUSTOM"


@dataclass(frozen=True)
class EncodingProfile:
    """A syntax identifier and the code points that are invalid for it."""

    identifier: str
    invalid_pattern: Pattern[str]
    description: str = ""

    @classmethod
    def from_pattern(
        cls,
        identifier: str,
        pattern: str,
        description: str = ""
    ) -> "EncodingProfile":
        """Build a profile from a regular expression source string."""
        return cls(identifier, re.compile(pattern), description)

    def sanitize(self, text: str) -> str:
        """Remove every code point that is invalid for this profile."""
        return self.invalid_pattern.sub("", text)


class EncodingRegistry:
    """Immutable lookup of syntax identifiers to sanitization profiles."""

    def __init__(
        self,
        profiles: Iterable[EncodingProfile],
        permissive_identifier: str = PERMISSIVE_IDENTIFIER
    ) -> None:
        table: Dict[str, EncodingProfile] = {
            profile.identifier: profile for profile in profiles
        }
        if permissive_identifier not in table:
            raise ValueError(
                f"Permissive profile {permissive_identifier!r} is not registered"
            )
        self._profiles: Mapping[str, EncodingProfile] = MappingProxyType(table)
        self._permissive_identifier = permissive_identifier

    @property
    def permissive(self) -> EncodingProfile:
        """The most permissive profile, used until an identifier is declared."""
        return self._profiles[self._permissive_identifier]

    def lookup(self, identifier: str) -> Optional[EncodingProfile]:
        """Return the profile registered for ``identifier``, if any."""
        return self._profiles.get(identifier.strip().upper())


def _build_default_registry() -> EncodingRegistry:
    profiles = [
        EncodingProfile.from_pattern("UNOA", LEVEL_AB_INVALID, "Level A, 7-bit"),
        EncodingProfile.from_pattern("UNOB", LEVEL_AB_INVALID, "Level B, 7-bit"),
    ]
    profiles.extend(
        EncodingProfile.from_pattern(identifier, ISO_8859_INVALID, "ISO 8859 family")
        for identifier in ISO_8859_IDENTIFIERS
    )
    profiles.extend(
        EncodingProfile.from_pattern(identifier, UNICODE_INVALID, "ISO 10646")
        for identifier in UNICODE_IDENTIFIERS
    )
    return EncodingRegistry(profiles)


DEFAULT_REGISTRY = _build_default_registry()


class EncodingSelection:
    """The sanitization profile chosen for one parse.

    Starts on ``initial`` (the registry's permissive profile unless
    configured otherwise) and accepts exactly one selection from the
    interchange header. Unknown identifiers are accepted input: they fix the
    selection without changing the active profile.
    """

    def __init__(
        self,
        registry: EncodingRegistry = DEFAULT_REGISTRY,
        initial: Optional[EncodingProfile] = None,
        pinned: bool = False
    ) -> None:
        self.registry = registry
        self.profile = initial or registry.permissive
        self.declared_identifier: Optional[str] = None
        self.state = ConfigState.UNSET
        # A pinned profile (custom strip pattern) survives declarations
        self._pinned = pinned

    @classmethod
    def with_custom_pattern(
        cls,
        pattern: str,
        registry: EncodingRegistry = DEFAULT_REGISTRY
    ) -> "EncodingSelection":
        """Selection whose sanitization always uses ``pattern``."""
        profile = EncodingProfile.from_pattern(CUSTOM_IDENTIFIER, pattern)
        return cls(registry, initial=profile, pinned=True)

    @property
    def is_selected(self) -> bool:
        return self.state is ConfigState.SET

    def select(self, identifier: str) -> bool:
        """Select the profile for the declared syntax identifier.

        Returns:
            True if this call fixed the selection, False if a selection was
            already in effect.
        """
        if self.state is ConfigState.SET:
            return False

        self.declared_identifier = identifier
        self.state = ConfigState.SET

        profile = self.registry.lookup(identifier)
        if profile is None:
            logger.debug(
                "Unrecognized syntax identifier, keeping active profile",
                extra={"identifier": identifier, "profile": self.profile.identifier}
            )
        elif not self._pinned:
            self.profile = profile
        return True

    def sanitize(self, text: str) -> str:
        """Sanitize ``text`` with the active profile."""
        return self.profile.sanitize(text)

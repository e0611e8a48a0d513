"""One-shot analysis of the UNA, UNB and UNH service segments.

Each of the three transitions happens at most once per parse:

- UNA, only as the first line, applies the service string advice.
- UNB selects the sanitization profile from its syntax identifier.
- UNH records the message type and directory of the interchange.
"""

from dataclasses import dataclass
from typing import Optional

from robust_edifact_parser.character.delimiters import ConfigState, DelimiterSet
from robust_edifact_parser.character.encoding import EncodingSelection
from robust_edifact_parser.shared.logging import get_logger
from robust_edifact_parser.tokenization.elements import Segment

SERVICE_STRING_TAG = "UNA"
INTERCHANGE_HEADER_TAG = "UNB"
MESSAGE_HEADER_TAG = "UNH"
SERVICE_TAGS = (SERVICE_STRING_TAG, INTERCHANGE_HEADER_TAG, MESSAGE_HEADER_TAG)

# Elements after the tag needed before UNH carries a message identifier
MESSAGE_HEADER_MIN_ELEMENTS = 2
MESSAGE_IDENTIFIER_INDEX = 1

# Component positions within the UNH message identifier (S009)
MESSAGE_TYPE_COMPONENT = 0
MESSAGE_VERSION_COMPONENT = 1
MESSAGE_RELEASE_COMPONENT = 2
CONTROLLING_AGENCY_COMPONENT = 3


@dataclass
class MessageMetadata:
    """Message identification recorded from the first usable UNH."""

    message_format: Optional[str] = None
    message_directory: Optional[str] = None
    message_reference: Optional[str] = None
    message_version: Optional[str] = None
    controlling_agency: Optional[str] = None
    state: ConfigState = ConfigState.UNSET


class InterchangeAnalyzer:
    """State machine over the three service segment tags."""

    def __init__(
        self,
        delimiters: DelimiterSet,
        encoding: EncodingSelection,
        correlation_id: Optional[str] = None
    ) -> None:
        self.delimiters = delimiters
        self.encoding = encoding
        self.metadata = MessageMetadata()
        self.logger = get_logger(__name__, correlation_id, "interchange_analyzer")

    def analyse_service_string(self, line: str, is_first_line: bool) -> bool:
        """Apply a UNA line's service characters if it opens the interchange.

        Args:
            line: Sanitized line starting with ``UNA``
            is_first_line: Whether no other segment precedes this line

        Returns:
            True if the declaration was applied by this call
        """
        if not is_first_line:
            self.logger.debug("Ignoring UNA that is not the first segment")
            return False
        return self.delimiters.apply_declaration(line[len(SERVICE_STRING_TAG):])

    def analyse_interchange_header(self, segment: Segment) -> bool:
        """Select the sanitization profile from the UNB syntax identifier."""
        if self.encoding.is_selected:
            return False

        syntax = segment.element(0)
        if syntax is None:
            return False

        identifier = syntax.component(0) or ""
        if not identifier:
            return False

        selected = self.encoding.select(identifier)
        self.logger.debug(
            "Syntax identifier analysed",
            extra={
                "identifier": identifier,
                "profile": self.encoding.profile.identifier,
            }
        )
        return selected

    def analyse_message_header(self, segment: Segment) -> bool:
        """Record message type and directory from a UNH segment.

        A UNH with fewer than two data elements after its tag carries no
        message identifier and leaves the metadata untouched.
        """
        metadata = self.metadata
        if metadata.state is ConfigState.SET:
            return False
        if len(segment.elements) < MESSAGE_HEADER_MIN_ELEMENTS:
            return False

        reference = segment.element(0)
        identifier = segment.elements[MESSAGE_IDENTIFIER_INDEX]

        metadata.message_reference = reference.value if reference is not None else None
        metadata.message_format = identifier.component(MESSAGE_TYPE_COMPONENT)
        if identifier.is_composite:
            metadata.message_version = identifier.component(MESSAGE_VERSION_COMPONENT)
            metadata.message_directory = identifier.component(MESSAGE_RELEASE_COMPONENT)
            metadata.controlling_agency = identifier.component(
                CONTROLLING_AGENCY_COMPONENT
            )
        metadata.state = ConfigState.SET

        self.logger.debug(
            "Message header analysed",
            extra={
                "message_format": metadata.message_format,
                "message_directory": metadata.message_directory,
            }
        )
        return True

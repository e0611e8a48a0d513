"""Parsed interchange and the configuration discovered while parsing it."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from robust_edifact_parser.character.delimiters import DelimiterSet
from robust_edifact_parser.character.encoding import DEFAULT_REGISTRY, EncodingProfile
from robust_edifact_parser.tokenization.elements import Segment


@dataclass
class Interchange:
    """Ordered segments plus message metadata and the delimiters/profile in effect."""

    segments: List[Segment] = field(default_factory=list)
    message_format: Optional[str] = None
    message_directory: Optional[str] = None
    message_reference: Optional[str] = None
    message_version: Optional[str] = None
    controlling_agency: Optional[str] = None
    syntax_identifier: Optional[str] = None
    delimiters: DelimiterSet = field(default_factory=DelimiterSet.with_defaults)
    encoding: EncodingProfile = field(default_factory=lambda: DEFAULT_REGISTRY.permissive)
    raw_segments: List[str] = field(default_factory=list)

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    def get_segments(self, tag: str) -> List[Segment]:
        """All segments carrying ``tag``, in interchange order."""
        return [segment for segment in self.segments if segment.tag == tag]

    def first_segment(self, tag: str) -> Optional[Segment]:
        """The first segment carrying ``tag``, if any."""
        for segment in self.segments:
            if segment.tag == tag:
                return segment
        return None

    def to_python(self) -> List[List[Any]]:
        """Plain nested lists, one per segment."""
        return [segment.to_python() for segment in self.segments]

    def to_dict(self) -> Dict[str, Any]:
        """Summary and content as JSON-compatible data."""
        return {
            "message_format": self.message_format,
            "message_directory": self.message_directory,
            "message_reference": self.message_reference,
            "message_version": self.message_version,
            "controlling_agency": self.controlling_agency,
            "syntax_identifier": self.syntax_identifier,
            "encoding_profile": self.encoding.identifier,
            "delimiters": self.delimiters.as_declaration(),
            "segments": self.to_python(),
        }

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

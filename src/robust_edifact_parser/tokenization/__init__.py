"""Escape-aware tokenization of EDIFACT interchanges.

Raw text is unwrapped into segment strings, each segment string is split
into a tag and data elements, and each data element into a scalar or a
composite of components.
"""

from .components import ComponentSplitter
from .elements import Composite, Element, Scalar, Segment, make_element
from .scanner import EscapeAudit, EscapeScanner
from .segments import SegmentSplitter
from .unwrapper import Unwrapper

__all__ = [
    "ComponentSplitter",
    "Composite",
    "Element",
    "EscapeAudit",
    "EscapeScanner",
    "Scalar",
    "Segment",
    "SegmentSplitter",
    "Unwrapper",
    "make_element",
]

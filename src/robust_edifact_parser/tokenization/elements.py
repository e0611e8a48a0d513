"""Segment and data element types produced by the tokenizer.

A segment is a tag plus an ordered sequence of data elements; a data
element is either a scalar value or a composite of component values.
"""

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class Scalar:
    """A simple data element holding one value."""

    value: str

    @property
    def is_composite(self) -> bool:
        return False

    @property
    def components(self) -> Tuple[str, ...]:
        return (self.value,)

    def component(self, index: int, default: Optional[str] = None) -> Optional[str]:
        """Return component ``index``; a scalar only has component 0."""
        return self.value if index == 0 else default

    def to_python(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Composite:
    """A composite data element holding two or more component values."""

    components: Tuple[str, ...]

    def __post_init__(self) -> None:
        """A single component must be represented as a Scalar."""
        if len(self.components) < 2:
            raise ValueError("Composite requires at least two components")

    @property
    def is_composite(self) -> bool:
        return True

    @property
    def value(self) -> str:
        """First component, the element's primary value."""
        return self.components[0]

    def component(self, index: int, default: Optional[str] = None) -> Optional[str]:
        """Return component ``index`` or ``default`` when absent."""
        if 0 <= index < len(self.components):
            return self.components[index]
        return default

    def to_python(self) -> List[str]:
        return list(self.components)

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self) -> Iterator[str]:
        return iter(self.components)


Element = Union[Scalar, Composite]


def make_element(components: Sequence[str]) -> Element:
    """Build an element, normalizing a single component to a Scalar."""
    if len(components) == 1:
        return Scalar(components[0])
    return Composite(tuple(components))


@dataclass(frozen=True)
class Segment:
    """A tagged segment and its data elements (tag excluded)."""

    tag: str
    elements: Tuple[Element, ...] = ()
    line_number: Optional[int] = None

    def element(self, index: int) -> Optional[Element]:
        """Return data element ``index`` (0 is the first after the tag)."""
        if 0 <= index < len(self.elements):
            return self.elements[index]
        return None

    def value(self, index: int, component: int = 0) -> Optional[str]:
        """Return one component value of data element ``index``."""
        element = self.element(index)
        if element is None:
            return None
        return element.component(component)

    def to_python(self) -> List[Any]:
        """Plain-data form: the tag followed by strings and lists of strings."""
        return [self.tag] + [element.to_python() for element in self.elements]

    def __len__(self) -> int:
        return len(self.elements)

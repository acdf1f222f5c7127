"""Data models for html-toc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class HeadingTier(Enum):
    """Tier of a heading inside the table of contents.

    Attributes:
        PRIMARY: Top-level section heading (``h2`` by default).
        SECONDARY: Subsection heading rendered indented (``h3`` by default).
    """

    PRIMARY = auto()
    SECONDARY = auto()


class Position(str, Enum):
    """Where the TOC fragment is merged relative to the content."""

    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"
    FLOAT_LEFT = "float_left"
    FLOAT_RIGHT = "float_right"

    @classmethod
    def is_known(cls, value: object) -> bool:
        if isinstance(value, cls):
            return True
        if not isinstance(value, str):
            return False
        return value.strip().lower() in {member.value for member in cls}

    @classmethod
    def resolve(cls, value: object) -> Position:
        """Return the position named by `value`, or `TOP` when it is missing or unknown.

        Examples:
            Position.resolve("Bottom")  # Position.BOTTOM
            Position.resolve("sideways")  # Position.TOP
            Position.resolve(None)  # Position.TOP
        """
        if isinstance(value, cls):
            return value
        if not cls.is_known(value):
            return cls.TOP
        return cls(value.strip().lower())

    @property
    def is_floating(self) -> bool:
        return self in (Position.FLOAT_LEFT, Position.FLOAT_RIGHT)


@dataclass(frozen=True)
class HeadingRecord:
    """A heading discovered in the content.

    Attributes:
        tier: Primary or secondary tier.
        text: Plain display text with markup stripped and whitespace trimmed.
        anchor_id: Unique, non-empty fragment identifier of the heading.
    """

    tier: HeadingTier
    text: str
    anchor_id: str


@dataclass
class ExtractResult:
    """Structured result of extracting headings from HTML content.

    Attributes:
        headings: Heading records in document order.
        content: Content with anchor ids written onto the headings. Equal to the
            input when no heading needed a new id.
    """

    headings: list[HeadingRecord]
    content: str


@dataclass
class TocFragment:
    """Rendered table of contents, built fresh for every render.

    Attributes:
        items: Headings linked from the fragment, in display order.
        position: Position the fragment is meant to be merged at.
        markup: HTML of the fragment; empty when there are no items.
    """

    items: list[HeadingRecord] = field(default_factory=list)
    position: Position = Position.TOP
    markup: str = ""

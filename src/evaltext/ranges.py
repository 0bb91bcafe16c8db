"""Host-document ranges, positions, and offset/line conversion."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class ContentRange:
    """Span of a literal's content inside the host document."""

    start_offset: int
    length: int

    def __post_init__(self) -> None:
        if self.start_offset < 0:
            raise ValueError(f"negative start offset: {self.start_offset}")
        if self.length < 0:
            raise ValueError(f"negative length: {self.length}")

    @classmethod
    def from_bounds(cls, start: int, end: int) -> ContentRange:
        """Build a range from absolute start and end offsets."""
        if end < start:
            raise ValueError(f"invalid range: end {end} before start {start}")
        return cls(start, end - start)

    @property
    def end_offset(self) -> int:
        return self.start_offset + self.length

    def contains_offset(self, offset: int) -> bool:
        return self.start_offset <= offset <= self.end_offset

    def contains_range(self, start: int, end: int) -> bool:
        """Return True if [start, end] lies fully inside this range."""
        return self.start_offset <= start and end <= self.end_offset

    def substring(self, text: str) -> str:
        return text[self.start_offset : self.end_offset]


def position_at(text: str, offset: int) -> Position:
    """Convert a 0-based offset in *text* to a Position.

    Offsets past the end are clamped to the end of the text.
    """
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return Position(line, offset - line_start + 1, offset)


def offset_at(text: str, line: int, column: int) -> int:
    """Convert a 1-based line and column to an offset in *text*.

    Columns past the end of the line are clamped to the line end.
    """
    line_start = 0
    for _ in range(line - 1):
        nl = text.find("\n", line_start)
        if nl < 0:
            return len(text)
        line_start = nl + 1
    line_end = text.find("\n", line_start)
    if line_end < 0:
        line_end = len(text)
    return min(line_start + max(column - 1, 0), line_end)

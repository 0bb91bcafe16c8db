"""Decode failure kinds and the error type with formatted source context."""

from __future__ import annotations

from enum import Enum

from evaltext.ranges import Position, position_at


class DecodeFailure(Enum):
    UNTERMINATED_ESCAPE = "unterminated escape sequence at end of string"
    MALFORMED_OCTAL = "malformed octal escape (expected \\0 followed by two octal digits)"


class DecodeError(Exception):
    """Raised when a literal cannot be decoded, with position and source context."""

    def __init__(
        self,
        failure: DecodeFailure,
        offset: int,
        source: str,
        length: int = 1,
    ) -> None:
        self.failure = failure
        self.message = failure.value
        self.offset = offset
        self.length = length
        self.source = source
        super().__init__(self.format())

    @property
    def position(self) -> Position:
        return position_at(self.source, self.offset)

    def format(self, filename: str = "<input>") -> str:
        position = self.position
        lines = self.source.splitlines(keepends=True)
        line_idx = position.line - 1
        col = position.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        # Underline the escape, but stay within the line
        underline_len = max(1, min(self.length, len(source_line) - col + 1))

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )

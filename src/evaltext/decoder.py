"""Escaped-text decoder for eval string literals.

Decodes the backslash escapes of a literal's content and records, for every
decoded character, the offset in the raw content that produced it. The offset
table has one entry more than the decoded text; the last entry points just past
the final decoded character.

Recognized escapes::

    \\n \\r \\t \\v \\b \\a      control characters
    \\$ \\" \\' \\\\          the character itself
    \\0NN                 two octal digits, one character

Any other escaped character is kept verbatim together with its backslash.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from evaltext.errors import DecodeError, DecodeFailure
from evaltext.ranges import ContentRange

logger = logging.getLogger(__name__)

# Offset table entry with no attributable source offset
UNKNOWN_OFFSET = -1

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\x0b",
    "b": "\b",
    "a": "\x07",
    "$": "$",
    '"': '"',
    "'": "'",
    "\\": "\\",
}

_OCTAL_DIGITS = frozenset("01234567")


@dataclass(frozen=True, slots=True)
class DecodeResult:
    """Outcome of one decode: text, offset table, and failure details.

    On failure ``text`` and ``offsets`` hold whatever was produced before the
    error and must not be used for mapping.
    """

    success: bool
    text: str
    offsets: tuple[int, ...]
    failure: DecodeFailure | None = None
    failure_offset: int | None = None

    def __bool__(self) -> bool:
        return self.success


class _Decoder:
    """Single left-to-right scan building output and offset table together."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._out: list[str] = []
        self._offsets = [UNKNOWN_OFFSET] * (len(source) + 1)

    def run(self) -> DecodeResult:
        source = self._source
        while self._pos < len(source):
            start = self._pos
            ch = source[self._pos]
            self._pos += 1

            # Bracket the unit: its start, and the offset after one raw char
            self._offsets[len(self._out)] = start
            self._offsets[len(self._out) + 1] = self._pos

            if ch != "\\":
                self._out.append(ch)
                continue

            if self._pos >= len(source):
                return self._fail(DecodeFailure.UNTERMINATED_ESCAPE, start)

            esc = source[self._pos]
            self._pos += 1

            if esc in _SIMPLE_ESCAPES:
                self._out.append(_SIMPLE_ESCAPES[esc])
            elif esc == "0":
                digits = source[self._pos : self._pos + 2]
                # TODO: accept the one to three digit form bash documents for \0nnn
                if len(digits) < 2 or not all(d in _OCTAL_DIGITS for d in digits):
                    return self._fail(DecodeFailure.MALFORMED_OCTAL, start)
                self._out.append(chr(int(digits, 8)))
                self._pos += 2
            else:
                self._out.append("\\")
                self._out.append(esc)

            self._offsets[len(self._out)] = self._pos

        text = "".join(self._out)
        return DecodeResult(True, text, tuple(self._offsets[: len(text) + 1]))

    def _fail(self, failure: DecodeFailure, offset: int) -> DecodeResult:
        logger.debug("decode failed at offset %d: %s", offset, failure.name)
        text = "".join(self._out)
        return DecodeResult(
            False,
            text,
            tuple(self._offsets[: len(text) + 1]),
            failure=failure,
            failure_offset=offset,
        )


def decode(source: str) -> DecodeResult:
    """Decode the escapes in *source* and build its offset table."""
    if "\\" not in source:
        return DecodeResult(True, source, tuple(range(len(source) + 1)))
    return _Decoder(source).run()


@dataclass(frozen=True, slots=True)
class OffsetMapper:
    """Maps offsets in decoded text back to offsets in the host document."""

    offsets: tuple[int, ...]
    content_range: ContentRange

    @classmethod
    def from_result(cls, result: DecodeResult, content_range: ContentRange) -> OffsetMapper:
        if not result.success:
            raise ValueError("cannot map offsets of a failed decode")
        return cls(result.offsets, content_range)

    def offset_in_host(self, decoded_offset: int) -> int:
        """Return the host offset for *decoded_offset*, or -1 if it has none.

        The result never points past the end of the content range.
        """
        if not 0 <= decoded_offset < len(self.offsets):
            return UNKNOWN_OFFSET
        source_offset = self.offsets[decoded_offset]
        if source_offset == UNKNOWN_OFFSET:
            return UNKNOWN_OFFSET
        return self.content_range.start_offset + min(source_offset, self.content_range.length)

    def range_in_host(self, start: int, end: int) -> ContentRange | None:
        """Map the decoded range [start, end) to a host range."""
        if start > end:
            return None
        host_start = self.offset_in_host(start)
        host_end = self.offset_in_host(end)
        if host_start == UNKNOWN_OFFSET or host_end == UNKNOWN_OFFSET:
            return None
        return ContentRange.from_bounds(host_start, host_end)

    def contains_range(self, start: int, end: int) -> bool:
        return self.content_range.contains_range(start, end)


class EscapedTextDecoder:
    """Decoder bound to one literal's content range in a host document.

    Offset queries answer -1 until a decode has succeeded.
    """

    def __init__(self, content_range: ContentRange) -> None:
        self._content_range = content_range
        self._result: DecodeResult | None = None
        self._mapper: OffsetMapper | None = None

    def decode(self, content: str) -> bool:
        result = decode(content)
        mapper = OffsetMapper.from_result(result, self._content_range) if result else None
        self._result, self._mapper = result, mapper
        return result.success

    @property
    def result(self) -> DecodeResult | None:
        return self._result

    @property
    def decoded_text(self) -> str | None:
        if self._result is None or not self._result.success:
            return None
        return self._result.text

    def get_offset_in_host(self, decoded_offset: int) -> int:
        if self._mapper is None:
            return UNKNOWN_OFFSET
        return self._mapper.offset_in_host(decoded_offset)

    def get_content_range(self) -> ContentRange:
        return self._content_range

    def contains_range(self, start: int, end: int) -> bool:
        return self._content_range.contains_range(start, end)


def decode_or_raise(
    source: str,
    content_range: ContentRange | None = None,
    document: str | None = None,
) -> tuple[str, OffsetMapper]:
    """Decode *source*, raising DecodeError on failure.

    *content_range* locates *source* inside *document*; both default to the
    source standing alone.
    """
    if content_range is None:
        content_range = ContentRange(0, len(source))
    if document is None:
        document = source

    result = decode(source)
    if not result.success:
        assert result.failure is not None and result.failure_offset is not None
        if result.failure == DecodeFailure.MALFORMED_OCTAL:
            length = min(4, len(source) - result.failure_offset)
        else:
            length = 1
        raise DecodeError(
            result.failure,
            content_range.start_offset + result.failure_offset,
            document,
            length,
        )
    return result.text, OffsetMapper.from_result(result, content_range)

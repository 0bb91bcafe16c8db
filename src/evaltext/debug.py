"""--debug offset table dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from evaltext.decoder import UNKNOWN_OFFSET, DecodeResult, OffsetMapper
from evaltext.ranges import ContentRange


def dump_offsets(
    result: DecodeResult,
    content_range: ContentRange | None = None,
    *,
    file: TextIO | None = None,
) -> None:
    """Print one row per decoded position: index, character, source and host offsets."""
    if file is None:
        file = sys.stderr
    if result.success:
        status = "ok"
    else:
        status = f"failed ({result.failure.name if result.failure else '?'})"
    header = f"DecodeResult {status} decoded={len(result.text)} table={len(result.offsets)}"
    if content_range is not None:
        header += f" range={content_range.start_offset}+{content_range.length}"
    file.write(header + "\n")

    mapper = OffsetMapper(result.offsets, content_range) if content_range is not None else None
    for i, source_offset in enumerate(result.offsets):
        char = repr(result.text[i]) if i < len(result.text) else "<end>"
        file.write(f"  {i:>4} {char:<8} -> {_fmt(source_offset)}")
        if mapper is not None and source_offset != UNKNOWN_OFFSET:
            file.write(f" (host {mapper.offset_in_host(i)})")
        file.write("\n")


def _fmt(offset: int) -> str:
    return "?" if offset == UNKNOWN_OFFSET else str(offset)

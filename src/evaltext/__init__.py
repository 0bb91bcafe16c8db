"""Decoder for escaped eval string literals with source offset mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from evaltext.decoder import DecodeResult

__version__ = "0.1.0"


def decode(source: str) -> DecodeResult:
    """Decode the escapes in *source* and build its offset table."""
    from evaltext.decoder import decode as _decode

    return _decode(source)

"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from evaltext.decoder import DecodeResult, OffsetMapper, decode
from evaltext.ranges import ContentRange


@pytest.fixture
def decoded():
    """Return a helper that decodes source and asserts success."""

    def _decoded(source: str) -> DecodeResult:
        result = decode(source)
        assert result.success, f"Expected {source!r} to decode, got {result.failure}"
        return result

    return _decoded


@pytest.fixture
def mapper_for(decoded):
    """Return a helper that decodes source and binds it to a content range."""

    def _mapper(source: str, start: int = 0, length: int | None = None) -> OffsetMapper:
        result = decoded(source)
        if length is None:
            length = len(source)
        return OffsetMapper.from_result(result, ContentRange(start, length))

    return _mapper

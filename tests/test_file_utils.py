"""Tests for request helpers."""

from __future__ import annotations

import pytest

from imgcompress.utils.file_utils import MULTIPART_OVERHEAD_BYTES, content_length_exceeds, parse_quality


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, 80),
        ("", 80),
        ("abc", 80),
        ("0", 80),
        ("75", 75),
        (" 30", 30),
        ("42.9", 42),
        ("12px", 12),
        ("-3", -3),
        ("+7", 7),
        ("150", 150),
        ("\u0663", 80),
        ("\u0664\u0665", 80),
    ],
)
def test_parse_quality(raw, expected) -> None:
    assert parse_quality(raw) == expected


def test_parse_quality_custom_default() -> None:
    assert parse_quality("nope", default=60) == 60


def test_content_length_exceeds() -> None:
    limit = 1000
    assert not content_length_exceeds(None, limit)
    assert not content_length_exceeds("garbage", limit)
    assert not content_length_exceeds(str(limit + MULTIPART_OVERHEAD_BYTES), limit)
    assert content_length_exceeds(str(limit + MULTIPART_OVERHEAD_BYTES + 1), limit)

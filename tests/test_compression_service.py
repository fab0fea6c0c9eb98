"""Tests for ImageCompressionService."""

from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from imgcompress.core.errors import ProcessingError
from imgcompress.services.compression_service import (
    ImageCompressionService,
    clamp_quality,
    compression_ratio,
)
from imgcompress.storage.local import LocalStorage


@pytest.fixture
def service(tmp_path) -> ImageCompressionService:
    return ImageCompressionService(LocalStorage(tmp_path, public_base_url="http://testserver"))


def test_compression_ratio() -> None:
    assert compression_ratio(1000, 250) == pytest.approx(75.0)
    assert compression_ratio(1000, 1500) == pytest.approx(-50.0)
    assert compression_ratio(0, 10) == 0.0


@pytest.mark.parametrize(("value", "expected"), [(-10, 1), (0, 1), (1, 1), (55, 55), (100, 100), (250, 100)])
def test_clamp_quality(value: int, expected: int) -> None:
    assert clamp_quality(value) == expected


def test_encode_produces_jpeg(service: ImageCompressionService, gradient_png: bytes) -> None:
    encoded = service.encode(gradient_png, 70)
    with Image.open(BytesIO(encoded)) as image:
        assert image.format == "JPEG"
        assert image.size == (256, 256)


def test_compress_persists_artifact(service: ImageCompressionService, tmp_path, gradient_png: bytes) -> None:
    result = service.compress(gradient_png, 60)
    filename = result.compressed_image_url.rsplit("/", 1)[-1]
    artifact = tmp_path / filename
    assert artifact.is_file()
    assert artifact.stat().st_size == result.compressed_size
    assert result.original_size == len(gradient_png)
    assert result.quality == 60


def test_compress_clamps_quality(service: ImageCompressionService, gradient_png: bytes) -> None:
    assert service.compress(gradient_png, 500).quality == 100


def test_ratio_consistent_for_reencoded_jpeg(service: ImageCompressionService) -> None:
    # Re-encoding a heavily compressed JPEG at full quality may grow it
    buffer = BytesIO()
    Image.new("RGB", (8, 8), (10, 200, 30)).save(buffer, format="JPEG", quality=1)
    result = service.compress(buffer.getvalue(), 100)
    expected = (result.original_size - result.compressed_size) / result.original_size * 100
    assert result.compression_ratio == pytest.approx(expected)


def test_grayscale_kept_as_is(service: ImageCompressionService) -> None:
    buffer = BytesIO()
    Image.new("L", (32, 32), 128).save(buffer, format="PNG")
    encoded = service.encode(buffer.getvalue(), 80)
    with Image.open(BytesIO(encoded)) as image:
        assert image.mode == "L"


def test_corrupt_input_raises_processing_error(service: ImageCompressionService, tmp_path) -> None:
    with pytest.raises(ProcessingError) as excinfo:
        service.compress(b"not an image", 80)
    assert excinfo.value.__cause__ is not None
    assert list(tmp_path.iterdir()) == []

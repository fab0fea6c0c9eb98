"""Pytest fixtures for the image compression API tests."""

from __future__ import annotations

import os
from io import BytesIO
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image, PngImagePlugin

from imgcompress.core.config import Settings
from imgcompress.main import create_app

TEST_BASE_URL = "http://testserver"


def make_noise_png(size: tuple[int, int] = (200, 200)) -> bytes:
    """Random RGB noise encoded as PNG; practically incompressible."""
    width, height = size
    image = Image.frombytes("RGB", size, os.urandom(width * height * 3))
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def make_png_of_size(target_bytes: int) -> bytes:
    """Noise PNG padded with a tEXt chunk to exactly ``target_bytes``."""
    image = Image.frombytes("RGB", (200, 200), os.urandom(200 * 200 * 3))

    def encode(info: PngImagePlugin.PngInfo | None) -> bytes:
        buffer = BytesIO()
        image.save(buffer, format="PNG", pnginfo=info)
        return buffer.getvalue()

    base = encode(None)
    key = "pad"
    # chunk = length(4) + type(4) + key + NUL + text + crc(4)
    text_length = target_bytes - len(base) - 12 - len(key) - 1
    assert text_length > 0, "target smaller than the unpadded image"

    info = PngImagePlugin.PngInfo()
    info.add_text(key, "x" * text_length)
    data = encode(info)
    assert len(data) == target_bytes
    return data


def make_gradient_png(size: tuple[int, int] = (256, 256)) -> bytes:
    gradient = Image.linear_gradient("L").resize(size)
    image = Image.merge("RGB", (gradient, gradient.rotate(90), gradient.rotate(180)))
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    settings = Settings(
        base_dir=tmp_path,
        uploads_dir=tmp_path / "uploads",
        public_base_url=TEST_BASE_URL,
    )
    settings.configure_paths()
    return settings


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> TestClient:
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def noise_png() -> bytes:
    return make_noise_png()


@pytest.fixture
def gradient_png() -> bytes:
    return make_gradient_png()


@pytest.fixture
def image_file(tmp_path: Path, gradient_png: bytes) -> Path:
    path = tmp_path / "photo.png"
    path.write_bytes(gradient_png)
    return path

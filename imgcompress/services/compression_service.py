from __future__ import annotations

from io import BytesIO

from PIL import Image

from imgcompress.core.errors import ProcessingError
from imgcompress.core.logging import configure_logging
from imgcompress.models import CompressionResult
from imgcompress.storage.local import LocalStorage

MIN_QUALITY = 1
MAX_QUALITY = 100

logger = configure_logging("compression")


def clamp_quality(quality: int) -> int:
    return max(MIN_QUALITY, min(MAX_QUALITY, int(quality)))


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """نسبة التوفير المئوية؛ سالبة إذا أنتج الترميز ملفًا أكبر."""
    if original_size <= 0:
        return 0.0
    return (original_size - compressed_size) / original_size * 100


class ImageCompressionService:
    """إعادة ترميز الصور بصيغة JPEG باستخدام Pillow وحفظ الناتج في التخزين."""

    # أوضاع الألوان التي يقبلها مرمّز JPEG مباشرة
    JPEG_MODES = {"RGB", "L", "CMYK"}

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage

    def encode(self, data: bytes, quality: int) -> bytes:
        with Image.open(BytesIO(data)) as image:
            image.load()
            if image.mode not in self.JPEG_MODES:
                image = image.convert("RGB")
            buffer = BytesIO()
            image.save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue()

    def compress(self, data: bytes, quality: int) -> CompressionResult:
        quality = clamp_quality(quality)
        original_size = len(data)

        try:
            encoded = self.encode(data, quality)
            output_path = self.storage.save_bytes(encoded, suffix=".jpg")
            compressed_size = output_path.stat().st_size
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
            raise ProcessingError() from exc

        if self.storage.retention is not None:
            removed = self.storage.purge_expired()
            if removed:
                logger.info("تم حذف %s ملفات منتهية الصلاحية", removed)

        logger.info(
            "ضغط صورة %s بايت إلى %s بايت بجودة %s: %s",
            original_size,
            compressed_size,
            quality,
            output_path.name,
        )

        return CompressionResult(
            compressed_image_url=self.storage.public_url(output_path),
            original_size=original_size,
            compressed_size=compressed_size,
            compression_ratio=compression_ratio(original_size, compressed_size),
            quality=quality,
        )

from __future__ import annotations

import base64
import mimetypes
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

import httpx
from pydantic import ValidationError

from imgcompress.core.logging import configure_logging
from imgcompress.models import CompressionResult

logger = configure_logging("client")

COMPRESS_PATH = "/api/v1/compress"
DOWNLOAD_FILENAME = "compressed-image.jpg"
GENERIC_FAILURE = "Error compressing image"


class UploadState(str, Enum):
    idle = "idle"
    uploading = "uploading"
    success = "success"


@dataclass
class Analytics:
    original_size: int
    compressed_size: int
    compression_ratio: float
    quality: int

    @classmethod
    def from_result(cls, result: CompressionResult) -> "Analytics":
        return cls(
            original_size=result.original_size,
            compressed_size=result.compressed_size,
            compression_ratio=result.compression_ratio,
            quality=result.quality,
        )

    def describe(self) -> dict[str, str]:
        """القيم بصيغة العرض: الأحجام بالكيلوبايت والنسب بمنزلتين عشريتين."""
        return {
            "Original Size": f"{self.original_size / 1024:.2f} KB",
            "Compressed Size": f"{self.compressed_size / 1024:.2f} KB",
            "Compression Ratio": f"{self.compression_ratio:.2f}%",
            "Quality Setting": f"{self.quality}%",
        }


def _default_error_reporter(message: str) -> None:
    logger.warning("%s", message)


class UploadFormController:
    """
    متحكم نموذج الرفع: يحتفظ بالصورة المختارة وقيمة الجودة، ويرسل طلب الضغط
    ثم يخزن رابط الصورة الناتجة والإحصاءات.

    لا يُسمح بأكثر من طلب ضغط واحد في الوقت نفسه، واختيار صورة جديدة أثناء
    الطلب يجعل نتيجته قديمة فلا تُعرض.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        *,
        http_client: Optional[httpx.Client] = None,
        on_error: Optional[Callable[[str], None]] = None,
        default_quality: int = 80,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = http_client or httpx.Client()
        self._owns_client = http_client is None
        self._report = on_error if on_error is not None else _default_error_reporter

        self.image_path: Optional[Path] = None
        self.preview: Optional[str] = None
        self.quality: Union[int, str] = default_quality
        self.compressed_image_url: Optional[str] = None
        self.analytics: Optional[Analytics] = None
        self.state = UploadState.idle

        self._in_flight = threading.Lock()
        self._sequence = 0

    # === Context management ===
    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "UploadFormController":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # === Form actions ===
    def select_image(self, path: Union[str, Path]) -> bool:
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError:
            self._report("Could not read the selected file")
            return False

        self._sequence += 1
        self.image_path = path
        self.compressed_image_url = None
        self.analytics = None
        self.state = UploadState.idle

        mime_type, _ = mimetypes.guess_type(path.name)
        encoded = base64.b64encode(content).decode("utf-8")
        self.preview = f"data:{mime_type or 'application/octet-stream'};base64,{encoded}"
        return True

    def set_quality(self, value: Union[int, str]) -> None:
        self.quality = value

    def compress(self) -> Optional[Analytics]:
        if self.image_path is None:
            self._report("Please upload an image first")
            return None

        if not self._in_flight.acquire(blocking=False):
            self._report("A compression is already in progress")
            return None

        try:
            self._sequence += 1
            sequence = self._sequence
            self.state = UploadState.uploading
            return self._send(sequence)
        finally:
            if self.state is UploadState.uploading:
                self.state = UploadState.idle
            self._in_flight.release()

    def download(self, destination_dir: Union[str, Path]) -> Optional[Path]:
        if not self.compressed_image_url:
            return None

        target = Path(destination_dir) / DOWNLOAD_FILENAME
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self._http.stream("GET", self.compressed_image_url) as response:
                response.raise_for_status()
                with target.open("wb") as buffer:
                    for chunk in response.iter_bytes():
                        buffer.write(chunk)
        except httpx.HTTPError:
            logger.exception("Download failed for %s", self.compressed_image_url)
            target.unlink(missing_ok=True)
            self._report("Error downloading image")
            return None
        return target

    # === Internals ===
    def _send(self, sequence: int) -> Optional[Analytics]:
        image_path = self.image_path
        mime_type, _ = mimetypes.guess_type(image_path.name)

        try:
            with image_path.open("rb") as handle:
                response = self._http.post(
                    f"{self.base_url}{COMPRESS_PATH}",
                    files={"image": (image_path.name, handle, mime_type or "application/octet-stream")},
                    data={"quality": str(self.quality)},
                )
        except (httpx.HTTPError, OSError):
            logger.exception("Compression request failed")
            self._fail(sequence, GENERIC_FAILURE)
            return None

        if not response.is_success:
            self._fail(sequence, f"Error: {self._server_message(response) or 'Something went wrong'}")
            return None

        try:
            result = CompressionResult.model_validate(response.json())
        except (ValueError, ValidationError):
            logger.exception("Unexpected response body from %s", response.url)
            self._fail(sequence, GENERIC_FAILURE)
            return None

        if sequence != self._sequence:
            logger.info("Discarding stale compression result")
            return None

        self.compressed_image_url = result.compressed_image_url
        self.analytics = Analytics.from_result(result)
        self.state = UploadState.success
        return self.analytics

    def _fail(self, sequence: int, message: str) -> None:
        if sequence != self._sequence:
            return
        self.compressed_image_url = None
        self.analytics = None
        self.state = UploadState.idle
        self._report(message)

    @staticmethod
    def _server_message(response: httpx.Response) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            return body.get("message")
        return None

import re
from typing import Optional, Union

from fastapi import UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile

from imgcompress.core.errors import ClientInputError, PayloadTooLargeError

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")

# هامش لترويسات multipart وحقل الجودة فوق حجم الصورة نفسه
MULTIPART_OVERHEAD_BYTES = 64 * 1024


def parse_quality(raw: Optional[str], default: int = 80) -> int:
    """
    قراءة قيمة الجودة بنفس سلوك parseInt: تؤخذ الأرقام البادئة فقط.
    القيم الغائبة أو غير الرقمية أو الصفرية تعود إلى القيمة الافتراضية.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(str(raw))
    if not match:
        return default
    return int(match.group(1)) or default


def ensure_image(upload: Union[UploadFile, str, None]) -> UploadFile:
    # الحقل النصي بدل الملف يعامل كصورة غائبة
    if not isinstance(upload, StarletteUploadFile) or not upload.filename:
        raise ClientInputError("No image file provided")
    return upload


async def read_limited(upload: UploadFile, limit: int) -> bytes:
    """قراءة محتوى الملف مع رفض ما يتجاوز الحد المسموح."""
    data = await upload.read(limit + 1)
    if len(data) > limit:
        raise PayloadTooLargeError()
    return data


def content_length_exceeds(header: Optional[str], limit: int) -> bool:
    if not header or not header.isdigit():
        return False
    return int(header) > limit + MULTIPART_OVERHEAD_BYTES

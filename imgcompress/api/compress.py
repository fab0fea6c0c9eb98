from typing import Optional, Union

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from imgcompress.core.logging import configure_logging
from imgcompress.models import ClientErrorResponse, CompressionResult, ErrorResponse
from imgcompress.services.compression_service import ImageCompressionService
from imgcompress.utils.file_utils import ensure_image, parse_quality, read_limited

router = APIRouter(prefix="/api/v1/compress", tags=["Image Compression"])

logger = configure_logging("api.compress")


def get_compression_service(request: Request) -> ImageCompressionService:
    return request.app.state.compression_service


@router.post(
    "",
    response_model=CompressionResult,
    summary="ضغط صورة مرفوعة بصيغة JPEG وإرجاع إحصاءات الحجم",
    responses={
        400: {"model": ClientErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def compress_image(
    request: Request,
    image: Union[UploadFile, str, None] = File(None),
    quality: Optional[str] = Form(None),
    service: ImageCompressionService = Depends(get_compression_service),
) -> CompressionResult:
    settings = request.app.state.settings
    upload = ensure_image(image)
    requested_quality = parse_quality(quality, default=settings.default_quality)

    data = await read_limited(upload, settings.max_upload_bytes)
    logger.info("استلام صورة للضغط: %s (%s بايت)", upload.filename, len(data))

    # الترميز عملية حسابية متزامنة، تُنفذ خارج حلقة الأحداث
    return await run_in_threadpool(service.compress, data, requested_quality)

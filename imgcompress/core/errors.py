from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .logging import configure_logging

logger = configure_logging("errors")


class CompressionAPIError(Exception):
    """خطأ عام يحمل رمز الحالة والرسالة الآمنة للعرض على العميل."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Error compressing image"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_body(self) -> dict:
        return {"success": False, "message": self.message}


class ClientInputError(CompressionAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "No image file provided"

    def to_body(self) -> dict:
        return {"message": self.message}


class PayloadTooLargeError(CompressionAPIError):
    status_code = 413
    message = "Image exceeds the maximum upload size"


class ProcessingError(CompressionAPIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Error compressing image"


async def _handle_api_error(request: Request, exc: CompressionAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        # التفاصيل الكاملة تبقى في سجلات الخادم فقط
        logger.error("فشل الطلب %s %s", request.method, request.url.path, exc_info=exc.__cause__ or exc)
    else:
        logger.warning("طلب مرفوض %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("خطأ غير متوقع في %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=ProcessingError.status_code, content=ProcessingError().to_body())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CompressionAPIError, _handle_api_error)
    app.add_exception_handler(Exception, _handle_unexpected)

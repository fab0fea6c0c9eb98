# imgcompress/main.py
from __future__ import annotations

from typing import Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from imgcompress.api import routers
from imgcompress.api.compress import router as compress_router
from imgcompress.core.config import Settings, get_settings
from imgcompress.core.errors import PayloadTooLargeError, register_exception_handlers
from imgcompress.core.logging import configure_logging
from imgcompress.models import HealthStatus
from imgcompress.services.compression_service import ImageCompressionService
from imgcompress.storage.local import LocalStorage
from imgcompress.utils.file_utils import content_length_exceeds

logger = configure_logging()


def _as_list(val: Iterable | str | None, fallback: list[str]) -> list[str]:
    if val is None:
        return fallback
    if isinstance(val, (list, tuple, set)):
        items = [str(x).strip() for x in val if str(x).strip()]
        return items or fallback
    items = [x.strip() for x in str(val).split(",") if x.strip()]
    return items or fallback


def build_storage(settings: Settings) -> LocalStorage:
    return LocalStorage(
        settings.uploads_dir,
        public_base_url=settings.public_base_url,
        url_prefix="/uploads",
        retention=settings.retention,
    )


def create_app(settings: Optional[Settings] = None, storage: Optional[LocalStorage] = None) -> FastAPI:
    """بناء تطبيق FastAPI مع حقن إعدادات التخزين بدلًا من الحالة العامة."""
    settings = settings or get_settings()
    storage = storage or build_storage(settings)

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.state.settings = settings
    app.state.storage = storage
    app.state.compression_service = ImageCompressionService(storage)

    # === حد حجم الرفع قبل قراءة جسم الطلب ===
    # يُسجل قبل CORS ليبقى داخله، فتحمل ردود 413 ترويسات CORS أيضًا
    @app.middleware("http")
    async def upload_size_guard(request: Request, call_next):
        if request.method == "POST" and request.url.path.rstrip("/") == compress_router.prefix:
            if content_length_exceeds(request.headers.get("content-length"), settings.max_upload_bytes):
                error = PayloadTooLargeError()
                logger.warning("رفض طلب بحجم %s بايت", request.headers.get("content-length"))
                return JSONResponse(status_code=error.status_code, content=error.to_body())
        return await call_next(request)

    # === CORS ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_as_list(settings.allow_origins, fallback=["*"]),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # === Routers ===
    for router in routers:
        app.include_router(router)

    # === Static artifacts ===
    app.mount(storage.url_prefix, StaticFiles(directory=str(storage.uploads_dir)), name="uploads")

    # === Basic endpoints ===
    @app.get("/")
    async def root() -> dict:
        logger.debug("Root endpoint accessed")
        return {"message": "Hello from the Image Compression API!"}

    @app.get("/health", response_model=HealthStatus)
    async def health_check() -> HealthStatus:
        logger.debug("Health check invoked")
        return HealthStatus(status="ok", message=f"{settings.app_name} is running")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    logger.info("Server has started on http://%s:%s", _settings.host, _settings.port)
    uvicorn.run(app, host=_settings.host, port=_settings.port)

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """إعدادات التطبيق العامة مع تحميل القيم من ملف .env عند توفره."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Image Compression API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    base_dir: Path = Field(default_factory=Path.cwd)
    uploads_dir: Optional[Path] = None
    public_base_url: str = "http://localhost:8080"

    max_upload_bytes: int = 10 * 1024 * 1024
    default_quality: int = 80
    artifact_ttl_hours: Optional[float] = None

    allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    host: str = "0.0.0.0"
    port: int = 8080

    @property
    def retention(self) -> Optional[timedelta]:
        if self.artifact_ttl_hours is None:
            return None
        return timedelta(hours=self.artifact_ttl_hours)

    def configure_paths(self) -> None:
        """تحديد مسار مجلد الملفات المضغوطة؛ يُنشأ المجلد عند بناء التخزين فقط."""
        self.uploads_dir = (self.uploads_dir or (self.base_dir / "uploads")).resolve()


@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    settings.configure_paths()
    return settings

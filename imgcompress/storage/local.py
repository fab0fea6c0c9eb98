from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional
from uuid import uuid4


class LocalStorage:
    """تخزين محلي للصور المضغوطة مع بناء روابطها العامة."""

    def __init__(
        self,
        uploads_dir: Path,
        *,
        public_base_url: str = "http://localhost:8080",
        url_prefix: str = "/uploads",
        retention: Optional[timedelta] = None,
    ) -> None:
        self.uploads_dir = Path(uploads_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.url_prefix = "/" + url_prefix.strip("/")
        self.retention = retention

        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _generate_filename(suffix: str) -> str:
        suffix = suffix if suffix.startswith(".") else f".{suffix.lstrip('.')}"
        return f"compressed-{uuid4().hex}{suffix}"

    def save_bytes(self, data: bytes, *, suffix: str = ".jpg") -> Path:
        # قد يُحذف المجلد أثناء التشغيل، لذا نتحقق منه عند كل كتابة
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        target_path = self.uploads_dir / self._generate_filename(suffix)
        target_path.write_bytes(data)
        return target_path

    def public_url(self, path: Path) -> str:
        return f"{self.public_base_url}{self.url_prefix}/{Path(path).name}"

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """حذف الملفات الأقدم من مدة الاحتفاظ المحددة وإرجاع عددها."""
        if self.retention is None:
            return 0

        cutoff = (now or datetime.now()) - self.retention
        removed = 0
        for path in self.uploads_dir.glob("compressed-*"):
            if not path.is_file():
                continue
            if datetime.fromtimestamp(path.stat().st_mtime) < cutoff:
                path.unlink(missing_ok=True)
                removed += 1
        return removed

"""
Wound image storage on the local filesystem.

Files land in ``UPLOAD_DIR/wounds`` and are referenced in the database by
their public URL (``/uploads/wounds/<filename>``); the app serves
``UPLOAD_DIR`` read-only under that prefix.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from ..core.config import settings

logger = logging.getLogger(__name__)

WOUNDS_SUBDIR = "wounds"

# MIME type -> file extension used when the upload has no usable name
_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class ImageStorageService:
    """Write and remove wound image files.

    ``base_dir`` defaults to ``settings.UPLOAD_DIR``; tests point it at a
    temporary directory.
    """

    def __init__(self, base_dir: Optional[str] = None, url_prefix: Optional[str] = None):
        self.base_dir = base_dir or settings.UPLOAD_DIR
        self.url_prefix = (url_prefix or settings.UPLOAD_URL_PREFIX).rstrip("/")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def store(self, image_data: bytes, wound_id: str, original_name: str, mime_type: str) -> dict:
        """Persist an image and return ``{"url": ..., "filename": ..., "path": ...}``."""
        wound_dir = os.path.join(self.base_dir, WOUNDS_SUBDIR)
        os.makedirs(wound_dir, exist_ok=True)

        ts = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
        filename = f"{wound_id}_{ts}.{self._extension(original_name, mime_type)}"
        filepath = os.path.join(wound_dir, filename)
        with open(filepath, "wb") as fh:
            fh.write(image_data)

        return {
            "url": f"{self.url_prefix}/{WOUNDS_SUBDIR}/{filename}",
            "filename": filename,
            "path": filepath,
        }

    def delete(self, url: str) -> bool:
        """Remove the file behind ``url``. Best-effort: failures are logged, never raised."""
        path = self.path_for(url)
        if path is None:
            logger.warning("Refusing to delete file outside upload dir: %s", url)
            return False
        try:
            if os.path.exists(path):
                os.remove(path)
                return True
        except OSError:
            logger.exception("Failed to delete image file %s", path)
        return False

    def path_for(self, url: str) -> Optional[str]:
        """Map a public URL back to a path inside ``base_dir`` (None if it escapes)."""
        relative = url
        if relative.startswith(self.url_prefix + "/"):
            relative = relative[len(self.url_prefix) + 1:]
        base = os.path.abspath(self.base_dir)
        path = os.path.abspath(os.path.join(base, relative))
        if os.path.commonpath([base, path]) != base:
            return None
        return path

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _extension(original_name: str, mime_type: str) -> str:
        ext = os.path.splitext(original_name or "")[1].lstrip(".").lower()
        if ext in ("jpg", "jpeg", "png", "webp"):
            return ext
        return _EXTENSIONS.get(mime_type, "bin")


image_storage = ImageStorageService()

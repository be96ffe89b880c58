"""
Validation and local-disk storage for uploaded photos and documents.

Files land in ``UPLOAD_DIR`` under a generated name and are served back
from ``UPLOAD_URL_PREFIX``.
"""
from __future__ import annotations

import re
import secrets
import time
from io import BytesIO
from pathlib import Path

import logging

from PIL import Image, UnidentifiedImageError

from ..core.config import get_settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}

ALLOWED_DOCUMENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/csv",
    "image/jpeg",
    "image/jpg",
    "image/png",
}

DEFAULT_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "text/csv": "csv",
}

_EXT_RE = re.compile(r"^[a-z0-9]{1,8}$")


class UploadRejected(ValueError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


def _file_extension(filename: str | None, content_type: str) -> str:
    name = filename or ""
    if "." in name:
        ext = name.rsplit(".", 1)[-1].lower()
        if _EXT_RE.match(ext):
            return ext
    return DEFAULT_EXTENSIONS.get(content_type, "jpg")


def _check_image(content: bytes, min_width: int, min_height: int) -> tuple[int, int]:
    try:
        with Image.open(BytesIO(content)) as img:
            width, height = img.size
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise UploadRejected("File is not a valid image.") from e

    if width < min_width or height < min_height:
        raise UploadRejected(
            f"Image too small. Minimum size: {min_width}x{min_height}px. "
            f"Your image: {width}x{height}px"
        )
    return width, height


def validate_upload(content: bytes, content_type: str | None, kind: str = "image") -> None:
    settings = get_settings()

    if not content:
        raise UploadRejected("No file provided")

    if len(content) > settings.UPLOAD_MAX_BYTES:
        max_mb = settings.UPLOAD_MAX_BYTES // (1024 * 1024)
        raise UploadRejected(f"File too large. Maximum size is {max_mb}MB.", status_code=413)

    ctype = (content_type or "").lower()
    if kind == "document":
        if ctype not in ALLOWED_DOCUMENT_TYPES:
            raise UploadRejected("Invalid file type. Only PDF, DOCX, CSV, JPEG, PNG files are allowed.")
    else:
        if ctype not in ALLOWED_IMAGE_TYPES:
            raise UploadRejected("Invalid file type. Only JPEG, PNG, and WebP images are allowed.")
        _check_image(content, settings.UPLOAD_MIN_IMAGE_WIDTH, settings.UPLOAD_MIN_IMAGE_HEIGHT)


def store_upload(content: bytes, filename: str | None, content_type: str | None) -> str:
    """
    Write ``content`` to the upload directory and return its public URL.

    ``OSError`` from the filesystem propagates to the caller.
    """
    settings = get_settings()
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    ext = _file_extension(filename, (content_type or "").lower())
    stored_name = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}.{ext}"
    (upload_dir / stored_name).write_bytes(content)

    logger.info("Stored upload %s (%d bytes)", stored_name, len(content), extra={"step": "upload"})
    return f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{stored_name}"

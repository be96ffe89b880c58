import errno
import logging
from typing import Literal

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from ..core.config import get_settings
from ..models.user import User
from ..services.uploads import UploadRejected, store_upload, validate_upload
from .deps import get_current_user

router = APIRouter(tags=["upload"])

logger = logging.getLogger(__name__)


@router.post("/upload")
def upload_file(
    file: UploadFile | None = File(default=None),
    upload_type: Literal["image", "document"] = Form(default="image", alias="type"),
    user: User = Depends(get_current_user),
):
    """
    Store a photo or supporting document and return its public URL.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    max_bytes = get_settings().UPLOAD_MAX_BYTES
    if file.size is not None and file.size > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.",
        )

    # one byte past the limit is enough for validate_upload to reject it
    content = file.file.read(max_bytes + 1)

    try:
        validate_upload(content, file.content_type, kind=upload_type)
        url = store_upload(content, file.filename, file.content_type)
    except UploadRejected as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except OSError as e:
        logger.exception("Upload failed: %s", e, extra={"user_id": user.id, "step": "upload"})
        if e.errno == errno.ENOSPC:
            raise HTTPException(status_code=507, detail="Insufficient storage space")
        if e.errno == errno.EACCES:
            raise HTTPException(status_code=403, detail="Permission denied")
        raise HTTPException(status_code=500, detail="Upload failed. Please try again.")

    return {"url": url}

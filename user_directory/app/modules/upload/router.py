from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool

from user_directory.app.core.auth import get_deps
from user_directory.app.core.config import settings
from user_directory.app.dependencies import AppDependencies
from user_directory.services.accounts import InvalidInput
from user_directory.services.media import MediaNotConfigured

router = APIRouter()
logger = logging.getLogger(__name__)


def validate_image(filename: str, content_type: Optional[str], size: int) -> None:
    if size == 0:
        raise InvalidInput("No file uploaded")
    if size > settings.MAX_UPLOAD_SIZE:
        raise InvalidInput("File too large")

    ext = Path(filename or "").suffix.lower()
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    if ext not in settings.ALLOWED_IMAGE_EXTENSIONS or mime not in settings.ALLOWED_IMAGE_TYPES:
        raise InvalidInput("Only image files (jpg, jpeg, png, gif) are allowed")


@router.post("/upload")
async def upload_image(
    file: Optional[UploadFile] = File(None),
    deps: AppDependencies = Depends(get_deps),
):
    if file is None or not file.filename:
        raise InvalidInput("No file uploaded")

    # One byte past the limit is enough to tell an oversized file apart.
    content = await file.read(settings.MAX_UPLOAD_SIZE + 1)
    validate_image(file.filename, file.content_type, len(content))

    if deps.media_store is None:
        raise MediaNotConfigured("Media storage is not configured")

    logger.info("[UPLOAD] %s (%s, %d bytes)", file.filename, file.content_type, len(content))
    stored = await run_in_threadpool(
        deps.media_store.store, content, filename=file.filename, content_type=file.content_type
    )
    return {"success": True, "url": stored.url, "public_id": stored.public_id}

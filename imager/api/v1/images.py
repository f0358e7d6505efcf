"""
Image endpoints.
Upload derives and stores every variant; delete removes them again.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import aiofiles
from fastapi import APIRouter, File, Form, Query, Response, UploadFile

from imager.config import get_settings
from imager.core.exceptions import PayloadTooLargeError
from imager.dependencies import ImagerService
from imager.schemas.upload import UploadResponse

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()

CHUNK_SIZE = 1024 * 1024  # 1MB chunks


async def _spool(upload: UploadFile) -> dict[str, Any]:
    """Write an upload to a temp file and describe it for the service."""
    suffix = Path(upload.filename or "").suffix
    fd, path = tempfile.mkstemp(prefix="imager_upload_", suffix=suffix, dir=settings.TEMP_DIRECTORY)
    os.close(fd)

    size = 0
    try:
        async with aiofiles.open(path, "wb") as f:
            while chunk := await upload.read(CHUNK_SIZE):
                size += len(chunk)
                if size > settings.MAX_UPLOAD_SIZE:
                    raise PayloadTooLargeError(settings.MAX_UPLOAD_SIZE)
                await f.write(chunk)
    except BaseException:
        os.unlink(path)
        raise

    return {
        "path": path,
        "name": upload.filename or os.path.basename(path),
        "size": size,
        "headers": dict(upload.headers),
    }


@router.post("", status_code=201, response_model=UploadResponse)
async def upload_images(
    imager: ImagerService,
    files: list[UploadFile] = File(..., description="Image files"),
    variant: str | None = Form(default=None, description="Variant set name"),
):
    """
    Upload one or more images.

    Every preset of the variant set is produced for each file and stored
    on every configured backend. Returns the storage base URI and the
    produced artifact names.
    """
    descriptors = []
    try:
        for upload in files:
            descriptors.append(await _spool(upload))

        result = await imager.upload(descriptors, variant)
    finally:
        for descriptor in descriptors:
            try:
                os.unlink(descriptor["path"])
            except OSError as e:
                logger.warning(f"Failed to remove spool file {descriptor['path']}: {e}")

    return UploadResponse(base_uri=result.base_uri, files=result.files)


@router.delete("/{filename}", status_code=204)
async def remove_image(
    filename: str,
    imager: ImagerService,
    variant: str | None = Query(default=None, description="Variant set name"),
):
    """
    Remove every variant of a stored image from all backends.
    Missing artifacts are ignored.
    """
    await imager.remove(filename, variant)
    return Response(status_code=204)

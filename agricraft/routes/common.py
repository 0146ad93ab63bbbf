from typing import Tuple

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from ..errors import ValidationError
from ..schemas import ImageAsset
from ..services.validators import validate_image_file
from ..utils.images import compress, default_budget


async def read_image_upload(file: UploadFile) -> ImageAsset:
    """Validate the declared type and filename, then read the upload into memory."""
    validate_image_file(file.content_type, file.filename)
    try:
        raw = await file.read()
    finally:
        await file.close()
    if not raw:
        raise ValidationError("Empty file.")
    return ImageAsset(data=raw, content_type=file.content_type, name=file.filename)


async def shrink_to_budget(asset: ImageAsset) -> Tuple[ImageAsset, bool]:
    """Returns (asset to upload, whether it was re-encoded)."""
    budget = default_budget()
    if asset.size <= budget.max_bytes:
        return asset, False
    # Pillow work is CPU bound; keep it off the event loop
    return await run_in_threadpool(compress, asset, budget), True

import base64
import logging
import os
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

from ..config import settings
from ..errors import DecodeError, EncodeError
from ..schemas import CompressionBudget, ImageAsset

logger = logging.getLogger(__name__)

TARGET_FORMAT = "WEBP"
TARGET_CONTENT_TYPE = "image/webp"
TARGET_EXTENSION = ".webp"

# 0.8 down to the 0.1 floor, expressed on Pillow's 0-100 scale
QUALITY_LADDER = (80, 70, 60, 50, 40, 30, 20, 10)


def default_budget() -> CompressionBudget:
    return CompressionBudget(
        max_bytes=int(settings.MAX_UPLOAD_MB * 1024 * 1024),
        max_dimension=settings.MAX_IMAGE_DIMENSION,
    )


def target_size(width: int, height: int, max_dimension: int) -> tuple:
    """Scale so the longer edge equals max_dimension; fractional pixels are truncated."""
    w, h = float(width), float(height)
    if w > h and w > max_dimension:
        h = h * max_dimension / w
        w = max_dimension
    elif h > max_dimension:
        w = w * max_dimension / h
        h = max_dimension
    return max(1, int(w)), max(1, int(h))


def replace_extension(name: str, extension: str = TARGET_EXTENSION) -> str:
    stem, ext = os.path.splitext(name)
    return (stem if ext else name) + extension


def _decode(data: bytes) -> Image.Image:
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to load image: {e}") from e
    if img.mode not in ("RGB", "RGBA"):
        keep_alpha = "A" in img.getbands() or "transparency" in img.info
        img = img.convert("RGBA" if keep_alpha else "RGB")
    return img


def _encode(img: Image.Image, quality: int) -> bytes:
    buf = BytesIO()
    try:
        img.save(buf, format=TARGET_FORMAT, quality=quality)
    except (OSError, KeyError, ValueError) as e:
        raise EncodeError(f"Failed to compress image: {e}") from e
    return buf.getvalue()


def compress(asset: ImageAsset, budget: Optional[CompressionBudget] = None) -> ImageAsset:
    """
    Re-encode an oversized image so it fits the byte budget.

    Assets already within budget are returned as-is. Otherwise the image is
    downscaled to budget.max_dimension on its longer edge and encoded as WebP,
    walking QUALITY_LADDER until the output fits. The lowest rung is accepted
    even when the result is still over budget.
    """
    budget = budget or default_budget()
    if asset.size <= budget.max_bytes:
        return asset

    img = _decode(asset.data)
    size = target_size(img.width, img.height, budget.max_dimension)
    if size != img.size:
        img = img.resize(size, Image.Resampling.LANCZOS)

    encoded = b""
    for quality in QUALITY_LADDER:
        encoded = _encode(img, quality)
        if len(encoded) <= budget.max_bytes:
            break
    else:
        logger.info("%s still %d bytes at quality floor", asset.name, len(encoded))

    logger.debug("compressed %s: %d -> %d bytes (%dx%d, q=%d)",
                 asset.name, asset.size, len(encoded), size[0], size[1], quality)
    return ImageAsset(
        data=encoded,
        content_type=TARGET_CONTENT_TYPE,
        name=replace_extension(asset.name),
    )


def to_base64(asset: ImageAsset) -> str:
    return base64.b64encode(asset.data).decode("utf-8")

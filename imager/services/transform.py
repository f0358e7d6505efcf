"""
Image transforms.

Wraps Pillow for the three derived kinds: resize (fit inside a box,
keeping aspect ratio), centered crop, and resize followed by a
centered crop. EXIF orientation is applied before any of them.
"""

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from PIL import Image, ImageOps

from imager.core.exceptions import TransformError
from imager.models.variant import OperationKind
from imager.schemas.variant import Dimensions

logger = logging.getLogger(__name__)


class ImageTransformer(Protocol):
    """Produces a derived image file from a source file."""

    async def transform(
        self,
        source_path: Path,
        dest_path: Path,
        kind: OperationKind,
        dimensions: Dimensions,
        secondary: Dimensions | None = None,
    ) -> Path:
        ...


def resize_image(img: Image.Image, dimensions: Dimensions) -> Image.Image:
    """Scale img up or down to fit the box; a missing side follows the ratio."""
    width, height = dimensions
    if width and height:
        return ImageOps.contain(img, (width, height), Image.Resampling.LANCZOS)

    if width:
        size = (width, max(1, round(img.height * width / img.width)))
    else:
        size = (max(1, round(img.width * height / img.height)), height)
    return img.resize(size, Image.Resampling.LANCZOS)


def center_crop(img: Image.Image, dimensions: Dimensions) -> Image.Image:
    """Crop the centered box, clamped to the image size."""
    width = min(dimensions.width or img.width, img.width)
    height = min(dimensions.height or img.height, img.height)
    left = (img.width - width) // 2
    top = (img.height - height) // 2
    return img.crop((left, top, left + width, top + height))


class PillowTransformer:
    """ImageTransformer backed by Pillow."""

    def __init__(self, quality: int = 85):
        self.quality = quality

    def _run(
        self,
        source_path: Path,
        dest_path: Path,
        kind: OperationKind,
        dimensions: Dimensions,
        secondary: Dimensions | None,
    ) -> Path:
        with Image.open(source_path) as source:
            fmt = source.format
            img = ImageOps.exif_transpose(source)

            if kind is OperationKind.RESIZE:
                img = resize_image(img, dimensions)
            elif kind is OperationKind.CROP:
                img = center_crop(img, dimensions)
            elif kind is OperationKind.RESIZE_AND_CROP:
                if secondary is None:
                    raise TransformError(message="resizeAndCrop needs a crop box")
                img = center_crop(resize_image(img, dimensions), secondary)
            else:
                raise TransformError(message=f"Nothing to transform for kind {kind.value}")

            save_kwargs = {}
            if fmt == "JPEG":
                if img.mode not in ("RGB", "L"):
                    img = img.convert("RGB")
                save_kwargs["quality"] = self.quality
            img.save(dest_path, format=fmt, **save_kwargs)

        return dest_path

    async def transform(
        self,
        source_path: Path,
        dest_path: Path,
        kind: OperationKind,
        dimensions: Dimensions,
        secondary: Dimensions | None = None,
    ) -> Path:
        """
        Write the transformed image to dest_path.

        Raises:
            TransformError: If the image cannot be read, transformed or written
        """
        try:
            return await asyncio.to_thread(
                self._run, Path(source_path), Path(dest_path), kind, dimensions, secondary
            )
        except TransformError:
            raise
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.warning(f"Transform of {source_path} failed: {e}")
            raise TransformError(
                message=f"Failed to transform image: {str(e)}",
                details={"kind": kind.value, "dimensions": str(dimensions)},
            )

"""
Pydantic schemas for configuration and responses.
"""

from imager.schemas.variant import (
    Dimensions,
    ResizeAndCropPreset,
    VariantSpec,
    parse_dimensions,
)
from imager.schemas.upload import UploadResponse
from imager.schemas.error import ErrorResponse

__all__ = [
    # Variant schemas
    "Dimensions",
    "ResizeAndCropPreset",
    "VariantSpec",
    "parse_dimensions",
    # Response schemas
    "UploadResponse",
    "ErrorResponse",
]

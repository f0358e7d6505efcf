"""Business logic services for the imager service."""

from imager.services.planner import VariantPlanner
from imager.services.executor import VariantExecutor
from imager.services.imager_service import Imager
from imager.services.source import (
    CONTENT_TYPE_EXTENSIONS,
    canonical_filename,
    extension_for,
    resolve_source_file,
    sanitize_filename,
)
from imager.services.transform import ImageTransformer, PillowTransformer

__all__ = [
    "VariantPlanner",
    "VariantExecutor",
    "Imager",
    "CONTENT_TYPE_EXTENSIONS",
    "canonical_filename",
    "extension_for",
    "resolve_source_file",
    "sanitize_filename",
    "ImageTransformer",
    "PillowTransformer",
]

"""
Domain models for the imager service.
"""

from imager.models.source import SourceFile
from imager.models.variant import OperationKind, UploadResult, VariantOperation

__all__ = [
    "SourceFile",
    "OperationKind",
    "VariantOperation",
    "UploadResult",
]

"""Core exceptions for the imager service."""

from imager.core.exceptions import (
    ImagerException,
    ConfigurationError,
    InputError,
    UnsupportedTypeError,
    PayloadTooLargeError,
    TransformError,
    BackendError,
    NotFoundError,
)

__all__ = [
    "ImagerException",
    "ConfigurationError",
    "InputError",
    "UnsupportedTypeError",
    "PayloadTooLargeError",
    "TransformError",
    "BackendError",
    "NotFoundError",
]

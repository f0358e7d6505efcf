"""
Custom exceptions for the imager service.
Every error carries an error code, a message and an HTTP status.
"""

from typing import Any


class ImagerException(Exception):
    """Base exception for all imager errors."""

    def __init__(
        self,
        error: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.error = error
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to response dictionary."""
        response = {
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


class ConfigurationError(ImagerException):
    """500 - Missing or invalid variant/backend configuration."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="configuration_error",
            message=message,
            status_code=500,
            details=details,
        )


class InputError(ImagerException):
    """400 - Bad file input (nothing given, unreadable path)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error: str = "invalid_input",
        status_code: int = 400,
    ):
        super().__init__(
            error=error,
            message=message,
            status_code=status_code,
            details=details,
        )


class UnsupportedTypeError(InputError):
    """415 - Content type has no known file extension."""

    def __init__(self, content_type: str | None):
        super().__init__(
            message=f"Unsupported content type: {content_type}",
            details={"contentType": content_type},
            error="unsupported_type",
            status_code=415,
        )


class PayloadTooLargeError(InputError):
    """413 - Upload size exceeds limit."""

    def __init__(self, max_size: int):
        max_size_mb = max_size / (1024 * 1024)
        super().__init__(
            message=f"Maximum upload size exceeded ({max_size_mb:.0f}MB limit)",
            error="payload_too_large",
            status_code=413,
        )


class TransformError(ImagerException):
    """500 - The image transform failed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="transform_failed",
            message=message,
            status_code=500,
            details=details,
        )


class BackendError(ImagerException):
    """502 - Upload or removal failed at a storage backend."""

    def __init__(
        self,
        message: str,
        backend: str,
        details: dict[str, Any] | None = None,
        error: str = "storage_error",
        status_code: int = 502,
    ):
        self.backend = backend
        super().__init__(
            error=error,
            message=message,
            status_code=status_code,
            details={"backend": backend, **(details or {})},
        )


class NotFoundError(BackendError):
    """404 - Removal target does not exist at the backend."""

    def __init__(self, remote_name: str, backend: str):
        self.remote_name = remote_name
        super().__init__(
            message=f"File not found: {remote_name}",
            backend=backend,
            details={"path": remote_name},
            error="not_found",
            status_code=404,
        )

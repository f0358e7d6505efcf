"""
Abstract storage backend interface.
Defines the contract for all storage implementations.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    All storage implementations (Local, S3, CDN container) must implement
    these methods so the upload fan-out can treat them uniformly.
    """

    #: Registry type name, used in logs and error details
    name: str = "storage"

    def __init__(self, upload_directory: str = ""):
        self.upload_directory = upload_directory or ""

    def remote_key(self, remote_name: str) -> str:
        """Key of an artifact, with the shared upload directory prefix."""
        return f"{self.upload_directory}{remote_name}"

    @abstractmethod
    async def upload(
        self,
        local_path: str | Path,
        remote_name: str,
        content_type: str,
    ) -> str | None:
        """
        Upload a local file to storage.

        Args:
            local_path: Path of the artifact on local disk
            remote_name: Artifact name, e.g. "thumb_1700000000000.jpg"
            content_type: MIME type of the artifact

        Returns:
            The stored artifact name, or None when the backend accepted
            the call without storing anything

        Raises:
            BackendError: If upload fails
        """
        pass

    @abstractmethod
    async def remove(self, remote_name: str) -> None:
        """
        Remove an artifact from storage.

        Raises:
            NotFoundError: If the artifact does not exist (backends that
                treat this as success return instead)
            BackendError: If removal fails for other reasons
        """
        pass

    @abstractmethod
    def base_uri(self) -> str | None:
        """
        Public base URI of stored artifacts, or None if unknown.

        Remote backends may only know this after the first successful call.
        """
        pass

"""
Local filesystem storage backend.
Stores artifacts on the local filesystem for development and simple deployments.
"""

import logging
import os
from pathlib import Path

import aiofiles
import aiofiles.os

from imager.config import get_settings
from imager.core.exceptions import BackendError, InputError, NotFoundError
from imager.storage.base import StorageBackend

logger = logging.getLogger(__name__)
settings = get_settings()

CHUNK_SIZE = 1024 * 1024  # 1MB chunks


class LocalStorageBackend(StorageBackend):
    """
    Local filesystem storage implementation.

    Artifacts land at <base_path>/<upload_directory>/<remote_name>.
    """

    name = "local"

    def __init__(
        self,
        base_path: str | None = None,
        upload_directory: str | None = None,
        base_uri: str | None = None,
        mode: int | None = None,
    ):
        """
        Initialize local storage backend.

        Args:
            base_path: Root directory. Defaults to settings.LOCAL_STORAGE_PATH
            upload_directory: Optional subdirectory under the root
            base_uri: Public base reported to callers. Defaults to base_path
            mode: Permission bits applied to written files
        """
        super().__init__(
            upload_directory if upload_directory is not None else settings.UPLOAD_DIRECTORY
        )
        self.base_path = Path(base_path or settings.LOCAL_STORAGE_PATH)
        self._base_uri = base_uri or settings.LOCAL_BASE_URI or str(self.base_path)
        self.mode = mode if mode is not None else settings.LOCAL_FILE_MODE

    def _get_full_path(self, remote_name: str) -> Path:
        """
        Get full filesystem path for an artifact name.

        Raises:
            InputError: If the name resolves outside the storage root
        """
        root = self.base_path.resolve()
        full_path = (root / self.upload_directory / remote_name).resolve()
        if not full_path.is_relative_to(root):
            raise InputError(
                message=f"Invalid artifact name: {remote_name!r}",
                details={"backend": self.name},
            )
        return full_path

    async def upload(
        self,
        local_path: str | Path,
        remote_name: str,
        content_type: str,
    ) -> str | None:
        """Copy the artifact under the storage root."""
        full_path = self._get_full_path(remote_name)

        try:
            # exist_ok covers a concurrent upload creating the same segment
            full_path.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(local_path, "rb") as src:
                async with aiofiles.open(full_path, "wb") as dst:
                    while chunk := await src.read(CHUNK_SIZE):
                        await dst.write(chunk)

            os.chmod(full_path, self.mode)

        except OSError as e:
            raise BackendError(
                message=f"Failed to write file: {str(e)}",
                backend=self.name,
                details={"path": str(full_path)},
            )

        logger.info(f"{remote_name} written")
        return remote_name

    async def remove(self, remote_name: str) -> None:
        """Delete an artifact; a missing file raises NotFoundError."""
        full_path = self._get_full_path(remote_name)

        try:
            await aiofiles.os.remove(full_path)
        except FileNotFoundError:
            raise NotFoundError(remote_name, backend=self.name)
        except OSError as e:
            raise BackendError(
                message=f"Failed to delete file: {str(e)}",
                backend=self.name,
                details={"path": str(full_path)},
            )

        logger.info(f"{remote_name} removed")

    def base_uri(self) -> str | None:
        return self._base_uri

"""
Variant executor.
Produces one derived artifact and pushes it to every storage backend.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence

from imager.models.source import SourceFile
from imager.models.variant import OperationKind, VariantOperation
from imager.services.source import extension_for
from imager.services.transform import ImageTransformer, PillowTransformer
from imager.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class VariantExecutor:
    """Runs single variant operations against a fixed set of backends."""

    def __init__(
        self,
        backends: Sequence[StorageBackend],
        transformer: ImageTransformer | None = None,
        temp_dir: str | Path | None = None,
    ):
        self.backends = list(backends)
        self.transformer = transformer or PillowTransformer()
        self.temp_dir = Path(temp_dir or tempfile.gettempdir())

    def _temp_path(self, content_type: str | None) -> Path:
        """Create a unique, empty per-operation temp file and return its path."""
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        fd, path = tempfile.mkstemp(
            prefix="imager_",
            suffix=extension_for(content_type),
            dir=self.temp_dir,
        )
        os.close(fd)
        return Path(path)

    async def fan_out(
        self,
        local_path: Path,
        remote_name: str,
        content_type: str | None,
    ) -> str | None:
        """
        Upload one artifact to every backend concurrently.

        Waits for all backends; the first failure (in backend order) is
        raised once they have all finished.

        Returns:
            remote_name if at least one backend stored it, else None
        """
        results = await asyncio.gather(
            *(
                backend.upload(local_path, remote_name, content_type)
                for backend in self.backends
            ),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, BaseException):
                raise result

        return remote_name if any(results) else None

    def _cleanup(self, temp_path: Path) -> None:
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove temp file {temp_path}: {e}")

    async def execute(
        self,
        source: SourceFile,
        operation: VariantOperation,
        filename: str,
    ) -> str | None:
        """
        Produce and store one variant of source.

        Args:
            source: Input image
            operation: Variant to produce
            filename: Canonical base name shared by all variants

        Returns:
            The remote artifact name, or None when nothing was stored
            (empty source, or no backend kept the artifact)

        Raises:
            TransformError: If the derived image could not be produced
            BackendError: If any backend failed
        """
        if not source.size:
            logger.info(f"Skipping empty file {source.original_name}")
            return None

        remote_name = operation.remote_name(filename)

        if operation.kind is OperationKind.ORIGINAL:
            return await self.fan_out(source.local_path, remote_name, source.content_type)

        temp_path = self._temp_path(source.content_type)
        try:
            await self.transformer.transform(
                source.local_path,
                temp_path,
                operation.kind,
                operation.dimensions,
                operation.secondary,
            )
            return await self.fan_out(temp_path, remote_name, source.content_type)
        finally:
            self._cleanup(temp_path)

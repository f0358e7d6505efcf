"""
Imager service - upload and removal of image variants.

One upload call resolves its inputs, then processes the files one after
another; each file's variants run concurrently and every variant is
pushed to all configured backends. Results are accumulated per call.
"""

import asyncio
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Sequence

from imager.config import Settings
from imager.core.exceptions import InputError, NotFoundError
from imager.models.source import SourceFile
from imager.models.variant import UploadResult, VariantOperation
from imager.schemas.variant import VariantSpec
from imager.services.executor import VariantExecutor
from imager.services.planner import VariantPlanner
from imager.services.source import (
    canonical_filename,
    extension_for,
    now_ms,
    resolve_source_file,
)
from imager.services.transform import ImageTransformer
from imager.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def _as_list(items: Any) -> list:
    """Accept a single identifier or a collection of them."""
    if items is None:
        return []
    if isinstance(items, (str, os.PathLike, Mapping, SourceFile)):
        return [items]
    return list(items)


def _first_error(results: Sequence[Any]) -> BaseException | None:
    for result in results:
        if isinstance(result, BaseException):
            return result
    return None


class Imager:
    """Entry point for uploading and removing image variants."""

    def __init__(
        self,
        backends: Sequence[StorageBackend],
        variants: dict[str, VariantSpec],
        default_variant: str | None = "default",
        transformer: ImageTransformer | None = None,
        temp_dir: str | Path | None = None,
    ):
        self.backends = list(backends)
        self.planner = VariantPlanner(variants, default_variant)
        self.executor = VariantExecutor(self.backends, transformer, temp_dir)
        self._last_stamp = 0

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        backends: Sequence[StorageBackend],
        transformer: ImageTransformer | None = None,
    ) -> "Imager":
        return cls(
            backends=backends,
            variants=settings.VARIANTS,
            default_variant=settings.DEFAULT_VARIANT,
            transformer=transformer,
            temp_dir=settings.TEMP_DIRECTORY,
        )

    def _next_stamp(self) -> int:
        # strictly increasing, so no two files share a synthesized name
        self._last_stamp = max(now_ms(), self._last_stamp + 1)
        return self._last_stamp

    def base_uri(self) -> str:
        """First base URI exposed by a backend, in registration order."""
        for backend in self.backends:
            uri = backend.base_uri()
            if uri:
                return uri
        return ""

    async def _upload_file(
        self,
        source: SourceFile,
        operations: list[VariantOperation],
        filename: str,
    ) -> list[str]:
        if not source.size:
            logger.info(f"Skipping empty file {source.original_name}")
            return []

        results = await asyncio.gather(
            *(self.executor.execute(source, op, filename) for op in operations),
            return_exceptions=True,
        )

        error = _first_error(results)
        if error is not None:
            raise error

        return [name for name in results if name]

    async def upload(self, files: Any, variant: str | None = None) -> UploadResult:
        """
        Upload every variant of one or more files.

        Args:
            files: A path, an upload descriptor, or a collection of them
            variant: Variant set name; the configured default when omitted

        Returns:
            UploadResult with the base URI and the de-duplicated artifact
            names, in file order then variant-kind order

        Raises:
            ConfigurationError: If no variant set resolves
            InputError: If no files are given or a file is unreadable
            UnsupportedTypeError: If a file is not a JPEG, PNG or GIF
            TransformError: If a derived image could not be produced
            BackendError: If any backend upload failed
        """
        spec = self.planner.resolve(variant)

        inputs = _as_list(files)
        if not inputs:
            raise InputError(message="Please provide the files to upload")

        sources = [resolve_source_file(f) for f in inputs]
        for source in sources:
            if source.size:
                extension_for(source.content_type)

        produced: dict[str, None] = {}
        for source in sources:
            operations = self.planner.plan(variant)
            filename = canonical_filename(source, spec.keep_names, self._next_stamp())
            names = await self._upload_file(source, operations, filename)
            produced.update(dict.fromkeys(names))
            logger.info(f"{source.original_name}: {len(names)} variant(s) stored")

        return UploadResult(base_uri=self.base_uri(), files=list(produced))

    async def _remove_one(self, backend: StorageBackend, remote_name: str) -> None:
        try:
            await backend.remove(remote_name)
        except NotFoundError:
            logger.info(f"{remote_name} not found on {backend.name}")

    async def remove(self, names: Any, variant: str | None = None) -> None:
        """
        Remove every variant of one or more files from all backends.

        Args:
            names: Canonical base name(s): an artifact name returned by
                upload with its "<preset><separator>" prefix stripped,
                e.g. "1700000000123.jpg" for "thumb_1700000000123.jpg"
            variant: Variant set name; the configured default when omitted

        Raises:
            ConfigurationError: If no variant set resolves
            InputError: If no names are given
            BackendError: If a backend failed for any reason other than
                the artifact being absent
        """
        operations = self.planner.plan(variant)

        files = [str(name) for name in _as_list(names)]
        if not files:
            raise InputError(message="Please provide the files to remove")

        results = await asyncio.gather(
            *(
                self._remove_one(backend, op.remote_name(filename))
                for filename in files
                for op in operations
                for backend in self.backends
            ),
            return_exceptions=True,
        )

        error = _first_error(results)
        if error is not None:
            raise error

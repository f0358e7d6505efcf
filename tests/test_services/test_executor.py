"""
Tests for the variant executor.
"""

import asyncio

import pytest

from fakes import MemoryBackend
from imager.core.exceptions import BackendError, TransformError
from imager.models.source import SourceFile
from imager.models.variant import OperationKind, VariantOperation
from imager.schemas.variant import Dimensions
from imager.services.executor import VariantExecutor
from imager.services.source import resolve_source_file

THUMB = VariantOperation("thumb", OperationKind.RESIZE, "_", Dimensions(100, 100))
ORIGINAL = VariantOperation("orig", OperationKind.ORIGINAL, "_")


class FailingTransformer:
    """Writes a partial file, then fails."""

    async def transform(self, source_path, dest_path, kind, dimensions, secondary=None):
        dest_path.write_bytes(b"partial")
        raise TransformError(message="boom")


@pytest.mark.asyncio
async def test_upload_to_every_backend(make_image, temp_dir):
    first, second = MemoryBackend("a"), MemoryBackend("b")
    executor = VariantExecutor([first, second], temp_dir=temp_dir)
    source = resolve_source_file(make_image())

    name = await executor.execute(source, THUMB, "1.jpg")

    assert name == "thumb_1.jpg"
    assert first.uploads == second.uploads == [("thumb_1.jpg", "image/jpeg")]
    assert first.objects["thumb_1.jpg"] == second.objects["thumb_1.jpg"]


@pytest.mark.asyncio
async def test_temp_file_removed_after_success(make_image, temp_dir):
    backend = MemoryBackend()
    executor = VariantExecutor([backend], temp_dir=temp_dir)

    await executor.execute(resolve_source_file(make_image()), THUMB, "1.jpg")

    assert backend.seen_paths[0].parent == temp_dir
    assert list(temp_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_backend_failure_waits_for_others_and_cleans_up(make_image, temp_dir):
    failing, healthy = MemoryBackend("bad", fail_upload=True), MemoryBackend("good")
    executor = VariantExecutor([failing, healthy], temp_dir=temp_dir)

    with pytest.raises(BackendError) as exc_info:
        await executor.execute(resolve_source_file(make_image()), THUMB, "1.jpg")

    assert exc_info.value.backend == "bad"
    assert "thumb_1.jpg" in healthy.objects
    assert list(temp_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_transform_failure_cleans_up(make_image, temp_dir):
    backend = MemoryBackend()
    executor = VariantExecutor([backend], FailingTransformer(), temp_dir=temp_dir)

    with pytest.raises(TransformError):
        await executor.execute(resolve_source_file(make_image()), THUMB, "1.jpg")

    assert backend.uploads == []
    assert list(temp_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_original_uploads_source_as_is(make_image, temp_dir):
    backend = MemoryBackend()
    executor = VariantExecutor([backend], temp_dir=temp_dir)
    path = make_image()

    name = await executor.execute(resolve_source_file(path), ORIGINAL, "1.jpg")

    assert name == "orig_1.jpg"
    assert backend.seen_paths == [path]
    assert backend.objects["orig_1.jpg"] == path.read_bytes()
    assert path.exists()


@pytest.mark.asyncio
async def test_empty_source_is_skipped(tmp_path, temp_dir):
    backend = MemoryBackend()
    executor = VariantExecutor([backend], temp_dir=temp_dir)
    source = SourceFile(0, "image/jpeg", "empty.jpg", tmp_path / "empty.jpg")

    assert await executor.execute(source, THUMB, "1.jpg") is None
    assert backend.uploads == []


@pytest.mark.asyncio
async def test_nothing_stored_returns_none(make_image, temp_dir):
    backend = MemoryBackend(store=False)
    executor = VariantExecutor([backend], temp_dir=temp_dir)

    assert await executor.execute(resolve_source_file(make_image()), THUMB, "1.jpg") is None


@pytest.mark.asyncio
async def test_concurrent_operations_get_distinct_temp_files(make_image, temp_dir):
    backend = MemoryBackend()
    executor = VariantExecutor([backend], temp_dir=temp_dir)
    source = resolve_source_file(make_image())
    operations = [
        VariantOperation(f"thumb{i}", OperationKind.RESIZE, "_", Dimensions(20, 20))
        for i in range(10)
    ]

    await asyncio.gather(*(executor.execute(source, op, "1.jpg") for op in operations))

    assert len(set(backend.seen_paths)) == 10
    assert all(p.name.startswith("imager_") and p.suffix == ".jpg" for p in backend.seen_paths)
    assert list(temp_dir.iterdir()) == []


def test_temp_dir_created_on_demand(tmp_path):
    executor = VariantExecutor([], temp_dir=tmp_path / "nested" / "tmp")

    path = executor._temp_path("image/png")

    assert path.parent == tmp_path / "nested" / "tmp"
    assert path.suffix == ".png"
    assert path.exists()

"""
Pytest configuration and fixtures for imager tests.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image

from imager.dependencies import get_imager
from imager.main import app
from imager.schemas.variant import ResizeAndCropPreset, VariantSpec
from imager.services.imager_service import Imager
from imager.storage.local import LocalStorageBackend


@pytest.fixture
def make_image(tmp_path):
    """Write a solid-color image and return its path."""

    def _make(
        name: str = "photo.jpg",
        size: tuple[int, int] = (500, 500),
        fmt: str = "JPEG",
        mode: str = "RGB",
    ) -> Path:
        path = tmp_path / "input" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        color = (200, 30, 30, 255) if mode == "RGBA" else (200, 30, 30)
        Image.new(mode, size, color[: len(mode)]).save(path, format=fmt)
        return path

    return _make


@pytest.fixture
def variants() -> dict[str, VariantSpec]:
    """Variant sets used across tests."""
    return {
        "default": VariantSpec(
            resize={"thumb": "100x100"},
            crop={"square": "50x50"},
        ),
        "banner": VariantSpec(
            resizeAndCrop={
                "banner": ResizeAndCropPreset(resize="800x600", crop="800x200"),
            },
        ),
        "full": VariantSpec(
            original={"orig": True},
            resize={"thumb": "100x100", "medium": "300x"},
            crop={"square": "50x50"},
            resizeAndCrop={
                "banner": ResizeAndCropPreset(resize="800x600", crop="800x200"),
            },
            separator="-",
        ),
        "named": VariantSpec(
            resize={"thumb": "100x100"},
            keepNames=True,
        ),
    }


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Directory receiving derived artifacts."""
    path = tmp_path / "tmp"
    path.mkdir()
    return path


@pytest.fixture
def local_storage(tmp_path) -> LocalStorageBackend:
    """Create a test storage backend."""
    return LocalStorageBackend(
        base_path=str(tmp_path / "storage"),
        upload_directory="",
        base_uri="/media",
    )


@pytest.fixture
def imager(local_storage, variants, temp_dir) -> Imager:
    """Imager writing to local storage only."""
    return Imager([local_storage], variants, temp_dir=temp_dir)


@pytest_asyncio.fixture(scope="function")
async def client(imager) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    def override_get_imager():
        return imager

    app.dependency_overrides[get_imager] = override_get_imager

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

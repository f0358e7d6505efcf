"""
Tests for source file resolution and artifact naming.
"""

import io
import os

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from imager.api.v1.images import _spool
from imager.core.exceptions import InputError, UnsupportedTypeError
from imager.models.source import SourceFile
from imager.services import source as source_module
from imager.services.source import (
    canonical_filename,
    extension_for,
    resolve_source_file,
    sanitize_filename,
)


def test_resolve_path(make_image):
    path = make_image("photo.jpg")

    source = resolve_source_file(str(path))

    assert source.size == path.stat().st_size
    assert source.content_type == "image/jpeg"
    assert source.original_name == "photo.jpg"
    assert source.local_path == path


def test_resolve_missing_path(tmp_path):
    with pytest.raises(InputError):
        resolve_source_file(tmp_path / "nope.jpg")


def test_descriptor_type_priority(make_image):
    path = make_image("photo.jpg")

    explicit = resolve_source_file(
        {"path": path, "name": "photo.jpg", "type": "image/png",
         "headers": {"content-type": "image/gif"}}
    )
    from_headers = resolve_source_file(
        {"path": path, "name": "photo.jpg", "headers": {"Content-Type": "image/gif"}}
    )
    sniffed = resolve_source_file({"path": path, "name": "photo.jpg"})

    assert explicit.content_type == "image/png"
    assert from_headers.content_type == "image/gif"
    assert sniffed.content_type == "image/jpeg"


def test_descriptor_size_kept(make_image):
    path = make_image("photo.jpg")

    source = resolve_source_file({"path": path, "name": "upload.jpg", "size": 0})

    assert source.size == 0
    assert source.original_name == "upload.jpg"


def test_unsupported_input():
    with pytest.raises(InputError):
        resolve_source_file(42)


@pytest.mark.parametrize(
    "content_type, ext",
    [
        ("image/jpeg", ".jpg"),
        ("image/jpg", ".jpg"),
        ("image/png", ".png"),
        ("image/gif", ".gif"),
    ],
)
def test_extension_for(content_type, ext):
    assert extension_for(content_type) == ext


@pytest.mark.parametrize("content_type", ["text/plain", "image/webp", None])
def test_extension_for_unsupported(content_type):
    with pytest.raises(UnsupportedTypeError):
        extension_for(content_type)


def test_canonical_filename_timestamp(monkeypatch, tmp_path):
    monkeypatch.setattr(source_module.time, "time", lambda: 1700000000.123)
    source = SourceFile(10, "image/png", "My Photo.png", tmp_path / "x.png")

    assert canonical_filename(source) == "1700000000123.png"
    assert canonical_filename(source, timestamp=5) == "5.png"


def test_canonical_filename_keep_names(tmp_path):
    source = SourceFile(10, "image/png", "../holiday pics/My Photo.png", tmp_path / "x.png")

    assert canonical_filename(source, keep_names=True) == "My_Photo.png"


def test_sanitize_filename_rejects_empty():
    with pytest.raises(InputError):
        sanitize_filename("uploads/...")


@pytest.mark.asyncio
async def test_resolve_spooled_upload(make_image):
    data = make_image("photo.jpg").read_bytes()
    upload = UploadFile(
        io.BytesIO(data),
        filename="photo.jpg",
        headers=Headers({"content-type": "image/jpeg"}),
    )

    descriptor = await _spool(upload)
    try:
        source = resolve_source_file(descriptor)

        assert source.size == len(data)
        assert source.content_type == "image/jpeg"
        assert source.original_name == "photo.jpg"
        assert source.local_path.read_bytes() == data
    finally:
        os.unlink(descriptor["path"])


def test_resolve_rejects_unspooled_upload():
    upload = UploadFile(io.BytesIO(b"data"), filename="photo.jpg")

    with pytest.raises(InputError):
        resolve_source_file(upload)

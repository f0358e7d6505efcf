"""
Source file resolution and canonical artifact names.
"""

import mimetypes
import os
import re
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from imager.core.exceptions import InputError, UnsupportedTypeError
from imager.models.source import SourceFile

# Content type -> extension for synthesized filenames
CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
}

_UNSAFE_CHARS = re.compile(r"[^\w.\-]+", re.ASCII)


def extension_for(content_type: str | None) -> str:
    """
    Extension for a supported image content type.

    Raises:
        UnsupportedTypeError: If the type is not a supported image type
    """
    ext = CONTENT_TYPE_EXTENSIONS.get((content_type or "").lower())
    if ext is None:
        raise UnsupportedTypeError(content_type)
    return ext


def _content_type(
    explicit: str | None,
    headers: Mapping[str, str] | None,
    name: str,
) -> str | None:
    if explicit:
        return explicit
    if headers:
        for key, value in headers.items():
            if key.lower() == "content-type" and value:
                return value
    guessed, _ = mimetypes.guess_type(name)
    return guessed


def _stat_size(path: Path) -> int:
    try:
        return os.stat(path).st_size
    except OSError as e:
        raise InputError(
            message=f"Unable to read file: {str(e)}",
            details={"path": str(path)},
        )


def resolve_source_file(file: Any) -> SourceFile:
    """
    Build a SourceFile from a path or an upload descriptor.

    Descriptors are mappings with "path" and optionally "name", "size",
    "type" and "headers", as produced once an upload has been spooled to
    disk. The content type is taken from "type", then the transport
    headers, then guessed from the file name.

    Raises:
        InputError: If the input is not usable or the path is unreadable
    """
    if isinstance(file, SourceFile):
        return file

    if isinstance(file, (str, os.PathLike)):
        path = Path(file)
        if not path.is_file():
            raise InputError(
                message=f"File not found: {path}",
                details={"path": str(path)},
            )
        return SourceFile(
            size=_stat_size(path),
            content_type=_content_type(None, None, path.name),
            original_name=path.name,
            local_path=path,
        )

    if isinstance(file, Mapping) and file.get("path"):
        path = Path(file["path"])
        name = file.get("name") or path.name
        size = file.get("size")
        if size is None:
            size = _stat_size(path)
        return SourceFile(
            size=size,
            content_type=_content_type(file.get("type"), file.get("headers"), name),
            original_name=name,
            local_path=path,
        )

    raise InputError(
        message="Unsupported file input",
        details={"type": type(file).__name__},
    )


def sanitize_filename(name: str) -> str:
    """Basename of name with anything outside [A-Za-z0-9_.-] replaced."""
    basename = re.split(r"[\\/]", name)[-1]
    cleaned = _UNSAFE_CHARS.sub("_", basename).lstrip(".")
    if not cleaned:
        raise InputError(message=f"Invalid file name: {name!r}")
    return cleaned


def now_ms() -> int:
    return round(time.time() * 1000)


def canonical_filename(
    source: SourceFile,
    keep_names: bool = False,
    timestamp: int | None = None,
) -> str:
    """
    Base name shared by every artifact of a source file.

    The original basename when keep_names is set, otherwise
    "<millisecond timestamp><extension for the content type>".
    """
    if keep_names:
        return sanitize_filename(source.original_name)
    if timestamp is None:
        timestamp = now_ms()
    return f"{timestamp}{extension_for(source.content_type)}"

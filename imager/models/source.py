"""
Source file model.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourceFile:
    """
    One input image, resolved from a path or an upload descriptor.

    Owned by the caller for the duration of one upload call.
    """

    size: int
    content_type: str | None
    original_name: str
    local_path: Path

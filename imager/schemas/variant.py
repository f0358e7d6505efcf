"""
Pydantic schemas for variant configuration.

A variant set groups named presets by operation kind. Presets carry
"WxH" dimension strings; the combined kind carries one for the resize
step and one for the crop step.
"""

import re
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from imager.core.exceptions import ConfigurationError

_DIMENSIONS_RE = re.compile(r"^\s*(\d*)\s*x\s*(\d*)\s*$", re.IGNORECASE)


class Dimensions(NamedTuple):
    """Target box; a missing side keeps the aspect ratio."""

    width: int | None
    height: int | None

    def __str__(self) -> str:
        return f"{self.width or ''}x{self.height or ''}"


def parse_dimensions(value: str, require_both: bool = False) -> Dimensions:
    """
    Parse a "WxH" string.

    Args:
        value: Dimension string such as "100x100" or "100x"
        require_both: Reject strings missing either side

    Raises:
        ConfigurationError: If the string is not a valid dimension
    """
    match = _DIMENSIONS_RE.match(str(value))
    if not match:
        raise ConfigurationError(
            message=f"Invalid dimensions: {value!r}",
            details={"expected": "WxH"},
        )

    width = int(match.group(1)) if match.group(1) else None
    height = int(match.group(2)) if match.group(2) else None

    if width is None and height is None:
        raise ConfigurationError(message=f"Invalid dimensions: {value!r}")
    if require_both and (width is None or height is None):
        raise ConfigurationError(
            message=f"Both width and height are required: {value!r}"
        )
    if width == 0 or height == 0:
        raise ConfigurationError(message=f"Dimensions must be positive: {value!r}")

    return Dimensions(width, height)


class ResizeAndCropPreset(BaseModel):
    """Resize to an intermediate box, then center-crop to the final box."""

    resize: str
    crop: str


class VariantSpec(BaseModel):
    """One named variant set from configuration."""

    original: dict[str, Any] = Field(default_factory=dict)
    resize: dict[str, str] = Field(default_factory=dict)
    crop: dict[str, str] = Field(default_factory=dict)
    resize_and_crop: dict[str, ResizeAndCropPreset] = Field(
        default_factory=dict,
        alias="resizeAndCrop",
    )
    separator: str = "_"
    keep_names: bool = Field(default=False, alias="keepNames")

    model_config = ConfigDict(populate_by_name=True)

    def is_empty(self) -> bool:
        """True when no kind carries a preset."""
        return not (self.original or self.resize or self.crop or self.resize_and_crop)

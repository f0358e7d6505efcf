"""
Variant operation models.
"""

import enum
from dataclasses import dataclass, field

from imager.schemas.variant import Dimensions


class OperationKind(str, enum.Enum):
    """Operation kinds, declared in the order plans are emitted."""

    ORIGINAL = "original"
    RESIZE = "resize"
    CROP = "crop"
    RESIZE_AND_CROP = "resizeAndCrop"


@dataclass(frozen=True)
class VariantOperation:
    """One preset of a variant set, ready to execute."""

    preset_name: str
    kind: OperationKind
    separator: str = "_"
    dimensions: Dimensions | None = None
    # crop box of a resizeAndCrop preset
    secondary: Dimensions | None = None

    def remote_name(self, filename: str) -> str:
        return f"{self.preset_name}{self.separator}{filename}"


@dataclass
class UploadResult:
    """Produced artifact names of one upload call."""

    base_uri: str
    files: list[str] = field(default_factory=list)

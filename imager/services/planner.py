"""
Variant planner.
Expands a configured variant set into the operations to run.
"""

from imager.core.exceptions import ConfigurationError
from imager.models.variant import OperationKind, VariantOperation
from imager.schemas.variant import VariantSpec, parse_dimensions


class VariantPlanner:
    """Resolves variant sets by name and turns them into operations."""

    def __init__(
        self,
        variants: dict[str, VariantSpec],
        default_variant: str | None = "default",
    ):
        self.variants = variants
        self.default_variant = default_variant

    def resolve(self, variant_name: str | None = None) -> VariantSpec:
        """
        Get a variant set, falling back to the configured default.

        Raises:
            ConfigurationError: If no name is given and no default exists,
                or if the named set is not configured
        """
        if not variant_name:
            if not self.default_variant or self.default_variant not in self.variants:
                raise ConfigurationError(
                    message="Please specify a proper variant OR provide a default"
                )
            variant_name = self.default_variant

        spec = self.variants.get(variant_name)
        if spec is None:
            raise ConfigurationError(
                message=f"Variant '{variant_name}' is not configured",
                details={"available": sorted(self.variants)},
            )
        return spec

    def plan(self, variant_name: str | None = None) -> list[VariantOperation]:
        """
        Expand a variant set into operations.

        Operations come out grouped by kind (original, resize, crop,
        resizeAndCrop) and in configuration order within a kind, so the
        artifact order is stable across runs.

        Raises:
            ConfigurationError: If the set is unknown, has no presets,
                or carries malformed dimensions
        """
        spec = self.resolve(variant_name)
        if spec.is_empty():
            raise ConfigurationError(
                message=f"Variant '{variant_name or self.default_variant}' has no presets"
            )

        sep = spec.separator
        operations = [
            VariantOperation(name, OperationKind.ORIGINAL, sep)
            for name in spec.original
        ]
        operations += [
            VariantOperation(name, OperationKind.RESIZE, sep, parse_dimensions(size))
            for name, size in spec.resize.items()
        ]
        operations += [
            VariantOperation(
                name, OperationKind.CROP, sep, parse_dimensions(size, require_both=True)
            )
            for name, size in spec.crop.items()
        ]
        operations += [
            VariantOperation(
                name,
                OperationKind.RESIZE_AND_CROP,
                sep,
                parse_dimensions(preset.resize),
                parse_dimensions(preset.crop, require_both=True),
            )
            for name, preset in spec.resize_and_crop.items()
        ]
        return operations

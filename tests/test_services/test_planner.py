"""
Tests for the variant planner.
"""

import pytest

from imager.core.exceptions import ConfigurationError
from imager.models.variant import OperationKind
from imager.schemas.variant import Dimensions, VariantSpec, parse_dimensions
from imager.services.planner import VariantPlanner


def test_plan_orders_by_kind(variants):
    planner = VariantPlanner(variants)

    operations = planner.plan("full")

    assert [(op.kind, op.preset_name) for op in operations] == [
        (OperationKind.ORIGINAL, "orig"),
        (OperationKind.RESIZE, "thumb"),
        (OperationKind.RESIZE, "medium"),
        (OperationKind.CROP, "square"),
        (OperationKind.RESIZE_AND_CROP, "banner"),
    ]
    assert {op.separator for op in operations} == {"-"}


def test_plan_dimensions(variants):
    operations = VariantPlanner(variants).plan("full")
    by_name = {op.preset_name: op for op in operations}

    assert by_name["orig"].dimensions is None
    assert by_name["thumb"].dimensions == Dimensions(100, 100)
    assert by_name["medium"].dimensions == Dimensions(300, None)
    assert by_name["banner"].dimensions == Dimensions(800, 600)
    assert by_name["banner"].secondary == Dimensions(800, 200)


def test_plan_uses_default(variants):
    operations = VariantPlanner(variants, default_variant="default").plan()

    assert [op.remote_name("1.jpg") for op in operations] == [
        "thumb_1.jpg",
        "square_1.jpg",
    ]


def test_unknown_variant(variants):
    with pytest.raises(ConfigurationError):
        VariantPlanner(variants).plan("missing")


def test_no_variant_and_no_default(variants):
    with pytest.raises(ConfigurationError):
        VariantPlanner(variants, default_variant=None).plan()


def test_default_not_configured():
    with pytest.raises(ConfigurationError):
        VariantPlanner({"other": VariantSpec(resize={"t": "10x10"})}).plan()


def test_empty_variant():
    with pytest.raises(ConfigurationError):
        VariantPlanner({"default": VariantSpec()}).plan()


def test_crop_requires_both_sides():
    planner = VariantPlanner({"default": VariantSpec(crop={"square": "50x"})})

    with pytest.raises(ConfigurationError):
        planner.plan()


@pytest.mark.parametrize(
    "value, expected",
    [
        ("100x100", Dimensions(100, 100)),
        ("100x", Dimensions(100, None)),
        ("x80", Dimensions(None, 80)),
        (" 640 X 480 ", Dimensions(640, 480)),
    ],
)
def test_parse_dimensions(value, expected):
    assert parse_dimensions(value) == expected


@pytest.mark.parametrize("value", ["", "x", "100", "axb", "0x10", "10x-5"])
def test_parse_dimensions_invalid(value):
    with pytest.raises(ConfigurationError):
        parse_dimensions(value)

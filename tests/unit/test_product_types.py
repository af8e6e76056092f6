from __future__ import annotations

import pytest

from personalization.classifier.product_types import (
    DesignPositioning,
    ProductType,
    classify,
    default_placement,
    describe,
    preset_positions,
    suggest,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("T-Shirt Premium", ProductType.TSHIRT),
        ("Tee oversize", ProductType.TSHIRT),
        ("Sweat à capuche", ProductType.HOODIE),
        ("Tasse céramique", ProductType.MUG),
        ("Casquette trucker", ProductType.CAP),
        ("Tote bag", ProductType.BAG),
        ("Coque iPhone 15", ProductType.PHONECASE),
        ("Autocollant vinyle", ProductType.STICKER),
        ("Affiche A3", ProductType.POSTER),
        ("Objet Mystère", ProductType.DEFAULT),
        ("", ProductType.DEFAULT),
        (None, ProductType.DEFAULT),
    ],
)
def test_classify(name, expected):
    assert classify(name) == expected


def test_first_matching_keyword_wins():
    # "pull" (hoodie) is checked before "cap" in "capuche"
    assert classify("Pull à capuche") == ProductType.HOODIE
    assert classify("Sweat Casquette") == ProductType.HOODIE


def test_keywords_match_as_substrings():
    # No hoodie keyword in "capuche", so "cap" matches it.
    assert classify("Veste à capuche") == ProductType.CAP


def test_default_placement_per_type():
    assert default_placement(ProductType.TSHIRT) == DesignPositioning(50, 35, 25, 30)
    assert default_placement(ProductType.CAP) == DesignPositioning(50, 35, 35, 20)
    assert default_placement(ProductType.MUG) == DesignPositioning(50, 50, 40, 40)
    assert default_placement("unknown") == DesignPositioning(50, 50, 30, 30)


@pytest.mark.parametrize("product_type", list(ProductType))
def test_presets_always_contain_center_equal_to_default(product_type):
    presets = preset_positions(product_type)
    assert presets["center"] == default_placement(product_type)


def test_preset_names_per_type():
    assert set(preset_positions(ProductType.TSHIRT)) == {"center", "chest", "lower", "small", "large"}
    assert set(preset_positions(ProductType.HOODIE)) == {"center", "chest", "pocket", "back"}
    assert set(preset_positions(ProductType.MUG)) == {"center", "left", "right", "wrap"}
    assert set(preset_positions(ProductType.CAP)) == {"center", "front", "side", "back"}
    assert set(preset_positions(ProductType.POSTER)) == {"center", "top", "bottom", "left", "right"}


def test_presets_derive_from_default():
    presets = preset_positions(ProductType.HOODIE)
    assert presets["pocket"] == DesignPositioning(x=50, y=60, width=15, height=15)
    assert presets["back"].x == 50


def test_describe_falls_back_to_default_label():
    assert describe(ProductType.MUG).startswith("Mug")
    assert describe("nonsense") == describe(ProductType.DEFAULT)


def test_suggest_bundles_type_default_and_presets():
    suggestion = suggest("Mug Classique")
    assert suggestion["productType"] == "MUG"
    assert suggestion["defaultPosition"] == {"x": 50, "y": 50, "width": 40, "height": 40, "rotation": 0}
    assert suggestion["presets"]["wrap"]["width"] == 70

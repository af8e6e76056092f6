"""
Product type classification.

Maps a base product's display name to a coarse product type and proposes
design placements for it:
- Default placement tuned to the product silhouette
- Named presets derived from the default
- Human readable label for the editor UI

Nothing here raises: unknown names degrade to the DEFAULT template.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ProductType(str, Enum):
    TSHIRT = "TSHIRT"
    HOODIE = "HOODIE"
    MUG = "MUG"
    CAP = "CAP"
    BAG = "BAG"
    PHONECASE = "PHONECASE"
    STICKER = "STICKER"
    POSTER = "POSTER"
    DEFAULT = "DEFAULT"


@dataclass(frozen=True)
class DesignPositioning:
    """Placement template, all values in percent of the product image."""

    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


# Order matters: first match wins, so "Sweat Casquette" is a HOODIE.
_KEYWORDS: Tuple[Tuple[ProductType, Tuple[str, ...]], ...] = (
    (ProductType.TSHIRT, ("t-shirt", "tshirt", "tee")),
    (ProductType.HOODIE, ("hoodie", "sweat", "pull")),
    (ProductType.MUG, ("mug", "tasse", "cup")),
    (ProductType.CAP, ("casquette", "cap", "hat", "chapeau")),
    (ProductType.BAG, ("sac", "bag", "tote")),
    (ProductType.PHONECASE, ("coque", "case", "phone")),
    (ProductType.STICKER, ("sticker", "autocollant")),
    (ProductType.POSTER, ("poster", "affiche", "print")),
)

_DEFAULTS: Dict[ProductType, DesignPositioning] = {
    ProductType.TSHIRT: DesignPositioning(x=50, y=35, width=25, height=30),  # chest
    ProductType.HOODIE: DesignPositioning(x=50, y=30, width=20, height=25),
    ProductType.MUG: DesignPositioning(x=50, y=50, width=40, height=40),
    ProductType.CAP: DesignPositioning(x=50, y=35, width=35, height=20),  # wide and short
    ProductType.BAG: DesignPositioning(x=50, y=45, width=35, height=35),
    ProductType.PHONECASE: DesignPositioning(x=50, y=50, width=60, height=40),
    ProductType.STICKER: DesignPositioning(x=50, y=50, width=80, height=80),
    ProductType.POSTER: DesignPositioning(x=50, y=50, width=70, height=60),
    ProductType.DEFAULT: DesignPositioning(x=50, y=50, width=30, height=30),
}

_DESCRIPTIONS: Dict[ProductType, str] = {
    ProductType.TSHIRT: "T-shirt - chest placement",
    ProductType.HOODIE: "Hoodie - high placement",
    ProductType.MUG: "Mug - centered placement",
    ProductType.CAP: "Cap - front placement",
    ProductType.BAG: "Bag - generous centered placement",
    ProductType.PHONECASE: "Phone case - fitted format",
    ProductType.STICKER: "Sticker - square format",
    ProductType.POSTER: "Poster - portrait format",
    ProductType.DEFAULT: "Standard product - centered placement",
}


def classify(product_name: Optional[str]) -> ProductType:
    """Return the product type for a display name.

    Examples:
        >>> classify("T-Shirt Premium")
        <ProductType.TSHIRT: 'TSHIRT'>
        >>> classify("Objet Mystère")
        <ProductType.DEFAULT: 'DEFAULT'>
    """
    if not product_name:
        return ProductType.DEFAULT

    name = product_name.lower()
    for product_type, keywords in _KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return product_type
    return ProductType.DEFAULT


def _coerce(product_type: Any) -> ProductType:
    if isinstance(product_type, ProductType):
        return product_type
    try:
        return ProductType(str(product_type).upper())
    except ValueError:
        return ProductType.DEFAULT


def default_placement(product_type: Any) -> DesignPositioning:
    return _DEFAULTS[_coerce(product_type)]


def preset_positions(product_type: Any) -> Dict[str, DesignPositioning]:
    """Named placement variants for a product type. Always contains ``center``."""
    product_type = _coerce(product_type)
    base = default_placement(product_type)

    if product_type == ProductType.TSHIRT:
        return {
            "center": base,
            "chest": replace(base, y=30),
            "lower": replace(base, y=55),
            "small": replace(base, width=15, height=20),
            "large": replace(base, width=35, height=40),
        }
    if product_type == ProductType.HOODIE:
        return {
            "center": base,
            "chest": replace(base, y=25),
            "pocket": replace(base, y=60, width=15, height=15),
            "back": replace(base, y=40, width=30, height=35),
        }
    if product_type == ProductType.MUG:
        return {
            "center": base,
            "left": replace(base, x=30),
            "right": replace(base, x=70),
            "wrap": replace(base, width=70, height=30),
        }
    if product_type == ProductType.CAP:
        return {
            "center": base,
            "front": replace(base, y=30),
            "side": replace(base, x=25, width=25, height=15),
            "back": replace(base, y=45),
        }
    return {
        "center": base,
        "top": replace(base, y=25),
        "bottom": replace(base, y=75),
        "left": replace(base, x=25),
        "right": replace(base, x=75),
    }


def describe(product_type: Any) -> str:
    return _DESCRIPTIONS[_coerce(product_type)]


def suggest(product_name: Optional[str]) -> Dict[str, Any]:
    """Bundle everything the editor needs to pre-position a design."""
    product_type = classify(product_name)
    return {
        "productType": product_type.value,
        "description": describe(product_type),
        "defaultPosition": default_placement(product_type).to_dict(),
        "presets": {
            name: preset.to_dict() for name, preset in preset_positions(product_type).items()
        },
    }


__all__ = [
    "ProductType",
    "DesignPositioning",
    "classify",
    "default_placement",
    "preset_positions",
    "describe",
    "suggest",
]

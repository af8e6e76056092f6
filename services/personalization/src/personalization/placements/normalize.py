"""Placement normalization.

Any partial positioning payload becomes a complete ``Position``. Legacy field
names are mapped onto the canonical ones by ``adapt_legacy_fields`` before any
value is read, so nothing downstream has to know about them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

Primitive = Union[str, int, float, bool, None]

DEFAULT_RENDERED_SIZE = 100.0

# Canonical name -> accepted spellings, in priority order.
_FIELD_ALIASES: Dict[str, tuple[str, ...]] = {
    "x": ("x",),
    "y": ("y",),
    "scale": ("scale",),
    "rotation": ("rotation", "rotationDegrees", "rotation_degrees"),
    "renderedWidth": (
        "renderedWidth",
        "rendered_width",
        "designWidth",
        "design_width",
        "width",
    ),
    "renderedHeight": (
        "renderedHeight",
        "rendered_height",
        "designHeight",
        "design_height",
        "height",
    ),
    "constraints": ("constraints",),
}


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0
    rendered_width: float = DEFAULT_RENDERED_SIZE
    rendered_height: float = DEFAULT_RENDERED_SIZE
    constraints: Dict[str, Primitive] = field(default_factory=dict)

    def to_json(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "scale": self.scale,
            "rotation": self.rotation,
            "renderedWidth": self.rendered_width,
            "renderedHeight": self.rendered_height,
            "constraints": dict(self.constraints),
        }


@dataclass
class Placement:
    """Stored position of one design on one vendor product."""

    vendor_product_id: int
    design_id: int
    position: Position
    updated_at: Optional[datetime] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "vendorProductId": self.vendor_product_id,
            "designId": self.design_id,
            "position": self.position.to_json(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


def adapt_legacy_fields(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Map historical field spellings onto canonical names.

    The first non-null spelling wins, so ``renderedWidth`` beats the older
    ``designWidth`` which beats the bare ``width`` of the first editor.
    """
    adapted: Dict[str, Any] = {}
    for canonical, spellings in _FIELD_ALIASES.items():
        for key in spellings:
            value = raw.get(key)
            if value is not None:
                adapted[canonical] = value
                break
    return adapted


def _number(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _constraints(value: Any) -> Dict[str, Primitive]:
    if not isinstance(value, Mapping):
        return {}
    return {
        str(key): item
        for key, item in value.items()
        if item is None or isinstance(item, (str, int, float, bool))
    }


def normalize_position(raw: Optional[Mapping[str, Any]]) -> Position:
    """Return a complete position for any input, ``None`` and ``{}`` included."""
    if not isinstance(raw, Mapping):
        raw = {}
    data = adapt_legacy_fields(raw)

    return Position(
        x=_number(data.get("x"), 0.0),
        y=_number(data.get("y"), 0.0),
        scale=max(0.0, _number(data.get("scale"), 1.0)),
        rotation=_number(data.get("rotation"), 0.0),
        rendered_width=_number(data.get("renderedWidth"), DEFAULT_RENDERED_SIZE),
        rendered_height=_number(data.get("renderedHeight"), DEFAULT_RENDERED_SIZE),
        constraints=_constraints(data.get("constraints")),
    )


__all__ = [
    "Primitive",
    "Position",
    "Placement",
    "adapt_legacy_fields",
    "normalize_position",
]

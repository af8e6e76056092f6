"""Printable zone geometry.

A delimitation is stored either as percentages of the product image
(``PERCENTAGE``, the canonical form) or as raw pixels captured against a
reference image size (``ABSOLUTE``, legacy). Everything here is pure: inputs are
never mutated and new values are returned.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Optional

from common.db.models import CoordinateType

from ..errors import InvalidGeometry

MIN_ROTATION = -180.0
MAX_ROTATION = 180.0


@dataclass(frozen=True)
class DelimitationBox:
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    coordinate_type: CoordinateType = CoordinateType.PERCENTAGE
    name: Optional[str] = None
    original_x: Optional[float] = None
    original_y: Optional[float] = None
    original_width: Optional[float] = None
    original_height: Optional[float] = None
    reference_width: Optional[int] = None
    reference_height: Optional[int] = None

    @property
    def is_percentage(self) -> bool:
        return self.coordinate_type == CoordinateType.PERCENTAGE


@dataclass(frozen=True)
class PixelBox:
    x: int
    y: int
    width: int
    height: int
    rotation: float = 0.0
    name: Optional[str] = None


def from_record(row: Any) -> DelimitationBox:
    """Build a box from a stored ``Delimitation`` row (or any object with the same attributes)."""
    coordinate_type = getattr(row, "coordinate_type", None) or CoordinateType.PERCENTAGE
    if isinstance(coordinate_type, str):
        coordinate_type = CoordinateType(coordinate_type.upper())
    return DelimitationBox(
        x=row.x,
        y=row.y,
        width=row.width,
        height=row.height,
        rotation=getattr(row, "rotation", None) or 0.0,
        coordinate_type=coordinate_type,
        name=getattr(row, "name", None),
        original_x=getattr(row, "original_x", None),
        original_y=getattr(row, "original_y", None),
        original_width=getattr(row, "original_width", None),
        original_height=getattr(row, "original_height", None),
        reference_width=getattr(row, "reference_width", None),
        reference_height=getattr(row, "reference_height", None),
    )


def validate(box: DelimitationBox) -> None:
    """Raise ``InvalidGeometry`` when the zone breaks its coordinate system's rules.

    Both systems require finite values, positive width/height and a rotation in
    [-180, 180]. Only PERCENTAGE zones are range-checked against [0, 100];
    ABSOLUTE zones just need non-negative offsets.
    """
    values = {"x": box.x, "y": box.y, "width": box.width, "height": box.height}
    for field_name, value in values.items():
        if value is None or not math.isfinite(value):
            raise InvalidGeometry(f"{field_name} must be a finite number")

    if box.width <= 0 or box.height <= 0:
        raise InvalidGeometry("width and height must be positive")

    rotation = box.rotation or 0.0
    if not math.isfinite(rotation) or not MIN_ROTATION <= rotation <= MAX_ROTATION:
        raise InvalidGeometry(f"rotation {rotation} outside [-180, 180]")

    if box.is_percentage:
        for field_name, value in values.items():
            if not 0 <= value <= 100:
                raise InvalidGeometry(f"{field_name}={value} outside [0, 100]")
    elif box.x < 0 or box.y < 0:
        raise InvalidGeometry("absolute coordinates must be positive")


def _check_reference(width: Optional[float], height: Optional[float]) -> None:
    if width is None or height is None or width <= 0 or height <= 0:
        raise InvalidGeometry(
            f"reference dimensions must be positive, got {width}x{height}"
        )


def to_percentage(
    box: DelimitationBox,
    reference_width: Optional[float],
    reference_height: Optional[float],
) -> DelimitationBox:
    """Convert an ABSOLUTE zone to percentages of the reference image.

    Values are rounded to two decimals; the pixel values and the reference size
    are kept in the ``original_*``/``reference_*`` attributes. PERCENTAGE input is
    returned as is.
    """
    if box.is_percentage:
        return box
    _check_reference(reference_width, reference_height)

    return replace(
        box,
        x=round(box.x / reference_width * 100, 2),
        y=round(box.y / reference_height * 100, 2),
        width=round(box.width / reference_width * 100, 2),
        height=round(box.height / reference_height * 100, 2),
        coordinate_type=CoordinateType.PERCENTAGE,
        original_x=box.x,
        original_y=box.y,
        original_width=box.width,
        original_height=box.height,
        reference_width=int(reference_width),
        reference_height=int(reference_height),
    )


def to_pixels(box: DelimitationBox, image_width: float, image_height: float) -> PixelBox:
    """Project a PERCENTAGE zone onto a render target of the given size."""
    _check_reference(image_width, image_height)
    if not box.is_percentage:
        # Rescale legacy pixels from their capture size to the target.
        _check_reference(box.reference_width, box.reference_height)
        box = to_percentage(box, box.reference_width, box.reference_height)

    return PixelBox(
        x=int(round(box.x / 100 * image_width)),
        y=int(round(box.y / 100 * image_height)),
        width=int(round(box.width / 100 * image_width)),
        height=int(round(box.height / 100 * image_height)),
        rotation=box.rotation,
        name=box.name,
    )


__all__ = [
    "DelimitationBox",
    "PixelBox",
    "from_record",
    "validate",
    "to_percentage",
    "to_pixels",
]

from __future__ import annotations

import pytest

from common.db.models import CoordinateType, Delimitation
from personalization.errors import InvalidGeometry
from personalization.geometry import coordinates
from personalization.geometry.coordinates import DelimitationBox


def box(**overrides) -> DelimitationBox:
    values = dict(x=10.0, y=20.0, width=30.0, height=40.0)
    values.update(overrides)
    return DelimitationBox(**values)


def test_percentage_zone_in_range_is_valid():
    coordinates.validate(box())


def test_percentage_x_over_100_fails():
    with pytest.raises(InvalidGeometry):
        coordinates.validate(box(x=101))


def test_absolute_x_over_100_passes():
    coordinates.validate(box(x=101, coordinate_type=CoordinateType.ABSOLUTE))


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-5, 10)])
def test_non_positive_size_fails_in_both_systems(width, height):
    for coordinate_type in CoordinateType:
        with pytest.raises(InvalidGeometry):
            coordinates.validate(box(width=width, height=height, coordinate_type=coordinate_type))


@pytest.mark.parametrize("rotation", [-181, 180.5, float("nan")])
def test_rotation_out_of_range_fails(rotation):
    with pytest.raises(InvalidGeometry):
        coordinates.validate(box(rotation=rotation))


def test_rotation_bounds_are_inclusive():
    coordinates.validate(box(rotation=-180))
    coordinates.validate(box(rotation=180))


def test_absolute_negative_offset_fails():
    with pytest.raises(InvalidGeometry):
        coordinates.validate(box(x=-1, coordinate_type=CoordinateType.ABSOLUTE))


def test_to_percentage_converts_and_keeps_originals():
    pixels = box(x=200, y=150, width=400, height=300, coordinate_type=CoordinateType.ABSOLUTE)

    converted = coordinates.to_percentage(pixels, 800, 600)

    assert converted.coordinate_type == CoordinateType.PERCENTAGE
    assert (converted.x, converted.y, converted.width, converted.height) == (25, 25, 50, 50)
    assert (converted.original_x, converted.original_width) == (200, 400)
    assert (converted.reference_width, converted.reference_height) == (800, 600)
    # Input untouched
    assert pixels.coordinate_type == CoordinateType.ABSOLUTE
    assert pixels.x == 200


def test_to_percentage_rounds_to_two_decimals():
    pixels = box(x=100, y=100, width=100, height=100, coordinate_type=CoordinateType.ABSOLUTE)
    converted = coordinates.to_percentage(pixels, 300, 700)
    assert converted.x == 33.33
    assert converted.height == 14.29


@pytest.mark.parametrize("reference", [(None, 600), (800, 0), (-1, 600)])
def test_to_percentage_requires_positive_reference(reference):
    pixels = box(coordinate_type=CoordinateType.ABSOLUTE)
    with pytest.raises(InvalidGeometry):
        coordinates.to_percentage(pixels, *reference)


def test_to_percentage_returns_percentage_input_unchanged():
    zone = box()
    assert coordinates.to_percentage(zone, None, None) is zone


def test_to_pixels_projects_onto_target():
    pixels = coordinates.to_pixels(box(x=25, y=50, width=50, height=25), 1000, 800)
    assert (pixels.x, pixels.y, pixels.width, pixels.height) == (250, 400, 500, 200)


def test_to_pixels_rescales_legacy_zone_through_its_reference():
    legacy = box(
        x=100,
        y=100,
        width=200,
        height=200,
        coordinate_type=CoordinateType.ABSOLUTE,
        reference_width=400,
        reference_height=400,
    )
    pixels = coordinates.to_pixels(legacy, 800, 800)
    assert (pixels.x, pixels.width) == (200, 400)


def test_from_record_reads_orm_row():
    row = Delimitation(
        x=5,
        y=6,
        width=7,
        height=8,
        rotation=None,
        coordinate_type=CoordinateType.ABSOLUTE,
        reference_width=640,
        reference_height=480,
        name="chest",
    )
    zone = coordinates.from_record(row)
    assert zone.rotation == 0.0
    assert zone.coordinate_type == CoordinateType.ABSOLUTE
    assert zone.reference_width == 640
    assert zone.name == "chest"

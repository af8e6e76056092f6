"""Conversion of legacy ABSOLUTE delimitations to PERCENTAGE.

Pixel zones are rescaled against the size they were drawn on: the stored
reference size, else the image's natural size, else the configured fallback.
Zones that are still invalid once converted (e.g. drawn past the image edge)
are left untouched and reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from common.config import settings
from common.db.models import CoordinateType, Delimitation
from common.logging import get_logger

from .errors import InvalidGeometry
from .geometry import coordinates

LOGGER = get_logger(__name__)


@dataclass
class MigrationReport:
    examined: int = 0
    converted: int = 0
    failed: List[Tuple[int, str]] = field(default_factory=list)
    dry_run: bool = False

    def to_dict(self) -> dict:
        return {
            "examined": self.examined,
            "converted": self.converted,
            "failed": [{"id": row_id, "error": error} for row_id, error in self.failed],
            "dryRun": self.dry_run,
        }


def reference_size(
    row: Delimitation,
    default_width: Optional[int] = None,
    default_height: Optional[int] = None,
) -> Tuple[int, int]:
    image = row.image
    width = (
        row.reference_width
        or (image.natural_width if image else None)
        or default_width
        or settings.default_image_width
    )
    height = (
        row.reference_height
        or (image.natural_height if image else None)
        or default_height
        or settings.default_image_height
    )
    return width, height


def migrate_delimitations(
    session: Session,
    *,
    dry_run: bool = False,
    default_width: Optional[int] = None,
    default_height: Optional[int] = None,
) -> MigrationReport:
    report = MigrationReport(dry_run=dry_run)
    rows = session.scalars(
        select(Delimitation)
        .where(Delimitation.coordinate_type == CoordinateType.ABSOLUTE)
        .options(selectinload(Delimitation.image))
        .order_by(Delimitation.id)
    ).all()

    for row in rows:
        report.examined += 1
        width, height = reference_size(row, default_width, default_height)
        try:
            converted = coordinates.to_percentage(coordinates.from_record(row), width, height)
            coordinates.validate(converted)
        except InvalidGeometry as exc:
            report.failed.append((row.id, exc.message))
            LOGGER.warning("Delimitation not migrated", delimitation=row.id, error=exc.message)
            continue

        if dry_run:
            LOGGER.info(
                "[DRY RUN] Would convert delimitation",
                delimitation=row.id,
                x=converted.x,
                y=converted.y,
                width=converted.width,
                height=converted.height,
            )
        else:
            row.x = converted.x
            row.y = converted.y
            row.width = converted.width
            row.height = converted.height
            row.coordinate_type = CoordinateType.PERCENTAGE
            row.original_x = converted.original_x
            row.original_y = converted.original_y
            row.original_width = converted.original_width
            row.original_height = converted.original_height
            row.reference_width = converted.reference_width
            row.reference_height = converted.reference_height
        report.converted += 1

    if dry_run:
        session.rollback()
    else:
        session.commit()

    LOGGER.info(
        "Delimitation migration finished",
        examined=report.examined,
        converted=report.converted,
        failed=len(report.failed),
        dry_run=dry_run,
    )
    return report


__all__ = ["MigrationReport", "migrate_delimitations", "reference_size"]

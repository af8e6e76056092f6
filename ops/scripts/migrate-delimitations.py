#!/usr/bin/env python3
"""Convert legacy pixel (ABSOLUTE) delimitations to percentages.

Usage:
    python ops/scripts/migrate-delimitations.py              # Convert and commit
    python ops/scripts/migrate-delimitations.py --dry-run    # Preview without writing
    python ops/scripts/migrate-delimitations.py --default-width 1200 --default-height 1200
"""

import argparse
import sys
from pathlib import Path

# Add services to path
ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(ROOT / "services" / "common" / "src"))
sys.path.insert(0, str(ROOT / "services" / "personalization" / "src"))

from common.db import SessionLocal
from common.logging import configure_logging, get_logger
from personalization.migrations import migrate_delimitations

configure_logging()
LOGGER = get_logger(__name__)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Migrate ABSOLUTE delimitations to PERCENTAGE",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview conversions without writing to the database",
    )
    parser.add_argument(
        "--default-width",
        type=int,
        default=None,
        help="Reference width when neither the zone nor its image records one",
    )
    parser.add_argument(
        "--default-height",
        type=int,
        default=None,
        help="Reference height when neither the zone nor its image records one",
    )
    args = parser.parse_args()

    session = SessionLocal()
    try:
        report = migrate_delimitations(
            session,
            dry_run=args.dry_run,
            default_width=args.default_width,
            default_height=args.default_height,
        )
    except Exception as e:
        session.rollback()
        LOGGER.error("Delimitation migration failed", error=str(e), exc_info=True)
        return 1
    finally:
        session.close()

    print("\n" + "=" * 60)
    print(f"{'DRY RUN - ' if args.dry_run else ''}Delimitation Migration Summary")
    print("=" * 60)
    print(f"Examined:  {report.examined}")
    print(f"Converted: {report.converted}")
    print(f"Failed:    {len(report.failed)}")
    for row_id, error in report.failed:
        print(f"  - #{row_id}: {error}")
    print("=" * 60)

    if args.dry_run:
        print("\nThis was a dry run. No changes were made to the database.")

    return 0 if not report.failed else 2


if __name__ == "__main__":
    sys.exit(main())

"""Shared fixtures for personalization unit tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Iterator, List

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT / "services/common/src"))
sys.path.append(str(ROOT / "services/personalization/src"))

# Must be set before common.db builds its engine.
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from common.db.models import (
    Base,
    BaseProduct,
    Design,
    PostValidationAction,
    ProductStatus,
    VendorProduct,
)

VENDOR_A = 10
VENDOR_B = 20
ADMIN_ID = 1

DESIGN_URL = "https://cdn.example.com/podmarket/designs/abc123.png"


class RecordingNotifier:
    def __init__(self) -> None:
        self.events: List = []

    def publish(self, event) -> None:
        self.events.append(event)


class FailingNotifier:
    def publish(self, event) -> None:
        raise ConnectionError("broker unavailable")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> Callable[[], Session]:
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def session(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(session: Session) -> Session:
    """Two vendors, their designs and products.

    - design 1: vendor A, private, stored at DESIGN_URL
    - design 2: vendor B, private
    - design 3: vendor B, published
    - product 7: vendor A, T-shirt, no design
    - product 8: vendor A, mug carrying design 1
    - product 9: vendor B
    """
    tshirt = BaseProduct(id=1, name="T-Shirt Premium")
    mug = BaseProduct(id=2, name="Mug Classique")
    session.add_all([tshirt, mug])
    session.add_all(
        [
            Design(
                id=1,
                vendor_id=VENDOR_A,
                name="Sunset",
                image_url=DESIGN_URL,
                storage_public_id="abc123",
                is_published=False,
            ),
            Design(id=2, vendor_id=VENDOR_B, name="Private", is_published=False),
            Design(id=3, vendor_id=VENDOR_B, name="Shared", is_published=True),
        ]
    )
    session.flush()
    session.add_all(
        [
            VendorProduct(
                id=7,
                vendor_id=VENDOR_A,
                base_product_id=1,
                name="Sunset tee",
                status=ProductStatus.DRAFT,
                post_validation_action=PostValidationAction.AUTO_PUBLISH,
            ),
            VendorProduct(
                id=8,
                vendor_id=VENDOR_A,
                base_product_id=2,
                design_id=1,
                name="Sunset mug",
                status=ProductStatus.DRAFT,
            ),
            VendorProduct(id=9, vendor_id=VENDOR_B, base_product_id=1, name="Other tee"),
        ]
    )
    session.commit()
    return session


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()

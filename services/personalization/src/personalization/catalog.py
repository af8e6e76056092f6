"""Product and design lookups used for ownership checks."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from common.db.models import Design, VendorProduct


class CatalogLookup:
    """Read-only access to vendor products and designs."""

    def __init__(self, session: Session):
        self.session = session

    def get_product(self, product_id: int) -> Optional[VendorProduct]:
        return self.session.get(VendorProduct, product_id)

    def get_design(self, design_id: int) -> Optional[Design]:
        return self.session.get(Design, design_id)

    def find_design_by_url(self, url: str, vendor_id: Optional[int] = None) -> Optional[Design]:
        stmt = select(Design).where(Design.image_url == url)
        if vendor_id is not None:
            stmt = stmt.where(Design.vendor_id == vendor_id)
        return self.session.scalars(stmt.order_by(Design.id)).first()

    def find_design_by_public_id(self, public_id: str) -> Optional[Design]:
        stmt = select(Design).where(Design.storage_public_id == public_id).order_by(Design.id)
        return self.session.scalars(stmt).first()


__all__ = ["CatalogLookup"]

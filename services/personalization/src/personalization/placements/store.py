"""Persistence of design placements keyed by (vendor product, design)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from common.db.models import Design, ProductDesignPosition, VendorProduct
from common.logging import get_logger

from ..catalog import CatalogLookup
from ..classifier import product_types
from ..errors import Forbidden, NotFound, PipelineError
from .normalize import Placement, normalize_position
from .transforms import DesignRef, extract_positioning, resolve_design

LOGGER = get_logger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _to_placement(row: ProductDesignPosition) -> Placement:
    return Placement(
        vendor_product_id=row.vendor_product_id,
        design_id=row.design_id,
        position=normalize_position(row.position),
        updated_at=row.updated_at,
    )


class PlacementStore:
    """Vendor placements of designs on their products.

    Writes and the owner-scoped read check the caller against the product and
    design before touching the table.
    """

    def __init__(self, session: Session, catalog: Optional[CatalogLookup] = None):
        self.session = session
        self.catalog = catalog or CatalogLookup(session)

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    def _owned_product(self, caller_vendor_id: int, product_id: int) -> VendorProduct:
        product = self.catalog.get_product(product_id)
        if product is None:
            raise NotFound(f"Vendor product {product_id} not found")
        if product.vendor_id != caller_vendor_id:
            raise Forbidden(f"Vendor product {product_id} belongs to another vendor")
        return product

    def check_access(
        self, caller_vendor_id: int, product_id: int, design_id: int
    ) -> Tuple[VendorProduct, Design]:
        """Return product and design when the caller may place the design on the product."""
        product = self._owned_product(caller_vendor_id, product_id)

        design = self.catalog.get_design(design_id)
        if design is None:
            raise NotFound(f"Design {design_id} not found")
        if design.vendor_id != caller_vendor_id and not design.is_published:
            raise Forbidden(f"Design {design_id} is neither owned nor published")
        return product, design

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def upsert(
        self,
        caller_vendor_id: int,
        product_id: int,
        design_id: int,
        positioning: Optional[Mapping[str, Any]],
    ) -> Placement:
        """Normalize and store a placement, replacing any previous one for the pair."""
        self.check_access(caller_vendor_id, product_id, design_id)
        position = normalize_position(positioning)
        now = datetime.utcnow()

        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise PipelineError(f"Upsert not supported on {dialect}")

        stmt = insert(ProductDesignPosition).values(
            vendor_product_id=product_id,
            design_id=design_id,
            position=position.to_json(),
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[
                ProductDesignPosition.vendor_product_id,
                ProductDesignPosition.design_id,
            ],
            set_={
                "position": stmt.excluded["position"],
                "updated_at": stmt.excluded["updated_at"],
            },
        )
        self.session.execute(stmt)
        self.session.commit()

        LOGGER.info(
            "Placement saved",
            vendor=caller_vendor_id,
            product=product_id,
            design=design_id,
        )
        return Placement(
            vendor_product_id=product_id,
            design_id=design_id,
            position=position,
            updated_at=now,
        )

    def get(self, product_id: int, design_id: int) -> Placement:
        row = self.session.get(
            ProductDesignPosition, (product_id, design_id), populate_existing=True
        )
        if row is None:
            raise NotFound(f"No placement for product {product_id} and design {design_id}")
        return _to_placement(row)

    def get_for_owner(self, caller_vendor_id: int, product_id: int, design_id: int) -> Placement:
        self.check_access(caller_vendor_id, product_id, design_id)
        return self.get(product_id, design_id)

    def delete(self, caller_vendor_id: int, product_id: int, design_id: int) -> None:
        """Remove a placement. Missing records are not an error."""
        self._owned_product(caller_vendor_id, product_id)
        result = self.session.execute(
            delete(ProductDesignPosition).where(
                ProductDesignPosition.vendor_product_id == product_id,
                ProductDesignPosition.design_id == design_id,
            )
        )
        self.session.commit()
        LOGGER.info(
            "Placement deleted",
            vendor=caller_vendor_id,
            product=product_id,
            design=design_id,
            removed=result.rowcount,
        )

    def list_for_product(self, product_id: int) -> List[Placement]:
        rows = self.session.scalars(
            select(ProductDesignPosition)
            .where(ProductDesignPosition.vendor_product_id == product_id)
            .order_by(ProductDesignPosition.design_id)
            .execution_options(populate_existing=True)
        )
        return [_to_placement(row) for row in rows]

    def count_for_product(self, product_id: int) -> int:
        return self.session.scalar(
            select(func.count())
            .select_from(ProductDesignPosition)
            .where(ProductDesignPosition.vendor_product_id == product_id)
        ) or 0

    def suggest_for_product(
        self, caller_vendor_id: int, product_id: int, design_id: Optional[int] = None
    ) -> Dict[str, Any]:
        """Editor pre-positioning for one of the caller's products.

        The stored placement for ``design_id`` is returned when there is one. The
        product type always comes from the base product's name.
        """
        product = self._owned_product(caller_vendor_id, product_id)
        base_name = product.base_product.name if product.base_product else None
        suggestion = product_types.suggest(base_name)
        suggestion["source"] = "classifier"
        suggestion["savedPosition"] = None

        if design_id is not None:
            row = self.session.get(
                ProductDesignPosition, (product_id, design_id), populate_existing=True
            )
            if row is not None:
                suggestion["source"] = "saved"
                suggestion["savedPosition"] = normalize_position(row.position).to_json()

        LOGGER.info(
            "Positioning suggested",
            vendor=caller_vendor_id,
            product=product_id,
            product_type=suggestion["productType"],
            source=suggestion["source"],
        )
        return suggestion

    def derive_from_transform_event(
        self,
        caller_vendor_id: int,
        product_id: int,
        design_ref: DesignRef,
        payload: Any,
    ) -> Optional[Placement]:
        """Store the placement embedded in an editor transform event, if any.

        Never raises: unresolved designs, payloads without positioning and
        permission failures are logged and dropped.
        """
        positioning = extract_positioning(payload)
        if positioning is None:
            LOGGER.warning(
                "Transform event without positioning",
                vendor=caller_vendor_id,
                product=product_id,
            )
            return None

        design = resolve_design(self.catalog, caller_vendor_id, design_ref)
        if design is None:
            LOGGER.warning(
                "Transform event for unknown design",
                vendor=caller_vendor_id,
                product=product_id,
                design_ref=str(design_ref),
            )
            return None

        try:
            return self.upsert(caller_vendor_id, product_id, design.id, positioning)
        except PipelineError as exc:
            self.session.rollback()
            LOGGER.warning(
                "Transform event dropped",
                vendor=caller_vendor_id,
                product=product_id,
                design=design.id,
                error=exc.code,
                detail=exc.message,
            )
            return None


__all__ = ["PlacementStore"]

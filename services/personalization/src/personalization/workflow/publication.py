"""Publication workflow for vendor products.

States::

    DRAFT ──submit──▶ PENDING ──approve──▶ PUBLISHED  (AUTO_PUBLISH)
      ▲                  │    └─approve──▶ DRAFT      (TO_DRAFT, validated)
      │                  └──reject───▶ REJECTED ──submit──▶ PENDING
      └────unpublish──── PUBLISHED ◀──publish── validated DRAFT

Each transition is a compare-and-set update on the status that was read, so a
concurrent decision on the same product fails with ``InvalidTransition``
instead of silently overwriting the first one. Every transition is recorded in
``publication_events`` and handed to the notifier.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from common.config import settings
from common.db.models import (
    PostValidationAction,
    ProductStatus,
    PublicationEvent,
    VendorProduct,
)
from common.logging import get_logger

from ..errors import (
    BypassDisabled,
    Forbidden,
    InvalidTransition,
    MissingPlacement,
    MissingReason,
    NotFound,
)
from ..placements import PlacementStore
from .notifier import LoggingNotifier, Notifier, PublicationNotice

LOGGER = get_logger(__name__)

SUBMITTABLE = (ProductStatus.DRAFT, ProductStatus.REJECTED)
FORCE_PUBLISHABLE = (ProductStatus.DRAFT, ProductStatus.PENDING, ProductStatus.REJECTED)


class PublicationWorkflow:
    """Moves vendor products through review and publication."""

    def __init__(
        self,
        session: Session,
        notifier: Optional[Notifier] = None,
        placements: Optional[PlacementStore] = None,
        allow_bypass: Optional[bool] = None,
    ):
        self.session = session
        self.notifier = notifier or LoggingNotifier()
        self.placements = placements or PlacementStore(session)
        self._allow_bypass = allow_bypass

    @property
    def allow_bypass(self) -> bool:
        if self._allow_bypass is not None:
            return self._allow_bypass
        return settings.allow_validation_bypass

    # ------------------------------------------------------------------
    # Vendor transitions
    # ------------------------------------------------------------------

    def submit_for_review(self, product_id: int, actor_id: int) -> VendorProduct:
        """DRAFT or REJECTED -> PENDING.

        Design-based products need at least one stored placement.
        """
        product = self._owned(actor_id, product_id)
        self._expect(product, SUBMITTABLE, "submit")
        if product.design_id is not None and self.placements.count_for_product(product_id) == 0:
            raise MissingPlacement(
                f"Vendor product {product_id} has no design placement to review"
            )

        return self._transition(
            product,
            new_status=ProductStatus.PENDING,
            event_type="submitted",
            actor_id=actor_id,
            values={"is_validated": False, "validated_at": None, "rejection_reason": None},
        )

    def publish(self, caller_vendor_id: int, product_id: int) -> VendorProduct:
        """Validated DRAFT -> PUBLISHED, for products approved with TO_DRAFT."""
        product = self._owned(caller_vendor_id, product_id)
        self._expect(product, (ProductStatus.DRAFT,), "publish")
        if not product.is_validated:
            raise InvalidTransition(
                f"Vendor product {product_id} must be validated before publication"
            )
        return self._transition(
            product,
            new_status=ProductStatus.PUBLISHED,
            event_type="published",
            actor_id=caller_vendor_id,
            guard=VendorProduct.is_validated.is_(True),
        )

    def unpublish(self, caller_vendor_id: int, product_id: int) -> VendorProduct:
        """PUBLISHED -> DRAFT. Validation is kept."""
        product = self._owned(caller_vendor_id, product_id)
        self._expect(product, (ProductStatus.PUBLISHED,), "unpublish")
        return self._transition(
            product,
            new_status=ProductStatus.DRAFT,
            event_type="unpublished",
            actor_id=caller_vendor_id,
        )

    def set_post_validation_action(
        self, caller_vendor_id: int, product_id: int, action: PostValidationAction
    ) -> VendorProduct:
        """Choose what the next approval does. Allowed in any state."""
        product = self._owned(caller_vendor_id, product_id)
        action = PostValidationAction(action)
        product.post_validation_action = action
        self.session.commit()
        self.session.refresh(product)
        LOGGER.info(
            "Post-validation action updated",
            vendor=caller_vendor_id,
            product=product_id,
            action=action.value,
        )
        return product

    # ------------------------------------------------------------------
    # Admin transitions
    # ------------------------------------------------------------------

    def approve(self, admin_id: int, product_id: int) -> VendorProduct:
        """PENDING -> PUBLISHED, or DRAFT when the vendor chose TO_DRAFT."""
        product = self._get(product_id)
        self._expect(product, (ProductStatus.PENDING,), "approve")

        if product.post_validation_action == PostValidationAction.TO_DRAFT:
            new_status = ProductStatus.DRAFT
        else:
            new_status = ProductStatus.PUBLISHED

        return self._transition(
            product,
            new_status=new_status,
            event_type="approved",
            actor_id=admin_id,
            values={
                "is_validated": True,
                "validated_at": datetime.utcnow(),
                "validated_by": admin_id,
                "rejection_reason": None,
            },
        )

    def reject(self, admin_id: int, product_id: int, reason: Optional[str]) -> VendorProduct:
        """PENDING -> REJECTED with a mandatory reason."""
        reason = (reason or "").strip()
        if not reason:
            raise MissingReason("A rejection reason is required")

        product = self._get(product_id)
        self._expect(product, (ProductStatus.PENDING,), "reject")
        return self._transition(
            product,
            new_status=ProductStatus.REJECTED,
            event_type="rejected",
            actor_id=admin_id,
            reason=reason,
            values={
                "is_validated": False,
                "validated_at": None,
                "validated_by": admin_id,
                "rejection_reason": reason,
            },
        )

    def force_publish(self, admin_id: int, product_id: int, reason: Optional[str]) -> VendorProduct:
        """Publish without validation.

        Disabled unless ``ALLOW_VALIDATION_BYPASS`` is set. The product is
        flagged ``validation_bypassed`` and the audit row carries ``bypass``.
        """
        if not self.allow_bypass:
            raise BypassDisabled("Validation bypass is disabled")
        reason = (reason or "").strip()
        if not reason:
            raise MissingReason("A reason is required to bypass validation")

        product = self._get(product_id)
        self._expect(product, FORCE_PUBLISHABLE, "force-publish")
        LOGGER.warning("Validation bypassed", admin=admin_id, product=product_id, reason=reason)
        return self._transition(
            product,
            new_status=ProductStatus.PUBLISHED,
            event_type="force_published",
            actor_id=admin_id,
            reason=reason,
            bypass=True,
            values={
                "validation_bypassed": True,
                "bypassed_by": admin_id,
                "rejection_reason": None,
            },
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_pending(self) -> List[VendorProduct]:
        stmt = (
            select(VendorProduct)
            .where(VendorProduct.status == ProductStatus.PENDING)
            .order_by(VendorProduct.updated_at, VendorProduct.id)
        )
        return list(self.session.scalars(stmt))

    def history(self, product_id: int) -> List[PublicationEvent]:
        self._get(product_id)
        stmt = (
            select(PublicationEvent)
            .where(PublicationEvent.product_id == product_id)
            .order_by(PublicationEvent.id)
        )
        return list(self.session.scalars(stmt))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get(self, product_id: int) -> VendorProduct:
        product = self.session.get(VendorProduct, product_id, populate_existing=True)
        if product is None:
            raise NotFound(f"Vendor product {product_id} not found")
        return product

    def _owned(self, vendor_id: int, product_id: int) -> VendorProduct:
        product = self._get(product_id)
        if product.vendor_id != vendor_id:
            raise Forbidden(f"Vendor product {product_id} belongs to another vendor")
        return product

    @staticmethod
    def _expect(product: VendorProduct, allowed: Iterable[ProductStatus], action: str) -> None:
        allowed = tuple(allowed)
        if product.status not in allowed:
            expected = ", ".join(status.value for status in allowed)
            raise InvalidTransition(
                f"Cannot {action} vendor product {product.id} in status "
                f"{product.status.value} (expected {expected})"
            )

    def _transition(
        self,
        product: VendorProduct,
        *,
        new_status: ProductStatus,
        event_type: str,
        actor_id: int,
        reason: Optional[str] = None,
        bypass: bool = False,
        values: Optional[Dict[str, Any]] = None,
        guard: Any = None,
    ) -> VendorProduct:
        old_status = product.status
        now = datetime.utcnow()

        stmt = (
            update(VendorProduct)
            .where(VendorProduct.id == product.id, VendorProduct.status == old_status)
            .values(status=new_status, updated_at=now, **(values or {}))
            .execution_options(synchronize_session=False)
        )
        if guard is not None:
            stmt = stmt.where(guard)

        result = self.session.execute(stmt)
        if result.rowcount == 0:
            self.session.rollback()
            raise InvalidTransition(
                f"Vendor product {product.id} was already decided by another request"
            )

        self.session.add(
            PublicationEvent(
                product_id=product.id,
                event_type=event_type,
                old_status=old_status,
                new_status=new_status,
                actor_id=actor_id,
                reason=reason,
                bypass=bypass,
                created_at=now,
            )
        )
        self.session.commit()
        self.session.refresh(product)

        LOGGER.info(
            "Publication transition",
            product=product.id,
            event_type=event_type,
            old_status=old_status.value,
            new_status=new_status.value,
            actor=actor_id,
        )
        self._notify(
            PublicationNotice(
                type=event_type,
                product_id=product.id,
                old_status=old_status.value,
                new_status=new_status.value,
                actor_id=actor_id,
                vendor_id=product.vendor_id,
                reason=reason,
                timestamp=now,
            )
        )
        return product

    def _notify(self, notice: PublicationNotice) -> None:
        try:
            self.notifier.publish(notice)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error(
                "Failed to deliver publication event",
                product=notice.product_id,
                event_type=notice.type,
                error=str(exc),
            )


__all__ = ["PublicationWorkflow", "SUBMITTABLE", "FORCE_PUBLISHABLE"]

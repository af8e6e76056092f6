"""SQLAlchemy models reflecting the shared data model."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    pass


class CoordinateType(enum.Enum):
    PERCENTAGE = "PERCENTAGE"
    ABSOLUTE = "ABSOLUTE"


class ProductStatus(enum.Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


class PostValidationAction(enum.Enum):
    AUTO_PUBLISH = "AUTO_PUBLISH"
    TO_DRAFT = "TO_DRAFT"


class BaseProduct(Base):
    """Admin-defined blank product (t-shirt, mug, cap...)."""

    __tablename__ = "base_products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    images: Mapped[List["ProductImage"]] = relationship(
        back_populates="product", cascade="all, delete-orphan"
    )


class ProductImage(Base):
    """One view (front, back...) of a base product."""

    __tablename__ = "product_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("base_products.id", ondelete="CASCADE"), nullable=False
    )
    view: Mapped[str] = mapped_column(String(50), default="FRONT")
    url: Mapped[Optional[str]] = mapped_column(String(1024))
    natural_width: Mapped[Optional[int]] = mapped_column(Integer)
    natural_height: Mapped[Optional[int]] = mapped_column(Integer)

    product: Mapped[BaseProduct] = relationship(back_populates="images")
    delimitations: Mapped[List["Delimitation"]] = relationship(
        back_populates="image", cascade="all, delete-orphan"
    )


class Delimitation(Base):
    """Printable zone drawn on a product image."""

    __tablename__ = "delimitations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_image_id: Mapped[int] = mapped_column(
        ForeignKey("product_images.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[Optional[str]] = mapped_column(String(120))
    x: Mapped[float] = mapped_column(Float, nullable=False)
    y: Mapped[float] = mapped_column(Float, nullable=False)
    width: Mapped[float] = mapped_column(Float, nullable=False)
    height: Mapped[float] = mapped_column(Float, nullable=False)
    rotation: Mapped[float] = mapped_column(Float, default=0.0)
    coordinate_type: Mapped[CoordinateType] = mapped_column(
        Enum(CoordinateType), default=CoordinateType.PERCENTAGE
    )
    # Legacy pixel values kept after migrating to percentages
    original_x: Mapped[Optional[float]] = mapped_column(Float)
    original_y: Mapped[Optional[float]] = mapped_column(Float)
    original_width: Mapped[Optional[float]] = mapped_column(Float)
    original_height: Mapped[Optional[float]] = mapped_column(Float)
    reference_width: Mapped[Optional[int]] = mapped_column(Integer)
    reference_height: Mapped[Optional[int]] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    image: Mapped[ProductImage] = relationship(back_populates="delimitations")


class Design(Base):
    """Reusable graphic asset uploaded by a vendor."""

    __tablename__ = "designs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    vendor_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), index=True)
    storage_public_id: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class VendorProduct(Base):
    """A vendor's customized product and its publication state."""

    __tablename__ = "vendor_products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    vendor_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    base_product_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("base_products.id", ondelete="SET NULL")
    )
    design_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("designs.id", ondelete="SET NULL")
    )
    name: Mapped[str] = mapped_column(String(255), default="")
    status: Mapped[ProductStatus] = mapped_column(
        Enum(ProductStatus), default=ProductStatus.DRAFT, nullable=False
    )
    is_validated: Mapped[bool] = mapped_column(Boolean, default=False)
    validated_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    validated_by: Mapped[Optional[int]] = mapped_column(Integer)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text)
    post_validation_action: Mapped[PostValidationAction] = mapped_column(
        Enum(PostValidationAction), default=PostValidationAction.AUTO_PUBLISH, nullable=False
    )
    validation_bypassed: Mapped[bool] = mapped_column(Boolean, default=False)
    bypassed_by: Mapped[Optional[int]] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    base_product: Mapped[Optional[BaseProduct]] = relationship()
    design_positions: Mapped[List["ProductDesignPosition"]] = relationship(
        back_populates="vendor_product", cascade="all, delete-orphan", passive_deletes=True
    )


class ProductDesignPosition(Base):
    """Stored placement of one design on one vendor product."""

    __tablename__ = "product_design_positions"

    vendor_product_id: Mapped[int] = mapped_column(
        ForeignKey("vendor_products.id", ondelete="CASCADE"), primary_key=True
    )
    design_id: Mapped[int] = mapped_column(
        ForeignKey("designs.id", ondelete="CASCADE"), primary_key=True
    )
    position: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    vendor_product: Mapped[VendorProduct] = relationship(back_populates="design_positions")


class PublicationEvent(Base):
    """Append-only audit trail of publication workflow transitions."""

    __tablename__ = "publication_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("vendor_products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    old_status: Mapped[ProductStatus] = mapped_column(Enum(ProductStatus), nullable=False)
    new_status: Mapped[ProductStatus] = mapped_column(Enum(ProductStatus), nullable=False)
    actor_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text)
    bypass: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


__all__ = [
    "Base",
    # Enums
    "CoordinateType",
    "ProductStatus",
    "PostValidationAction",
    # Models
    "BaseProduct",
    "ProductImage",
    "Delimitation",
    "Design",
    "VendorProduct",
    "ProductDesignPosition",
    "PublicationEvent",
]

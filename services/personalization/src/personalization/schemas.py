"""Request and response models for the personalization API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from common.db.models import CoordinateType, PostValidationAction, ProductStatus
from common.schemas import MarketModel

from .placements import Placement

ConstraintValue = Union[bool, int, float, str, None]


class PositionModel(MarketModel):
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0
    rendered_width: float = Field(100.0, alias="renderedWidth")
    rendered_height: float = Field(100.0, alias="renderedHeight")
    constraints: Dict[str, ConstraintValue] = Field(default_factory=dict)


class PlacementResponse(MarketModel):
    vendor_product_id: int = Field(..., alias="vendorProductId")
    design_id: int = Field(..., alias="designId")
    position: PositionModel
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


def serialize_placement(placement: Placement) -> PlacementResponse:
    return PlacementResponse.model_validate(placement.to_json())


class TransformRequest(MarketModel):
    design_id: Optional[int] = Field(None, alias="designId")
    design_url: Optional[str] = Field(None, alias="designUrl")
    transforms: Dict[str, Any] = Field(default_factory=dict)


class TransformResponse(MarketModel):
    saved: bool
    placement: Optional[PlacementResponse] = None


class PositioningTemplate(MarketModel):
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0


class SuggestionResponse(MarketModel):
    product_type: str = Field(..., alias="productType")
    description: str
    default_position: PositioningTemplate = Field(..., alias="defaultPosition")
    presets: Dict[str, PositioningTemplate]
    source: str = "classifier"
    saved_position: Optional[PositionModel] = Field(None, alias="savedPosition")


class VendorProductStatusResponse(MarketModel):
    id: int
    vendor_id: int = Field(..., alias="vendorId")
    name: str = ""
    status: ProductStatus
    is_validated: bool = Field(False, alias="isValidated")
    validated_at: Optional[datetime] = Field(None, alias="validatedAt")
    validated_by: Optional[int] = Field(None, alias="validatedBy")
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")
    post_validation_action: PostValidationAction = Field(..., alias="postValidationAction")
    validation_bypassed: bool = Field(False, alias="validationBypassed")


class PostValidationActionRequest(MarketModel):
    post_validation_action: PostValidationAction = Field(..., alias="postValidationAction")


class ReasonRequest(MarketModel):
    # Optional so a missing reason surfaces as missing_reason rather than a 422.
    reason: Optional[str] = None


class PublicationEventResponse(MarketModel):
    id: int
    product_id: int = Field(..., alias="productId")
    event_type: str = Field(..., alias="eventType")
    old_status: ProductStatus = Field(..., alias="oldStatus")
    new_status: ProductStatus = Field(..., alias="newStatus")
    actor_id: int = Field(..., alias="actorId")
    reason: Optional[str] = None
    bypass: bool = False
    created_at: datetime = Field(..., alias="createdAt")


class DelimitationRequest(MarketModel):
    name: Optional[str] = None
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    coordinate_type: CoordinateType = Field(CoordinateType.PERCENTAGE, alias="coordinateType")
    reference_width: Optional[float] = Field(None, alias="referenceWidth")
    reference_height: Optional[float] = Field(None, alias="referenceHeight")


class DelimitationModel(MarketModel):
    name: Optional[str] = None
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    coordinate_type: CoordinateType = Field(..., alias="coordinateType")


class DelimitationValidationResponse(MarketModel):
    valid: bool
    percentage: Optional[DelimitationModel] = None


__all__ = [
    "PositionModel",
    "PlacementResponse",
    "serialize_placement",
    "TransformRequest",
    "TransformResponse",
    "PositioningTemplate",
    "SuggestionResponse",
    "VendorProductStatusResponse",
    "PostValidationActionRequest",
    "ReasonRequest",
    "PublicationEventResponse",
    "DelimitationRequest",
    "DelimitationModel",
    "DelimitationValidationResponse",
]

"""Admin review queue and delimitation checks."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends

from common.db.models import CoordinateType
from common.logging import get_logger

from ..dependencies import AuthContext, get_workflow, require_admin
from ..geometry import coordinates
from ..schemas import (
    DelimitationModel,
    DelimitationRequest,
    DelimitationValidationResponse,
    PublicationEventResponse,
    ReasonRequest,
    VendorProductStatusResponse,
)
from ..workflow import PublicationWorkflow

LOGGER = get_logger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/vendor-products/pending", response_model=List[VendorProductStatusResponse])
def list_pending(
    admin: AuthContext = Depends(require_admin),
    workflow: PublicationWorkflow = Depends(get_workflow),
) -> List[VendorProductStatusResponse]:
    return [VendorProductStatusResponse.model_validate(p) for p in workflow.list_pending()]


@router.post("/vendor-products/{product_id}/approve", response_model=VendorProductStatusResponse)
def approve(
    product_id: int,
    admin: AuthContext = Depends(require_admin),
    workflow: PublicationWorkflow = Depends(get_workflow),
) -> VendorProductStatusResponse:
    return VendorProductStatusResponse.model_validate(workflow.approve(admin.user_id, product_id))


@router.post("/vendor-products/{product_id}/reject", response_model=VendorProductStatusResponse)
def reject(
    product_id: int,
    request: Optional[ReasonRequest] = Body(default=None),
    admin: AuthContext = Depends(require_admin),
    workflow: PublicationWorkflow = Depends(get_workflow),
) -> VendorProductStatusResponse:
    product = workflow.reject(admin.user_id, product_id, request.reason if request else None)
    return VendorProductStatusResponse.model_validate(product)


@router.post(
    "/vendor-products/{product_id}/force-publish", response_model=VendorProductStatusResponse
)
def force_publish(
    product_id: int,
    request: Optional[ReasonRequest] = Body(default=None),
    admin: AuthContext = Depends(require_admin),
    workflow: PublicationWorkflow = Depends(get_workflow),
) -> VendorProductStatusResponse:
    product = workflow.force_publish(
        admin.user_id, product_id, request.reason if request else None
    )
    return VendorProductStatusResponse.model_validate(product)


@router.get(
    "/vendor-products/{product_id}/history", response_model=List[PublicationEventResponse]
)
def history(
    product_id: int,
    admin: AuthContext = Depends(require_admin),
    workflow: PublicationWorkflow = Depends(get_workflow),
) -> List[PublicationEventResponse]:
    return [PublicationEventResponse.model_validate(e) for e in workflow.history(product_id)]


@router.post("/delimitations/validate", response_model=DelimitationValidationResponse)
def validate_delimitation(
    request: DelimitationRequest,
    admin: AuthContext = Depends(require_admin),
) -> DelimitationValidationResponse:
    """Validate a zone drawn in the product editor.

    ABSOLUTE zones sent with their reference image size also get their
    percentage equivalent back.
    """
    box = coordinates.DelimitationBox(
        x=request.x,
        y=request.y,
        width=request.width,
        height=request.height,
        rotation=request.rotation,
        coordinate_type=request.coordinate_type,
        name=request.name,
    )
    coordinates.validate(box)

    percentage = None
    if box.coordinate_type == CoordinateType.PERCENTAGE:
        percentage = box
    elif request.reference_width and request.reference_height:
        percentage = coordinates.to_percentage(
            box, request.reference_width, request.reference_height
        )
        # Zones drawn past the reference image edge land outside 0-100.
        coordinates.validate(percentage)

    return DelimitationValidationResponse(
        valid=True,
        percentage=DelimitationModel.model_validate(percentage) if percentage else None,
    )

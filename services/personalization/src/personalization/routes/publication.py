"""Vendor side of the publication workflow."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..dependencies import AuthContext, get_current_user, get_workflow
from ..schemas import PostValidationActionRequest, VendorProductStatusResponse
from ..workflow import PublicationWorkflow

router = APIRouter(prefix="/api/vendor-products", tags=["publication"])


@router.post("/{product_id}/submit", response_model=VendorProductStatusResponse)
def submit_for_review(
    product_id: int,
    user: AuthContext = Depends(get_current_user),
    workflow: PublicationWorkflow = Depends(get_workflow),
) -> VendorProductStatusResponse:
    product = workflow.submit_for_review(product_id, user.user_id)
    return VendorProductStatusResponse.model_validate(product)


@router.post("/{product_id}/publish", response_model=VendorProductStatusResponse)
def publish(
    product_id: int,
    user: AuthContext = Depends(get_current_user),
    workflow: PublicationWorkflow = Depends(get_workflow),
) -> VendorProductStatusResponse:
    return VendorProductStatusResponse.model_validate(workflow.publish(user.user_id, product_id))


@router.post("/{product_id}/unpublish", response_model=VendorProductStatusResponse)
def unpublish(
    product_id: int,
    user: AuthContext = Depends(get_current_user),
    workflow: PublicationWorkflow = Depends(get_workflow),
) -> VendorProductStatusResponse:
    return VendorProductStatusResponse.model_validate(workflow.unpublish(user.user_id, product_id))


@router.patch("/{product_id}/post-validation-action", response_model=VendorProductStatusResponse)
def set_post_validation_action(
    product_id: int,
    request: PostValidationActionRequest,
    user: AuthContext = Depends(get_current_user),
    workflow: PublicationWorkflow = Depends(get_workflow),
) -> VendorProductStatusResponse:
    product = workflow.set_post_validation_action(
        user.user_id, product_id, request.post_validation_action
    )
    return VendorProductStatusResponse.model_validate(product)

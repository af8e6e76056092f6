"""Design placement routes for vendor products."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from common.logging import get_logger

from ..classifier import product_types
from ..dependencies import AuthContext, get_current_user, get_placement_store
from ..placements import PlacementStore
from ..schemas import (
    PlacementResponse,
    SuggestionResponse,
    TransformRequest,
    TransformResponse,
    serialize_placement,
)

LOGGER = get_logger(__name__)

router = APIRouter(prefix="/api/vendor-products", tags=["placements"])
positioning_router = APIRouter(prefix="/api/positioning", tags=["placements"])


def _unwrap_positioning(body: Dict[str, Any]) -> Dict[str, Any]:
    for key in ("position", "positioning"):
        nested = body.get(key)
        if isinstance(nested, dict):
            return nested
    return body


@router.put("/{product_id}/designs/{design_id}/position", response_model=PlacementResponse)
def save_position(
    product_id: int,
    design_id: int,
    body: Optional[Dict[str, Any]] = Body(default=None),
    user: AuthContext = Depends(get_current_user),
    store: PlacementStore = Depends(get_placement_store),
) -> PlacementResponse:
    placement = store.upsert(user.user_id, product_id, design_id, _unwrap_positioning(body or {}))
    return serialize_placement(placement)


@router.get("/{product_id}/designs/{design_id}/position", response_model=PlacementResponse)
def read_position(
    product_id: int,
    design_id: int,
    user: AuthContext = Depends(get_current_user),
    store: PlacementStore = Depends(get_placement_store),
) -> PlacementResponse:
    return serialize_placement(store.get(product_id, design_id))


@router.delete("/{product_id}/designs/{design_id}/position")
def delete_position(
    product_id: int,
    design_id: int,
    user: AuthContext = Depends(get_current_user),
    store: PlacementStore = Depends(get_placement_store),
) -> dict:
    store.delete(user.user_id, product_id, design_id)
    return {"deleted": True, "vendorProductId": product_id, "designId": design_id}


@router.get("/{product_id}/positions", response_model=List[PlacementResponse])
def list_positions(
    product_id: int,
    user: AuthContext = Depends(get_current_user),
    store: PlacementStore = Depends(get_placement_store),
) -> List[PlacementResponse]:
    return [serialize_placement(placement) for placement in store.list_for_product(product_id)]


@router.post("/{product_id}/transforms", response_model=TransformResponse)
def record_transform(
    product_id: int,
    request: TransformRequest,
    user: AuthContext = Depends(get_current_user),
    store: PlacementStore = Depends(get_placement_store),
) -> TransformResponse:
    """Save the placement carried by an editor transform event, best effort."""
    design_ref = request.design_id if request.design_id is not None else request.design_url
    if design_ref is None:
        LOGGER.warning("Transform event without design reference", product=product_id)
        return TransformResponse(saved=False)

    placement = store.derive_from_transform_event(
        user.user_id, product_id, design_ref, request.transforms
    )
    if placement is None:
        return TransformResponse(saved=False)
    return TransformResponse(saved=True, placement=serialize_placement(placement))


@positioning_router.get("/suggest", response_model=SuggestionResponse)
def suggest_positioning(
    product_name: Optional[str] = Query(default=None, alias="productName"),
) -> SuggestionResponse:
    return SuggestionResponse.model_validate(product_types.suggest(product_name))


@router.get("/{product_id}/positioning", response_model=SuggestionResponse)
def product_positioning(
    product_id: int,
    design_id: Optional[int] = Query(default=None, alias="designId"),
    user: AuthContext = Depends(get_current_user),
    store: PlacementStore = Depends(get_placement_store),
) -> SuggestionResponse:
    """Saved placement for the design if any, plus the base product's templates."""
    return SuggestionResponse.model_validate(
        store.suggest_for_product(user.user_id, product_id, design_id)
    )

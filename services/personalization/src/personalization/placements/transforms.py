"""Helpers for turning design-editor transform events into placements.

Transform events are telemetry from the editor, not commands: anything that
cannot be resolved is reported as ``None`` and the caller logs it.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any, Mapping, Optional, Union
from urllib.parse import urlparse

from common.db.models import Design
from common.logging import get_logger

from ..catalog import CatalogLookup

LOGGER = get_logger(__name__)

DesignRef = Union[int, str]


def extract_positioning(payload: Any) -> Optional[Mapping[str, Any]]:
    """Find the positioning object inside a free-form transform payload.

    Looks at ``positioning``, then ``position``, then the ``"0"`` key some
    editors emit, then the first object-valued entry that carries an ``x``.
    The result must have numeric ``x`` and ``y``.
    """
    if not isinstance(payload, Mapping):
        return None

    candidate = None
    for key in ("positioning", "position", "0"):
        value = payload.get(key)
        if isinstance(value, Mapping):
            candidate = value
            break
    else:
        for value in payload.values():
            if isinstance(value, Mapping) and "x" in value:
                candidate = value
                break

    if candidate is None:
        return None

    for axis in ("x", "y"):
        value = candidate.get(axis)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            LOGGER.warning("Transform positioning without numeric coordinates", positioning=dict(candidate))
            return None
    return candidate


def public_id_from_url(url: str) -> Optional[str]:
    """Storage identifier of an asset URL: last path segment without extension."""
    path = urlparse(url).path if "://" in url else url
    name = PurePosixPath(path).name
    if not name:
        return None
    return name.rsplit(".", 1)[0] if "." in name else name


def _as_design_id(design_ref: DesignRef) -> Optional[int]:
    if isinstance(design_ref, bool):
        return None
    if isinstance(design_ref, int):
        return design_ref
    text = str(design_ref).strip()
    return int(text) if text.isdigit() else None


def resolve_design(catalog: CatalogLookup, vendor_id: int, design_ref: DesignRef) -> Optional[Design]:
    """Resolve a design reference by id, then URL (vendor scoped, then any), then storage id."""
    design_id = _as_design_id(design_ref)
    if design_id is not None:
        design = catalog.get_design(design_id)
        if design is not None:
            return design

    url = str(design_ref).strip()
    if not url:
        return None

    design = catalog.find_design_by_url(url, vendor_id=vendor_id)
    if design is not None:
        return design

    design = catalog.find_design_by_url(url)
    if design is not None:
        LOGGER.info("Design resolved by URL outside vendor scope", vendor=vendor_id, design=design.id)
        return design

    public_id = public_id_from_url(url)
    if public_id:
        return catalog.find_design_by_public_id(public_id)
    return None


__all__ = ["DesignRef", "extract_positioning", "public_id_from_url", "resolve_design"]

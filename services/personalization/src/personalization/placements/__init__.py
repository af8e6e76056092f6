"""Design placement storage and normalization."""

from .normalize import Placement, Position, adapt_legacy_fields, normalize_position
from .store import PlacementStore

__all__ = [
    "Placement",
    "PlacementStore",
    "Position",
    "adapt_legacy_fields",
    "normalize_position",
]

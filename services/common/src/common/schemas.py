"""Pydantic schema helpers shared by services."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class MarketModel(BaseModel):
    """Base model enabling ORM mode and camelCase aliases on the wire."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


__all__ = ["MarketModel"]

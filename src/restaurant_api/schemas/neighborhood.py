"""Neighborhood schemas - read-only reference polygons."""

from typing import Any
from uuid import UUID

from pydantic import Field

from restaurant_api.schemas.base import ApiModel


class NeighborhoodGeometry(ApiModel):
    """Bare polygon coordinates; no geometry type is stored."""

    coordinates: list[Any]


class NeighborhoodCreate(ApiModel):
    """Input model used when loading reference data."""

    name: str = Field(..., min_length=1, max_length=255)
    geometry: NeighborhoodGeometry


class Neighborhood(NeighborhoodCreate):
    id: UUID

"""Restaurant schemas - request bodies, records and result envelopes."""

import math
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from restaurant_api.geo import MAX_LATITUDE, MAX_LONGITUDE
from restaurant_api.schemas.base import ApiModel, NonEmptyStr


class Address(ApiModel):
    """Street address with an optional [longitude, latitude] coordinate."""

    building: str | None = None
    street: str | None = None
    zipcode: str | None = None
    coord: list[float] | None = Field(
        default=None,
        description="Coordinate pair [longitude, latitude]",
    )

    @field_validator("coord")
    @classmethod
    def validate_coord(cls, v: list[float] | None) -> list[float] | None:
        if v is None:
            return v
        if len(v) != 2:
            raise ValueError("coord must be [lon, lat]")
        if not all(math.isfinite(c) for c in v):
            raise ValueError("coord values must be finite numbers")
        lng, lat = v
        if abs(lng) > MAX_LONGITUDE or abs(lat) > MAX_LATITUDE:
            raise ValueError("coord must be [lon, lat]")
        return v


class RatingSummary(ApiModel):
    """Aggregate over a restaurant's reviews."""

    avg: float = 0.0
    count: int = 0


class RestaurantCreate(ApiModel):
    """Request model for creating a restaurant."""

    name: NonEmptyStr = Field(..., max_length=255)
    borough: NonEmptyStr = Field(..., max_length=255)
    cuisine: NonEmptyStr = Field(..., max_length=255)
    address: Address | None = None


class RestaurantUpdate(ApiModel):
    """Request model for a partial restaurant update.

    Only fields present in the request are applied. The merged record is
    re-validated against RestaurantCreate.
    """

    name: NonEmptyStr | None = Field(default=None, max_length=255)
    borough: NonEmptyStr | None = Field(default=None, max_length=255)
    cuisine: NonEmptyStr | None = Field(default=None, max_length=255)
    address: Address | None = None


class Restaurant(ApiModel):
    """A restaurant record."""

    id: UUID
    name: str
    borough: str
    cuisine: str
    address: Address | None = None
    rating_summary: RatingSummary = Field(default_factory=RatingSummary)
    created_at: datetime
    updated_at: datetime


class RestaurantPage(ApiModel):
    """One page of restaurants plus the total matching count."""

    page: int
    limit: int
    total: int
    items: list[Restaurant]


class SortField(str, Enum):
    """Sort keys accepted by the search endpoint."""

    NAME = "name"
    CUISINE = "cuisine"
    CREATED_AT = "createdAt"
    RATING = "rating"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class RestaurantFilters(ApiModel):
    """Search filters. Unset fields do not constrain the result."""

    name: str | None = None
    borough: str | None = None
    cuisine: str | None = None
    zipcode: str | None = None
    min_rating: float | None = None
    max_rating: float | None = None


class PolygonQuery(ApiModel):
    """Request body for a containment query against a raw coordinate ring."""

    coordinates: list[Any] = Field(
        ...,
        description="Polygon ring(s) as [[lng, lat], ...]; the Polygon type is implied",
    )


class WithinResult(ApiModel):
    count: int
    items: list[Restaurant]


class NeighborhoodWithinResult(WithinResult):
    neighborhood: str


class NearbyRestaurant(Restaurant):
    """A restaurant annotated with its distance from the query origin."""

    distance_meters: float


class Origin(ApiModel):
    lng: float
    lat: float


class NearResult(ApiModel):
    origin: Origin
    count: int
    items: list[NearbyRestaurant]

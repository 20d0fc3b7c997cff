"""Pydantic schemas for API request/response models."""

from restaurant_api.schemas.neighborhood import (
    Neighborhood,
    NeighborhoodCreate,
    NeighborhoodGeometry,
)
from restaurant_api.schemas.restaurant import (
    Address,
    NearbyRestaurant,
    NearResult,
    NeighborhoodWithinResult,
    Origin,
    PolygonQuery,
    RatingSummary,
    Restaurant,
    RestaurantCreate,
    RestaurantFilters,
    RestaurantPage,
    RestaurantUpdate,
    SortField,
    SortOrder,
    WithinResult,
)
from restaurant_api.schemas.review import Review, ReviewCreate, ReviewUpdate

__all__ = [
    "Address",
    "NearbyRestaurant",
    "NearResult",
    "Neighborhood",
    "NeighborhoodCreate",
    "NeighborhoodGeometry",
    "NeighborhoodWithinResult",
    "Origin",
    "PolygonQuery",
    "RatingSummary",
    "Restaurant",
    "RestaurantCreate",
    "RestaurantFilters",
    "RestaurantPage",
    "RestaurantUpdate",
    "Review",
    "ReviewCreate",
    "ReviewUpdate",
    "SortField",
    "SortOrder",
    "WithinResult",
]

"""API routes for the restaurant reviews service."""

from restaurant_api.routes.restaurants import router as restaurants_router
from restaurant_api.routes.reviews import router as reviews_router

__all__ = [
    "restaurants_router",
    "reviews_router",
]

"""SQLAlchemy models for the restaurant reviews database."""

from restaurant_api.models.neighborhood import Neighborhood
from restaurant_api.models.restaurant import Restaurant
from restaurant_api.models.review import Review

__all__ = [
    "Neighborhood",
    "Restaurant",
    "Review",
]

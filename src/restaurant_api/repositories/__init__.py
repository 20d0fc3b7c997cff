"""Data access layer for the restaurant reviews API."""

from restaurant_api.repositories import neighborhood, restaurant, review

__all__ = [
    "neighborhood",
    "restaurant",
    "review",
]

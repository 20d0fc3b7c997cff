"""Review schemas."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BeforeValidator, Field, StringConstraints

from restaurant_api.schemas.base import ApiModel


def _whole_number(value: Any) -> Any:
    """Accept integral floats such as 5.0; everything else must already be an int."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


Rating = Annotated[int, Field(strict=True, ge=1, le=5), BeforeValidator(_whole_number)]
Comment = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=1000)
]


class ReviewCreate(ApiModel):
    """Request model for creating a review."""

    rating: Rating = Field(..., description="Integer rating from 1 to 5")
    comment: Comment


class ReviewUpdate(ApiModel):
    """Request model for a partial review update."""

    rating: Rating | None = None
    comment: Comment | None = None


class Review(ApiModel):
    """A review record."""

    id: UUID
    restaurant_id: UUID
    rating: int
    comment: str
    created_at: datetime

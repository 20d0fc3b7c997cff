"""Review endpoints. Every mutation reruns the parent's rating summary."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_api.database import get_db
from restaurant_api.dependencies import parse_id
from restaurant_api.errors import InputValidationError, NotFound, describe_validation_errors
from restaurant_api.ratings import refresh_rating_summary
from restaurant_api.repositories import restaurant as restaurant_repo
from restaurant_api.repositories import review as review_repo
from restaurant_api.schemas import Review, ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews"])


@router.post(
    "/restaurants/{restaurant_id}/reviews",
    response_model=Review,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    restaurant_id: str,
    payload: Any = Body(default=None),
    db: AsyncSession = Depends(get_db),
) -> Review:
    """Create a review (rating 1-5, non-empty comment) and refresh the summary.

    The id is checked first, then the restaurant must exist, then the body is
    validated.
    """
    rid = parse_id(restaurant_id, "Invalid restaurant id")
    if not await restaurant_repo.restaurant_exists(db, rid):
        raise NotFound("Restaurant not found")

    try:
        review_create = ReviewCreate.model_validate(payload)
    except ValidationError as exc:
        raise InputValidationError(describe_validation_errors(exc.errors())) from exc

    review = await review_repo.create_review(db, rid, review_create)
    await refresh_rating_summary(db, rid)
    return review


@router.get("/restaurants/{restaurant_id}/reviews", response_model=list[Review])
async def list_reviews(
    restaurant_id: str,
    db: AsyncSession = Depends(get_db),
) -> list[Review]:
    """List reviews for a restaurant, newest first."""
    rid = parse_id(restaurant_id, "Invalid restaurant id")
    return await review_repo.list_reviews_by_restaurant(db, rid)


@router.put("/reviews/{review_id}", response_model=Review)
@router.patch("/reviews/{review_id}", response_model=Review)
async def update_review(
    review_id: str,
    review_update: ReviewUpdate | None = None,
    db: AsyncSession = Depends(get_db),
) -> Review:
    """Update a review and refresh its restaurant's summary."""
    rid = parse_id(review_id, "Invalid review id")
    review = await review_repo.update_review(db, rid, review_update or ReviewUpdate())
    if review is None:
        raise NotFound("Review not found")

    await refresh_rating_summary(db, review.restaurant_id)
    return review


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a review and refresh its restaurant's summary."""
    restaurant_id = await review_repo.delete_review(db, parse_id(review_id, "Invalid review id"))
    if restaurant_id is None:
        raise NotFound("Review not found")

    await refresh_rating_summary(db, restaurant_id)

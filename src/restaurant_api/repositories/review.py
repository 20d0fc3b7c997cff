"""Review repository - data access for reviews.

These functions only touch the reviews table. Callers rerun
``ratings.refresh_rating_summary`` after every mutation.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_api.errors import InputValidationError, describe_validation_errors
from restaurant_api.models import Review as ReviewModel
from restaurant_api.schemas import Review, ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)


def _ensure_utc(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC). SQLite returns naive datetimes."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


async def create_review(db: AsyncSession, restaurant_id: UUID, review_create: ReviewCreate) -> Review:
    """Create a review. The caller is responsible for checking the restaurant exists."""
    review = ReviewModel(
        restaurant_id=restaurant_id,
        rating=review_create.rating,
        comment=review_create.comment,
    )
    db.add(review)
    await db.commit()
    await db.refresh(review)
    logger.info("Created review %s for restaurant %s", review.id, restaurant_id)
    return _to_schema(review)


async def list_reviews_by_restaurant(db: AsyncSession, restaurant_id: UUID) -> list[Review]:
    """List reviews for a restaurant, newest first."""
    result = await db.execute(
        select(ReviewModel)
        .where(ReviewModel.restaurant_id == restaurant_id)
        .order_by(ReviewModel.created_at.desc())
    )
    return [_to_schema(r) for r in result.scalars().all()]


async def update_review(db: AsyncSession, review_id: UUID, review_update: ReviewUpdate) -> Review | None:
    """Apply a partial update. Returns None if the review does not exist.

    The merged review is validated again, so a PATCH cannot null out the
    comment or push the rating out of range.
    """
    result = await db.execute(select(ReviewModel).where(ReviewModel.id == review_id))
    review = result.scalar_one_or_none()
    if review is None:
        return None

    merged = {
        "rating": review.rating,
        "comment": review.comment,
        **review_update.model_dump(exclude_unset=True),
    }
    try:
        validated = ReviewCreate.model_validate(merged)
    except ValidationError as exc:
        raise InputValidationError(describe_validation_errors(exc.errors())) from exc

    review.rating = validated.rating
    review.comment = validated.comment
    await db.commit()
    await db.refresh(review)
    return _to_schema(review)


async def delete_review(db: AsyncSession, review_id: UUID) -> UUID | None:
    """Delete a review.

    Returns the deleted review's restaurant ID, or None if not found.
    """
    result = await db.execute(select(ReviewModel).where(ReviewModel.id == review_id))
    review = result.scalar_one_or_none()
    if review is None:
        return None

    restaurant_id = review.restaurant_id
    await db.delete(review)
    await db.commit()
    logger.info("Deleted review %s of restaurant %s", review_id, restaurant_id)
    return restaurant_id


def _to_schema(review: ReviewModel) -> Review:
    """Convert SQLAlchemy model to Pydantic schema."""
    return Review(
        id=review.id,
        restaurant_id=review.restaurant_id,
        rating=review.rating,
        comment=review.comment,
        created_at=_ensure_utc(review.created_at),
    )

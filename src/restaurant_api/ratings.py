"""Rating summary aggregation.

A restaurant's ``rating_avg``/``rating_count`` columns cache an aggregate over
its reviews. After every review create, update or delete the summary is
rebuilt in three independent steps:

1. load the current ratings for the restaurant,
2. aggregate them with :func:`compute_rating_summary`,
3. overwrite the two summary columns with a targeted UPDATE.

No lock or transaction spans the three steps. Two concurrent mutations for
the same restaurant can interleave so that the last writer publishes an
aggregate read before the other mutation landed; the summary then undercounts
until the next mutation reruns the sequence.
"""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_api.errors import UpstreamFailure
from restaurant_api.models import Restaurant as RestaurantModel
from restaurant_api.models import Review as ReviewModel
from restaurant_api.schemas import RatingSummary

logger = logging.getLogger(__name__)


def compute_rating_summary(ratings: Iterable[int]) -> RatingSummary:
    """Mean and count of the given ratings. The mean is 0 for no ratings and is not rounded."""
    values = list(ratings)
    if not values:
        return RatingSummary(avg=0.0, count=0)
    return RatingSummary(avg=sum(values) / len(values), count=len(values))


async def load_ratings(db: AsyncSession, restaurant_id: UUID) -> list[int]:
    """Read the ratings of every review currently referencing the restaurant."""
    result = await db.execute(
        select(ReviewModel.rating).where(ReviewModel.restaurant_id == restaurant_id)
    )
    return list(result.scalars().all())


async def write_rating_summary(
    db: AsyncSession, restaurant_id: UUID, summary: RatingSummary
) -> bool:
    """Overwrite only the summary columns. Returns False if the restaurant is gone."""
    result = await db.execute(
        update(RestaurantModel)
        .where(RestaurantModel.id == restaurant_id)
        .values(rating_avg=summary.avg, rating_count=summary.count)
    )
    await db.commit()
    return result.rowcount > 0


async def refresh_rating_summary(db: AsyncSession, restaurant_id: UUID) -> RatingSummary:
    """Recompute and store the rating summary for a restaurant.

    The review mutation that triggered this has already been committed and is
    not rolled back if the summary write fails.
    """
    try:
        ratings = await load_ratings(db, restaurant_id)
        summary = compute_rating_summary(ratings)
        written = await write_rating_summary(db, restaurant_id, summary)
    except SQLAlchemyError as exc:
        logger.error(
            "Failed to refresh rating summary for restaurant %s", restaurant_id, exc_info=True
        )
        raise UpstreamFailure() from exc

    if not written:
        # Reviews of a deleted restaurant are kept; there is nothing to update.
        logger.info("Restaurant %s no longer exists; rating summary not stored", restaurant_id)
    return summary

"""Restaurant repository - data access for restaurants."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from pydantic import ValidationError
from shapely.geometry import Polygon
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_api.errors import InputValidationError, describe_validation_errors
from restaurant_api.geo import bounding_box, haversine_meters, polygon_contains
from restaurant_api.models import Restaurant as RestaurantModel
from restaurant_api.schemas import (
    Address,
    NearbyRestaurant,
    RatingSummary,
    Restaurant,
    RestaurantCreate,
    RestaurantFilters,
    RestaurantPage,
    RestaurantUpdate,
    SortField,
    SortOrder,
)

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    SortField.NAME: RestaurantModel.name,
    SortField.CUISINE: RestaurantModel.cuisine,
    SortField.CREATED_AT: RestaurantModel.created_at,
    SortField.RATING: RestaurantModel.rating_avg,
}


def _ensure_utc(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC). SQLite returns naive datetimes."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def _split_address(address: Address | None) -> tuple[dict | None, float | None, float | None]:
    """Split an address into its JSON document and coordinate columns."""
    if address is None:
        return None, None, None
    document = address.model_dump(exclude={"coord"})
    if address.coord is None:
        return document, None, None
    lng, lat = address.coord
    return document, lng, lat


def _address_to_schema(restaurant: RestaurantModel) -> Address | None:
    if restaurant.address is None and restaurant.longitude is None:
        return None
    coord = None
    if restaurant.longitude is not None and restaurant.latitude is not None:
        coord = [restaurant.longitude, restaurant.latitude]
    return Address(**(restaurant.address or {}), coord=coord)


def _apply(restaurant: RestaurantModel, data: RestaurantCreate) -> None:
    restaurant.name = data.name
    restaurant.borough = data.borough
    restaurant.cuisine = data.cuisine
    restaurant.address, restaurant.longitude, restaurant.latitude = _split_address(data.address)


async def create_restaurant(db: AsyncSession, restaurant_create: RestaurantCreate) -> Restaurant:
    """Create a new restaurant with an empty rating summary."""
    restaurant = RestaurantModel(rating_avg=0.0, rating_count=0)
    _apply(restaurant, restaurant_create)
    db.add(restaurant)
    await db.commit()
    await db.refresh(restaurant)
    logger.info("Created restaurant %s (%s)", restaurant.id, restaurant.name)
    return _to_schema(restaurant)


async def get_restaurant(db: AsyncSession, restaurant_id: UUID) -> Restaurant | None:
    """Get a restaurant by ID."""
    result = await db.execute(select(RestaurantModel).where(RestaurantModel.id == restaurant_id))
    restaurant = result.scalar_one_or_none()
    if restaurant is None:
        return None
    return _to_schema(restaurant)


async def restaurant_exists(db: AsyncSession, restaurant_id: UUID) -> bool:
    """Check if a restaurant exists."""
    result = await db.execute(select(RestaurantModel.id).where(RestaurantModel.id == restaurant_id))
    return result.scalar_one_or_none() is not None


async def update_restaurant(
    db: AsyncSession, restaurant_id: UUID, restaurant_update: RestaurantUpdate
) -> Restaurant | None:
    """Apply a partial update. Returns None if the restaurant does not exist.

    Raises InputValidationError if the merged record is invalid, e.g. when a
    required field is explicitly set to null.
    """
    result = await db.execute(select(RestaurantModel).where(RestaurantModel.id == restaurant_id))
    restaurant = result.scalar_one_or_none()
    if restaurant is None:
        return None

    address = _address_to_schema(restaurant)
    merged = {
        "name": restaurant.name,
        "borough": restaurant.borough,
        "cuisine": restaurant.cuisine,
        "address": address.model_dump() if address is not None else None,
        **restaurant_update.model_dump(exclude_unset=True),
    }
    try:
        validated = RestaurantCreate.model_validate(merged)
    except ValidationError as exc:
        raise InputValidationError(describe_validation_errors(exc.errors())) from exc

    _apply(restaurant, validated)
    await db.commit()
    await db.refresh(restaurant)
    return _to_schema(restaurant)


async def delete_restaurant(db: AsyncSession, restaurant_id: UUID) -> bool:
    """Delete a restaurant. Its reviews are left in place.

    Returns True if deleted, False if not found.
    """
    result = await db.execute(select(RestaurantModel).where(RestaurantModel.id == restaurant_id))
    restaurant = result.scalar_one_or_none()
    if restaurant is None:
        return False

    await db.delete(restaurant)
    await db.commit()
    logger.info("Deleted restaurant %s", restaurant_id)
    return True


async def list_restaurants(db: AsyncSession, page: int, limit: int) -> RestaurantPage:
    """List restaurants newest first.

    The total is counted with a separate query and is not atomic with the
    page fetch.
    """
    result = await db.execute(
        select(RestaurantModel)
        .order_by(RestaurantModel.created_at.desc(), RestaurantModel.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    items = [_to_schema(r) for r in result.scalars().all()]
    total = await db.scalar(select(func.count()).select_from(RestaurantModel))
    return RestaurantPage(page=page, limit=limit, total=total or 0, items=items)


async def search_restaurants(
    db: AsyncSession,
    filters: RestaurantFilters,
    sort: SortField,
    order: SortOrder,
    page: int,
    limit: int,
) -> RestaurantPage:
    """Filter, sort and paginate restaurants."""
    conditions = []
    if filters.name:
        conditions.append(RestaurantModel.name.icontains(filters.name, autoescape=True))
    if filters.borough:
        conditions.append(RestaurantModel.borough == filters.borough)
    if filters.cuisine:
        conditions.append(RestaurantModel.cuisine == filters.cuisine)
    if filters.zipcode:
        conditions.append(RestaurantModel.address["zipcode"].as_string() == filters.zipcode)
    if filters.min_rating is not None:
        conditions.append(RestaurantModel.rating_avg >= filters.min_rating)
    if filters.max_rating is not None:
        conditions.append(RestaurantModel.rating_avg <= filters.max_rating)

    column = _SORT_COLUMNS[sort]
    ordering = column.desc() if order == SortOrder.DESC else column.asc()

    result = await db.execute(
        select(RestaurantModel)
        .where(*conditions)
        .order_by(ordering, RestaurantModel.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    items = [_to_schema(r) for r in result.scalars().all()]
    total = await db.scalar(select(func.count()).select_from(RestaurantModel).where(*conditions))
    return RestaurantPage(page=page, limit=limit, total=total or 0, items=items)


async def find_within_polygon(db: AsyncSession, polygon: Polygon, limit: int) -> list[Restaurant]:
    """Restaurants whose coordinate lies inside the polygon (boundary included).

    Rows are prefiltered on the polygon's bounding box, then tested exactly.
    """
    min_lng, min_lat, max_lng, max_lat = polygon.bounds
    result = await db.execute(
        select(RestaurantModel)
        .where(
            RestaurantModel.longitude.between(min_lng, max_lng),
            RestaurantModel.latitude.between(min_lat, max_lat),
        )
        .order_by(RestaurantModel.created_at, RestaurantModel.id)
    )

    matches = []
    for restaurant in result.scalars():
        if polygon_contains(polygon, restaurant.longitude, restaurant.latitude):
            matches.append(_to_schema(restaurant))
            if len(matches) >= limit:
                break
    return matches


async def find_near(
    db: AsyncSession,
    lng: float,
    lat: float,
    max_distance_meters: float | None,
    limit: int,
) -> list[NearbyRestaurant]:
    """Restaurants nearest to the origin, closest first."""
    conditions = [RestaurantModel.longitude.is_not(None), RestaurantModel.latitude.is_not(None)]
    if max_distance_meters is not None:
        box = bounding_box(lng, lat, max_distance_meters)
        conditions.append(RestaurantModel.latitude.between(box.min_lat, box.max_lat))
        if box.min_lng is not None:
            conditions.append(RestaurantModel.longitude.between(box.min_lng, box.max_lng))

    result = await db.execute(select(RestaurantModel).where(*conditions))

    candidates = []
    for restaurant in result.scalars():
        distance = haversine_meters(lng, lat, restaurant.longitude, restaurant.latitude)
        if max_distance_meters is not None and distance > max_distance_meters:
            continue
        candidates.append((distance, restaurant))
    candidates.sort(key=lambda pair: pair[0])

    return [
        NearbyRestaurant(**_to_schema(r).model_dump(), distance_meters=distance)
        for distance, r in candidates[:limit]
    ]


def _to_schema(restaurant: RestaurantModel) -> Restaurant:
    """Convert SQLAlchemy model to Pydantic schema."""
    return Restaurant(
        id=restaurant.id,
        name=restaurant.name,
        borough=restaurant.borough,
        cuisine=restaurant.cuisine,
        address=_address_to_schema(restaurant),
        rating_summary=RatingSummary(avg=restaurant.rating_avg, count=restaurant.rating_count),
        created_at=_ensure_utc(restaurant.created_at),
        updated_at=_ensure_utc(restaurant.updated_at),
    )

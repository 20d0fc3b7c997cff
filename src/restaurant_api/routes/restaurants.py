"""Restaurant CRUD, search and geospatial endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_api.config import settings
from restaurant_api.database import get_db
from restaurant_api.dependencies import (
    parse_id,
    parse_limit,
    parse_optional_float,
    parse_pagination,
)
from restaurant_api.errors import InputValidationError, NotFound
from restaurant_api.geo import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    parse_coordinate,
    polygon_from_coordinates,
)
from restaurant_api.repositories import neighborhood as neighborhood_repo
from restaurant_api.repositories import restaurant as restaurant_repo
from restaurant_api.schemas import (
    NearResult,
    NeighborhoodWithinResult,
    Origin,
    PolygonQuery,
    Restaurant,
    RestaurantCreate,
    RestaurantFilters,
    RestaurantPage,
    RestaurantUpdate,
    SortField,
    SortOrder,
    WithinResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.post("", response_model=Restaurant, status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    restaurant_create: RestaurantCreate,
    db: AsyncSession = Depends(get_db),
) -> Restaurant:
    """Create a restaurant. name, borough and cuisine are required."""
    return await restaurant_repo.create_restaurant(db, restaurant_create)


@router.get("", response_model=RestaurantPage)
async def list_restaurants(
    page: str | None = Query(default=None, description="Page number, starting at 1"),
    limit: str | None = Query(default=None, description="Page size, 1-100"),
    db: AsyncSession = Depends(get_db),
) -> RestaurantPage:
    """List restaurants, newest first."""
    page_number, page_size = parse_pagination(page, limit)
    return await restaurant_repo.list_restaurants(db, page_number, page_size)


# ============================================================================
# Search and geospatial queries (declared before /{restaurant_id})
# ============================================================================


@router.get("/search", response_model=RestaurantPage)
async def search_restaurants(
    name: str | None = Query(default=None, description="Case-insensitive substring"),
    borough: str | None = Query(default=None),
    cuisine: str | None = Query(default=None),
    zipcode: str | None = Query(default=None),
    min_rating: str | None = Query(default=None, alias="minRating"),
    max_rating: str | None = Query(default=None, alias="maxRating"),
    sort: str | None = Query(default=None, description="name, cuisine, createdAt or rating"),
    order: str | None = Query(default=None, description="asc or desc"),
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> RestaurantPage:
    """Search restaurants by name, location, cuisine and rating range.

    Unknown sort keys fall back to createdAt; unknown orders fall back to asc.
    """
    filters = RestaurantFilters(
        name=name,
        borough=borough,
        cuisine=cuisine,
        zipcode=zipcode,
        min_rating=parse_optional_float(min_rating),
        max_rating=parse_optional_float(max_rating),
    )
    try:
        sort_field = SortField(sort)
    except ValueError:
        sort_field = SortField.CREATED_AT
    sort_order = SortOrder.DESC if order == SortOrder.DESC.value else SortOrder.ASC
    page_number, page_size = parse_pagination(page, limit)
    return await restaurant_repo.search_restaurants(
        db, filters, sort_field, sort_order, page_number, page_size
    )


@router.get("/within", response_model=NeighborhoodWithinResult)
async def restaurants_within_neighborhood(
    neighborhood: str | None = Query(default=None, description="Neighborhood name"),
    db: AsyncSession = Depends(get_db),
) -> NeighborhoodWithinResult:
    """Restaurants located inside a named neighborhood."""
    if not neighborhood:
        raise InputValidationError("neighborhood query param is required")

    found = await neighborhood_repo.get_neighborhood_by_name(db, neighborhood)
    if found is None:
        raise NotFound("Neighborhood not found")

    polygon = polygon_from_coordinates(found.geometry.coordinates)
    items = await restaurant_repo.find_within_polygon(db, polygon, settings.within_max_results)
    return NeighborhoodWithinResult(neighborhood=found.name, count=len(items), items=items)


@router.post("/within", response_model=WithinResult)
async def restaurants_within_polygon(
    query: PolygonQuery,
    db: AsyncSession = Depends(get_db),
) -> WithinResult:
    """Restaurants located inside a caller-supplied polygon ring."""
    polygon = polygon_from_coordinates(query.coordinates)
    items = await restaurant_repo.find_within_polygon(db, polygon, settings.within_max_results)
    return WithinResult(count=len(items), items=items)


@router.get("/near", response_model=NearResult)
async def restaurants_near(
    lng: str | None = Query(default=None, description="Origin longitude"),
    lat: str | None = Query(default=None, description="Origin latitude"),
    max_distance_meters: str | None = Query(default=None, alias="maxDistanceMeters"),
    limit: str | None = Query(default=None, description="Max results, 1-200"),
    db: AsyncSession = Depends(get_db),
) -> NearResult:
    """Restaurants ordered by distance from (lng, lat), each with distanceMeters."""
    origin_lng = parse_coordinate(lng, "lng", MAX_LONGITUDE)
    origin_lat = parse_coordinate(lat, "lat", MAX_LATITUDE)
    max_distance = parse_optional_float(max_distance_meters)
    if max_distance is not None and max_distance < 0:
        max_distance = None
    result_limit = parse_limit(limit, settings.near_default_limit, settings.near_max_limit)

    items = await restaurant_repo.find_near(db, origin_lng, origin_lat, max_distance, result_limit)
    return NearResult(origin=Origin(lng=origin_lng, lat=origin_lat), count=len(items), items=items)


# ============================================================================
# Single restaurant
# ============================================================================


@router.get("/{restaurant_id}", response_model=Restaurant)
async def get_restaurant(
    restaurant_id: str,
    db: AsyncSession = Depends(get_db),
) -> Restaurant:
    """Get a restaurant by ID."""
    restaurant = await restaurant_repo.get_restaurant(db, parse_id(restaurant_id))
    if restaurant is None:
        raise NotFound("Not found")
    return restaurant


@router.put("/{restaurant_id}", response_model=Restaurant)
@router.patch("/{restaurant_id}", response_model=Restaurant)
async def update_restaurant(
    restaurant_id: str,
    restaurant_update: RestaurantUpdate | None = None,
    db: AsyncSession = Depends(get_db),
) -> Restaurant:
    """Update a restaurant. PUT and PATCH both apply only the supplied fields."""
    rid = parse_id(restaurant_id)
    updated = await restaurant_repo.update_restaurant(
        db, rid, restaurant_update or RestaurantUpdate()
    )
    if updated is None:
        raise NotFound("Not found")
    return updated


@router.delete("/{restaurant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_restaurant(
    restaurant_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a restaurant. Its reviews are not deleted."""
    deleted = await restaurant_repo.delete_restaurant(db, parse_id(restaurant_id))
    if not deleted:
        raise NotFound("Not found")

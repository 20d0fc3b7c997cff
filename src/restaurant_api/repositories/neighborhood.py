"""Neighborhood repository - lookups against reference polygons."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_api.models import Neighborhood as NeighborhoodModel
from restaurant_api.schemas import Neighborhood, NeighborhoodCreate


async def get_neighborhood_by_name(db: AsyncSession, name: str) -> Neighborhood | None:
    """Get a neighborhood by its exact name."""
    result = await db.execute(
        select(NeighborhoodModel).where(NeighborhoodModel.name == name).limit(1)
    )
    neighborhood = result.scalar_one_or_none()
    if neighborhood is None:
        return None
    return _to_schema(neighborhood)


async def create_neighborhoods_bulk(
    db: AsyncSession, neighborhoods: list[NeighborhoodCreate]
) -> list[Neighborhood]:
    """Insert reference neighborhoods (used by the data loader and tests)."""
    models = [
        NeighborhoodModel(name=n.name, geometry=n.geometry.model_dump())
        for n in neighborhoods
    ]
    db.add_all(models)
    await db.commit()
    for m in models:
        await db.refresh(m)
    return [_to_schema(m) for m in models]


def _to_schema(neighborhood: NeighborhoodModel) -> Neighborhood:
    """Convert SQLAlchemy model to Pydantic schema."""
    return Neighborhood(
        id=neighborhood.id,
        name=neighborhood.name,
        geometry=neighborhood.geometry,
    )

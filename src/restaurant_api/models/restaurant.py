"""Restaurant model."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, Float, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from restaurant_api.database import Base, JSONVariant


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Restaurant(Base):
    """A restaurant with its cached rating summary.

    The address coordinate is kept in its own columns so spatial queries can
    prefilter on a bounding box; the rest of the address is a JSON document.
    """

    __tablename__ = "restaurants"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    borough: Mapped[str] = mapped_column(String(255), nullable=False)
    cuisine: Mapped[str] = mapped_column(String(255), nullable=False)
    # {building, street, zipcode}
    address: Mapped[dict | None] = mapped_column(JSONVariant, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    # Materialized over the reviews table, rewritten after every review mutation
    rating_avg: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Python-side defaults keep microsecond precision on SQLite
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_restaurants_created_at", "created_at"),
        Index("ix_restaurants_borough", "borough"),
        Index("ix_restaurants_cuisine", "cuisine"),
        Index("ix_restaurants_rating_avg", "rating_avg"),
        Index("ix_restaurants_coord", "longitude", "latitude"),
    )

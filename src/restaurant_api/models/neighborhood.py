"""Neighborhood model for read-only reference polygons."""

import uuid

from sqlalchemy import Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from restaurant_api.database import Base, JSONVariant


class Neighborhood(Base):
    """A named neighborhood boundary.

    ``geometry`` holds only ``{"coordinates": [...]}``; the geometry type is
    not stored and is supplied as "Polygon" at query time.
    """

    __tablename__ = "neighborhoods"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    geometry: Mapped[dict] = mapped_column(JSONVariant, nullable=False)

    __table_args__ = (Index("ix_neighborhoods_name", "name"),)

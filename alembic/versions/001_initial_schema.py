"""Initial schema: restaurants, reviews, neighborhoods

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "restaurants",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("borough", sa.String(255), nullable=False),
        sa.Column("cuisine", sa.String(255), nullable=False),
        sa.Column("address", postgresql.JSONB, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("rating_avg", sa.Float, nullable=False, server_default="0"),
        sa.Column("rating_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_restaurants_created_at", "restaurants", ["created_at"])
    op.create_index("ix_restaurants_borough", "restaurants", ["borough"])
    op.create_index("ix_restaurants_cuisine", "restaurants", ["cuisine"])
    op.create_index("ix_restaurants_rating_avg", "restaurants", ["rating_avg"])
    op.create_index("ix_restaurants_coord", "restaurants", ["longitude", "latitude"])

    # No foreign key: reviews outlive a deleted restaurant
    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("restaurant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.String(1000), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_reviews_restaurant_id", "reviews", ["restaurant_id"])

    op.create_table(
        "neighborhoods",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("geometry", postgresql.JSONB, nullable=False),
    )
    op.create_index("ix_neighborhoods_name", "neighborhoods", ["name"])


def downgrade() -> None:
    op.drop_table("neighborhoods")
    op.drop_table("reviews")
    op.drop_table("restaurants")

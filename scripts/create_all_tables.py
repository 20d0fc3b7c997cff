#!/usr/bin/env python3
"""Create all missing tables from the SQLAlchemy models.

Prefer ``alembic upgrade head`` for managed databases; this is for local
setups and throwaway environments.
"""

import os

from sqlalchemy import create_engine

from restaurant_api.database import Base, sync_database_url
from restaurant_api.models import Neighborhood, Restaurant, Review  # noqa: F401


def main():
    url = os.environ.get("DATABASE_URL", "")
    if not url:
        print("DATABASE_URL not set")
        return

    engine = create_engine(sync_database_url(url))
    Base.metadata.create_all(engine)
    for table in Base.metadata.sorted_tables:
        print(f"✓ {table.name} table")
    print("\n✅ All tables created successfully!")


if __name__ == "__main__":
    main()

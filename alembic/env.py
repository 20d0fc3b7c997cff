"""Alembic environment for the restaurant schema."""

import os
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool

load_dotenv()

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from restaurant_api.database import Base, sync_database_url  # noqa: E402
from restaurant_api.models import Neighborhood, Restaurant, Review  # noqa: E402, F401

target_metadata = Base.metadata


def get_url() -> str:
    """DATABASE_URL_SYNC if set, else DATABASE_URL rewritten for psycopg2."""
    return os.getenv("DATABASE_URL_SYNC") or sync_database_url(
        os.getenv("DATABASE_URL", "postgresql://localhost/restaurants")
    )


def run_migrations_offline() -> None:
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()
    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

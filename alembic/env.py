"""
Alembic Migration Environment
===============================

What:  Applies the geoturismo schema migrations.
How:   The target URL is `-x database_url=...` when given on the command line,
       otherwise settings.database_url (DATABASE_URL). Online runs go through
       an async engine and connection.run_sync(); type changes are compared
       during --autogenerate.

    alembic upgrade head
    alembic -x database_url=postgresql+asyncpg://u:p@host/db upgrade head
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from geoturismo.config import settings
from geoturismo.database import Base

import geoturismo.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get(
        "database_url", settings.database_url
    )


config.set_main_option("sqlalchemy.url", database_url())

CONFIGURE_OPTS = {
    "target_metadata": target_metadata,
    "compare_type": True,
}


def run_migrations_offline() -> None:
    """Prints the SQL instead of executing it."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **CONFIGURE_OPTS,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, **CONFIGURE_OPTS)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(do_run_migrations)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())

"""Alembic environment for the people / employees schema (async engine)."""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy.engine import Connection

from alembic import context

from entity_lifecycle.infrastructure.database import Base, Settings, build_engine
import entity_lifecycle.infrastructure.persistence.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _settings() -> Settings:
    """DATABASE_URL in the environment wins over sqlalchemy.url in alembic.ini."""
    ini_url = config.get_main_option("sqlalchemy.url")
    if ini_url and "DATABASE_URL" not in os.environ:
        return Settings(database_url=ini_url)
    return Settings()


def _configure(**kwargs) -> None:  # type: ignore[no-untyped-def]
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout instead of executing it."""
    _configure(
        url=_settings().database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )


def _run_sync(connection: Connection) -> None:
    _configure(connection=connection)


async def run_migrations_online() -> None:
    engine = build_engine(_settings())
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_sync)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())

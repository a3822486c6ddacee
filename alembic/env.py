"""
alembic/env.py

Alembic environment for InkConnect schema migrations.
- Offline mode renders SQL against the configured URL
- Online mode runs through the application's async engine
- Importing inkconnect.database.models registers every table on Base.metadata
"""

import asyncio
from logging.config import fileConfig

from alembic import context

from inkconnect.database.base import Base
from inkconnect.database.session import engine as async_engine

# registers profiles, artists, clients, appointments, messages, artwork, reviews, site settings
from inkconnect.database import models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit migration SQL without a database connection."""
    context.configure(
        url=str(async_engine.url),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Apply migrations over the async engine."""
    async with async_engine.connect() as conn:
        await conn.run_sync(do_run_migrations)
    await async_engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())

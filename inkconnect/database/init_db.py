"""
inkconnect/database/init_db.py

Creates every table from the ORM metadata. Intended for local development;
deployed databases are managed through Alembic migrations.
"""

import asyncio
import logging

from inkconnect.core.logging import init_logging
from inkconnect.database import models  # noqa: F401  (registers all tables)
from inkconnect.database.base import Base
from inkconnect.database.session import engine

logger = logging.getLogger(__name__)


async def init_db() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("[DB] All tables created.")


if __name__ == "__main__":
    init_logging()
    asyncio.run(init_db())

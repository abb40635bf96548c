"""
Database initialization: create tables from SQLModel metadata.
"""

import asyncio
import logging

from sqlmodel import SQLModel

from config import ApplicationConfig
from src.api.middleware import configure_logging
from src.depends import engine

# Ensure models are imported so SQLModel.metadata knows about them
import src.domain.entities  # noqa: F401

logger = logging.getLogger("init_db")


async def create_all_tables():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def main():
    configure_logging(ApplicationConfig.LOG_LEVEL)
    logger.info("Creating tables...")
    await create_all_tables()
    await engine.dispose()
    logger.info("Done.")


if __name__ == "__main__":
    asyncio.run(main())

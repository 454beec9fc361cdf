# lifetrack/app/db/init_db.py
"""
Create all tables in the configured database.

    python -m lifetrack.app.db.init_db
"""
import asyncio
import logging
import sys

from sqlalchemy.ext.asyncio import AsyncEngine

from lifetrack.app.db.base import Base, engine
# Register models on Base.metadata
from lifetrack.app import models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_tables(bind: AsyncEngine = engine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def main() -> None:
    try:
        await create_tables()
        logger.info("Tables created")
    except Exception:
        logger.exception("Failed to create tables")
        raise
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(main())

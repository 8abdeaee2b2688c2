import logging

from sqlalchemy.ext.asyncio import AsyncEngine

# Importing the models registers every table on Base.metadata.
import portal.auth.models  # noqa: F401
import portal.core.models  # noqa: F401
from portal.db.session import Base, engine

logger = logging.getLogger(__name__)


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Create missing tables, unique indexes and check constraints."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready (%d tables)", len(Base.metadata.tables))

from typing import AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from portal.core.config import settings


def engine_options(database_url: str) -> Dict:
    """Pool settings for server databases; SQLite files/memory use the dialect defaults."""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    # Idle connections are dropped by the server after a while; ping and recycle.
    return {"pool_pre_ping": True, "pool_recycle": 300}


engine = create_async_engine(
    settings.database_url,
    echo=False,
    future=True,
    **engine_options(settings.database_url),
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; services commit or roll back themselves."""
    async with AsyncSessionLocal() as session:
        yield session

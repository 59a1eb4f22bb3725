# Database connection setup
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import get_settings
from .core.models.base import BaseModel

settings = get_settings()

engine = create_async_engine(settings.database_url, echo=settings.database_echo)

# Session factory; the realtime dispatcher opens one session per command with it
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db_session():
    """Request-scoped database session (FastAPI dependency)."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def get_session_factory() -> async_sessionmaker:
    """Session factory for code that outlives a single request."""
    return AsyncSessionLocal


async def create_tables():
    """Create all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

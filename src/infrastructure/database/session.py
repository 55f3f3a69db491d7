"""Engine and session factory for the document store.

Both are built once per process and shared by every request; each unit of
work opens its own short-lived session from the factory.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import settings
from infrastructure.database.models import Base


def _connect_args(url: str) -> dict:
    # Supavisor runs in transaction mode, which breaks asyncpg's prepared
    # statement cache.
    if "pooler.supabase.com" in url:
        return {"statement_cache_size": 0}
    return {}


def build_engine(url: str = settings.async_database_url) -> AsyncEngine:
    return create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,
        connect_args=_connect_args(url),
    )


engine = build_engine()

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def create_schema(bind: AsyncEngine = engine) -> None:
    """Create the documents table if it does not exist yet."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

"""Async database engine and session dependency for the registration API."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from vendor_api.config import settings

# SQLite gets a single shared connection usable from the event loop thread.
_sqlite_options = (
    {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    if settings.is_sqlite
    else {}
)

engine = create_async_engine(settings.database_url, echo=settings.debug, **_sqlite_options)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db():
    """Request-scoped session; commits on success, rolls back on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

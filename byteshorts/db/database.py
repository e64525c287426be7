"""
Database configuration and connection management
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy import MetaData
import structlog

from byteshorts.core.config import settings

logger = structlog.get_logger()

# Declarative base with naming convention for constraints
metadata = MetaData(naming_convention={
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s"
})

Base = declarative_base(metadata=metadata)


def create_engine(database_url: str = None, echo: bool = None) -> AsyncEngine:
    """Create an async engine for the given URL (defaults to settings)"""
    url = database_url or settings.DATABASE_URL
    kwargs = {
        "echo": settings.DATABASE_ECHO if echo is None else echo,
        "future": True,
    }
    return create_async_engine(url, **kwargs)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    """Create a session factory bound to an engine"""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(bind: AsyncEngine):
    """Create all database tables that do not exist yet"""
    # Import models so they are registered with the metadata
    from byteshorts.models import video  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", tables=sorted(Base.metadata.tables))


async def drop_tables(bind: AsyncEngine):
    """Drop all database tables (use with caution!)"""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("All database tables dropped")

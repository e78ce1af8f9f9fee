"""Database engines, sessions and shared model mixins."""

import uuid
from typing import AsyncGenerator

from sqlalchemy import Column, DateTime, String, func, create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from marketplace.config import get_settings

settings = get_settings()

# Request-scoped sessions for the API
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# Celery workers and scripts share the same database through psycopg2
sync_engine = create_engine(
    settings.database_url.replace("postgresql+asyncpg://", "postgresql://"),
    echo=settings.debug,
    pool_size=max(1, settings.db_pool_size // 2),
    max_overflow=max(0, settings.db_max_overflow // 2),
    pool_pre_ping=True,
)
SyncSessionLocal = sessionmaker(bind=sync_engine, autoflush=False)


class Base(DeclarativeBase):
    pass


def new_id() -> str:
    """Marketplace ids are UUID4 strings stored as varchar(36)."""
    return str(uuid.uuid4())


class UUIDMixin:
    id = Column(String(36), primary_key=True, default=new_id)


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session that commits on success and rolls back on any error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

"""Async database engine, session factory and declarative base."""

from typing import Annotated, Any, AsyncGenerator

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from compliance_dashboard.config import get_settings
from compliance_dashboard.logging_config import get_logger

logger = get_logger(__name__)
settings = get_settings()


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def _engine_options(database_url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.database_echo}
    if database_url.startswith("postgresql"):
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for the request.

    Routers commit explicitly once all writes of an operation are flushed;
    anything raised before that rolls the whole unit of work back.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


DbSession = Annotated[AsyncSession, Depends(get_db)]


async def init_db() -> None:
    """Create the schema (PostgreSQL only) and any missing tables."""
    # Import models so they register with the metadata
    from compliance_dashboard import models  # noqa: F401
    from compliance_dashboard.models.base import SCHEMA

    async with engine.begin() as conn:
        if SCHEMA and engine.dialect.name == "postgresql":
            await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}"))
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", dialect=engine.dialect.name)


async def close_db() -> None:
    """Dispose of the engine's connection pool."""
    await engine.dispose()

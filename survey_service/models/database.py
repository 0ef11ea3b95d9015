"""Database setup and session management using async SQLAlchemy 2.0.

This module configures the async engine, session factory, and base class
for all ORM models. The engine is created lazily on first use so that tests
can point the service at their own database before anything connects.
"""

from typing import AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from survey_service.config import get_settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine suited to the database backend.

    SQLite gets a NullPool, a generous busy timeout so concurrent writers
    wait for the lock instead of failing, and foreign key enforcement.
    Other backends get a sized connection pool.
    """
    settings = get_settings()

    if database_url.startswith("sqlite"):
        engine = create_async_engine(
            database_url,
            echo=echo,
            poolclass=NullPool,
            connect_args={"timeout": 30},
        )

        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )


def get_engine() -> AsyncEngine:
    """Get or create the global engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(settings.database_url)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the global session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,  # Prevent lazy loading after commit
        )
    return _session_factory


def configure_engine(engine: AsyncEngine) -> None:
    """Replace the global engine and session factory (used by tests)."""
    global _engine, _session_factory
    _engine = engine
    _session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


async def init_models() -> None:
    """Create all tables that do not exist yet."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close pooled connections on shutdown."""
    if _engine is not None:
        await _engine.dispose()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency function for FastAPI to provide database sessions.

    Yields:
        AsyncSession: SQLAlchemy session, closed after the request completes
        even if an exception occurs.
    """
    async with get_session_factory()() as db:
        yield db

"""
Geoturismo Backend — Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   A `Database` handle owns the engine (connection pool) and the session
       factory. It is created in the application lifespan, stored on
       `app.state.database`, and injected into every handler through
       `get_db_session`, which commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system,
       by Alembic for metadata, and by the test suite directly.
When:  Engine is created at startup; sessions are created per-request.

Connection Pooling Strategy:
    pool_size / max_overflow:  bounded by settings (default 10 + 5)
    pool_pre_ping:             validates connections before checkout
    pool_recycle:              replaces long-lived connections

    SQLite URLs (used by the test suite) skip the sizing arguments;
    in-memory SQLite uses a StaticPool so every session sees the same database.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from geoturismo.config import settings


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with the shared metadata
    (used by Alembic for migrations and by the tests to build the schema).
    """
    pass


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    What:  Creates the async engine for a connection URL.
    How:   Server databases get the configured pool; SQLite gets the
           dialect defaults (StaticPool for in-memory databases).
    """
    if database_url.startswith("sqlite"):
        kwargs = {}
        if make_url(database_url).database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_async_engine(database_url, echo=echo, **kwargs)

    return create_async_engine(
        database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=settings.db_pool_recycle,
        echo=echo,
    )


class Database:
    """
    Lifecycle-scoped connection pool handle.

    Attributes:
        engine:          The async engine (owns the connection pool)
        session_factory: Creates AsyncSession instances bound to the engine

    `expire_on_commit=False` keeps ORM attributes readable after commit,
    which response serialization depends on.
    """

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        self.url = database_url or settings.database_url
        self.engine = build_engine(self.url, echo=echo)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Scoped unit of work: one session, one transaction.

        How it works:
            1. Creates a new session from the factory
            2. Yields it to the caller (the caller performs queries)
            3. On success: commits the transaction
            4. On error: rolls back the transaction and re-raises
            5. Always: closes the session (returns connection to pool)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def ping(self) -> bool:
        """Runs SELECT 1 against the pool; used by the health check."""
        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT 1 AS ok"))
            return result.scalar() == 1

    async def create_all(self) -> None:
        """Creates every table registered on Base.metadata (tests and local dev)."""
        import geoturismo.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """
        What:  Gracefully closes all connections in the pool.
        When:  Called during application shutdown (lifespan handler).
        """
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    What:    Checks out a session from the application's Database handle.
    Who:     Injected into route handlers via FastAPI's Depends() system.
    When:    Created at the start of each request, disposed at the end.

    Example usage in a route:
        @router.get("/puntos")
        async def list_puntos(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session

"""
Posts & Comments API — Database Engine & Sessions
===================================================

What:  Async SQLAlchemy engine, session factory, declarative base and
       lifecycle helpers.
How:   One engine per process with connection pooling. Collections open a
       short-lived session from `async_session_factory` for every operation.
Who:   Used by SqlCollection (services/collection.py), the health route and
       the application lifespan.
When:  Engine is created at module import; sessions are created per operation.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite (tests, local development) uses SQLAlchemy's default pool and
    none of the options above.
"""

from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from posts_api.config import settings


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for `url`.

    Pool options are only passed to server databases; SQLite pools reject them.
    """
    kwargs: Dict[str, Any] = {"echo": echo}
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(url, **kwargs)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: records are serialized after the commit
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


# ── Engine & Session Factory ──────────────────────────────────────────────
engine = build_engine(
    settings.resolved_database_url,
    echo=settings.log_level == "DEBUG",
)

async_session_factory = build_session_factory(engine)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models share this metadata, which alembic reads for migrations and
    `create_tables()` uses for development setups.
    """
    pass


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def check_connection(bind: AsyncEngine = engine) -> None:
    """
    Run `SELECT 1` against the database.

    Raises whatever the driver raises when the database is unreachable.
    """
    async with bind.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Create every table registered on Base.metadata that does not exist yet."""
    # Registers the models on Base.metadata
    from posts_api.models import comment, post  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()

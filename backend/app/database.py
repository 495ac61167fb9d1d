"""
Singers API — Database Context and Session Management
=======================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency,
       bundled into a `Database` object instead of module-level globals.
Why:   Route handlers receive the connection context explicitly (via
       app.state), so tests can hand the app a throwaway SQLite database.
How:   `Database.from_settings()` builds the engine; `create_app()` stores the
       instance on `app.state.database`; `get_db_session` opens one
       AsyncSession per request from it.
Who:   main.py (lifecycle), routes (dependency), services (sessions).

Result convention:
    Services wrap every database call and return a `DbResult` carrying either
    a value or the raw error text. Routes check `result.ok` and answer with a
    single 400 response on failure.
"""

import logging
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Dict, Generic, Optional, TypeVar, Union

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


@dataclass
class DbResult(Generic[T]):
    """
    Outcome of a single database operation.

    Exactly one of `value` / `error` is meaningful: when `error` is set the
    operation failed and `value` is None. A successful lookup that matched
    nothing has `error=None` and `value=None`.
    """

    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, exc: Union[SQLAlchemyError, OSError]) -> "DbResult[Any]":
        """Builds a failed result from a driver or socket error, keeping its raw text."""
        original = getattr(exc, "orig", None)
        # A bare ConnectionRefusedError() has no text
        return cls(error=str(original or exc) or type(exc).__name__)


class Database:
    """
    Connection context: one engine plus its session factory.

    Lifecycle:
        1. Built by create_app() (engine creation does not connect)
        2. ping() verifies connectivity before the server starts
        3. session() hands out AsyncSessions per request
        4. dispose() closes pooled connections on shutdown
    """

    def __init__(self, url: str, **engine_kwargs: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        # expire_on_commit=False: documents are serialized after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        kwargs: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(settings.database_url, **kwargs)

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def ping(self) -> bool:
        """Runs SELECT 1; returns False instead of raising when unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database ping failed: %s", e)
            return False

    async def create_tables(self) -> None:
        # Models must be imported so their tables are registered on Base.metadata
        from app.models import Instrument, Singer  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Services commit their own writes; this dependency only guarantees that an
    unfinished transaction is rolled back and the connection returned to the
    pool.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

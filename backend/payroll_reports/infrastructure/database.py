"""Database access — async engine, per-request sessions, readiness probe.

Invariants:
    - A SQLAlchemy failure escaping a session is rolled back and re-raised as
      DatabaseError; the driver message stays in the logs
    - pool_pre_ping on every engine; pool sizing only for server databases
    - get_db() refuses to hand out sessions before init_db() ran

Design Decisions:
    - Module-level db_manager set by the app lifespan; routes depend on get_db
      and tests override that dependency
    - expire_on_commit=False so a saved report can be mapped back to the
      domain after commit without another round trip
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from payroll_reports.core.errors import DatabaseError

logger = logging.getLogger(__name__)

_FAILURE_SUMMARIES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "commit", "constraint violated"),
    (OperationalError, "connect", "database unreachable"),
)


def to_database_error(exc: SQLAlchemyError) -> DatabaseError:
    """Public DatabaseError for a SQLAlchemy failure, without driver details."""
    for exc_type, operation, summary in _FAILURE_SUMMARIES:
        if isinstance(exc, exc_type):
            return DatabaseError(summary, operation)
    return DatabaseError(type(exc).__name__, "query")


def build_engine(
    database_url: str, pool_size: int = 20, max_overflow: int = 10,
) -> AsyncEngine:
    options: dict = {"pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options |= {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_recycle": 3600,
        }
    return create_async_engine(database_url, **options)


class DatabaseSessionManager:
    """Owns the engine and hands out sessions that map failures to DatabaseError."""

    def __init__(
        self, engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self.engine = engine
        self.session_factory = session_factory or async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as db:
            try:
                yield db
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(f"Session rolled back after {type(e).__name__}: {e}")
                raise to_database_error(e) from e

    async def is_reachable(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database readiness check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(
    database_url: str, pool_size: int = 20, max_overflow: int = 10,
) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(
        build_engine(database_url, pool_size, max_overflow),
    )
    return db_manager


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request."""
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as db:
        yield db

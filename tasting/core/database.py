"""Database connectivity layer for the tasting service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tasting.core.config import settings
from tasting.core.exceptions import ConflictUniqueError, StoreUnavailableError
from tasting.models.entities import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Lazily establishes the engine and session factory for the relational store."""

    def __init__(self, url: Optional[str] = None) -> None:
        self.url = url
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def initialize(self, url: Optional[str] = None) -> None:
        """Create the engine; SQLite connections get foreign keys and explicit BEGIN."""

        if self.engine is not None:
            return

        self.url = url or self.url or settings.DATABASE_URL
        logger.info("Initializing database manager for %s", self.url.split("@")[-1])

        engine_kwargs = {"echo": settings.DATABASE_ECHO}
        if self.url.startswith("sqlite") and ":memory:" in self.url:
            engine_kwargs["poolclass"] = StaticPool
        elif not self.url.startswith("sqlite"):
            engine_kwargs["pool_pre_ping"] = True

        self.engine = create_async_engine(self.url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            _install_sqlite_hooks(self.engine)

        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Database manager initialized")

    async def create_all(self) -> None:
        if self.engine is None:
            await self.initialize()
        async with self.engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        if self.engine is None:
            await self.initialize()
        async with self.engine.begin() as connection:
            await connection.run_sync(Base.metadata.drop_all)

    def session(self) -> AsyncSession:
        if self.session_factory is None:
            raise StoreUnavailableError("Database manager is not initialized")
        return self.session_factory()

    async def close(self) -> None:
        """Dispose of pooled connections."""

        logger.info("Closing database connections")
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self.session_factory = None


def _install_sqlite_hooks(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:
        # The driver's own transaction handling breaks SAVEPOINT; BEGIN is emitted below.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(connection) -> None:
        connection.exec_driver_sql("BEGIN")


# Unique constraints and the column lists SQLite reports in place of their names.
_UNIQUE_CONSTRAINTS = {
    "person_year_unique": "person_years.person_id, person_years.year",
    "signature_year_unique": "person_years.signature, person_years.year",
    "person_year_praline_unique": "ratings.person_year_id, ratings.praline_id",
}


def violated_constraint(exc: IntegrityError) -> Optional[str]:
    """Name the unique constraint behind an integrity error, if it is a known one."""

    message = str(getattr(exc, "orig", exc))
    for name, columns in _UNIQUE_CONSTRAINTS.items():
        if name in message or columns in message:
            return name
    return None


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a block inside one transaction and translate storage failures.

    Uniqueness violations that escape the block surface as
    :class:`ConflictUniqueError`; any other driver failure becomes
    :class:`StoreUnavailableError`. Domain errors pass through untouched and
    roll the transaction back.
    """

    try:
        async with session.begin():
            yield session
    except IntegrityError as exc:
        constraint = violated_constraint(exc)
        logger.warning("Unresolved constraint violation: %s", constraint or exc.orig)
        raise ConflictUniqueError(
            "The change conflicts with existing data",
            details={"constraint": constraint},
        ) from exc
    except DBAPIError as exc:
        logger.error("Store failure: %s", exc)
        raise StoreUnavailableError("The data store is unavailable") from exc


# Singleton instance used by the API and CLI
database_manager = DatabaseManager()

__all__ = ["DatabaseManager", "database_manager", "unit_of_work", "violated_constraint"]

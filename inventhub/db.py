"""
Database handle wrapping the asyncpg connection pool.

All database access goes through Database.transaction() or
Database.connection(). Never use pool.acquire() directly outside this module.
The handle is created once per application (or per test session) and passed
to whoever needs it; there is no module-level pool.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from inventhub.schema import DROP_STATEMENTS, SCHEMA_STATEMENTS

logger = logging.getLogger(__name__)


def migration_url(dsn: str) -> str:
    """
    Rewrite an application DSN for the synchronous migration engine.

    Accepts the legacy postgres:// scheme and asyncpg driver URLs, and
    returns a plain postgresql:// URL SQLAlchemy resolves to psycopg2.
    """
    if not dsn:
        raise RuntimeError("DATABASE_URL must be set to run migrations")
    scheme, sep, rest = dsn.partition("://")
    if not sep:
        raise RuntimeError(f"DATABASE_URL is not a URL: {dsn!r}")
    if scheme in ("postgres", "postgresql", "postgresql+asyncpg"):
        scheme = "postgresql"
    return f"{scheme}://{rest}"


class Database:
    """An explicit store handle: one connection pool plus helpers."""

    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 2,
        max_size: int = 20,
        command_timeout: float = 60,
        server_settings: dict[str, str] | None = None,
    ) -> None:
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.server_settings = server_settings
        self.pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """
        Open the connection pool.
        Called once at application startup.
        """
        if self.pool is not None:
            return
        self.pool = await asyncpg.create_pool(
            dsn=self.dsn,
            min_size=self.min_size,
            max_size=self.max_size,
            command_timeout=self.command_timeout,
            server_settings=self.server_settings,
        )
        logger.info("Database pool opened (min=%d, max=%d)", self.min_size, self.max_size)

    async def close(self) -> None:
        """
        Close the connection pool.
        Called at application shutdown.
        """
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            logger.info("Database pool closed")

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise RuntimeError("Database pool not initialized. Call connect() first.")
        return self.pool

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Acquire a pooled connection without an explicit transaction.

        Each statement autocommits. Prefer transaction() for anything
        that writes more than one row.
        """
        async with self._require_pool().acquire() as conn:
            yield conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Acquire a pooled connection inside a transaction.

        Usage:
            async with db.transaction() as conn:
                summaries = await invention_repo.list_inventions(conn, filters)

        Commits on normal exit, rolls back if the block raises.
        """
        async with self._require_pool().acquire() as conn:
            async with conn.transaction():
                yield conn

    async def create_schema(self) -> None:
        """Create all tables and indexes if they do not exist yet."""
        async with self.transaction() as conn:
            for statement in SCHEMA_STATEMENTS:
                await conn.execute(statement)

    async def drop_schema(self) -> None:
        """Drop all tables. Test and local-reset use only."""
        async with self.transaction() as conn:
            for statement in DROP_STATEMENTS:
                await conn.execute(statement)

"""SQLite storage for recommendation records.

Each operation opens its own connection (WAL mode, busy timeout applied).
An in-memory database is shared across connections through a cache-shared
URI, kept alive by one long-lived connection until ``close()``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Iterable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import aiosqlite

from music_recommender.domain.shared.constants import (
    DatabaseTables,
    DatabaseURLSchemes,
    SQLPragmas,
)
from music_recommender.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import DatabaseSettings

logger = logging.getLogger(__name__)

_TABLE = DatabaseTables.RECOMMENDATIONS

_SCHEMA: tuple[str, ...] = (
    f"""
    CREATE TABLE IF NOT EXISTS {_TABLE} (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        source_item TEXT NOT NULL,
        source_item_name TEXT,
        recommended_item_id TEXT NOT NULL,
        recommended_item_name TEXT NOT NULL,
        reasoning TEXT NOT NULL DEFAULT '',
        confidence REAL NOT NULL DEFAULT 0,
        feedback INTEGER,
        created_at TEXT NOT NULL
    )
    """,
    f"CREATE INDEX IF NOT EXISTS idx_{_TABLE}_user_source ON {_TABLE}(user_id, source_item)",
    f"CREATE INDEX IF NOT EXISTS idx_{_TABLE}_user_item ON {_TABLE}(user_id, recommended_item_id)",
)


class Database:
    """aiosqlite connection manager for the recommendation store."""

    def __init__(self, url: str, settings: DatabaseSettings | None = None) -> None:
        self._db_path = url.removeprefix(DatabaseURLSchemes.SQLITE_PREFIX)
        self._busy_timeout = settings.busy_timeout_ms if settings else 5000
        self._connection_timeout = settings.connection_timeout_s if settings else 10
        self._keepalive_conn: aiosqlite.Connection | None = None
        self._initialized = False
        # Each in-memory instance gets its own shared-cache name.
        self._memory_uri = DatabaseURLSchemes.MEMORY_SHARED_URI.format(token=uuid4().hex)

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def _in_memory(self) -> bool:
        return self._db_path == DatabaseURLSchemes.MEMORY

    async def initialize(self) -> None:
        """Create the parent directory, the table and its indexes. Idempotent."""
        if self._initialized:
            return

        if self._in_memory:
            if self._keepalive_conn is None:
                self._keepalive_conn = await self._connect()
        else:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        async with self.transaction() as conn:
            for statement in _SCHEMA:
                await conn.execute(statement)

        self._initialized = True
        logger.info(LogTemplates.DATABASE_INITIALIZED, self._db_path)

    async def _connect(self) -> aiosqlite.Connection:
        if self._in_memory:
            target, uri = self._memory_uri, True
        else:
            target, uri = self._db_path, False

        # Timestamps are stored as ISO text and parsed by the repository.
        conn = await aiosqlite.connect(
            target, detect_types=0, uri=uri, timeout=self._connection_timeout
        )
        conn.row_factory = aiosqlite.Row
        for pragma in (
            SQLPragmas.JOURNAL_MODE_WAL,
            SQLPragmas.FOREIGN_KEYS_ON,
            SQLPragmas.BUSY_TIMEOUT.format(timeout=self._busy_timeout),
        ):
            await conn.execute(pragma)
        return conn

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Open a fresh connection and close it on exit."""
        conn = await self._connect()
        try:
            yield conn
        finally:
            await conn.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Open a connection that commits on success and rolls back on error."""
        async with self.connection() as conn:
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def execute(self, sql: str, parameters: tuple[Any, ...] = ()) -> int:
        """Run one statement in its own transaction and return the changed row count."""
        async with self.transaction() as conn:
            cursor = await conn.execute(sql, parameters)
            return cursor.rowcount

    async def execute_many(self, sql: str, parameters: Iterable[tuple[Any, ...]]) -> int:
        """Run *sql* for every parameter tuple in a single transaction.

        Either every row is written or none is.
        """
        batch = list(parameters)
        if not batch:
            return 0
        async with self.transaction() as conn:
            await conn.executemany(sql, batch)
        return len(batch)

    async def fetch_one(self, sql: str, parameters: tuple[Any, ...] = ()) -> dict[str, Any] | None:
        async with self.connection() as conn:
            cursor = await conn.execute(sql, parameters)
            row = await cursor.fetchone()
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, parameters: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        async with self.connection() as conn:
            rows = await conn.execute_fetchall(sql, parameters)
        return [dict(row) for row in rows]

    async def close(self) -> None:
        """Release the in-memory keepalive connection, if any."""
        if self._keepalive_conn is not None:
            try:
                await self._keepalive_conn.close()
            finally:
                self._keepalive_conn = None
        self._initialized = False
        logger.info(LogTemplates.DATABASE_CLOSED)

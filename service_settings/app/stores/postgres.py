"""
PostgreSQL persistence for settings and audit events.
"""

import json
from typing import Any, Optional

import asyncpg

from edge_shared.errors import NotFoundError, PersistenceError
from edge_shared.logging import get_logger

from ..events import AuditEvent

_DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class _PostgresStore:
    """Pool lifecycle shared by the PostgreSQL stores.

    Pass ``pool`` to share one pool between stores; the store that created
    a pool is the one that closes it.
    """

    store_name = "postgres"

    def __init__(self, dsn: Optional[str] = None, pool: Optional[asyncpg.Pool] = None):
        if dsn is None and pool is None:
            raise ValueError("Either dsn or pool is required")
        self.dsn = dsn
        self.pool = pool
        self._owns_pool = pool is None
        self.logger = get_logger(f"settings.stores.{self.store_name}")

    async def start(self):
        """Open the pool (if needed) and create tables."""
        try:
            if self.pool is None:
                self.pool = await asyncpg.create_pool(
                    self.dsn,
                    min_size=1,
                    max_size=10,
                    command_timeout=30
                )
            await self._create_tables()
        except _DB_ERRORS as e:
            self.logger.error("Failed to start PostgreSQL store", error=str(e))
            raise PersistenceError(self.store_name, str(e)) from e

        self.logger.info("PostgreSQL store started")

    async def stop(self):
        """Close the pool if this store owns it."""
        if self.pool and self._owns_pool:
            await self.pool.close()
            self.logger.info("PostgreSQL store stopped")

    async def _create_tables(self):
        raise NotImplementedError

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise PersistenceError(self.store_name, "store not started")
        return self.pool


class PostgresSettingStore(_PostgresStore):
    """Settings table keyed by name with a JSONB document value."""

    store_name = "settings"

    async def _create_tables(self):
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    name TEXT PRIMARY KEY,
                    content JSONB
                );
            """)

    async def exists(self, key: str) -> bool:
        try:
            async with self._require_pool().acquire() as conn:
                return bool(await conn.fetchval(
                    "SELECT EXISTS(SELECT 1 FROM settings WHERE name = $1)", key
                ))
        except _DB_ERRORS as e:
            self.logger.error("Error checking setting", setting_id=key, error=str(e))
            raise PersistenceError(self.store_name, str(e)) from e

    async def get(self, key: str) -> Any:
        try:
            async with self._require_pool().acquire() as conn:
                row = await conn.fetchrow("SELECT content FROM settings WHERE name = $1", key)
        except _DB_ERRORS as e:
            self.logger.error("Error loading setting", setting_id=key, error=str(e))
            raise PersistenceError(self.store_name, str(e)) from e

        if row is None:
            raise NotFoundError(f"Setting '{key}' not found", details={"id": key})
        if row["content"] is None:
            return None
        return json.loads(row["content"])

    async def insert(self, key: str, value: Any) -> None:
        await self._write(
            "INSERT INTO settings (name, content) VALUES ($1, $2::jsonb)",
            key, value
        )

    async def update_row(self, key: str, value: Any) -> None:
        await self._write(
            "UPDATE settings SET content = $2::jsonb WHERE name = $1",
            key, value
        )

    async def delete(self, key: str) -> None:
        try:
            async with self._require_pool().acquire() as conn:
                await conn.execute("DELETE FROM settings WHERE name = $1", key)
        except _DB_ERRORS as e:
            self.logger.error("Error deleting setting", setting_id=key, error=str(e))
            raise PersistenceError(self.store_name, str(e)) from e

    async def _write(self, query: str, key: str, value: Any) -> None:
        try:
            async with self._require_pool().acquire() as conn:
                await conn.execute(query, key, json.dumps(value))
        except _DB_ERRORS as e:
            self.logger.error("Error writing setting", setting_id=key, error=str(e))
            raise PersistenceError(self.store_name, str(e)) from e


class PostgresEventStore(_PostgresStore):
    """Append-only events table; ids and timestamps come from the database."""

    store_name = "events"

    async def _create_tables(self):
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    id BIGSERIAL PRIMARY KEY,
                    type VARCHAR(255) NOT NULL,
                    created_by VARCHAR(255) NOT NULL,
                    data JSONB,
                    created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
                );
            """)

    async def store(self, event: AuditEvent) -> None:
        try:
            async with self._require_pool().acquire() as conn:
                await conn.execute(
                    "INSERT INTO events (type, created_by, data) VALUES ($1, $2, $3::jsonb)",
                    event.type.value, event.created_by, json.dumps(event.data)
                )
        except _DB_ERRORS as e:
            self.logger.error("Error storing event", event_type=event.type.value, error=str(e))
            raise PersistenceError(self.store_name, str(e)) from e

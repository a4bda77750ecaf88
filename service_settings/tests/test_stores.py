"""
Tests for the in-memory and PostgreSQL setting/event stores.
"""

import json
import pytest
from unittest.mock import AsyncMock, MagicMock

from edge_shared.errors import NotFoundError, PersistenceError
from service_settings.app.events import AuditEvent, SettingEventType
from service_settings.app.stores import build_stores
from service_settings.app.stores.memory import InMemoryEventStore, InMemorySettingStore
from service_settings.app.stores.postgres import PostgresEventStore, PostgresSettingStore


class _Acquire:
    """Async context manager standing in for pool.acquire()."""

    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, *exc):
        return False


@pytest.fixture
def conn():
    connection = MagicMock()
    connection.execute = AsyncMock()
    connection.fetchval = AsyncMock(return_value=True)
    connection.fetchrow = AsyncMock(return_value=None)
    return connection


@pytest.fixture
def pool(conn):
    mock_pool = MagicMock()
    mock_pool.acquire = MagicMock(side_effect=lambda: _Acquire(conn))
    mock_pool.close = AsyncMock()
    return mock_pool


class TestInMemorySettingStore:
    """Test cases for InMemorySettingStore."""

    @pytest.mark.asyncio
    async def test_insert_get_exists_delete(self):
        store = InMemorySettingStore()

        assert await store.exists("k") is False
        await store.insert("k", {"a": 1})
        assert await store.exists("k") is True
        assert await store.get("k") == {"a": 1}

        await store.update_row("k", {"a": 2})
        assert await store.get("k") == {"a": 2}

        await store.delete("k")
        with pytest.raises(NotFoundError):
            await store.get("k")

    @pytest.mark.asyncio
    async def test_null_value_is_stored(self):
        store = InMemorySettingStore()
        await store.insert("k", None)

        assert await store.exists("k") is True
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self):
        store = InMemorySettingStore({"other": 1})
        await store.delete("missing")
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_values_are_copied(self):
        store = InMemorySettingStore()
        value = {"nested": {"flag": True}}
        await store.insert("k", value)

        value["nested"]["flag"] = False
        fetched = await store.get("k")
        fetched["nested"]["flag"] = None

        assert await store.get("k") == {"nested": {"flag": True}}


class TestInMemoryEventStore:
    """Test cases for InMemoryEventStore."""

    @pytest.mark.asyncio
    async def test_assigns_ids_and_timestamps(self):
        store = InMemoryEventStore()
        await store.store(AuditEvent.for_setting(SettingEventType.CREATED, "a", "admin"))
        await store.store(AuditEvent.for_setting(SettingEventType.DELETED, "a", "admin"))

        events = store.events
        assert [e.id for e in events] == [1, 2]
        assert events[0].created_at <= events[1].created_at
        assert events[1].to_dict()["type"] == "setting-deleted"
        assert events[1].to_dict()["createdBy"] == "admin"


class TestPostgresSettingStore:
    """Test cases for PostgresSettingStore."""

    def test_requires_dsn_or_pool(self):
        with pytest.raises(ValueError):
            PostgresSettingStore()

    @pytest.mark.asyncio
    async def test_start_creates_table(self, pool, conn):
        store = PostgresSettingStore(pool=pool)
        await store.start()

        ddl = conn.execute.await_args.args[0]
        assert "CREATE TABLE IF NOT EXISTS settings" in ddl

    @pytest.mark.asyncio
    async def test_insert_serializes_json(self, pool, conn):
        store = PostgresSettingStore(pool=pool)
        await store.insert("k", {"a": [1, 2]})

        query, key, content = conn.execute.await_args.args
        assert query.startswith("INSERT INTO settings")
        assert key == "k"
        assert json.loads(content) == {"a": [1, 2]}

    @pytest.mark.asyncio
    async def test_update_row_targets_name(self, pool, conn):
        store = PostgresSettingStore(pool=pool)
        await store.update_row("k", {"a": 3})

        query, key, content = conn.execute.await_args.args
        assert query.startswith("UPDATE settings")
        assert key == "k"
        assert json.loads(content) == {"a": 3}

    @pytest.mark.asyncio
    async def test_get_decodes_json(self, pool, conn):
        conn.fetchrow = AsyncMock(return_value={"content": '{"enabled": true}'})
        store = PostgresSettingStore(pool=pool)

        assert await store.get("k") == {"enabled": True}

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, pool, conn):
        store = PostgresSettingStore(pool=pool)

        with pytest.raises(NotFoundError) as exc_info:
            await store.get("k")

        assert exc_info.value.details == {"id": "k"}

    @pytest.mark.asyncio
    async def test_get_json_null(self, pool, conn):
        conn.fetchrow = AsyncMock(return_value={"content": "null"})
        store = PostgresSettingStore(pool=pool)

        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_exists(self, pool, conn):
        conn.fetchval = AsyncMock(return_value=False)
        store = PostgresSettingStore(pool=pool)
        assert await store.exists("k") is False

    @pytest.mark.asyncio
    async def test_database_errors_become_persistence_errors(self, pool, conn):
        conn.execute = AsyncMock(side_effect=ConnectionRefusedError("refused"))
        store = PostgresSettingStore(pool=pool)

        with pytest.raises(PersistenceError) as exc_info:
            await store.delete("k")

        assert exc_info.value.code == "PERSISTENCE_ERROR"
        assert "refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_not_started_raises(self):
        store = PostgresSettingStore(dsn="postgres://localhost/edge")
        with pytest.raises(PersistenceError):
            await store.exists("k")

    @pytest.mark.asyncio
    async def test_shared_pool_is_not_closed(self, pool):
        store = PostgresSettingStore(pool=pool)
        await store.stop()
        pool.close.assert_not_awaited()


class TestPostgresEventStore:
    """Test cases for PostgresEventStore."""

    @pytest.mark.asyncio
    async def test_store_inserts_event(self, pool, conn):
        store = PostgresEventStore(pool=pool)
        await store.store(AuditEvent.for_setting(SettingEventType.UPDATED, "k", "admin"))

        query, event_type, created_by, data = conn.execute.await_args.args
        assert query.startswith("INSERT INTO events")
        assert event_type == "setting-updated"
        assert created_by == "admin"
        assert json.loads(data) == {"id": "k"}

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, pool, conn):
        conn.execute = AsyncMock(side_effect=ConnectionResetError("reset"))
        store = PostgresEventStore(pool=pool)

        with pytest.raises(PersistenceError):
            await store.store(AuditEvent.for_setting(SettingEventType.CREATED, "k", "admin"))


def test_build_stores_defaults_to_memory():
    setting_store, event_store = build_stores(None)
    assert isinstance(setting_store, InMemorySettingStore)
    assert isinstance(event_store, InMemoryEventStore)


def test_build_stores_with_dsn_uses_postgres():
    setting_store, event_store = build_stores("postgres://localhost/edge")
    assert isinstance(setting_store, PostgresSettingStore)
    assert isinstance(event_store, PostgresEventStore)

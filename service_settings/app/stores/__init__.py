"""
Setting and event store adapters.

In-memory stores back local runs and tests; the PostgreSQL stores are
used when a settings DSN is configured.
"""

from typing import Optional, Tuple

from .memory import InMemoryEventStore, InMemorySettingStore
from .postgres import PostgresEventStore, PostgresSettingStore


def build_stores(dsn: Optional[str] = None) -> Tuple[object, object]:
    """Return a (setting_store, event_store) pair for the given DSN."""
    if not dsn:
        return InMemorySettingStore(), InMemoryEventStore()
    return PostgresSettingStore(dsn), PostgresEventStore(dsn)


__all__ = [
    "InMemoryEventStore",
    "InMemorySettingStore",
    "PostgresEventStore",
    "PostgresSettingStore",
    "build_stores",
]

"""
Setting service: key-value configuration with an audit trail.
"""

from typing import Any, Optional

from edge_shared.logging import get_logger
from edge_shared.metrics import MetricsCollector

from .events import AuditEvent, SettingEventType


class SettingService:
    """Upsert and delete settings, recording one audit event per change.

    ``setting_store`` must provide async ``exists``, ``get``, ``insert``,
    ``update_row`` and ``delete``, with ``get`` raising NotFoundError for an
    absent key; ``event_store`` must provide async
    ``store(event)``. Events are stored only after the write succeeded. A
    failed event write does not roll the setting write back.

    ``insert`` checks existence before writing and the two steps are not
    atomic: concurrent inserts of the same key may record the wrong event
    kind. Serialize per key if that matters.
    """

    def __init__(self, setting_store, event_store, metrics: Optional[MetricsCollector] = None):
        self.setting_store = setting_store
        self.event_store = event_store
        self.metrics = metrics
        self.logger = get_logger("settings.service")

    async def get(self, key: str) -> Any:
        """Return the stored value for ``key``; the store raises NotFoundError when absent."""
        return await self.setting_store.get(key)

    async def insert(self, key: str, value: Any, created_by: str) -> None:
        """Create the setting or update it in place when it already exists."""
        if await self.setting_store.exists(key):
            await self.setting_store.update_row(key, value)
            await self._record(SettingEventType.UPDATED, key, created_by)
        else:
            await self.setting_store.insert(key, value)
            await self._record(SettingEventType.CREATED, key, created_by)

    async def delete(self, key: str, created_by: str) -> None:
        """Delete the setting. Absent keys are left to the store's semantics."""
        await self.setting_store.delete(key)
        await self._record(SettingEventType.DELETED, key, created_by)

    async def _record(self, event_type: SettingEventType, key: str, created_by: str) -> None:
        await self.event_store.store(AuditEvent.for_setting(event_type, key, created_by))

        self.logger.info(
            "Setting changed",
            setting_id=key,
            event_type=event_type.value,
            created_by=created_by
        )
        if self.metrics:
            self.metrics.record_setting_change(event_type.value)

"""
In-memory setting and event stores.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from edge_shared.errors import NotFoundError

from ..events import AuditEvent, StoredEvent


class InMemorySettingStore:
    """Dictionary-backed setting store.

    Values are deep-copied on the way in and out so callers cannot mutate
    stored documents.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._rows: Dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self._rows[key] = copy.deepcopy(value)

    async def exists(self, key: str) -> bool:
        return key in self._rows

    async def get(self, key: str) -> Any:
        if key not in self._rows:
            raise NotFoundError(f"Setting '{key}' not found", details={"id": key})
        return copy.deepcopy(self._rows[key])

    async def insert(self, key: str, value: Any) -> None:
        self._rows[key] = copy.deepcopy(value)

    async def update_row(self, key: str, value: Any) -> None:
        self._rows[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        self._rows.pop(key, None)

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None

    def __len__(self) -> int:
        return len(self._rows)


class InMemoryEventStore:
    """Append-only list of stored events in insertion order."""

    def __init__(self) -> None:
        self._events: List[StoredEvent] = []

    async def store(self, event: AuditEvent) -> None:
        self._events.append(
            StoredEvent(
                id=len(self._events) + 1,
                type=event.type,
                created_by=event.created_by,
                data=dict(event.data),
                created_at=datetime.now(timezone.utc),
            )
        )

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None

    @property
    def events(self) -> List[StoredEvent]:
        return list(self._events)

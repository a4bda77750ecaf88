"""
Audit event types for setting changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict


class SettingEventType(str, Enum):
    """Kinds of audited setting changes."""
    CREATED = "setting-created"
    UPDATED = "setting-updated"
    DELETED = "setting-deleted"


@dataclass(frozen=True)
class AuditEvent:
    """An audit event as handed to an event store.

    Only the setting key is recorded in ``data``; values stay out of the
    event log.
    """

    type: SettingEventType
    created_by: str
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_setting(cls, event_type: SettingEventType, key: str, created_by: str) -> "AuditEvent":
        return cls(type=event_type, created_by=created_by, data={"id": key})

    @property
    def setting_key(self) -> Any:
        return self.data.get("id")


@dataclass(frozen=True)
class StoredEvent:
    """An event after the store has assigned its id and timestamp."""

    id: int
    type: SettingEventType
    created_by: str
    data: Dict[str, Any]
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "createdBy": self.created_by,
            "data": dict(self.data),
            "createdAt": self.created_at.isoformat(),
        }

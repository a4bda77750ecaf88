"""
Settings package for flag-edge.

Internal key-value configuration with an audit trail. Every create,
update and delete is recorded as an event after the write succeeds.

Structure:
- app.service: SettingService (upsert/delete with audit events).
- app.events: audit event types and records.
- app.stores: in-memory and PostgreSQL setting/event stores.
- app.cli: administrative command line entry point.
"""

from .events import AuditEvent, SettingEventType, StoredEvent
from .service import SettingService

__all__ = [
    "AuditEvent",
    "SettingEventType",
    "SettingService",
    "StoredEvent",
]

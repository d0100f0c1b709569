"""
Core engine module.

Exports:
- Record, register_record: Immutable record base and registration
- EventBus, Event, ProgressionEvent: Event system
"""

from salvage_engine.core.record import (
    Record,
    register_record,
    get_record_type,
    get_all_record_types,
)
from salvage_engine.core.events import EventBus, Event, EventHandler, ProgressionEvent

__all__ = [
    # Records
    "Record",
    "register_record",
    "get_record_type",
    "get_all_record_types",
    # Events
    "EventBus",
    "Event",
    "EventHandler",
    "ProgressionEvent",
]

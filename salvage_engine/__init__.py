"""
Salvage Engine

Domain-neutral infrastructure for the pilot progression rules:
immutable records, a typed event bus and the reference data loader.

Quick Start:
    from salvage_engine.resources import ReferenceDatabase

    db = ReferenceDatabase("data")
    db.load_all()
"""

__version__ = "0.1.0"

from salvage_engine.core import (
    Record,
    register_record,
    get_record_type,
    EventBus,
    Event,
    ProgressionEvent,
)

__all__ = [
    "Record",
    "register_record",
    "get_record_type",
    "EventBus",
    "Event",
    "ProgressionEvent",
]

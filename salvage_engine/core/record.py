"""
Record base class for immutable reference and state data.

Records are pure data containers with NO rule logic.
All rules live in the progression module. This separation makes:
- Snapshots trivially shareable between builders
- Serialization trivial
- Testing easier

Usage:
    @register_record
    class Ability(Record):
        id: str
        tree: str
        level: int
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    """
    Base class for all records.

    Records are immutable containers using Pydantic for:
    - Automatic validation
    - JSON serialization
    - Type hints
    - Default values

    IMPORTANT: Records are frozen. "Changing" a record means building
    a new one with evolve(...).
    """

    model_config = ConfigDict(
        # Snapshots are shared freely, never mutated
        frozen=True,
        # Catch typos in data files and call sites
        extra='forbid',
    )

    # Class variable: record type name (used for serialization)
    _type_name: ClassVar[str] = ""

    @classmethod
    def get_type_name(cls) -> str:
        """Get the record type name for serialization."""
        return cls._type_name or cls.__name__

    def evolve(self, **changes) -> Record:
        """Return a copy with the given fields replaced (re-validated)."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)


# Registry of record types for deserialization
_record_registry: dict[str, type[Record]] = {}


def register_record(cls: type[Record]) -> type[Record]:
    """
    Decorator to register a record type.

    Usage:
        @register_record
        class TreeRequirement(Record):
            tree: str
            required_trees: frozenset[str]
    """
    type_name = cls.get_type_name()
    _record_registry[type_name] = cls
    return cls


def get_record_type(type_name: str) -> type[Record] | None:
    """Get record class by type name."""
    return _record_registry.get(type_name)


def get_all_record_types() -> dict[str, type[Record]]:
    """Get all registered record types."""
    return _record_registry.copy()

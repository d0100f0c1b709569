"""
Pilot components - the character progression snapshot.
"""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator

from salvage_engine.core.record import Record, register_record


@register_record
class CharacterProgression(Record):
    """
    Everything the progression rules own about one pilot build.

    Instances are frozen snapshots. Ledger operations return a new
    snapshot and leave the old one untouched, so a caller can keep the
    previous value around for undo or for diffing against storage.

    Attributes:
        primary_class_id: Selected primary class (None before class selection)
        specialization_class_id: Advanced or hybrid specialization, if any
        selected_ability_ids: Selected abilities in selection order
        legendary_ability_id: The single legendary ability, if any
        current_tp: Unspent Training Points
    """
    primary_class_id: Optional[str] = None
    specialization_class_id: Optional[str] = None
    selected_ability_ids: tuple[str, ...] = ()
    legendary_ability_id: Optional[str] = None
    current_tp: int = 0

    @field_validator('selected_ability_ids')
    @classmethod
    def _no_duplicates(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(value)) != len(value):
            raise ValueError("selected_ability_ids must not contain duplicates")
        return value

    def has_ability(self, ability_id: str) -> bool:
        return ability_id in self.selected_ability_ids

    @property
    def ability_count(self) -> int:
        return len(self.selected_ability_ids)

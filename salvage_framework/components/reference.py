"""
Reference components - abilities, classes, tree requirements.

These mirror the read-only rules catalog. Nothing in the progression
rules ever builds or changes them after loading.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional

from pydantic import Field

from salvage_engine.core.record import Record, register_record


class ClassKind(Enum):
    """Pilot class archetypes."""
    CORE = auto()
    ADVANCED = auto()
    HYBRID = auto()


@register_record
class Ability(Record):
    """
    A single ability in a leveled tree.

    Attributes:
        id: Unique catalog id
        name: Display name (legendary sets refer to abilities by name)
        tree: Name of the tree the ability belongs to
        level: Position in the tree, starting at 1
    """
    id: str
    name: str
    tree: str
    level: int = Field(ge=1)


@register_record
class SpecializationClass(Record):
    """
    A pilot class.

    Core classes grant core trees. Taking a class as a secondary
    specialization unlocks its specialization tree.

    Attributes:
        id: Unique catalog id
        name: Display name
        kind: Core, Advanced or Hybrid
        core_trees: Trees granted to a primary class (Core only)
        specialization_tree: Tree unlocked by this class as a specialization
        legendary_ability_names: Capstone abilities owned by this class
        base_class_id: For Advanced classes, the Core class they advance
        allow_specialization: False for classes that can never specialize
    """
    id: str
    name: str
    kind: ClassKind = ClassKind.CORE
    core_trees: tuple[str, ...] = ()
    specialization_tree: Optional[str] = None
    legendary_ability_names: frozenset[str] = frozenset()
    base_class_id: Optional[str] = None
    allow_specialization: bool = True

    @property
    def is_core(self) -> bool:
        return self.kind is ClassKind.CORE

    @property
    def is_hybrid(self) -> bool:
        return self.kind is ClassKind.HYBRID


@register_record
class TreeRequirement(Record):
    """A hybrid tree unlocks once any one of `required_trees` is completed."""
    tree: str
    required_trees: frozenset[str] = frozenset()

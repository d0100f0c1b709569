"""
Ability catalog - typed, read-only view over the reference data.
"""

from __future__ import annotations

from typing import Iterable, Optional

from salvage_engine.resources import ReferenceDatabase
from salvage_framework.components import (
    Ability,
    ClassKind,
    SpecializationClass,
    TreeRequirement,
)


class AbilityCatalog:
    """
    Read-only catalog of abilities, classes and tree requirements.

    Loaded once per session and shared freely between ledgers.
    Sequences keep catalog order, which eligibility results rely on.
    """

    def __init__(
        self,
        abilities: Iterable[Ability] = (),
        classes: Iterable[SpecializationClass] = (),
        tree_requirements: Iterable[TreeRequirement] = (),
    ):
        self._abilities: dict[str, Ability] = {}
        self._classes: dict[str, SpecializationClass] = {}
        self._tree_requirements: dict[str, TreeRequirement] = {}

        for ability in abilities:
            self._abilities[ability.id] = ability
        for cls in classes:
            self._classes[cls.id] = cls
        for requirement in tree_requirements:
            # First requirement for a tree wins
            self._tree_requirements.setdefault(requirement.tree, requirement)

    @classmethod
    def from_database(cls, database: ReferenceDatabase) -> AbilityCatalog:
        """Build a catalog from a loaded ReferenceDatabase."""
        return cls(
            abilities=[cls._parse_ability(d) for d in database.abilities.values()],
            classes=[cls._parse_class(d) for d in database.classes.values()],
            tree_requirements=[
                cls._parse_tree_requirement(d)
                for d in database.tree_requirements.values()
            ],
        )

    @staticmethod
    def _parse_ability(data: dict) -> Ability:
        """Parse an ability from JSON data."""
        return Ability(
            id=data['id'],
            name=data['name'],
            tree=data['tree'],
            level=int(data['level']),
        )

    @staticmethod
    def _parse_class(data: dict) -> SpecializationClass:
        """Parse a class from JSON data."""
        return SpecializationClass(
            id=data['id'],
            name=data['name'],
            kind=ClassKind[data.get('kind', 'core').upper()],
            core_trees=tuple(data.get('core_trees', [])),
            specialization_tree=data.get('specialization_tree'),
            legendary_ability_names=frozenset(data.get('legendary_abilities', [])),
            base_class_id=data.get('base_class'),
            allow_specialization=data.get('allow_specialization', True),
        )

    @staticmethod
    def _parse_tree_requirement(data: dict) -> TreeRequirement:
        """Parse a tree requirement from JSON data."""
        return TreeRequirement(
            tree=data['tree'],
            required_trees=frozenset(data.get('requirement', [])),
        )

    def list_abilities(self) -> list[Ability]:
        """Get all abilities in catalog order."""
        return list(self._abilities.values())

    def list_classes(self) -> list[SpecializationClass]:
        """Get all classes in catalog order."""
        return list(self._classes.values())

    def list_tree_requirements(self) -> list[TreeRequirement]:
        """Get all tree requirements in catalog order."""
        return list(self._tree_requirements.values())

    def get_ability(self, ability_id: str) -> Optional[Ability]:
        """Get an ability."""
        return self._abilities.get(ability_id)

    def get_class(self, class_id: Optional[str]) -> Optional[SpecializationClass]:
        """Get a class (None-safe, for optional class references)."""
        if class_id is None:
            return None
        return self._classes.get(class_id)

    def get_tree_requirement(self, tree: str) -> Optional[TreeRequirement]:
        """Get the requirement gating a hybrid tree."""
        return self._tree_requirements.get(tree)

    def get_abilities_in_tree(self, tree: str) -> list[Ability]:
        """Get all abilities of one tree, lowest level first."""
        return sorted(
            (a for a in self._abilities.values() if a.tree == tree),
            key=lambda a: a.level,
        )

    def get_classes_by_kind(self, kind: ClassKind) -> list[SpecializationClass]:
        """Get all classes of a kind."""
        return [c for c in self._classes.values() if c.kind is kind]

    def __len__(self) -> int:
        return len(self._abilities)

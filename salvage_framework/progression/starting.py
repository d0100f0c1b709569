"""
Starting build helpers - the first, free ability of a new pilot.
"""

from __future__ import annotations

from salvage_framework.components import Ability, ClassKind, SpecializationClass
from salvage_framework.progression.catalog import AbilityCatalog
from salvage_framework.progression.eligibility import can_specialize
from salvage_framework.progression.rules import DEFAULT_RULES, RulesConfig


def all_core_trees(catalog: AbilityCatalog) -> list[str]:
    """Get every core tree of every Core class, in catalog order."""
    trees: list[str] = []
    for cls in catalog.get_classes_by_kind(ClassKind.CORE):
        for tree in cls.core_trees:
            if tree not in trees:
                trees.append(tree)
    return trees


def starting_trees(
    catalog: AbilityCatalog,
    primary_class: SpecializationClass,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[str]:
    """
    Get the trees a new pilot may take the free starting ability from.

    Classes barred from specializing (the Salvager) are jacks of all
    trades and start from any Core class's core trees. This only widens
    the starting pick; later purchases stay within the class's own trees.
    """
    trees = list(primary_class.core_trees)
    if not can_specialize(primary_class, rules):
        for tree in all_core_trees(catalog):
            if tree not in trees:
                trees.append(tree)
    return trees


def starting_ability_options(
    catalog: AbilityCatalog,
    class_id: str,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[Ability]:
    """
    Get the level 1 abilities a new pilot of a class may start with.

    Returns:
        Abilities sorted by name; empty for an unknown class
    """
    primary_class = catalog.get_class(class_id)
    if primary_class is None:
        return []

    options = []
    for tree in starting_trees(catalog, primary_class, rules):
        options.extend(a for a in catalog.get_abilities_in_tree(tree) if a.level == 1)

    return sorted(options, key=lambda a: a.name)

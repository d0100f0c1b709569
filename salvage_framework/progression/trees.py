"""
Tree index - group abilities into their leveled trees.
"""

from __future__ import annotations

from typing import Iterable

from salvage_framework.components import Ability


def by_tree(abilities: Iterable[Ability]) -> dict[str, list[Ability]]:
    """
    Group abilities by tree, each tree sorted by ascending level.

    Trees appear in order of first occurrence; abilities sharing a level
    keep their input order.
    """
    trees: dict[str, list[Ability]] = {}
    for ability in abilities:
        trees.setdefault(ability.tree, []).append(ability)

    for tree_abilities in trees.values():
        tree_abilities.sort(key=lambda a: a.level)

    return trees


def count_by_tree(abilities: Iterable[Ability]) -> dict[str, int]:
    """Count abilities per tree."""
    counts: dict[str, int] = {}
    for ability in abilities:
        counts[ability.tree] = counts.get(ability.tree, 0) + 1
    return counts

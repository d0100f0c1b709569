"""
Tree gating - one ability unlocked at a time per tree.
"""

from __future__ import annotations

from typing import Iterable

from salvage_framework.components import Ability


def lowest_available_level(tree: str, selected: Iterable[Ability]) -> int:
    """
    Get the single next-selectable level of a tree.

    Args:
        tree: Tree name
        selected: Already-selected abilities (other trees are ignored)

    Returns:
        1 if nothing in the tree is selected, else highest selected level + 1
    """
    levels = [a.level for a in selected if a.tree == tree]
    if not levels:
        return 1
    return max(levels) + 1


def is_selectable(ability: Ability, selected: Iterable[Ability]) -> bool:
    """Check if an ability sits exactly at its tree's next level."""
    return ability.level == lowest_available_level(ability.tree, selected)

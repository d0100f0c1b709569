"""
Ability pricing in Training Points.
"""

from __future__ import annotations

from typing import Optional

from salvage_framework.components import Ability, SpecializationClass
from salvage_framework.progression.rules import DEFAULT_RULES, RulesConfig


def legendary_names(
    primary_class: Optional[SpecializationClass],
    specialization_class: Optional[SpecializationClass] = None,
) -> frozenset[str]:
    """Get the legendary ability names owned by a pilot's classes."""
    names: frozenset[str] = frozenset()
    for cls in (primary_class, specialization_class):
        if cls is not None:
            names |= cls.legendary_ability_names
    return names


def ability_cost(
    ability: Ability,
    primary_class: Optional[SpecializationClass],
    specialization_class: Optional[SpecializationClass] = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """
    Calculate the TP price of an ability.

    First match wins:
        legendary ability of either class -> legendary_cost (3)
        specialization tree of either class -> specialization_tree_cost (2)
        core tree of the primary class -> core_tree_cost (1)
        anything else -> default_cost (1)

    Without a primary class the price is unclassed_cost (0); the ledger
    rejects such selections before pricing them.
    """
    if primary_class is None:
        return rules.unclassed_cost

    if ability.name in legendary_names(primary_class, specialization_class):
        return rules.legendary_cost

    specialization_trees = {primary_class.specialization_tree}
    if specialization_class is not None:
        specialization_trees.add(specialization_class.specialization_tree)
    specialization_trees.discard(None)
    if ability.tree in specialization_trees:
        return rules.specialization_tree_cost

    if ability.tree in primary_class.core_trees:
        return rules.core_tree_cost

    return rules.default_cost

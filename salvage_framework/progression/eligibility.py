"""
Specialization eligibility - which advanced or hybrid classes a pilot may take.

Always recomputed from the current selection; removing abilities can make
a previously eligible specialization ineligible again.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from salvage_framework.components import (
    Ability,
    ClassKind,
    SpecializationClass,
    TreeRequirement,
)
from salvage_framework.progression.rules import DEFAULT_RULES, RulesConfig
from salvage_framework.progression.trees import count_by_tree


def completed_trees(
    selected: Iterable[Ability],
    rules: RulesConfig = DEFAULT_RULES,
) -> set[str]:
    """Get the trees with at least `completed_tree_threshold` selections."""
    return {
        tree for tree, count in count_by_tree(selected).items()
        if count >= rules.completed_tree_threshold
    }


def can_specialize(
    primary_class: Optional[SpecializationClass],
    rules: RulesConfig = DEFAULT_RULES,
) -> bool:
    """Check the per-class policy that bars some classes from specializing."""
    if primary_class is None:
        return False
    if not primary_class.allow_specialization:
        return False
    return primary_class.name not in rules.no_specialization_classes


def advanced_version_id(
    primary_class: SpecializationClass,
    classes: Iterable[SpecializationClass],
) -> str:
    """
    Get the class id that stands for "advanced version of the primary class".

    Catalogs that model advanced classes separately link them through
    base_class_id; otherwise the primary class doubles as its own
    advanced version.
    """
    for cls in classes:
        if cls.kind is ClassKind.ADVANCED and cls.base_class_id == primary_class.id:
            return cls.id
    return primary_class.id


def eligible_specializations(
    selected: Sequence[Ability],
    primary_class: Optional[SpecializationClass],
    classes: Sequence[SpecializationClass],
    tree_requirements: Iterable[TreeRequirement],
    rules: RulesConfig = DEFAULT_RULES,
) -> list[str]:
    """
    Get the specialization class ids currently open to a pilot.

    Args:
        selected: Selected abilities
        primary_class: The pilot's primary class
        classes: Every class in catalog order
        tree_requirements: Every hybrid tree requirement
        rules: Thresholds and policy

    Returns:
        Hybrid class ids in catalog order, then the advanced-version id
    """
    if len(selected) < rules.min_abilities_for_specialization:
        return []

    if not can_specialize(primary_class, rules):
        return []

    completed = completed_trees(selected, rules)
    if not completed:
        return []

    requirements: dict[str, TreeRequirement] = {}
    for requirement in tree_requirements:
        requirements.setdefault(requirement.tree, requirement)

    eligible: list[str] = []

    for cls in classes:
        if cls.kind is not ClassKind.HYBRID or cls.specialization_tree is None:
            continue
        requirement = requirements.get(cls.specialization_tree)
        if requirement is None:
            continue
        if requirement.required_trees & completed:
            eligible.append(cls.id)

    if completed.intersection(primary_class.core_trees):
        advanced_id = advanced_version_id(primary_class, classes)
        if advanced_id not in eligible:
            eligible.append(advanced_id)

    return eligible

"""
Progression module - trees, costs, specializations, the ledger.

Provides:
- Ability catalog over the reference data
- Tree gating and ability pricing
- Specialization eligibility
- Validated build transitions (ProgressionLedger)
"""

from salvage_framework.progression.catalog import AbilityCatalog
from salvage_framework.progression.rules import RulesConfig, RemovalPolicy, DEFAULT_RULES
from salvage_framework.progression.trees import by_tree, count_by_tree
from salvage_framework.progression.gates import lowest_available_level, is_selectable
from salvage_framework.progression.costs import ability_cost, legendary_names
from salvage_framework.progression.eligibility import (
    completed_trees,
    can_specialize,
    eligible_specializations,
)
from salvage_framework.progression.errors import (
    EngineError,
    EngineErrorKind,
    RuleViolation,
    TransitionResult,
)
from salvage_framework.progression.starting import starting_ability_options
from salvage_framework.progression.ledger import ProgressionLedger, LegendaryOption

__all__ = [
    # Catalog
    "AbilityCatalog",
    # Rules
    "RulesConfig",
    "RemovalPolicy",
    "DEFAULT_RULES",
    # Trees
    "by_tree",
    "count_by_tree",
    "lowest_available_level",
    "is_selectable",
    # Costs
    "ability_cost",
    "legendary_names",
    # Eligibility
    "completed_trees",
    "can_specialize",
    "eligible_specializations",
    # Results
    "EngineError",
    "EngineErrorKind",
    "RuleViolation",
    "TransitionResult",
    # Ledger
    "starting_ability_options",
    "ProgressionLedger",
    "LegendaryOption",
]

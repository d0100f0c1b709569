"""
Game rule constants for pilot progression.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Iterable, Optional


class RemovalPolicy(Enum):
    """What happens when the retraining tax exceeds the TP on hand."""
    REJECT = auto()          # Fail with INSUFFICIENT_RESOURCES
    CLAMP = auto()           # Debit down to 0
    ALLOW_NEGATIVE = auto()  # Debit anyway, TP may go below 0


class RulesConfig:
    """Configuration for the progression rules."""

    def __init__(
        self,
        starting_tp: int = 0,
        legendary_cost: int = 3,
        specialization_tree_cost: int = 2,
        core_tree_cost: int = 1,
        default_cost: int = 1,
        unclassed_cost: int = 0,
        removal_cost: int = 1,
        min_abilities_for_specialization: int = 6,
        completed_tree_threshold: int = 3,
        no_specialization_classes: Optional[Iterable[str]] = None,
        removal_policy: RemovalPolicy = RemovalPolicy.REJECT,
        max_starting_abilities: int = 1,
    ):
        if starting_tp < 0:
            raise ValueError(f"starting_tp must be >= 0, got {starting_tp}")
        self.starting_tp = starting_tp
        self.legendary_cost = legendary_cost
        self.specialization_tree_cost = specialization_tree_cost
        self.core_tree_cost = core_tree_cost
        self.default_cost = default_cost
        self.unclassed_cost = unclassed_cost
        self.removal_cost = removal_cost
        self.min_abilities_for_specialization = min_abilities_for_specialization
        self.completed_tree_threshold = completed_tree_threshold
        # Matched against class names; the Salvager never advances
        if no_specialization_classes is None:
            no_specialization_classes = ("Salvager",)
        self.no_specialization_classes = frozenset(no_specialization_classes)
        self.removal_policy = removal_policy
        self.max_starting_abilities = max_starting_abilities


DEFAULT_RULES = RulesConfig()

"""
Progression ledger - validated transitions over a pilot's build.

Every operation takes a CharacterProgression snapshot and returns a
TransitionResult. On success the result holds a new snapshot; on failure
it holds an EngineError and the caller keeps the snapshot it passed in,
which no operation ever modifies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from salvage_framework.components import (
    Ability,
    CharacterProgression,
    SpecializationClass,
)
from salvage_framework.progression import costs, eligibility, gates
from salvage_framework.progression.catalog import AbilityCatalog
from salvage_framework.progression.errors import (
    EngineErrorKind,
    TransitionResult,
)
from salvage_framework.progression.rules import RemovalPolicy, RulesConfig
from salvage_framework.progression.starting import starting_ability_options
from salvage_framework.progression.trees import by_tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegendaryOption:
    """A legendary ability offered to a pilot, with its current availability."""
    ability: Ability
    cost: int
    selectable: bool
    selected: bool


class ProgressionLedger:
    """
    Applies rule-checked transitions to CharacterProgression snapshots.

    The ledger holds only the read-only catalog and rules, so one ledger
    can serve any number of pilots.

    Usage:
        ledger = ProgressionLedger(catalog)
        pilot = ledger.create_progression("hacker", starting_tp=5)
        result = ledger.select_ability(pilot, "hacking-1")
        if result.ok:
            pilot = result.progression
    """

    def __init__(self, catalog: AbilityCatalog, rules: Optional[RulesConfig] = None):
        self.catalog = catalog
        self.rules = rules or RulesConfig()

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def empty_progression(self) -> CharacterProgression:
        """Get a build with no class selected."""
        return CharacterProgression(current_tp=self.rules.starting_tp)

    def create_progression(
        self,
        class_id: str,
        starting_tp: Optional[int] = None,
    ) -> CharacterProgression:
        """
        Start a new build for a primary class.

        Args:
            class_id: Primary class id
            starting_tp: TP on hand (default: the configured baseline)

        Raises:
            RuleViolation: If the class is not in the catalog or
                starting_tp is negative
        """
        if starting_tp is not None and starting_tp < 0:
            self._reject(
                "create_progression", EngineErrorKind.INVALID_AMOUNT,
                f"Starting TP cannot be negative ({starting_tp})",
                starting_tp=starting_tp,
            ).unwrap()

        progression = self.set_primary_class(self.empty_progression(), class_id).unwrap()
        if starting_tp is not None:
            progression = progression.evolve(current_tp=starting_tp)
        return progression

    def set_primary_class(
        self,
        progression: CharacterProgression,
        class_id: str,
    ) -> TransitionResult:
        """
        Select a primary class.

        Trees are class-scoped, so abilities, specialization and legendary
        ability are dropped and TP returns to the configured baseline.
        """
        if self.catalog.get_class(class_id) is None:
            return self._reject(
                "set_primary_class", EngineErrorKind.CLASS_NOT_FOUND,
                f"Unknown class '{class_id}'", class_id=class_id,
            )

        return self._commit("set_primary_class", CharacterProgression(
            primary_class_id=class_id,
            current_tp=self.rules.starting_tp,
        ))

    def grant_starting_ability(
        self,
        progression: CharacterProgression,
        ability_id: str,
    ) -> TransitionResult:
        """Add a new pilot's free level 1 ability."""
        op = "grant_starting_ability"
        primary, failure = self._require_primary(op, progression)
        if failure:
            return failure

        ability = self.catalog.get_ability(ability_id)
        if ability is None:
            return self._reject(
                op, EngineErrorKind.ABILITY_NOT_FOUND,
                f"Unknown ability '{ability_id}'", ability_id=ability_id,
            )

        if progression.ability_count >= self.rules.max_starting_abilities:
            return self._reject(
                op, EngineErrorKind.STARTING_ABILITY_UNAVAILABLE,
                "Starting abilities have already been chosen",
            )

        options = starting_ability_options(self.catalog, primary.id, self.rules)
        if ability not in options:
            return self._reject(
                op, EngineErrorKind.STARTING_ABILITY_UNAVAILABLE,
                f"{ability.name} is not a starting ability for {primary.name}",
                ability_id=ability_id,
            )

        return self._commit(op, progression.evolve(
            selected_ability_ids=progression.selected_ability_ids + (ability.id,),
        ))

    # -------------------------------------------------------------------------
    # Abilities
    # -------------------------------------------------------------------------

    def select_ability(
        self,
        progression: CharacterProgression,
        ability_id: str,
    ) -> TransitionResult:
        """
        Buy the next ability of a tree.

        Requires a primary class, a reachable tree, the ability to be the
        tree's next level and enough TP to pay for it.
        """
        op = "select_ability"
        primary, failure = self._require_primary(op, progression)
        if failure:
            return failure

        ability = self.catalog.get_ability(ability_id)
        if ability is None:
            return self._reject(
                op, EngineErrorKind.ABILITY_NOT_FOUND,
                f"Unknown ability '{ability_id}'", ability_id=ability_id,
            )

        specialization = self.catalog.get_class(progression.specialization_class_id)

        if ability.tree not in self._reachable_trees(primary, specialization):
            return self._reject(
                op, EngineErrorKind.ABILITY_NOT_REACHABLE,
                f"The {ability.tree} tree is not available to this pilot",
                tree=ability.tree,
            )

        selected = self.selected_abilities(progression)
        next_level = gates.lowest_available_level(ability.tree, selected)
        if ability.level != next_level:
            return self._reject(
                op, EngineErrorKind.GATE_NOT_SATISFIED,
                f"{ability.tree} is open at level {next_level}, not {ability.level}",
                tree=ability.tree, level=ability.level, next_level=next_level,
            )

        cost = costs.ability_cost(ability, primary, specialization, self.rules)
        if progression.current_tp < cost:
            return self._reject(
                op, EngineErrorKind.INSUFFICIENT_RESOURCES,
                f"{ability.name} costs {cost} TP, but only "
                f"{progression.current_tp} TP are available",
                cost=cost, available=progression.current_tp,
            )

        return self._commit(op, progression.evolve(
            selected_ability_ids=progression.selected_ability_ids + (ability.id,),
            current_tp=progression.current_tp - cost,
        ))

    def remove_ability(
        self,
        progression: CharacterProgression,
        ability_id: str,
    ) -> TransitionResult:
        """
        Retrain away a selected ability.

        Costs the flat retraining tax, whatever the ability cost to buy.
        Higher levels of the same tree may stay selected.
        """
        op = "remove_ability"
        if self.catalog.get_ability(ability_id) is None:
            return self._reject(
                op, EngineErrorKind.ABILITY_NOT_FOUND,
                f"Unknown ability '{ability_id}'", ability_id=ability_id,
            )

        if not progression.has_ability(ability_id):
            return self._reject(
                op, EngineErrorKind.NOTHING_SELECTED,
                f"Ability '{ability_id}' is not selected", ability_id=ability_id,
            )

        new_tp = self._after_removal_tax(progression)
        if new_tp is None:
            return self._reject_tax(op, progression)

        return self._commit(op, progression.evolve(
            selected_ability_ids=tuple(
                i for i in progression.selected_ability_ids if i != ability_id
            ),
            current_tp=new_tp,
        ))

    # -------------------------------------------------------------------------
    # Specialization
    # -------------------------------------------------------------------------

    def set_specialization(
        self,
        progression: CharacterProgression,
        class_id: str,
    ) -> TransitionResult:
        """
        Take an advanced or hybrid specialization.

        Switching from another specialization drops that specialization's
        tree abilities and legendary ability first; eligibility is checked
        against the selection that would remain.
        """
        op = "set_specialization"
        primary, failure = self._require_primary(op, progression)
        if failure:
            return failure

        if self.catalog.get_class(class_id) is None:
            return self._reject(
                op, EngineErrorKind.CLASS_NOT_FOUND,
                f"Unknown class '{class_id}'", class_id=class_id,
            )

        candidate = progression
        if progression.specialization_class_id not in (None, class_id):
            candidate = self._without_specialization(progression, primary)

        eligible = self.eligible_specializations(candidate)
        if class_id not in eligible:
            return self._reject(
                op, EngineErrorKind.SPECIALIZATION_NOT_ELIGIBLE,
                f"Class '{class_id}' is not an available specialization",
                class_id=class_id, eligible=eligible,
            )

        return self._commit(op, candidate.evolve(specialization_class_id=class_id))

    def clear_specialization(self, progression: CharacterProgression) -> TransitionResult:
        """Drop the specialization with its tree abilities and legendary ability."""
        op = "clear_specialization"
        if progression.specialization_class_id is None:
            return self._reject(
                op, EngineErrorKind.NOTHING_SELECTED, "No specialization selected",
            )

        primary, failure = self._require_primary(op, progression)
        if failure:
            return failure

        return self._commit(op, self._without_specialization(progression, primary))

    # -------------------------------------------------------------------------
    # Legendary abilities
    # -------------------------------------------------------------------------

    def select_legendary_ability(
        self,
        progression: CharacterProgression,
        ability_id: str,
    ) -> TransitionResult:
        """
        Buy the pilot's single legendary ability.

        Requires a specialization whose whole tree is selected and enough
        TP for the legendary price.
        """
        op = "select_legendary_ability"
        primary, failure = self._require_primary(op, progression)
        if failure:
            return failure

        ability = self.catalog.get_ability(ability_id)
        if ability is None:
            return self._reject(
                op, EngineErrorKind.ABILITY_NOT_FOUND,
                f"Unknown ability '{ability_id}'", ability_id=ability_id,
            )

        if progression.legendary_ability_id is not None:
            return self._reject(
                op, EngineErrorKind.LEGENDARY_ALREADY_SELECTED,
                "A legendary ability is already selected",
                legendary_ability_id=progression.legendary_ability_id,
            )

        specialization = self.catalog.get_class(progression.specialization_class_id)

        if ability.name not in costs.legendary_names(primary, specialization):
            return self._reject(
                op, EngineErrorKind.NOT_LEGENDARY,
                f"{ability.name} is not a legendary ability of this pilot's classes",
                ability_id=ability_id,
            )

        if specialization is None:
            return self._reject(
                op, EngineErrorKind.NO_SPECIALIZATION,
                "Legendary abilities require a specialization",
            )

        missing = self._missing_specialization_abilities(progression, primary, specialization)
        if missing is None or missing:
            return self._reject(
                op, EngineErrorKind.SPECIALIZATION_INCOMPLETE,
                "Every ability of the specialization tree must be selected first",
                missing=[a.id for a in missing or []],
            )

        cost = self.rules.legendary_cost
        if progression.current_tp < cost:
            return self._reject(
                op, EngineErrorKind.INSUFFICIENT_RESOURCES,
                f"Legendary abilities cost {cost} TP, but only "
                f"{progression.current_tp} TP are available",
                cost=cost, available=progression.current_tp,
            )

        return self._commit(op, progression.evolve(
            legendary_ability_id=ability.id,
            current_tp=progression.current_tp - cost,
        ))

    def remove_legendary_ability(self, progression: CharacterProgression) -> TransitionResult:
        """Retrain away the legendary ability for the flat retraining tax."""
        op = "remove_legendary_ability"
        if progression.legendary_ability_id is None:
            return self._reject(
                op, EngineErrorKind.NOTHING_SELECTED, "No legendary ability selected",
            )

        new_tp = self._after_removal_tax(progression)
        if new_tp is None:
            return self._reject_tax(op, progression)

        return self._commit(op, progression.evolve(
            legendary_ability_id=None,
            current_tp=new_tp,
        ))

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    def adjust_tp(self, progression: CharacterProgression, delta: int) -> TransitionResult:
        """Grant (positive delta) or spend (negative delta) TP directly."""
        op = "adjust_tp"
        new_tp = progression.current_tp + delta
        if new_tp < 0:
            return self._reject(
                op, EngineErrorKind.INVALID_AMOUNT,
                f"Cannot spend {-delta} TP with {progression.current_tp} TP available",
                delta=delta, available=progression.current_tp,
            )
        return self._commit(op, progression.evolve(current_tp=new_tp))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def selected_abilities(self, progression: CharacterProgression) -> list[Ability]:
        """Resolve the selected ability ids, in selection order."""
        selected = []
        for ability_id in progression.selected_ability_ids:
            ability = self.catalog.get_ability(ability_id)
            if ability is not None:
                selected.append(ability)
        return selected

    def reachable_trees(self, progression: CharacterProgression) -> list[str]:
        """Get the trees this pilot may currently train in."""
        primary = self.catalog.get_class(progression.primary_class_id)
        if primary is None:
            return []
        specialization = self.catalog.get_class(progression.specialization_class_id)
        return self._reachable_trees(primary, specialization)

    def eligible_specializations(self, progression: CharacterProgression) -> list[str]:
        """Get the specialization class ids currently open to this pilot."""
        primary = self.catalog.get_class(progression.primary_class_id)
        return eligibility.eligible_specializations(
            self.selected_abilities(progression),
            primary,
            self.catalog.list_classes(),
            self.catalog.list_tree_requirements(),
            self.rules,
        )

    def selectable_abilities(self, progression: CharacterProgression) -> list[str]:
        """
        Get the ability ids that currently pass the gate.

        Covers reachable trees only, in tree order; affordability is left
        to the caller so it can show unaffordable abilities dimmed.
        """
        trees = self.reachable_trees(progression)
        if not trees:
            return []

        selected = self.selected_abilities(progression)
        index = by_tree(a for a in self.catalog.list_abilities() if a.tree in trees)

        selectable = []
        for tree in trees:
            for ability in index.get(tree, []):
                if progression.has_ability(ability.id):
                    continue
                if gates.is_selectable(ability, selected):
                    selectable.append(ability.id)
        return selectable

    def ability_cost(self, progression: CharacterProgression, ability_id: str) -> Optional[int]:
        """Get what an ability would cost this pilot, or None if unknown."""
        ability = self.catalog.get_ability(ability_id)
        if ability is None:
            return None
        return costs.ability_cost(
            ability,
            self.catalog.get_class(progression.primary_class_id),
            self.catalog.get_class(progression.specialization_class_id),
            self.rules,
        )

    def legendary_options(self, progression: CharacterProgression) -> list[LegendaryOption]:
        """Get the legendary abilities of the pilot's classes, sorted by name."""
        primary = self.catalog.get_class(progression.primary_class_id)
        if primary is None:
            return []
        specialization = self.catalog.get_class(progression.specialization_class_id)
        names = costs.legendary_names(primary, specialization)

        options = []
        for ability in self.catalog.list_abilities():
            if ability.name not in names:
                continue
            result = self.select_legendary_ability(progression, ability.id)
            options.append(LegendaryOption(
                ability=ability,
                cost=self.rules.legendary_cost,
                selectable=result.ok,
                selected=progression.legendary_ability_id == ability.id,
            ))
        return sorted(options, key=lambda o: o.ability.name)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_primary(
        self,
        op: str,
        progression: CharacterProgression,
    ) -> tuple[Optional[SpecializationClass], Optional[TransitionResult]]:
        if progression.primary_class_id is None:
            return None, self._reject(
                op, EngineErrorKind.NO_PRIMARY_CLASS, "Select a class first",
            )
        primary = self.catalog.get_class(progression.primary_class_id)
        if primary is None:
            return None, self._reject(
                op, EngineErrorKind.CLASS_NOT_FOUND,
                f"Unknown class '{progression.primary_class_id}'",
                class_id=progression.primary_class_id,
            )
        return primary, None

    def _reachable_trees(
        self,
        primary: SpecializationClass,
        specialization: Optional[SpecializationClass],
    ) -> list[str]:
        trees = list(primary.core_trees)
        if specialization is not None and specialization.specialization_tree:
            if specialization.specialization_tree not in trees:
                trees.append(specialization.specialization_tree)
        return trees

    def _missing_specialization_abilities(
        self,
        progression: CharacterProgression,
        primary: SpecializationClass,
        specialization: SpecializationClass,
    ) -> Optional[list[Ability]]:
        """Get unselected abilities of the specialization tree; None if it has no tree."""
        tree = specialization.specialization_tree
        if tree is None:
            return None
        legendary = costs.legendary_names(primary, specialization)
        return [
            a for a in self.catalog.get_abilities_in_tree(tree)
            if a.name not in legendary and not progression.has_ability(a.id)
        ]

    def _without_specialization(
        self,
        progression: CharacterProgression,
        primary: SpecializationClass,
    ) -> CharacterProgression:
        old = self.catalog.get_class(progression.specialization_class_id)
        dropped_tree = old.specialization_tree if old is not None else None
        kept_ids = tuple(
            a.id for a in self.selected_abilities(progression)
            if a.tree != dropped_tree or a.tree in primary.core_trees
        )
        return progression.evolve(
            specialization_class_id=None,
            selected_ability_ids=kept_ids,
            legendary_ability_id=None,
        )

    def _after_removal_tax(self, progression: CharacterProgression) -> Optional[int]:
        """Get TP after the retraining tax, or None if the policy rejects it."""
        new_tp = progression.current_tp - self.rules.removal_cost
        if new_tp >= 0:
            return new_tp
        policy = self.rules.removal_policy
        if policy is RemovalPolicy.CLAMP:
            return 0
        if policy is RemovalPolicy.ALLOW_NEGATIVE:
            return new_tp
        return None

    def _reject_tax(self, op: str, progression: CharacterProgression) -> TransitionResult:
        return self._reject(
            op, EngineErrorKind.INSUFFICIENT_RESOURCES,
            f"Retraining costs {self.rules.removal_cost} TP, but only "
            f"{progression.current_tp} TP are available",
            cost=self.rules.removal_cost, available=progression.current_tp,
        )

    def _commit(self, op: str, progression: CharacterProgression) -> TransitionResult:
        logger.debug(
            f"{op}: committed (tp={progression.current_tp}, "
            f"abilities={progression.ability_count})"
        )
        return TransitionResult.success(progression)

    def _reject(
        self,
        op: str,
        kind: EngineErrorKind,
        message: str,
        **details,
    ) -> TransitionResult:
        logger.debug(f"{op}: rejected {kind.name}: {message}")
        return TransitionResult.failure(kind, message, **details)

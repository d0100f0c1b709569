"""
Build session - one pilot being edited.

Both the in-memory pilot builder and the persisted live sheet drive the
rules through a BuildSession, so neither keeps its own copy of them.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from salvage_engine.core.events import EventBus, ProgressionEvent
from salvage_framework.components import CharacterProgression
from salvage_framework.progression.ledger import ProgressionLedger
from salvage_framework.progression.errors import TransitionResult


class BuildSession:
    """
    Holds the current progression of one pilot and swaps it wholesale.

    Features:
    - Forwards every transition to a shared ProgressionLedger
    - Replaces the held snapshot only on success
    - Publishes a ProgressionEvent after each transition
    - Undo of committed transitions

    Usage:
        session = BuildSession(ledger, event_bus=event_bus)
        session.set_primary_class("hacker")
        session.adjust_tp(5)
        result = session.select_ability("hacking-1")
        if not result.ok:
            show_toast(result.error.message)
    """

    MAX_HISTORY = 50

    def __init__(
        self,
        ledger: ProgressionLedger,
        progression: Optional[CharacterProgression] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.ledger = ledger
        self.event_bus = event_bus
        self._progression = progression or ledger.empty_progression()
        self._history: list[CharacterProgression] = []

    @property
    def progression(self) -> CharacterProgression:
        """Current snapshot."""
        return self._progression

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def set_primary_class(self, class_id: str) -> TransitionResult:
        return self._apply(
            ProgressionEvent.CLASS_SELECTED,
            lambda p: self.ledger.set_primary_class(p, class_id),
            class_id=class_id,
        )

    def grant_starting_ability(self, ability_id: str) -> TransitionResult:
        return self._apply(
            ProgressionEvent.ABILITY_SELECTED,
            lambda p: self.ledger.grant_starting_ability(p, ability_id),
            ability_id=ability_id,
        )

    def select_ability(self, ability_id: str) -> TransitionResult:
        return self._apply(
            ProgressionEvent.ABILITY_SELECTED,
            lambda p: self.ledger.select_ability(p, ability_id),
            ability_id=ability_id,
        )

    def remove_ability(self, ability_id: str) -> TransitionResult:
        return self._apply(
            ProgressionEvent.ABILITY_REMOVED,
            lambda p: self.ledger.remove_ability(p, ability_id),
            ability_id=ability_id,
        )

    def set_specialization(self, class_id: str) -> TransitionResult:
        return self._apply(
            ProgressionEvent.SPECIALIZATION_SELECTED,
            lambda p: self.ledger.set_specialization(p, class_id),
            class_id=class_id,
        )

    def clear_specialization(self) -> TransitionResult:
        return self._apply(
            ProgressionEvent.SPECIALIZATION_CLEARED,
            self.ledger.clear_specialization,
        )

    def select_legendary_ability(self, ability_id: str) -> TransitionResult:
        return self._apply(
            ProgressionEvent.LEGENDARY_SELECTED,
            lambda p: self.ledger.select_legendary_ability(p, ability_id),
            ability_id=ability_id,
        )

    def remove_legendary_ability(self) -> TransitionResult:
        return self._apply(
            ProgressionEvent.LEGENDARY_REMOVED,
            self.ledger.remove_legendary_ability,
        )

    def adjust_tp(self, delta: int) -> TransitionResult:
        return self._apply(
            ProgressionEvent.TP_ADJUSTED,
            lambda p: self.ledger.adjust_tp(p, delta),
            delta=delta,
        )

    def undo(self) -> bool:
        """
        Restore the snapshot before the last committed transition.

        Returns:
            True if there was something to undo
        """
        if not self._history:
            return False
        self._progression = self._history.pop()
        return True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def eligible_specializations(self) -> list[str]:
        return self.ledger.eligible_specializations(self._progression)

    def selectable_abilities(self) -> list[str]:
        return self.ledger.selectable_abilities(self._progression)

    def ability_cost(self, ability_id: str) -> Optional[int]:
        return self.ledger.ability_cost(self._progression, ability_id)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _apply(
        self,
        event_type: ProgressionEvent,
        transition: Callable[[CharacterProgression], TransitionResult],
        **data: Any,
    ) -> TransitionResult:
        previous = self._progression
        result = transition(previous)

        if not result.ok:
            if self.event_bus:
                self.event_bus.publish(
                    ProgressionEvent.TRANSITION_REJECTED,
                    attempted=event_type,
                    error=result.error,
                    **data,
                )
            return result

        self._history.append(previous)
        if len(self._history) > self.MAX_HISTORY:
            self._history.pop(0)
        self._progression = result.progression

        if self.event_bus:
            self.event_bus.publish(
                event_type,
                progression=result.progression,
                tp_delta=result.progression.current_tp - previous.current_tp,
                **data,
            )
        return result

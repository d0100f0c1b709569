"""
Transition results and rule violation kinds.

Ledger operations never raise for expected rule violations. They return
a TransitionResult carrying either the new progression or an EngineError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional

from salvage_framework.components import CharacterProgression


class EngineErrorKind(Enum):
    """Why a transition was rejected."""
    NO_PRIMARY_CLASS = auto()
    ABILITY_NOT_FOUND = auto()
    CLASS_NOT_FOUND = auto()
    ABILITY_NOT_REACHABLE = auto()
    GATE_NOT_SATISFIED = auto()
    INSUFFICIENT_RESOURCES = auto()
    SPECIALIZATION_NOT_ELIGIBLE = auto()
    NO_SPECIALIZATION = auto()
    SPECIALIZATION_INCOMPLETE = auto()
    NOT_LEGENDARY = auto()
    LEGENDARY_ALREADY_SELECTED = auto()
    NOTHING_SELECTED = auto()
    INVALID_AMOUNT = auto()
    STARTING_ABILITY_UNAVAILABLE = auto()


@dataclass(frozen=True)
class EngineError:
    """
    A rejected transition.

    Attributes:
        kind: Violation kind, for callers that branch on it
        message: Human-readable explanation
        details: Extra context, e.g. {"cost": 2, "available": 1}
    """
    kind: EngineErrorKind
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.kind.name}: {self.message}" if self.message else self.kind.name


class RuleViolation(Exception):
    """Raised by TransitionResult.unwrap() for a failed transition."""

    def __init__(self, error: EngineError):
        super().__init__(str(error))
        self.error = error

    @property
    def kind(self) -> EngineErrorKind:
        return self.error.kind


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a ledger operation: exactly one of progression/error is set."""
    progression: Optional[CharacterProgression] = None
    error: Optional[EngineError] = None

    @classmethod
    def success(cls, progression: CharacterProgression) -> TransitionResult:
        return cls(progression=progression)

    @classmethod
    def failure(
        cls,
        kind: EngineErrorKind,
        message: str = "",
        **details: Any,
    ) -> TransitionResult:
        return cls(error=EngineError(kind=kind, message=message, details=details))

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> Optional[EngineErrorKind]:
        return self.error.kind if self.error else None

    def unwrap(self) -> CharacterProgression:
        """Return the new progression or raise RuleViolation."""
        if self.error is not None:
            raise RuleViolation(self.error)
        return self.progression

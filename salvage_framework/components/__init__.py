"""
Salvage Components - Data-only record definitions.

All components are immutable Pydantic models that:
- Validate data on construction
- Serialize to/from JSON automatically
- Contain no rule logic (rules live in progression)
"""

from salvage_framework.components.reference import (
    Ability,
    ClassKind,
    SpecializationClass,
    TreeRequirement,
)
from salvage_framework.components.pilot import CharacterProgression

__all__ = [
    # Reference
    "Ability",
    "ClassKind",
    "SpecializationClass",
    "TreeRequirement",
    # Pilot
    "CharacterProgression",
]

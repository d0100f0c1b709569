"""
Salvage Framework module.

Provides the pilot progression rules built on top of the engine:
- Components (data-only, Pydantic records)
- Progression (trees, costs, specializations, ledger)
- Builder (stateful build sessions with events and undo)
"""

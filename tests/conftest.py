import os
import sys
from pathlib import Path

import pytest

# Ensure the packages can be imported without installing
sys.path.append(os.getcwd())

from salvage_framework.components import (
    Ability,
    ClassKind,
    SpecializationClass,
    TreeRequirement,
)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def _tree(tree: str, prefix: str, names: list[str]) -> list[Ability]:
    return [
        Ability(id=f"{prefix}-{level}", name=name, tree=tree, level=level)
        for level, name in enumerate(names, start=1)
    ]


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from salvage_engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def abilities():
    """Small rules catalog: two core classes, two hybrids, legendaries."""
    return (
        _tree("Hacking", "hack", ["Bypass", "Backdoor", "Root Access"])
        + _tree("Tech", "tech", ["Jury Rig", "Overclock", "Signal Boost"])
        + _tree("Advanced Hacker", "adv", ["Daemon", "Mesh Network", "Zero Day"])
        + _tree("Combat", "combat", ["Quick Draw", "Suppressing Fire", "Killshot"])
        + _tree("Survival", "survival", ["Field Dressing", "Forage", "Hardened"])
        + _tree("Netrunner", "net", ["Jack In", "Ice Breaker"])
        + _tree("Field Medic", "medic", ["Triage", "Stim Pack"])
        + _tree("Salvaging", "salvage", ["Scrounge"])
        + [
            Ability(id="legend-ghost", name="Ghost in the Machine", tree="Legendary", level=1),
            Ability(id="legend-overdrive", name="Neural Overdrive", tree="Legendary", level=1),
            Ability(id="legend-last-stand", name="Last Stand", tree="Legendary", level=1),
        ]
    )


@pytest.fixture
def classes():
    return [
        SpecializationClass(
            id="hacker",
            name="Hacker",
            kind=ClassKind.CORE,
            core_trees=("Hacking", "Tech"),
            specialization_tree="Advanced Hacker",
            legendary_ability_names=frozenset({"Ghost in the Machine"}),
        ),
        SpecializationClass(
            id="soldier",
            name="Soldier",
            kind=ClassKind.CORE,
            core_trees=("Combat", "Survival"),
            legendary_ability_names=frozenset({"Last Stand"}),
        ),
        SpecializationClass(
            id="salvager",
            name="Salvager",
            kind=ClassKind.CORE,
            core_trees=("Salvaging",),
        ),
        SpecializationClass(
            id="netrunner",
            name="Netrunner",
            kind=ClassKind.HYBRID,
            specialization_tree="Netrunner",
            legendary_ability_names=frozenset({"Neural Overdrive"}),
        ),
        SpecializationClass(
            id="medic",
            name="Field Medic",
            kind=ClassKind.HYBRID,
            specialization_tree="Field Medic",
        ),
    ]


@pytest.fixture
def tree_requirements():
    return [
        TreeRequirement(tree="Netrunner", required_trees=frozenset({"Hacking"})),
        TreeRequirement(tree="Field Medic", required_trees=frozenset({"Survival"})),
    ]


@pytest.fixture
def catalog(abilities, classes, tree_requirements):
    from salvage_framework.progression import AbilityCatalog
    return AbilityCatalog(abilities, classes, tree_requirements)


@pytest.fixture
def ledger(catalog):
    from salvage_framework.progression import ProgressionLedger
    return ProgressionLedger(catalog)


@pytest.fixture
def hacker(ledger):
    """A fresh Hacker with 5 TP."""
    return ledger.create_progression("hacker", starting_tp=5)


@pytest.fixture
def build(ledger):
    """Apply a list of ability selections, failing the test on any rejection."""
    def _build(progression, *ability_ids):
        for ability_id in ability_ids:
            progression = ledger.select_ability(progression, ability_id).unwrap()
        return progression
    return _build

import pytest

from salvage_framework.components import CharacterProgression
from salvage_framework.progression import (
    EngineErrorKind,
    ProgressionLedger,
    RemovalPolicy,
    RuleViolation,
    RulesConfig,
)

FULL_HACKER = ("hack-1", "hack-2", "hack-3", "tech-1", "tech-2", "tech-3")


# -----------------------------------------------------------------------------
# Primary class
# -----------------------------------------------------------------------------

def test_create_progression(ledger):
    pilot = ledger.create_progression("hacker")

    assert pilot.primary_class_id == "hacker"
    assert pilot.selected_ability_ids == ()
    assert pilot.current_tp == 0

def test_create_progression_unknown_class(ledger):
    with pytest.raises(RuleViolation) as exc_info:
        ledger.create_progression("pirate")
    assert exc_info.value.kind is EngineErrorKind.CLASS_NOT_FOUND

def test_create_progression_rejects_negative_tp(ledger):
    with pytest.raises(RuleViolation) as exc_info:
        ledger.create_progression("hacker", starting_tp=-5)
    assert exc_info.value.kind is EngineErrorKind.INVALID_AMOUNT

def test_rules_reject_negative_baseline():
    with pytest.raises(ValueError):
        RulesConfig(starting_tp=-1)

def test_set_primary_class_resets_build(ledger, hacker, build):
    pilot = build(ledger.adjust_tp(hacker, 20).unwrap(), *FULL_HACKER)
    pilot = ledger.set_specialization(pilot, "netrunner").unwrap()

    result = ledger.set_primary_class(pilot, "soldier")

    assert result.ok
    assert result.progression == CharacterProgression(primary_class_id="soldier", current_tp=0)

def test_set_primary_class_restores_configured_baseline(catalog):
    ledger = ProgressionLedger(catalog, RulesConfig(starting_tp=4))
    pilot = ledger.adjust_tp(ledger.create_progression("hacker"), 10).unwrap()

    assert ledger.set_primary_class(pilot, "hacker").progression.current_tp == 4


# -----------------------------------------------------------------------------
# Ability selection
# -----------------------------------------------------------------------------

def test_scenario_gate_and_costs(ledger, hacker):
    result = ledger.select_ability(hacker, "hack-1")
    assert result.ok
    pilot = result.progression
    assert pilot.current_tp == 4

    skipped = ledger.select_ability(pilot, "hack-3")
    assert skipped.error_kind is EngineErrorKind.GATE_NOT_SATISFIED
    assert skipped.error.details["next_level"] == 2

    pilot = ledger.select_ability(pilot, "hack-2").unwrap()
    assert pilot.current_tp == 3
    assert "hack-3" in ledger.selectable_abilities(pilot)

def test_select_requires_primary_class(ledger):
    pilot = ledger.adjust_tp(ledger.empty_progression(), 5).unwrap()

    result = ledger.select_ability(pilot, "hack-1")

    assert result.error_kind is EngineErrorKind.NO_PRIMARY_CLASS

def test_select_unknown_ability(ledger, hacker):
    assert ledger.select_ability(hacker, "nope").error_kind is EngineErrorKind.ABILITY_NOT_FOUND

def test_select_unreachable_tree(ledger, hacker):
    result = ledger.select_ability(hacker, "combat-1")
    assert result.error_kind is EngineErrorKind.ABILITY_NOT_REACHABLE

def test_specialization_tree_locked_until_specialized(ledger, hacker):
    result = ledger.select_ability(hacker, "adv-1")
    assert result.error_kind is EngineErrorKind.ABILITY_NOT_REACHABLE

def test_select_twice_fails_gate(ledger, hacker):
    pilot = ledger.select_ability(hacker, "hack-1").unwrap()
    result = ledger.select_ability(pilot, "hack-1")

    assert result.error_kind is EngineErrorKind.GATE_NOT_SATISFIED
    assert pilot.selected_ability_ids == ("hack-1",)

def test_scenario_insufficient_resources(ledger):
    pilot = ledger.create_progression("hacker")

    result = ledger.select_ability(pilot, "hack-1")

    assert result.error_kind is EngineErrorKind.INSUFFICIENT_RESOURCES
    assert result.error.details == {"cost": 1, "available": 0}
    assert pilot == ledger.create_progression("hacker")

def test_selection_keeps_insertion_order(ledger, hacker, build):
    pilot = build(hacker, "tech-1", "hack-1", "tech-2")
    assert pilot.selected_ability_ids == ("tech-1", "hack-1", "tech-2")

def test_tp_never_negative_after_selection(ledger, hacker):
    pilot = hacker
    for _ in range(10):
        for ability_id in ledger.selectable_abilities(pilot):
            result = ledger.select_ability(pilot, ability_id)
            if result.ok:
                pilot = result.progression
                assert pilot.current_tp >= 0
    assert pilot.current_tp == 0
    assert pilot.ability_count == 5


# -----------------------------------------------------------------------------
# Removal
# -----------------------------------------------------------------------------

def test_scenario_removal_costs_flat_tax(ledger, hacker, build):
    pilot = build(ledger.adjust_tp(hacker, 10).unwrap(), *FULL_HACKER)
    pilot = ledger.set_specialization(pilot, "hacker").unwrap()
    pilot = build(pilot, "adv-1")
    tp_before = pilot.current_tp

    # Bought for 2 TP, removed for 1
    pilot = ledger.remove_ability(pilot, "adv-1").unwrap()

    assert pilot.current_tp == tp_before - 1
    assert not pilot.has_ability("adv-1")

def test_remove_lower_level_keeps_higher(ledger, hacker, build):
    pilot = build(hacker, "hack-1", "hack-2")

    pilot = ledger.remove_ability(pilot, "hack-1").unwrap()

    assert pilot.selected_ability_ids == ("hack-2",)
    assert ledger.selectable_abilities(pilot)[0] == "hack-3"

def test_remove_not_selected(ledger, hacker):
    assert ledger.remove_ability(hacker, "hack-1").error_kind is EngineErrorKind.NOTHING_SELECTED
    assert ledger.remove_ability(hacker, "nope").error_kind is EngineErrorKind.ABILITY_NOT_FOUND

def test_removal_without_tp_is_rejected_by_default(ledger, hacker, build):
    pilot = build(ledger.adjust_tp(hacker, -4).unwrap(), "hack-1")
    assert pilot.current_tp == 0

    result = ledger.remove_ability(pilot, "hack-1")

    assert result.error_kind is EngineErrorKind.INSUFFICIENT_RESOURCES
    assert pilot.has_ability("hack-1")

@pytest.mark.parametrize("policy, expected_tp", [
    (RemovalPolicy.CLAMP, 0),
    (RemovalPolicy.ALLOW_NEGATIVE, -1),
])
def test_removal_policies(catalog, policy, expected_tp):
    ledger = ProgressionLedger(catalog, RulesConfig(removal_policy=policy))
    pilot = ledger.create_progression("hacker", starting_tp=1)
    pilot = ledger.select_ability(pilot, "hack-1").unwrap()

    pilot = ledger.remove_ability(pilot, "hack-1").unwrap()

    assert pilot.current_tp == expected_tp
    assert pilot.selected_ability_ids == ()


# -----------------------------------------------------------------------------
# Specialization
# -----------------------------------------------------------------------------

def test_scenario_eligibility_after_six(ledger, hacker, build):
    pilot = build(ledger.adjust_tp(hacker, 1).unwrap(), *FULL_HACKER)

    eligible = ledger.eligible_specializations(pilot)

    assert "hacker" in eligible
    assert "netrunner" in eligible
    assert "medic" not in eligible

def test_set_specialization_rechecks_eligibility(ledger, hacker, build):
    pilot = build(ledger.adjust_tp(hacker, 2).unwrap(), *FULL_HACKER)
    assert "netrunner" in ledger.eligible_specializations(pilot)

    # Dropping below six abilities closes every specialization again
    pilot = ledger.remove_ability(pilot, "hack-3").unwrap()

    assert ledger.eligible_specializations(pilot) == []
    result = ledger.set_specialization(pilot, "netrunner")

    assert result.error_kind is EngineErrorKind.SPECIALIZATION_NOT_ELIGIBLE
    assert result.error.details["eligible"] == []

def test_set_specialization_errors(ledger, hacker):
    assert ledger.set_specialization(hacker, "pirate").error_kind is EngineErrorKind.CLASS_NOT_FOUND
    assert ledger.set_specialization(hacker, "netrunner").error_kind is EngineErrorKind.SPECIALIZATION_NOT_ELIGIBLE
    assert ledger.set_specialization(
        ledger.empty_progression(), "netrunner"
    ).error_kind is EngineErrorKind.NO_PRIMARY_CLASS

def test_specialization_opens_its_tree(ledger, hacker, build):
    pilot = build(ledger.adjust_tp(hacker, 10).unwrap(), *FULL_HACKER)
    pilot = ledger.set_specialization(pilot, "netrunner").unwrap()

    assert ledger.reachable_trees(pilot) == ["Hacking", "Tech", "Netrunner"]
    assert ledger.selectable_abilities(pilot) == ["net-1"]
    assert ledger.ability_cost(pilot, "net-1") == 2

    pilot = ledger.select_ability(pilot, "net-1").unwrap()
    assert pilot.current_tp == 15 - 6 - 2

def test_switching_specialization_drops_old_tree(ledger, hacker, build):
    pilot = build(ledger.adjust_tp(hacker, 10).unwrap(), *FULL_HACKER)
    pilot = ledger.set_specialization(pilot, "netrunner").unwrap()
    pilot = build(pilot, "net-1")

    pilot = ledger.set_specialization(pilot, "hacker").unwrap()

    assert pilot.specialization_class_id == "hacker"
    assert pilot.selected_ability_ids == FULL_HACKER

def test_switch_rechecks_eligibility_after_dropping_old_tree(ledger, hacker, build):
    pilot = build(ledger.adjust_tp(hacker, 20).unwrap(), *FULL_HACKER)
    pilot = ledger.set_specialization(pilot, "netrunner").unwrap()
    pilot = build(pilot, "net-1", "net-2")
    pilot = ledger.remove_ability(pilot, "tech-3").unwrap()
    pilot = ledger.remove_ability(pilot, "tech-2").unwrap()
    assert "hacker" in ledger.eligible_specializations(pilot)

    # Dropping net-1 and net-2 would leave four abilities
    result = ledger.set_specialization(pilot, "hacker")

    assert result.error_kind is EngineErrorKind.SPECIALIZATION_NOT_ELIGIBLE
    assert result.error.details["eligible"] == []
    assert pilot.specialization_class_id == "netrunner"
    assert pilot.ability_count == 6

def test_switch_keeps_abilities_outside_old_tree(ledger, hacker, build):
    pilot = build(ledger.adjust_tp(hacker, 20).unwrap(), *FULL_HACKER)
    pilot = ledger.set_specialization(pilot, "hacker").unwrap()
    pilot = build(pilot, "adv-1")

    pilot = ledger.set_specialization(pilot, "netrunner").unwrap()

    assert pilot.selected_ability_ids == FULL_HACKER
    assert pilot.specialization_class_id in ledger.eligible_specializations(pilot)

def test_reselecting_current_specialization_is_unchanged(ledger, hacker, build):
    pilot = build(ledger.adjust_tp(hacker, 10).unwrap(), *FULL_HACKER)
    pilot = ledger.set_specialization(pilot, "netrunner").unwrap()
    pilot = build(pilot, "net-1")

    assert ledger.set_specialization(pilot, "netrunner").progression == pilot

def test_clear_specialization(ledger, hacker, build):
    pilot = build(ledger.adjust_tp(hacker, 10).unwrap(), *FULL_HACKER)
    assert ledger.clear_specialization(pilot).error_kind is EngineErrorKind.NOTHING_SELECTED

    pilot = ledger.set_specialization(pilot, "hacker").unwrap()
    pilot = build(pilot, "adv-1")
    tp = pilot.current_tp

    pilot = ledger.clear_specialization(pilot).unwrap()

    assert pilot.specialization_class_id is None
    assert "adv-1" not in pilot.selected_ability_ids
    assert pilot.current_tp == tp


# -----------------------------------------------------------------------------
# Resources and queries
# -----------------------------------------------------------------------------

def test_adjust_tp(ledger, hacker):
    assert ledger.adjust_tp(hacker, 3).progression.current_tp == 8
    assert ledger.adjust_tp(hacker, -5).progression.current_tp == 0

    result = ledger.adjust_tp(hacker, -6)
    assert result.error_kind is EngineErrorKind.INVALID_AMOUNT

def test_selectable_abilities_initial(ledger, hacker):
    assert ledger.selectable_abilities(hacker) == ["hack-1", "tech-1"]
    assert ledger.selectable_abilities(ledger.empty_progression()) == []

def test_ability_cost_query(ledger, hacker):
    assert ledger.ability_cost(hacker, "hack-1") == 1
    assert ledger.ability_cost(hacker, "adv-1") == 2
    assert ledger.ability_cost(hacker, "legend-ghost") == 3
    assert ledger.ability_cost(hacker, "nope") is None

def test_rejection_is_a_no_op(ledger, hacker):
    snapshot = hacker.model_dump()
    failures = [
        ledger.select_ability(hacker, "hack-3"),
        ledger.select_ability(hacker, "combat-1"),
        ledger.remove_ability(hacker, "hack-1"),
        ledger.set_specialization(hacker, "netrunner"),
        ledger.select_legendary_ability(hacker, "legend-ghost"),
        ledger.remove_legendary_ability(hacker),
        ledger.adjust_tp(hacker, -100),
    ]

    assert all(not r.ok and r.progression is None for r in failures)
    assert hacker.model_dump() == snapshot

def test_unwrap_raises_rule_violation(ledger, hacker):
    with pytest.raises(RuleViolation) as exc_info:
        ledger.select_ability(hacker, "hack-2").unwrap()
    assert exc_info.value.kind is EngineErrorKind.GATE_NOT_SATISFIED
    assert "GATE_NOT_SATISFIED" in str(exc_info.value)

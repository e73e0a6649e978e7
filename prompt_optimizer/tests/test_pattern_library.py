"""Tests for pattern selection, ordering and configuration."""

import itertools
import logging

import pytest

from prompt_optimizer.intelligence import PatternLibrary
from prompt_optimizer.tests.helpers import FakePattern, assert_runs_before
from prompt_optimizer.types import ALL_INTENTS, IntentAnalysis, LibraryConfig


def ids(patterns):
    return [p.id for p in patterns]


def _analysis(intent):
    return IntentAnalysis(primary_intent=intent, confidence=100)


def test_duplicate_ids_are_rejected():
    with pytest.raises(ValueError, match="Duplicate pattern id"):
        PatternLibrary([FakePattern("a"), FakePattern("a")])


def test_registry_accessors(library):
    assert library.pattern_count == 27
    assert library.get_pattern("conciseness-filter") is not None
    assert library.get_pattern("missing") is None
    assert len(library.get_all_patterns()) == 27


def test_patterns_by_mode_include_both():
    library = PatternLibrary(
        [FakePattern("fast", mode="fast"), FakePattern("deep", mode="deep"), FakePattern("both")]
    )

    assert ids(library.get_patterns_by_mode("fast")) == ["fast", "both"]
    assert ids(library.get_patterns_by_mode("deep")) == ["deep", "both"]


def test_inapplicable_patterns_are_never_selected(library):
    for intent, mode in itertools.product(ALL_INTENTS, ("fast", "deep")):
        context = library.build_context("Create a login page", _analysis(intent), mode)
        selected = library.get_applicable_patterns("Create a login page", intent, mode=mode)
        for pattern in library.get_all_patterns():
            if not pattern.is_applicable(context):
                assert pattern not in selected


def test_priority_order_with_registration_tie_break():
    library = PatternLibrary(
        [FakePattern("low", 2), FakePattern("tie-a", 7), FakePattern("high", 9),
         FakePattern("tie-b", 7)]
    )

    selected = library.get_applicable_patterns("x", "planning")

    assert ids(selected) == ["high", "tie-a", "tie-b", "low"]


def test_run_after_moves_pattern_behind_dependency():
    library = PatternLibrary(
        [
            FakePattern("checklist", 9, run_after=("criteria",)),
            FakePattern("other", 8),
            FakePattern("criteria", 3),
        ]
    )

    selected = library.get_applicable_patterns("x", "testing")

    assert ids(selected) == ["other", "criteria", "checklist"]


def test_run_after_ignores_unselected_dependency():
    library = PatternLibrary(
        [
            FakePattern("checklist", 9, run_after=("criteria",)),
            FakePattern("criteria", 3, mode="fast"),
        ]
    )

    selected = library.get_applicable_patterns("x", "testing", mode="deep")

    assert ids(selected) == ["checklist"]


def test_default_library_honours_run_after(library):
    selected = library.get_applicable_patterns("Write tests for checkout", "testing", mode="deep")

    assert_runs_before(selected, "success-criteria-enforcer", "validation-checklist-creator")


def test_disabled_pattern_is_removed_everywhere(library):
    config = LibraryConfig(disabled=("conciseness-filter",))
    for intent, mode in itertools.product(ALL_INTENTS, ("fast", "deep")):
        selected = library.get_applicable_patterns("Create a login", intent, None, mode, config)
        assert "conciseness-filter" not in ids(selected)


def test_apply_config_disables_pattern(library):
    library.apply_config(LibraryConfig.from_mapping({"disabled": ["conciseness-filter"]}))

    selected = library.get_applicable_patterns("Create a login page", "code-generation")

    assert "conciseness-filter" not in ids(selected)


def test_priority_override_in_range_is_used(library):
    config = LibraryConfig(priority_overrides={"step-decomposer": 1})
    step = library.get_pattern("step-decomposer")

    assert library.effective_priority(step, config) == 1


def test_priority_override_out_of_range_is_ignored(library, caplog):
    config = LibraryConfig(priority_overrides={"step-decomposer": 15})
    step = library.get_pattern("step-decomposer")

    with caplog.at_level(logging.WARNING):
        library.apply_config(config)

    assert library.effective_priority(step) == step.priority
    assert "Ignoring priority override 15" in caplog.text


def test_priority_override_reorders_pipeline():
    library = PatternLibrary([FakePattern("first", 9), FakePattern("second", 5)])
    config = LibraryConfig(priority_overrides={"second": 10})

    assert ids(library.get_applicable_patterns("x", "planning", config=config)) == [
        "second",
        "first",
    ]


def test_unknown_ids_are_logged_and_ignored(caplog):
    library = PatternLibrary([FakePattern("known")])
    config = LibraryConfig(disabled=("ghost",), custom_settings={"phantom": {"a": 1}})

    with caplog.at_level(logging.WARNING):
        library.apply_config(config)

    assert "ghost" in caplog.text
    assert "phantom" in caplog.text
    assert ids(library.get_applicable_patterns("x", "planning")) == ["known"]


def test_get_pattern_settings(library):
    assert library.get_pattern_settings("edge-case-identifier") is None

    library.apply_config(
        LibraryConfig.from_mapping(
            {"patterns": {"customSettings": {"edge-case-identifier": {"maxEdgeCases": 3}}}}
        )
    )

    assert library.get_pattern_settings("edge-case-identifier") == {"maxEdgeCases": 3}
    assert library.get_pattern_settings("scope-definer") is None


def test_context_carries_custom_settings(library):
    config = LibraryConfig(custom_settings={"scope-definer": {"maxInScope": 2}})
    context = library.build_context("x", _analysis("planning"), "deep", config)

    assert context.pattern_settings == {"scope-definer": {"maxInScope": 2}}
    assert context.original_prompt == "x"


def test_selection_is_deterministic(library):
    first = library.get_applicable_patterns("Build an API", "code-generation", mode="deep")
    second = library.get_applicable_patterns("Build an API", "code-generation", mode="deep")

    assert ids(first) == ids(second)
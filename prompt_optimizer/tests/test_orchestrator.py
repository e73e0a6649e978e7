"""End-to-end tests for PromptOptimizer.improve."""

import logging

import pytest

from prompt_optimizer.intelligence import PatternLibrary
from prompt_optimizer.optimizer.analysis import DEEP_MODE_HINT
from prompt_optimizer.optimizer.orchestrator import PromptOptimizer
from prompt_optimizer.tests.helpers import (
    FailingPattern,
    FakePattern,
    NoneReturningPattern,
    RecordingPattern,
    assert_applied,
    assert_not_applied,
)
from prompt_optimizer.types import LibraryConfig

LOGIN_PROMPT = "Create a login page"
VERBOSE_PROMPT = "Please could you maybe help me create a login page if possible"


def test_login_page_gains_objective(optimizer):
    result = optimizer.improve(LOGIN_PROMPT, "fast")

    assert result.improved.startswith("# Objective")
    assert_applied(result, "objective-clarifier")
    assert_not_applied(result, "conciseness-filter")
    assert result.original == LOGIN_PROMPT
    assert result.mode == "fast"
    assert result.clear_scores is None


def test_verbose_prompt_loses_filler(optimizer, scorer):
    result = optimizer.improve(VERBOSE_PROMPT, "fast")

    assert "Please" not in result.improved
    for phrase in ("could you", "maybe", "if possible"):
        assert phrase not in result.improved.lower()
    assert_applied(result, "conciseness-filter")
    assert scorer.score(result.improved).conciseness > scorer.score(VERBOSE_PROMPT).conciseness


def test_improve_is_deterministic():
    first = PromptOptimizer().improve(VERBOSE_PROMPT, "deep")
    second = PromptOptimizer().improve(VERBOSE_PROMPT, "deep")

    assert first.improved == second.improved
    assert first.applied_patterns == second.applied_patterns


def test_deep_mode_reports_clear_scores(optimizer):
    result = optimizer.improve("Build a checkout API with payment processing", "deep")

    assert result.clear_scores is not None
    assert result.clear_scores.adaptiveness is not None
    assert result.clear_scores.reflectiveness is not None
    assert len(result.applied_patterns) > len(optimizer.improve(LOGIN_PROMPT).applied_patterns)


def test_auto_mode_escalates_weak_prompt(optimizer):
    result = optimizer.improve("login page", mode=None)

    assert result.triage_result.needs_deep_analysis
    assert result.mode == "deep"


def test_pre_supplied_intent_skips_classification(optimizer):
    result = optimizer.improve("Order tracking for the mobile app", "deep", intent="prd-generation")

    assert result.intent.primary_intent == "prd-generation"
    assert_applied(result, "prd-structure-enforcer")


def test_unknown_mode_raises(optimizer):
    with pytest.raises(ValueError, match="Unknown mode"):
        optimizer.improve(LOGIN_PROMPT, "turbo")


@pytest.mark.parametrize("prompt", ["", "   ", None, 42])
def test_malformed_input_skips_pipeline(optimizer, prompt):
    result = optimizer.improve(prompt)

    assert result.improved == result.original
    assert result.applied_patterns == []
    assert result.failed_patterns == []


def test_failing_pattern_does_not_abort_run(caplog):
    library = PatternLibrary([FailingPattern("boom", 9), FakePattern("steady", 5)])
    optimizer = PromptOptimizer(library=library)

    with caplog.at_level(logging.ERROR):
        result = optimizer.improve(LOGIN_PROMPT)

    assert result.failed_patterns == ["boom"]
    assert [p.id for p in result.applied_patterns] == ["steady"]
    assert result.improved.endswith("[steady]")
    assert "Pattern boom failed" in caplog.text


def test_malformed_pattern_result_is_recorded_as_failure(caplog):
    library = PatternLibrary([NoneReturningPattern("broken", 9), FakePattern("ok", 5)])

    with caplog.at_level(logging.ERROR):
        result = PromptOptimizer(library=library).improve(LOGIN_PROMPT)

    assert result.failed_patterns == ["broken"]
    assert [p.id for p in result.applied_patterns] == ["ok"]
    assert result.improved == f"{LOGIN_PROMPT}\n\n[ok]"
    assert "expected PatternResult, got NoneType" in caplog.text


def test_patterns_see_current_prompt_and_fixed_original():
    recorder = RecordingPattern("recorder", 1)
    library = PatternLibrary([FakePattern("first", 9), recorder])

    PromptOptimizer(library=library).improve(LOGIN_PROMPT)

    assert recorder.calls == [(f"{LOGIN_PROMPT}\n\n[first]", LOGIN_PROMPT)]


def test_per_call_config_disables_pattern(optimizer):
    config = LibraryConfig(disabled=("objective-clarifier",))
    result = optimizer.improve(LOGIN_PROMPT, config=config)

    assert_not_applied(result, "objective-clarifier")
    assert not result.improved.startswith("# Objective")


def test_analysis_buckets(optimizer):
    result = optimizer.improve(LOGIN_PROMPT)
    analysis = result.analysis

    assert any(gap.startswith("Missing context") for gap in analysis.gaps)
    assert any(s.startswith("Expand detail") for s in analysis.suggestions)
    assert "Added clear objective statement" in analysis.ambiguities
    assert result.recommendation == DEEP_MODE_HINT


def test_strengths_for_detailed_prompt(optimizer):
    prompt = (
        "We currently run a legacy Flask API. Write a Python function that validates "
        "uploaded CSV files, for example rejecting rows with missing ids. Success means "
        "all existing users keep working and the function returns a list of errors."
    )
    result = optimizer.improve(prompt)

    assert "Clear context provided" in result.analysis.strengths
    assert "Technical constraints specified" in result.analysis.strengths
    assert "Includes examples for clarity" in result.analysis.strengths
    assert "Comprehensive detail provided" in result.analysis.strengths


def test_improvements_match_applied_patterns(optimizer):
    result = optimizer.improve(VERBOSE_PROMPT, "deep")

    assert len(result.improvements) == len(result.applied_patterns)
    for improvement, applied in zip(result.improvements, result.applied_patterns):
        assert improvement.description == applied.description


def test_verbose_pattern_logs(caplog):
    optimizer = PromptOptimizer(verbose_pattern_logs=True)

    with caplog.at_level(logging.INFO, logger="prompt_optimizer"):
        optimizer.improve(LOGIN_PROMPT)

    assert "Pattern objective-clarifier applied" in caplog.text


def test_statistics(optimizer):
    stats = optimizer.get_statistics()

    assert stats["total_patterns"] == 27
    assert stats["fast_patterns"] + stats["deep_patterns"] >= stats["total_patterns"]
    assert stats["fast_patterns"] < stats["deep_patterns"]

"""Tests for the triage engine."""

import itertools

from prompt_optimizer.intelligence.triage import (
    MISSING_OUTPUT_FORMAT,
    VERY_LOW_WORD_COUNT,
    TriageEngine,
)
from prompt_optimizer.types import QualityScore, TriageThresholds


def make_scores(conciseness, logic, explicitness):
    return QualityScore(
        conciseness=conciseness,
        logic=logic,
        explicitness=explicitness,
        overall=0,
        rating="poor",
    )


def test_weak_prompt_needs_deep_analysis(triage):
    result = triage.perform_triage("login page")

    assert result.needs_deep_analysis
    assert VERY_LOW_WORD_COUNT in result.secondary_indicators
    assert result.reasons


def test_clean_result_has_no_reasons(triage):
    result = triage.evaluate(make_scores(90, 90, 90), [])

    assert not result.needs_deep_analysis
    assert result.reasons == []


def test_one_reason_per_triggered_condition(triage):
    result = triage.evaluate(
        make_scores(10, 10, 10), [VERY_LOW_WORD_COUNT, MISSING_OUTPUT_FORMAT]
    )

    assert len(result.reasons) == 4


def test_single_secondary_indicator_is_not_enough(triage):
    result = triage.evaluate(make_scores(90, 90, 90), [MISSING_OUTPUT_FORMAT])

    assert not result.needs_deep_analysis


def test_triage_is_monotonic(triage):
    """Lowering any single dimension never turns a deep verdict into a fast one."""
    values = (0, 30, 49, 50, 59, 60, 75, 100)
    for c, l, e in itertools.product(values, repeat=3):
        before = triage.evaluate(make_scores(c, l, e), []).needs_deep_analysis
        if not before:
            continue
        for lowered in (
            make_scores(max(0, c - 10), l, e),
            make_scores(c, max(0, l - 10), e),
            make_scores(c, l, max(0, e - 10)),
        ):
            assert triage.evaluate(lowered, []).needs_deep_analysis


def test_custom_thresholds():
    strict = TriageEngine(thresholds=TriageThresholds(explicitness_min=95))
    relaxed = TriageEngine(thresholds=TriageThresholds(explicitness_min=0))
    scores = make_scores(90, 90, 80)

    assert strict.evaluate(scores, []).needs_deep_analysis
    assert not relaxed.evaluate(scores, []).needs_deep_analysis


def test_non_string_prompt(triage):
    result = triage.perform_triage(None)

    assert result.needs_deep_analysis

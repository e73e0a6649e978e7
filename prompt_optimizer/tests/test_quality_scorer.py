"""Tests for CLEAR quality scoring."""

import pytest

from prompt_optimizer.intelligence.quality_scorer import rating_for
from prompt_optimizer.tests.helpers import assert_scores_bounded

VERBOSE_PROMPT = "Please could you maybe help me create a login page if possible"

SAMPLE_PROMPTS = (
    "",
    "   ",
    "fix",
    "Create a login page",
    VERBOSE_PROMPT,
    "Please please please thanks thanks really really very very just just maybe perhaps " * 10,
    "You are a senior Python developer. Write a function that parses CSV files. "
    "Return a list of dicts as JSON. Keep a concise style. For example: a,b -> "
    '[{"a": "b"}]. Success criteria: all tests pass.',
)


@pytest.mark.parametrize("prompt", SAMPLE_PROMPTS)
@pytest.mark.parametrize("mode", ["fast", "deep"])
def test_scores_are_bounded(scorer, prompt, mode):
    assert_scores_bounded(scorer.score(prompt, mode=mode))


def test_empty_prompt_scores_zero(scorer):
    scores = scorer.score("")

    assert scores.overall == 0
    assert scores.rating == "poor"
    assert scores.adaptiveness is None


def test_deep_mode_adds_dimensions(scorer):
    scores = scorer.score("Create a login page", mode="deep")

    assert scores.adaptiveness is not None
    assert scores.reflectiveness is not None
    assert scores.adaptiveness_details is not None
    assert len(scores.adaptiveness_details.alternative_phrasings) >= 2
    assert scores.reflectiveness_details.edge_cases


def test_pleasantries_lower_conciseness(scorer):
    verbose = scorer.score(VERBOSE_PROMPT)
    direct = scorer.score("Create a login page with email and password fields")

    assert verbose.conciseness < direct.conciseness
    assert verbose.conciseness_details.pleasantries_count == 2


def test_explicit_prompt_scores_full_explicitness(scorer):
    scores = scorer.score(SAMPLE_PROMPTS[-1])

    assert scores.explicitness == 100
    assert scores.explicitness_details.missing == []


def test_conflicting_length_instructions_lower_logic(scorer):
    scores = scorer.score("Give a brief but comprehensive answer about caching")

    assert scores.logic < 100
    assert not scores.logic_details.has_coherent_flow


def test_scoring_is_deterministic(scorer):
    assert scorer.score(VERBOSE_PROMPT, "deep") == scorer.score(VERBOSE_PROMPT, "deep")


def test_unknown_mode_raises(scorer):
    with pytest.raises(ValueError):
        scorer.score("Create a login page", mode="turbo")


@pytest.mark.parametrize(
    "overall,rating",
    [(100, "excellent"), (80, "excellent"), (79, "good"), (65, "good"),
     (64, "needs-improvement"), (45, "needs-improvement"), (44, "poor"), (0, "poor")],
)
def test_rating_bands(overall, rating):
    assert rating_for(overall) == rating

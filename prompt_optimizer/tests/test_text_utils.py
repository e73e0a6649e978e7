"""Tests for the shared text helpers and confidence arithmetic."""

import pytest

from prompt_optimizer.intelligence import confidence
from prompt_optimizer.intelligence.text_utils import (
    capitalize_first,
    contains_term,
    count_words,
    dedupe,
    first_sentence,
    has_examples,
    has_headers,
    has_objective,
    has_tech_stack,
    signal_to_noise,
    tidy_whitespace,
)


def test_contains_term_respects_word_boundaries():
    assert contains_term("Build an API gateway", "api")
    assert not contains_term("Build a rapid prototype", "api")
    assert contains_term("Write tests for the parser", "test")


def test_examples_detection_includes_abbreviation():
    assert has_examples("Support several formats, e.g. CSV")
    assert has_examples("Return errors such as 404")
    assert not has_examples("Return errors")


def test_objective_detection():
    assert has_objective("Create a login page")
    assert has_objective("Our goal is faster builds")
    assert not has_objective("The login page")


def test_tech_stack_detection():
    assert has_tech_stack("Use React with a Postgres database")
    assert not has_tech_stack("Make it look nice")


def test_headers_and_sentences():
    assert has_headers("# Objective\nDo the thing")
    assert not has_headers("No headers here")
    assert first_sentence("## Goal\nShip it. Then rest.") == "Goal"
    assert first_sentence("Ship it. Then rest.") == "Ship it"


def test_tidy_whitespace_and_capitalize():
    assert tidy_whitespace("a   b ,  c\n\n\n\nd") == "a b, c\n\nd"
    assert capitalize_first("  hello") == "  Hello"


def test_signal_to_noise_bounds():
    assert signal_to_noise("") == 0.0
    assert 0.0 <= signal_to_noise("the cat sat on a mat") <= 1.0
    assert count_words("one two  three") == 3


def test_dedupe_keeps_first_seen_order():
    assert dedupe(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
    assert dedupe(["Aa", "aa", "B"], key=str.lower) == ["Aa", "B"]


@pytest.mark.parametrize(
    "value,expected",
    [(0, "low"), (49, "low"), (50, "medium"), (70, "high"), (85, "very-high")],
)
def test_confidence_category_bands(value, expected):
    assert confidence.category(value) == expected


def test_competition_penalty_floor():
    # Runner-up within 15% of the winner costs 15 points, never below 60
    assert confidence.competition_penalty(70, 20, 19) == 60
    assert confidence.competition_penalty(90, 20, 19) == 75
    assert confidence.competition_penalty(90, 20, 5) == 90
    assert confidence.ratio(0, 0) == 50

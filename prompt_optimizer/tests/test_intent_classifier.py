"""Tests for keyword-vote intent classification."""

import pytest


@pytest.mark.parametrize(
    "prompt,expected",
    [
        ("Create a login page", "code-generation"),
        ("Fix this error: the form throws error on submit", "debugging"),
        ("Write unit tests for the payment service", "testing"),
        ("Migrate from MySQL to Postgres", "migration"),
        ("Run a security audit to check for XSS and SQL injection", "security-review"),
        ("Summarize the meeting notes into key points", "summarization"),
        ("Write a PRD for the onboarding flow", "prd-generation"),
        ("Explain how the caching layer works", "documentation"),
        ("What is the best way to design the architecture for a chat app?", "planning"),
    ],
)
def test_classifies_primary_intent(classifier, prompt, expected):
    assert classifier.classify(prompt).primary_intent == expected


def test_empty_prompt_defaults_to_code_generation(classifier):
    analysis = classifier.classify("")

    assert analysis.primary_intent == "code-generation"
    assert analysis.confidence == 50


def test_non_string_prompt_is_treated_as_empty(classifier):
    analysis = classifier.classify(None)

    assert analysis.primary_intent == "code-generation"
    assert analysis.confidence == 50


def test_negation_halves_keyword_points(classifier):
    plain = classifier.classify("Refactor the parser")
    negated = classifier.classify("Do not refactor the parser")

    assert negated.scores["refinement"] < plain.scores["refinement"]


def test_characteristics(classifier):
    analysis = classifier.classify("How should I structure `def load()` for the API?")
    traits = analysis.characteristics

    assert traits.has_code_context
    assert traits.has_technical_terms
    assert traits.is_open_ended


def test_planning_suggests_deep_mode(classifier):
    analysis = classifier.classify("What is the best way to design the architecture for a chat?")

    assert analysis.suggested_mode == "deep"


def test_confidence_is_bounded(classifier):
    for prompt in ("", "fix", "Create a React component and write tests for it"):
        assert 0 <= classifier.classify(prompt).confidence <= 100

"""Custom assertions for prompt optimizer tests."""

from prompt_optimizer.patterns.base import Pattern
from prompt_optimizer.types import ImprovedPrompt, QualityScore


def assert_scores_bounded(scores: QualityScore) -> None:
    """
    Verify every scored dimension and overall lie in 0-100.

    Args:
        scores: Quality scores to check

    Raises:
        AssertionError: If any value is out of range
    """
    values = dict(scores.dimensions(), overall=scores.overall)
    out_of_range = {name: v for name, v in values.items() if not 0 <= v <= 100}
    assert not out_of_range, f"Scores out of range: {out_of_range}"


def assert_runs_before(pipeline: list[Pattern], first: str, second: str) -> None:
    """
    Verify one pattern id precedes another in a pipeline.

    Raises:
        AssertionError: If either id is missing or the order is wrong
    """
    ids = [p.id for p in pipeline]
    assert first in ids, f"{first} not selected: {ids}"
    assert second in ids, f"{second} not selected: {ids}"
    assert ids.index(first) < ids.index(second), f"Expected {first} before {second}: {ids}"


def assert_applied(result: ImprovedPrompt, pattern_id: str) -> None:
    """Verify a pattern changed the prompt during a run."""
    applied = [p.id for p in result.applied_patterns]
    assert pattern_id in applied, f"Expected {pattern_id} to be applied, got {applied}"


def assert_not_applied(result: ImprovedPrompt, pattern_id: str) -> None:
    """Verify a pattern left the prompt alone during a run."""
    applied = [p.id for p in result.applied_patterns]
    assert pattern_id not in applied, f"Expected {pattern_id} not to be applied: {applied}"

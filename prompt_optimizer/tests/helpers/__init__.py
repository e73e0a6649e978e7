"""Test helpers for prompt optimizer tests."""

from prompt_optimizer.tests.helpers.assertions import (
    assert_applied,
    assert_not_applied,
    assert_runs_before,
    assert_scores_bounded,
)
from prompt_optimizer.tests.helpers.fake_patterns import (
    FailingPattern,
    FakePattern,
    NoneReturningPattern,
    RecordingPattern,
)

__all__ = [
    "FakePattern",
    "FailingPattern",
    "NoneReturningPattern",
    "RecordingPattern",
    "assert_applied",
    "assert_not_applied",
    "assert_runs_before",
    "assert_scores_bounded",
]

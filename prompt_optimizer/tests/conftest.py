"""Pytest fixtures for prompt optimizer tests."""

import pytest

from prompt_optimizer.intelligence import (
    IntentClassifier,
    PatternLibrary,
    QualityScorer,
    TriageEngine,
)
from prompt_optimizer.optimizer.orchestrator import PromptOptimizer
from prompt_optimizer.patterns import default_patterns
from prompt_optimizer.types import IntentAnalysis, PatternContext


@pytest.fixture
def classifier():
    return IntentClassifier()


@pytest.fixture
def scorer():
    return QualityScorer()


@pytest.fixture
def triage(scorer):
    return TriageEngine(scorer=scorer)


@pytest.fixture
def library():
    """Library holding every built-in pattern with the default configuration."""
    return PatternLibrary(default_patterns())


@pytest.fixture
def optimizer(library):
    return PromptOptimizer(library=library)


@pytest.fixture
def make_context():
    """
    Build a PatternContext for direct pattern tests.

    The returned factory takes the original prompt plus optional intent, mode
    and custom settings.
    """

    def _make(prompt, intent="code-generation", mode="fast", settings=None):
        return PatternContext(
            mode=mode,
            original_prompt=prompt,
            intent=IntentAnalysis(primary_intent=intent, confidence=100),
            pattern_settings=settings or {},
        )

    return _make


@pytest.fixture
def config_file(tmp_path):
    """Write a config.yaml with a disabled pattern and overrides."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "optimizer:\n"
        "  mode: deep\n"
        "  output_format: json\n"
        "intelligence:\n"
        "  verbose_pattern_logs: true\n"
        "  triage:\n"
        "    conciseness_min: 70\n"
        "  patterns:\n"
        "    disabled: [conciseness-filter]\n"
        "    priorityOverrides:\n"
        "      step-decomposer: 10\n"
        "    customSettings:\n"
        "      edge-case-identifier:\n"
        "        maxEdgeCases: 3\n"
    )
    return path

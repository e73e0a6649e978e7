"""Signal extraction, triage and pattern selection."""

from prompt_optimizer.intelligence.intent_classifier import IntentClassifier
from prompt_optimizer.intelligence.quality_scorer import QualityScorer
from prompt_optimizer.intelligence.triage import TriageEngine
from prompt_optimizer.intelligence.pattern_library import PatternLibrary

__all__ = [
    "IntentClassifier",
    "QualityScorer",
    "TriageEngine",
    "PatternLibrary",
]

"""Triage: decide whether fast heuristics suffice or deep analysis should run."""

import logging

from prompt_optimizer.intelligence.quality_scorer import QualityScorer
from prompt_optimizer.intelligence.text_utils import (
    count_words,
    has_objective,
    has_output_format,
    has_tech_stack,
)
from prompt_optimizer.types import QualityScore, TriageResult, TriageThresholds

logger = logging.getLogger(__name__)

VERY_LOW_WORD_COUNT = "very low word count"
MISSING_OBJECTIVE = "missing objective"
MISSING_TECH_STACK = "missing technical context"
MISSING_OUTPUT_FORMAT = "missing output format"


class TriageEngine:
    """Escalates weak prompts to deep analysis.

    Escalation is monotonic: lowering any score or adding a secondary
    indicator never turns a deep verdict back into a fast one.
    """

    def __init__(
        self,
        scorer: QualityScorer | None = None,
        thresholds: TriageThresholds | None = None,
    ):
        self.scorer = scorer or QualityScorer()
        self.thresholds = thresholds or TriageThresholds()

    def perform_triage(self, prompt: str) -> TriageResult:
        """Score the prompt in fast mode and evaluate the triage rules.

        Args:
            prompt: Prompt text

        Returns:
            TriageResult with one reason per triggered condition
        """
        text = prompt if isinstance(prompt, str) else ""
        scores = self.scorer.score(text, mode="fast")
        result = self.evaluate(scores, self.secondary_indicators(text))
        logger.debug(
            f"Triage: deep={result.needs_deep_analysis}, reasons={len(result.reasons)}"
        )
        return result

    def secondary_indicators(self, prompt: str) -> list[str]:
        """List the weak signals present in a prompt."""
        indicators = []
        if count_words(prompt) < self.thresholds.min_word_count:
            indicators.append(VERY_LOW_WORD_COUNT)
        if not has_objective(prompt):
            indicators.append(MISSING_OBJECTIVE)
        if not has_tech_stack(prompt):
            indicators.append(MISSING_TECH_STACK)
        if not has_output_format(prompt):
            indicators.append(MISSING_OUTPUT_FORMAT)
        return indicators

    def evaluate(self, scores: QualityScore, indicators: list[str]) -> TriageResult:
        """Apply the thresholds to precomputed scores and indicators."""
        t = self.thresholds
        reasons = []
        if scores.conciseness < t.conciseness_min:
            reasons.append(f"Conciseness score {scores.conciseness} is below {t.conciseness_min}")
        if scores.logic < t.logic_min:
            reasons.append(f"Logic score {scores.logic} is below {t.logic_min}")
        if scores.explicitness < t.explicitness_min:
            reasons.append(
                f"Explicitness score {scores.explicitness} is below {t.explicitness_min}"
            )
        if len(indicators) >= t.secondary_indicator_threshold:
            reasons.append(
                f"{len(indicators)} secondary indicators present: {', '.join(indicators)}"
            )

        return TriageResult(
            needs_deep_analysis=bool(reasons),
            reasons=reasons,
            secondary_indicators=list(indicators),
        )

"""Main prompt optimizer orchestrator using the pattern pipeline."""

import logging
import time

from prompt_optimizer.config import Config
from prompt_optimizer.intelligence import (
    IntentClassifier,
    PatternLibrary,
    QualityScorer,
    TriageEngine,
)
from prompt_optimizer.optimizer.analysis import build_analysis, recommendation
from prompt_optimizer.patterns import Pattern, default_patterns
from prompt_optimizer.types import (
    AppliedPattern,
    ImprovedPrompt,
    Intent,
    IntentAnalysis,
    LibraryConfig,
    Mode,
    PatternContext,
    PatternResult,
)

logger = logging.getLogger(__name__)

MODES = ("fast", "deep")


class PromptOptimizer:
    """Runs one prompt through classification, scoring, triage and the pattern pipeline."""

    def __init__(
        self,
        classifier: IntentClassifier | None = None,
        scorer: QualityScorer | None = None,
        triage: TriageEngine | None = None,
        library: PatternLibrary | None = None,
        verbose_pattern_logs: bool = False,
    ):
        """
        Initialize the optimizer.

        Args:
            classifier: Intent classifier
            scorer: Quality scorer shared with triage when triage is not given
            triage: Triage engine
            library: Pattern library (defaults to every built-in pattern)
            verbose_pattern_logs: Log each pattern outcome at INFO instead of DEBUG
        """
        self.classifier = classifier or IntentClassifier()
        self.scorer = scorer or QualityScorer()
        self.triage = triage or TriageEngine(scorer=self.scorer)
        self.library = library or PatternLibrary(default_patterns())
        self.verbose_pattern_logs = verbose_pattern_logs

    @classmethod
    def from_config(cls, config: Config) -> "PromptOptimizer":
        """Build an optimizer with the built-in patterns and the configured settings."""
        scorer = QualityScorer()
        return cls(
            scorer=scorer,
            triage=TriageEngine(scorer=scorer, thresholds=config.triage_thresholds),
            library=PatternLibrary(default_patterns(), config=config.library_config),
            verbose_pattern_logs=config.verbose_pattern_logs,
        )

    def improve(
        self,
        prompt: str,
        mode: Mode | None = "fast",
        intent: Intent | IntentAnalysis | None = None,
        config: LibraryConfig | None = None,
    ) -> ImprovedPrompt:
        """
        Improve a prompt.

        Args:
            prompt: Prompt text; non-string input is treated as empty
            mode: "fast", "deep", or None to let triage decide
            intent: Pre-supplied intent that skips classification
            config: Per-call library configuration

        Returns:
            ImprovedPrompt with the rewritten prompt and its analysis

        Raises:
            ValueError: If mode is not fast, deep or None
        """
        if mode is not None and mode not in MODES:
            raise ValueError(f"Unknown mode: {mode}. Expected one of {MODES}")
        if not isinstance(prompt, str):
            logger.warning(f"Expected a string prompt, got {type(prompt).__name__}")
            prompt = ""

        start_time = time.time()
        analysis = self._resolve_intent(prompt, intent)
        triage_result = self.triage.perform_triage(prompt)
        if mode is None:
            mode = "deep" if triage_result.needs_deep_analysis else "fast"

        logger.info(
            f"Improving prompt ({len(prompt)} chars): intent={analysis.primary_intent}, "
            f"mode={mode}"
        )
        scores = self.scorer.score(prompt, mode=mode)

        improved = prompt
        results: list[PatternResult] = []
        applied: list[AppliedPattern] = []
        failed: list[str] = []
        if prompt.strip():
            pipeline = self.library.get_applicable_patterns(
                prompt, analysis, scores, mode, config
            )
            context = self.library.build_context(prompt, analysis, mode, config)
            for pattern in pipeline:
                result = self._run_pattern(pattern, improved, context)
                if result is None:
                    failed.append(pattern.id)
                    continue
                results.append(result)
                if result.applied:
                    improved = result.enhanced_prompt
                    applied.append(
                        AppliedPattern(
                            id=pattern.id,
                            name=pattern.name,
                            dimension=result.improvement.dimension,
                            description=result.improvement.description,
                            impact=result.improvement.impact,
                        )
                    )
        else:
            logger.info("Empty prompt, skipping pattern pipeline")

        result = ImprovedPrompt(
            original=prompt,
            improved=improved,
            mode=mode,
            intent=analysis,
            analysis=build_analysis(prompt, scores, results),
            triage_result=triage_result,
            clear_scores=scores if mode == "deep" else None,
            improvements=[r.improvement for r in results if r.applied],
            applied_patterns=applied,
            failed_patterns=failed,
        )
        result.recommendation = recommendation(result, scores, mode)

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Applied {len(applied)} patterns ({len(failed)} failed) in {elapsed_ms:.1f}ms"
        )
        return result

    def get_statistics(self) -> dict[str, int]:
        """Pattern counts for the registered library."""
        return {
            "total_patterns": self.library.pattern_count,
            "fast_patterns": len(self.library.get_patterns_by_mode("fast")),
            "deep_patterns": len(self.library.get_patterns_by_mode("deep")),
        }

    def _resolve_intent(
        self, prompt: str, intent: Intent | IntentAnalysis | None
    ) -> IntentAnalysis:
        if intent is None:
            return self.classifier.classify(prompt)
        if isinstance(intent, IntentAnalysis):
            return intent
        return IntentAnalysis(
            primary_intent=intent,
            confidence=100,
            characteristics=self.classifier.characteristics(prompt, intent),
        )

    def _run_pattern(
        self, pattern: Pattern, prompt: str, context: PatternContext
    ) -> PatternResult | None:
        """Apply one pattern; an exception or non-PatternResult return is logged as None."""
        try:
            result = pattern.apply(prompt, context)
            if not isinstance(result, PatternResult):
                raise TypeError(f"expected PatternResult, got {type(result).__name__}")
        except Exception as e:
            logger.error(f"Pattern {pattern.id} failed: {e}", exc_info=True)
            return None

        level = logging.INFO if self.verbose_pattern_logs else logging.DEBUG
        status = "applied" if result.applied else "skipped"
        logger.log(level, f"Pattern {pattern.id} {status}: {result.improvement.description}")
        return result

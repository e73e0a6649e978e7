"""Pattern registry and the selection/ordering engine."""

import logging
from collections.abc import Iterable
from typing import Any

from prompt_optimizer.patterns.base import Pattern, mode_matches
from prompt_optimizer.types import (
    IntentAnalysis,
    LibraryConfig,
    Mode,
    PatternContext,
    QualityScore,
)

logger = logging.getLogger(__name__)

MIN_PRIORITY = 1
MAX_PRIORITY = 10


class PatternLibrary:
    """Registry of patterns plus the algorithm that turns a run into a pipeline.

    Patterns are injected at construction; registration order breaks
    priority ties. ``apply_config`` replaces the instance configuration and
    is not re-entrant: do not call it while another caller is selecting
    patterns from the same library. Passing ``config`` to
    ``get_applicable_patterns`` avoids shared state entirely.
    """

    def __init__(self, patterns: Iterable[Pattern], config: LibraryConfig | None = None):
        """
        Initialize the library.

        Args:
            patterns: Pattern instances in registration order
            config: Optional initial configuration

        Raises:
            ValueError: If two patterns share an id
        """
        self._patterns: dict[str, Pattern] = {}
        for pattern in patterns:
            if pattern.id in self._patterns:
                raise ValueError(f"Duplicate pattern id: {pattern.id}")
            self._patterns[pattern.id] = pattern
        self._config = LibraryConfig()
        if config is not None:
            self.apply_config(config)

    @property
    def config(self) -> LibraryConfig:
        return self._config

    def apply_config(self, config: LibraryConfig) -> None:
        """Replace the library configuration, logging entries that will be ignored."""
        self._warn_ignored(config)
        self._config = config
        logger.info(
            f"Pattern config applied: {len(config.disabled)} disabled, "
            f"{len(config.priority_overrides)} priority overrides, "
            f"{len(config.custom_settings)} custom settings"
        )

    def get_pattern(self, pattern_id: str) -> Pattern | None:
        return self._patterns.get(pattern_id)

    def get_all_patterns(self) -> list[Pattern]:
        return list(self._patterns.values())

    def get_patterns_by_mode(self, mode: Mode) -> list[Pattern]:
        return [p for p in self._patterns.values() if mode_matches(p.mode, mode)]

    @property
    def pattern_count(self) -> int:
        return len(self._patterns)

    def get_pattern_settings(self, pattern_id: str) -> dict[str, Any] | None:
        """Custom settings configured for a pattern, or None when there are none."""
        return self._config.custom_settings.get(pattern_id)

    def effective_priority(self, pattern: Pattern, config: LibraryConfig | None = None) -> int:
        """Configured override when it lies in 1-10, otherwise the pattern's own priority."""
        override = (config or self._config).priority_overrides.get(pattern.id)
        if override is not None and MIN_PRIORITY <= override <= MAX_PRIORITY:
            return override
        return pattern.priority

    def build_context(
        self,
        prompt: str,
        intent: IntentAnalysis,
        mode: Mode,
        config: LibraryConfig | None = None,
    ) -> PatternContext:
        """Snapshot shared by every pattern in one run."""
        config = config or self._config
        return PatternContext(
            mode=mode,
            original_prompt=prompt,
            intent=intent,
            pattern_settings=config.custom_settings,
        )

    def get_applicable_patterns(
        self,
        prompt: str,
        intent: IntentAnalysis | str,
        quality_scores: QualityScore | None = None,
        mode: Mode = "fast",
        config: LibraryConfig | None = None,
    ) -> list[Pattern]:
        """
        Select and order the patterns to run.

        Candidates are filtered by intent, mode and the disabled list, stable
        sorted by effective priority (highest first), then given one
        ``run_after`` adjustment pass. Quality gating lives inside each
        pattern's guard, so ``quality_scores`` does not affect selection.

        Args:
            prompt: Original prompt
            intent: Intent analysis, or a bare intent label
            quality_scores: Scores of the original prompt
            mode: Analysis mode
            config: Per-call configuration; defaults to the library's own

        Returns:
            Ordered list of patterns to execute
        """
        if config is not None:
            self._warn_ignored(config)
        config = config or self._config
        if isinstance(intent, str):
            intent = IntentAnalysis(primary_intent=intent, confidence=100)
        context = self.build_context(prompt, intent, mode, config)

        disabled = set(config.disabled)
        candidates = [
            p
            for p in self._patterns.values()
            if p.id not in disabled and p.is_applicable(context)
        ]
        # sorted() is stable, so equal priorities keep registration order
        ordered = sorted(candidates, key=lambda p: -self.effective_priority(p, config))
        ordered = self._apply_run_after(ordered)

        logger.debug(
            f"Selected {len(ordered)} patterns for {intent.primary_intent}/{mode}: "
            f"{[p.id for p in ordered]}"
        )
        return ordered

    def _apply_run_after(self, ordered: list[Pattern]) -> list[Pattern]:
        """Single best-effort pass moving each pattern directly behind its prerequisites.

        Chains of dependencies (A after B after C) are not guaranteed to end up
        fully ordered.
        """
        result = list(ordered)
        for pattern in ordered:
            for dependency in pattern.run_after:
                ids = [p.id for p in result]
                if dependency not in ids:
                    continue
                if ids.index(pattern.id) < ids.index(dependency):
                    result.remove(pattern)
                    result.insert(ids.index(dependency), pattern)
        return result

    def _warn_ignored(self, config: LibraryConfig) -> None:
        for pattern_id in config.disabled:
            if pattern_id not in self._patterns:
                logger.warning(f"Ignoring unknown pattern id in disabled list: {pattern_id}")
        for pattern_id, priority in config.priority_overrides.items():
            if pattern_id not in self._patterns:
                logger.warning(f"Ignoring priority override for unknown pattern: {pattern_id}")
            elif not MIN_PRIORITY <= priority <= MAX_PRIORITY:
                logger.warning(
                    f"Ignoring priority override {priority} for {pattern_id}: "
                    f"must be between {MIN_PRIORITY} and {MAX_PRIORITY}"
                )
        for pattern_id in config.custom_settings:
            if pattern_id not in self._patterns:
                logger.warning(f"Ignoring custom settings for unknown pattern: {pattern_id}")

"""Base contract for prompt transformation patterns."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import ClassVar, Protocol, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from prompt_optimizer.types import (
    ALL_INTENTS,
    Dimension,
    Impact,
    Improvement,
    Mode,
    PatternContext,
    PatternMode,
    PatternResult,
)

logger = logging.getLogger(__name__)

V = TypeVar("V")


class Pattern(Protocol):
    """Protocol for prompt transformation patterns.

    A pattern inspects the current prompt and returns a PatternResult. When
    ``applied`` is False the returned prompt must equal the input.
    """

    id: str
    name: str
    description: str
    applicable_intents: frozenset[str]
    mode: PatternMode
    priority: int
    run_after: tuple[str, ...]

    def is_applicable(self, context: PatternContext) -> bool:
        """Check whether the pattern should run for the context's intent and mode."""
        ...

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        """Transform the prompt."""
        ...


class PatternSettings(BaseModel):
    """Base for per-pattern settings; accepts snake_case or camelCase keys."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "ignore",
    }


class BasePattern(ABC):
    """Base class for the built-in patterns.

    Subclasses declare their metadata as class attributes and implement
    ``apply``. Shared text helpers live in ``intelligence.text_utils``.
    """

    id: ClassVar[str] = ""
    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    applicable_intents: ClassVar[frozenset[str]] = frozenset()
    mode: ClassVar[PatternMode] = "both"
    priority: ClassVar[int] = 5
    run_after: ClassVar[tuple[str, ...]] = ()
    dimension: ClassVar[Dimension] = "clarity"
    settings_model: ClassVar[type[PatternSettings]] = PatternSettings

    def is_applicable(self, context: PatternContext) -> bool:
        """Check intent membership and mode compatibility."""
        return context.intent.primary_intent in self.applicable_intents and mode_matches(
            self.mode, context.mode
        )

    def settings(self, context: PatternContext) -> PatternSettings:
        """Resolve this pattern's settings, merging custom overrides over defaults.

        Invalid overrides are logged and ignored.
        """
        overrides = context.pattern_settings.get(self.id) or {}
        try:
            return self.settings_model.model_validate(overrides)
        except ValidationError as e:
            logger.warning(f"Invalid settings for pattern {self.id}: {e}. Using defaults.")
            return self.settings_model()

    @abstractmethod
    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        """
        Transform the prompt.

        Args:
            prompt: Current prompt, possibly changed by earlier patterns
            context: Read-only run context

        Returns:
            PatternResult describing the change
        """
        pass

    def unchanged(self, prompt: str, description: str) -> PatternResult:
        """Result for a pattern that left the prompt alone."""
        return PatternResult(
            enhanced_prompt=prompt,
            improvement=Improvement(
                dimension=self.dimension, description=description, impact="low"
            ),
            applied=False,
        )

    def changed(
        self, prompt: str, enhanced: str, description: str, impact: Impact
    ) -> PatternResult:
        """Result for a transformation; reports not-applied when the text is identical."""
        if enhanced == prompt:
            return self.unchanged(prompt, description)
        return PatternResult(
            enhanced_prompt=enhanced,
            improvement=Improvement(
                dimension=self.dimension, description=description, impact=impact
            ),
            applied=True,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, priority={self.priority})"


def mode_matches(pattern_mode: PatternMode, mode: Mode) -> bool:
    """A "both" pattern runs in every mode; otherwise the modes must match."""
    return pattern_mode == "both" or pattern_mode == mode


def impact_for(count: int) -> Impact:
    """Impact convention for count-based findings: 0-1 low, 2-3 medium, 4+ high."""
    if count >= 4:
        return "high"
    if count >= 2:
        return "medium"
    return "low"


def check_intent_map(mapping: Mapping[str, V], owner: str) -> Mapping[str, V]:
    """Verify an intent-keyed table covers exactly the known intents.

    Args:
        mapping: Table keyed by intent
        owner: Name used in the error message

    Returns:
        The mapping, unchanged

    Raises:
        ValueError: If an intent is missing or an unknown key is present
    """
    missing = set(ALL_INTENTS) - set(mapping)
    unknown = set(mapping) - set(ALL_INTENTS)
    if missing or unknown:
        raise ValueError(
            f"{owner} intent table is not exhaustive: "
            f"missing={sorted(missing)}, unknown={sorted(unknown)}"
        )
    return mapping


def append_section(prompt: str, section: str) -> str:
    """Append a markdown section after the prompt, separated by a blank line."""
    return f"{prompt.rstrip()}\n\n{section.strip()}"

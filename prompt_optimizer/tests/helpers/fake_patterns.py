"""Fake patterns for exercising the library and orchestrator in isolation."""

from prompt_optimizer.patterns.base import BasePattern, append_section
from prompt_optimizer.types import ALL_INTENTS, PatternContext, PatternResult


class FakePattern(BasePattern):
    """Appends a marker line once; a second pass sees the marker and skips."""

    applicable_intents = frozenset(ALL_INTENTS)
    mode = "both"

    def __init__(
        self,
        pattern_id: str,
        priority: int = 5,
        run_after: tuple[str, ...] = (),
        mode: str = "both",
        intents: frozenset[str] | None = None,
    ):
        self.id = pattern_id
        self.name = f"Fake {pattern_id}"
        self.description = f"Appends the {pattern_id} marker"
        self.priority = priority
        self.run_after = run_after
        self.mode = mode
        if intents is not None:
            self.applicable_intents = intents

    @property
    def marker(self) -> str:
        return f"[{self.id}]"

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if self.marker in prompt:
            return self.unchanged(prompt, "Marker already present")
        return self.changed(prompt, append_section(prompt, self.marker), "Added marker", "low")


class FailingPattern(FakePattern):
    """Raises on every apply call."""

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        raise RuntimeError(f"{self.id} exploded")


class RecordingPattern(FakePattern):
    """Records the prompt and original prompt it was handed on each call."""

    def __init__(self, pattern_id: str, priority: int = 5):
        super().__init__(pattern_id, priority)
        self.calls: list[tuple[str, str]] = []

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        self.calls.append((prompt, context.original_prompt))
        return super().apply(prompt, context)


class NoneReturningPattern(FakePattern):
    """Returns None instead of a PatternResult."""

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        return None

"""Turns vague adjectives and abstract goals into concrete, measurable asks."""

import re

from prompt_optimizer.patterns.base import BasePattern, PatternSettings, impact_for
from prompt_optimizer.types import PatternContext, PatternResult

# Words already followed by an annotation or quoted in a clarification are left alone
_ANNOTATED = r"(?!\s*[(\[\"])"

VAGUE_WORDS: dict[str, str] = {
    "better": "(e.g., quicker, more stable)",
    "good": "(e.g., high-performing, maintainable)",
    "nice": "(e.g., polished, accessible)",
    "fast": "(e.g., < 100ms response time)",
    "slow": "(e.g., > 2s load time)",
    "something": "[specify what]",
    "somehow": "[specify method]",
}

MEASURABLE: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bfast(?:er)?\b" + _ANNOTATED, re.I), "(specify: < 100ms or < 1s)"),
    (re.compile(r"\bslow(?:er)?\b" + _ANNOTATED, re.I), "(specify: > 2s or > 5s)"),
    (re.compile(r"\befficient\b" + _ANNOTATED, re.I), "(specify metrics: time, memory, CPU)"),
    (re.compile(r"\bscalable\b" + _ANNOTATED, re.I), "(specify: 1K, 10K or 100K users)"),
    (re.compile(r"\breliable\b" + _ANNOTATED, re.I), "(specify: 99.9% uptime, < 0.1% errors)"),
    (re.compile(r"\bsecure\b" + _ANNOTATED, re.I), "(specify: HTTPS, auth required, encrypted)"),
)

ABSTRACT_GOALS: tuple[tuple[re.Pattern[str], str], ...] = (
    (
        re.compile(r"\bmake\s+it\s+better\b", re.I),
        "improve by [specify: performance, UX or reliability]",
    ),
    (
        re.compile(r"\bshould\s+be\s+nice\b", re.I),
        "should have [specify: polished UI, intuitive UX]",
    ),
    (
        re.compile(r"\bwant\s+it\s+to\s+be\s+good\b", re.I),
        "should meet [specify: quality standards, performance targets]",
    ),
    (
        re.compile(r"\bmore\s+efficient\b" + _ANNOTATED, re.I),
        "more efficient (reduce time/memory/CPU by [X%])",
    ),
    (
        re.compile(r"\bless\s+complex\b" + _ANNOTATED, re.I),
        "less complex (reduce from [X] to [Y] components/lines/dependencies)",
    ),
)

_SPECIFIC_METRIC = (
    re.compile(r"\d+\s*(?:ms|s|min|hours?)\b", re.I),
    re.compile(r"\d+\s*(?:kb|mb|gb)\b", re.I),
    re.compile(r"\d+\s*(?:%|percent)", re.I),
    re.compile(r"[<>]=?\s*\d+"),
    re.compile(r"\d+k?\s*(?:users?|requests?)", re.I),
)

_VAGUE_PATTERNS = {
    word: re.compile(rf"\b{word}\b" + _ANNOTATED, re.IGNORECASE) for word in VAGUE_WORDS
}


class ActionabilitySettings(PatternSettings):
    replace_vague_words: bool = True
    add_measurable_criteria: bool = True
    concretize_goals: bool = True


class ActionabilityEnhancer(BasePattern):
    """Annotates vague wording in place.

    Impact follows the count-based convention over the three rewrite passes.
    """

    id = "actionability-enhancer"
    name = "Actionability Enhancer"
    description = "Converts vague goals into specific, actionable tasks"
    applicable_intents = frozenset({"code-generation", "planning", "refinement", "debugging"})
    mode = "both"
    priority = 7
    dimension = "actionability"
    settings_model = ActionabilitySettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        settings = self.settings(context)
        enhanced = prompt
        passes = 0

        steps = (
            (settings.concretize_goals, self.concretize_goals),
            (settings.replace_vague_words, self.replace_vague_words),
            (settings.add_measurable_criteria, self.add_measurable_criteria),
        )
        for enabled, step in steps:
            if not enabled:
                continue
            rewritten = step(enhanced)
            if rewritten != enhanced:
                passes += 1
            enhanced = rewritten

        return self.changed(
            prompt,
            enhanced,
            f"Made {passes} improvements to increase specificity",
            impact_for(passes),
        )

    def concretize_goals(self, text: str) -> str:
        for pattern, replacement in ABSTRACT_GOALS:
            text = pattern.sub(replacement, text)
        return text

    def replace_vague_words(self, text: str) -> str:
        for word, annotation in VAGUE_WORDS.items():
            text = _VAGUE_PATTERNS[word].sub(lambda m, a=annotation: f"{m.group(0)} {a}", text)
        return text

    def add_measurable_criteria(self, text: str) -> str:
        if has_specific_metric(text):
            return text
        for pattern, suggestion in MEASURABLE:
            text = pattern.sub(lambda m, s=suggestion: f"{m.group(0)} {s}", text)
        return text


def has_specific_metric(text: str) -> bool:
    """Check for concrete numbers with units, percentages, comparisons or scale."""
    return any(pattern.search(text) for pattern in _SPECIFIC_METRIC)

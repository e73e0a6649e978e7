"""Extracts or infers a goal statement and places it at the top of the prompt."""

import re
from collections.abc import Callable

from prompt_optimizer.intelligence.text_utils import capitalize_first, contains_term
from prompt_optimizer.patterns.base import BasePattern, PatternSettings, check_intent_map
from prompt_optimizer.types import ALL_INTENTS, PatternContext, PatternResult

_EXPLICIT_OBJECTIVE = re.compile(
    r"^(?:#+\s*objective\b|objective:|goal:|purpose:)", re.IGNORECASE | re.MULTILINE
)

_GOAL_STATEMENT = re.compile(
    r"(?:i need to|i want to|i'm trying to|we need to|we want to|"
    r"goal is to|objective is to|purpose is to)\s+([^.\n]+)",
    re.IGNORECASE,
)

_ACTION_CLAUSE = re.compile(
    r"\b((?:create|build|make|implement|develop|write|design|add|fix|refactor|migrate|"
    r"summarize|summarise|document|explain|test|review|audit)\s+[^.\n?!]+)",
    re.IGNORECASE,
)


def _code_generation(lower: str) -> str | None:
    if contains_term(lower, "function"):
        return "Create a function that meets the specified requirements"
    if contains_term(lower, "component"):
        return "Build a component with the described functionality"
    if contains_term(lower, "api"):
        return "Implement an API endpoint as specified"
    return None


def _fixed(objective: str) -> Callable[[str], str | None]:
    return lambda lower: objective


INTENT_FALLBACKS: dict[str, Callable[[str], str | None]] = check_intent_map(
    {
        "code-generation": _code_generation,
        "planning": _fixed("Plan and design the described system or feature"),
        "refinement": _fixed("Improve and optimize the existing code"),
        "debugging": _fixed("Fix the identified error or bug"),
        "documentation": _fixed("Provide clear documentation and explanation"),
        "testing": _fixed("Write tests that verify the described behavior"),
        "migration": _fixed("Migrate the existing system to the target platform"),
        "security-review": _fixed("Identify and fix security vulnerabilities"),
        "summarization": _fixed("Summarize the provided material"),
        "prd-generation": _fixed("Produce a product requirements document"),
    },
    "ObjectiveClarifier",
)


class ObjectiveSettings(PatternSettings):
    infer_from_intent: bool = True


class ObjectiveClarifier(BasePattern):
    """Prepends an ``# Objective`` section.

    Impact is always high when applied.
    """

    id = "objective-clarifier"
    name = "Objective Clarifier"
    description = "Extracts or infers clear goal statement"
    applicable_intents = frozenset(ALL_INTENTS)
    mode = "both"
    priority = 9
    dimension = "clarity"
    settings_model = ObjectiveSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if _EXPLICIT_OBJECTIVE.search(prompt):
            return self.unchanged(prompt, "Objective already clearly stated")

        objective = self.extract_objective(prompt)
        if objective is None and self.settings(context).infer_from_intent:
            objective = INTENT_FALLBACKS[context.intent.primary_intent](prompt.lower())
        if not objective:
            return self.unchanged(prompt, "Could not infer clear objective")

        enhanced = f"# Objective\n{objective}\n\n{prompt}"
        return self.changed(prompt, enhanced, "Added clear objective statement", "high")

    def extract_objective(self, prompt: str) -> str | None:
        """Pull an explicit goal statement or the first action clause out of the prompt."""
        for pattern in (_GOAL_STATEMENT, _ACTION_CLAUSE):
            match = pattern.search(prompt)
            if match and match.group(1).strip():
                return capitalize_first(match.group(1).strip().rstrip(",;:"))
        return None

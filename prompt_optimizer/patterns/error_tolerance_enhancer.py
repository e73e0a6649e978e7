"""Adds failure scenarios and error handling expectations."""

import re

from pydantic import Field

from prompt_optimizer.intelligence.text_utils import dedupe
from prompt_optimizer.patterns.base import BasePattern, PatternSettings, append_section
from prompt_optimizer.types import PatternContext, PatternResult

ERROR_INDICATORS = (
    "error handling",
    "error cases",
    "exception",
    "try catch",
    "try/catch",
    "failure mode",
    "edge case",
    "fallback",
    "graceful",
    "robust",
    "resilient",
    "retry",
    "timeout",
    "validation",
    "sanitize",
    "invalid input",
    "null check",
    "undefined check",
)

# (detector, scenarios); the first three scenarios of every matching category are used
SCENARIOS: tuple[tuple[re.Pattern[str], tuple[str, ...]], ...] = (
    (
        re.compile(r"\b(?:api|fetch|http|request|endpoint|rest|graphql)\b", re.I),
        (
            "Network timeout or connection failure",
            "HTTP 4xx client errors (400, 401, 403, 404)",
            "HTTP 5xx server errors",
            "Rate limiting (429)",
        ),
    ),
    (
        re.compile(r"\b(?:database|db|sql|query|postgres|mysql|mongo|redis)\b", re.I),
        ("Connection pool exhaustion", "Query timeout", "Constraint violation", "Deadlock"),
    ),
    (
        re.compile(r"\b(?:input|form|user|validation|field|param)\b", re.I),
        ("Empty or null input", "Invalid format", "Input too long or too short"),
    ),
    (
        re.compile(r"\b(?:file|read|write|fs|path|directory|upload|download)\b", re.I),
        ("File not found", "Permission denied", "Disk full"),
    ),
    (
        re.compile(r"\b(?:async|await|promise|callback|event|queue)\b", re.I),
        ("Unhandled promise rejection", "Race conditions", "Deadlocks"),
    ),
)

GENERAL_SCENARIOS = ("Null or undefined values", "Type mismatches", "Out of bounds access")

PER_CATEGORY = 3

STANDARD_PRACTICES = (
    "Provide meaningful error messages",
    "Log errors with context for debugging",
    "Degrade gracefully instead of crashing",
    "Retry transient failures with a bounded number of attempts",
    "Never expose sensitive information in error responses",
)


class ErrorToleranceSettings(PatternSettings):
    max_error_scenarios: int = Field(default=6, ge=1, le=10)


class ErrorToleranceEnhancer(BasePattern):
    """Appends ``## Error Handling Requirements``.

    Impact is always medium when applied.
    """

    id = "error-tolerance-enhancer"
    name = "Error Tolerance Enhancer"
    description = "Adds error handling requirements and failure mode considerations"
    applicable_intents = frozenset(
        {"code-generation", "refinement", "debugging", "migration", "testing"}
    )
    mode = "deep"
    priority = 5
    dimension = "completeness"
    settings_model = ErrorToleranceSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        lower = prompt.lower()
        if any(indicator in lower for indicator in ERROR_INDICATORS):
            return self.unchanged(prompt, "Error handling already addressed")

        scenarios = [
            scenario
            for detector, category in SCENARIOS
            if detector.search(prompt)
            for scenario in category[:PER_CATEGORY]
        ] or list(GENERAL_SCENARIOS)
        scenarios = dedupe(scenarios)[: self.settings(context).max_error_scenarios]

        section = "\n".join(
            [
                "## Error Handling Requirements",
                "Consider handling these failure scenarios:",
                *(f"- {scenario}" for scenario in scenarios),
                *(f"- {practice}" for practice in STANDARD_PRACTICES),
            ]
        )
        return self.changed(
            prompt,
            append_section(prompt, section),
            f"Added {len(scenarios)} error handling considerations",
            "medium",
        )

"""Surfaces edge cases and failure modes by intent and domain."""

from typing import NamedTuple

from pydantic import Field

from prompt_optimizer.intelligence.text_utils import dedupe, has_any
from prompt_optimizer.patterns.base import (
    BasePattern,
    PatternSettings,
    append_section,
    check_intent_map,
    impact_for,
)
from prompt_optimizer.types import PatternContext, PatternResult

SECTION_HEADER = "### Edge Cases to Consider"


class EdgeCase(NamedTuple):
    scenario: str
    consideration: str


# (trigger keywords, cases); an empty trigger always fires
Rule = tuple[tuple[str, ...], tuple[EdgeCase, ...]]

GENERAL_RULES: tuple[Rule, ...] = (
    (
        ("input", "data", "form", "field"),
        (
            EdgeCase("Empty or null inputs", "How should missing or undefined values be handled?"),
            EdgeCase("Invalid input types", "What happens if input has the wrong type?"),
        ),
    ),
    (
        ("api", "request", "fetch", "call"),
        (EdgeCase("Network failures", "How to handle timeouts, connection errors and retries?"),),
    ),
)

DOMAIN_RULES: tuple[Rule, ...] = (
    (
        ("payment", "transaction", "money", "price", "cart"),
        (
            EdgeCase("Duplicate transactions", "How to prevent accidental double charges?"),
            EdgeCase("Currency and rounding", "How are currencies and decimal precision handled?"),
        ),
    ),
    (
        ("file", "upload", "download", "image", "document"),
        (
            EdgeCase("Large files", "What are the size limits? How are oversized files rejected?"),
            EdgeCase("Malicious files", "How are file types validated and scanned for malware?"),
        ),
    ),
    (
        ("date", "time", "schedule", "calendar", "timezone"),
        (
            EdgeCase("Timezone handling", "How to handle users in different timezones?"),
            EdgeCase("Date boundaries", "What about daylight saving, leap years, month ends?"),
        ),
    ),
)

INTENT_RULES: dict[str, tuple[Rule, ...]] = check_intent_map(
    {
        "code-generation": (
            (
                (),
                (
                    EdgeCase(
                        "Boundary conditions",
                        "What happens at min/max values, empty collections or single items?",
                    ),
                ),
            ),
            (
                ("list", "array", "collection"),
                (EdgeCase("Empty collections", "How to handle lists with 0 or 1 elements?"),),
            ),
            (
                ("user", "auth", "login", "session"),
                (
                    EdgeCase(
                        "Session expiration",
                        "What happens when the user session expires mid-operation?",
                    ),
                ),
            ),
            (
                ("concurrent", "parallel", "async"),
                (
                    EdgeCase(
                        "Race conditions",
                        "What if multiple operations access shared state simultaneously?",
                    ),
                ),
            ),
        ),
        "debugging": (
            (
                (),
                (
                    EdgeCase(
                        "Intermittent failures",
                        "Can the bug be reproduced consistently? What conditions affect it?",
                    ),
                    EdgeCase(
                        "Environment differences",
                        "Does it only happen in certain environments (dev/prod/test)?",
                    ),
                    EdgeCase("Data-dependent bugs", "Does data volume trigger it?"),
                ),
            ),
        ),
        "testing": (
            (
                (),
                (
                    EdgeCase("Test isolation", "Are tests independent or do they share state?"),
                    EdgeCase(
                        "Flaky tests",
                        "Are there timing-dependent tests that may fail intermittently?",
                    ),
                    EdgeCase("Mock boundaries", "Do mocks accurately represent real dependencies?"),
                ),
            ),
        ),
        "migration": (
            (
                (),
                (
                    EdgeCase("Data incompatibility", "Can all existing data be converted?"),
                    EdgeCase("Rollback strategy", "How to revert if the migration fails midway?"),
                    EdgeCase(
                        "Feature parity gaps",
                        "Are there features in the old system not supported in the new one?",
                    ),
                    EdgeCase("Downtime requirements", "What downtime is acceptable?"),
                ),
            ),
        ),
        "security-review": (
            (
                (),
                (
                    EdgeCase(
                        "Authentication bypass",
                        "Can attackers access resources without proper credentials?",
                    ),
                    EdgeCase(
                        "Privilege escalation",
                        "Can users gain access to resources they should not have?",
                    ),
                    EdgeCase(
                        "Input injection",
                        "Is user input sanitized before use (SQL, XSS, command)?",
                    ),
                    EdgeCase(
                        "Sensitive data exposure",
                        "Is sensitive data encrypted in transit and at rest?",
                    ),
                ),
            ),
        ),
        "planning": (),
        "refinement": (),
        "documentation": (),
        "summarization": (),
        "prd-generation": (),
    },
    "EdgeCaseIdentifier",
)


class EdgeCaseSettings(PatternSettings):
    max_edge_cases: int = Field(default=8, ge=1, le=15)


class EdgeCaseIdentifier(BasePattern):
    id = "edge-case-identifier"
    name = "Edge Case Identifier"
    description = "Identify potential edge cases and failure modes by domain"
    applicable_intents = frozenset(
        {"code-generation", "debugging", "testing", "migration", "security-review"}
    )
    mode = "deep"
    priority = 4
    dimension = "completeness"
    settings_model = EdgeCaseSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if SECTION_HEADER in prompt:
            return self.unchanged(prompt, "Edge cases already listed")

        cases = self.identify(context.original_prompt, context.intent.primary_intent)
        cases = cases[: self.settings(context).max_edge_cases]
        if not cases:
            return self.unchanged(prompt, "No edge cases identified")

        section = "\n".join(
            [SECTION_HEADER, ""]
            + [f"- **{case.scenario}**: {case.consideration}" for case in cases]
        )
        return self.changed(
            prompt,
            append_section(prompt, section),
            f"Identified {len(cases)} potential edge cases",
            impact_for(len(cases)),
        )

    def identify(self, prompt: str, intent: str) -> list[EdgeCase]:
        """Collect general, intent-specific and domain edge cases, first occurrence wins.

        Callers pass the original prompt so sections added earlier in the run
        do not trigger domain rules.
        """
        cases: list[EdgeCase] = []
        for triggers, rule_cases in (*GENERAL_RULES, *INTENT_RULES[intent], *DOMAIN_RULES):
            if not triggers or has_any(prompt, triggers):
                cases.extend(rule_cases)
        return dedupe(cases, key=lambda case: case.scenario.lower())

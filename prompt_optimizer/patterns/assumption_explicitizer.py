"""Spells out the assumptions an agent would otherwise make silently."""

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

SECTION_HEADER = "### Implicit Assumptions"


class Assumption(NamedTuple):
    """Assumption surfaced when any ``when`` term is present and no ``unless`` term is."""

    assumption: str
    clarify: str
    when: tuple[str, ...] = ()
    unless: tuple[str, ...] = ()

    def holds(self, prompt: str) -> bool:
        if self.when and not has_any(prompt, self.when):
            return False
        return not (self.unless and has_any(prompt, self.unless))


MISSING_CONTEXT = (
    Assumption(
        "Frontend framework is React",
        "Which frontend framework should be used (React, Vue or Angular)?",
        when=("component", "frontend", "ui"),
        unless=("react", "vue", "angular", "svelte", "next.js", "nextjs", "nuxt"),
    ),
    Assumption(
        "Language is TypeScript/JavaScript",
        "Which programming language should be used?",
        when=("function", "class", "code", "implement"),
        unless=("typescript", "javascript", "python", "java", "go", "rust"),
    ),
    Assumption(
        "Database type is flexible",
        "Which database technology is being used?",
        when=("database", "store", "persist", "save"),
        unless=("postgres", "postgresql", "mysql", "mongodb", "sqlite", "redis"),
    ),
)

INTENT_ASSUMPTIONS: dict[str, tuple[Assumption, ...]] = check_intent_map(
    {
        "code-generation": (
            Assumption(
                "Basic error handling is expected",
                "Which error handling strategy applies (raise, return null or a default value)?",
                unless=("error", "exception", "catch", "handle"),
            ),
            Assumption(
                "Using async/await pattern",
                "Should this be synchronous or asynchronous?",
                when=("api", "fetch", "request", "call"),
                unless=("async", "await", "promise", "callback"),
            ),
            Assumption(
                "Using React Context or local state",
                "Which state management approach is preferred?",
                when=("state", "store", "context"),
                unless=("redux", "zustand", "mobx", "context api"),
            ),
        ),
        "planning": (
            Assumption(
                "Small team (1-3 developers)",
                "How many people will work on this?",
                unless=("team", "developer", "person", "people"),
            ),
            Assumption(
                "Flexible timeline",
                "What are the timeline constraints?",
                unless=("deadline", "timeline", "sprint", "week", "month"),
            ),
            Assumption(
                "Starting with low to moderate scale",
                "What is the expected scale (users, requests/sec)?",
                unless=("users", "traffic", "scale", "load"),
            ),
        ),
        "migration": (
            Assumption(
                "Downtime is acceptable",
                "Is zero-downtime migration required?",
                unless=("downtime", "zero-downtime", "maintenance"),
            ),
            Assumption(
                "Rollback capability is needed",
                "What is the rollback strategy if migration fails?",
                unless=("rollback", "revert", "backup"),
            ),
            Assumption(
                "All existing data must be preserved",
                "Can any data be discarded or archived during migration?",
            ),
        ),
        "testing": (
            Assumption(
                "Using the project's existing test framework",
                "Which test framework should be used?",
                unless=("jest", "vitest", "mocha", "pytest", "junit", "unittest"),
            ),
            Assumption(
                "Standard coverage target (80%+)",
                "What is the target code coverage percentage?",
                unless=("coverage", "percent"),
            ),
            Assumption(
                "External dependencies should be mocked",
                "Should tests use real dependencies or mocks?",
                unless=("mock", "stub", "fake", "spy"),
            ),
        ),
        "debugging": (
            Assumption(
                "Bug occurs in the development environment",
                "In which environment does this bug occur?",
                unless=("production", "staging", "development", "local"),
            ),
            Assumption(
                "Bug is consistently reproducible",
                "Does this bug occur every time or intermittently?",
                unless=("always", "sometimes", "intermittent", "random"),
            ),
        ),
        "refinement": (),
        "documentation": (),
        "security-review": (),
        "summarization": (),
        "prd-generation": (),
    },
    "AssumptionExplicitizer",
)

DOMAIN_ASSUMPTIONS = (
    Assumption(
        "Using JWT-based authentication",
        "Which authentication mechanism is in use?",
        when=("user", "login", "auth"),
        unless=("jwt", "session", "oauth", "cookie"),
    ),
    Assumption(
        "Building a REST API",
        "Which API style applies (REST, GraphQL or gRPC)?",
        when=("api", "endpoint"),
        unless=("rest", "graphql", "grpc", "websocket"),
    ),
)


class AssumptionSettings(PatternSettings):
    max_assumptions: int = Field(default=8, ge=1, le=15)
    check_domain_assumptions: bool = True


class AssumptionExplicitizer(BasePattern):
    id = "assumption-explicitizer"
    name = "Assumption Explicitizer"
    description = "Make implicit assumptions explicit to prevent misunderstandings"
    applicable_intents = frozenset(
        {"code-generation", "planning", "migration", "testing", "debugging", "prd-generation"}
    )
    mode = "deep"
    priority = 6
    dimension = "clarity"
    settings_model = AssumptionSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if SECTION_HEADER in prompt:
            return self.unchanged(prompt, "Assumptions already listed")

        settings = self.settings(context)
        candidates = [*MISSING_CONTEXT, *INTENT_ASSUMPTIONS[context.intent.primary_intent]]
        if settings.check_domain_assumptions:
            candidates += DOMAIN_ASSUMPTIONS
        assumptions = dedupe(
            (a for a in candidates if a.holds(prompt)), key=lambda a: a.assumption.lower()
        )[: settings.max_assumptions]
        if not assumptions:
            return self.unchanged(prompt, "No implicit assumptions detected")

        lines = [
            SECTION_HEADER,
            "",
            "The following assumptions are being made. Confirm or correct each one:",
            "",
        ]
        for i, a in enumerate(assumptions, start=1):
            lines += [f"**{i}. {a.assumption}**", f"   Clarify: {a.clarify}", ""]

        return self.changed(
            prompt,
            append_section(prompt, "\n".join(lines)),
            f"Identified {len(assumptions)} implicit assumptions to clarify",
            impact_for(len(assumptions)),
        )

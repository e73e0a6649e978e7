"""Adds explicit scope boundaries to keep work from creeping."""

import re
from typing import NamedTuple

from pydantic import Field

from prompt_optimizer.intelligence.text_utils import dedupe, has_any
from prompt_optimizer.patterns.base import (
    BasePattern,
    PatternSettings,
    append_section,
    check_intent_map,
)
from prompt_optimizer.types import PatternContext, PatternResult

SCOPE_INDICATORS = (
    "scope definition",
    "out of scope",
    "not included",
    "scope:",
    "in scope",
    "excluded",
    "will not",
    "won't include",
    "not part of",
)

_REQUIREMENT_CLAUSES = (
    re.compile(r"\b(?:need|want|require|should have|must have)\s+([^.,\n]+)", re.I),
    re.compile(r"\b(?:create|build|implement|add)\s+(?:an?\s+)?([^.,\n]+)", re.I),
)

_FRONTEND = ("frontend", "ui", "component")
_BACKEND = ("backend", "api", "server")


class ScopeRule(NamedTuple):
    """Scope line emitted when any ``when`` term is present and no ``unless`` term is."""

    item: str
    when: tuple[str, ...] = ()
    unless: tuple[str, ...] = ()

    def fires(self, prompt: str) -> bool:
        if self.when and not has_any(prompt, self.when):
            return False
        return not (self.unless and has_any(prompt, self.unless))


IN_SCOPE: dict[str, tuple[ScopeRule, ...]] = check_intent_map(
    {
        "code-generation": (
            ScopeRule("Component implementation with specified functionality", ("component", "ui")),
            ScopeRule("API endpoint implementation", ("api", "endpoint")),
        ),
        "planning": (
            ScopeRule("High-level architecture design"),
            ScopeRule("Task breakdown and sequencing"),
        ),
        "migration": (
            ScopeRule("Data migration from source to target"),
            ScopeRule("Functionality preservation"),
        ),
        "refinement": (),
        "debugging": (),
        "documentation": (),
        "testing": (),
        "security-review": (),
        "summarization": (),
        "prd-generation": (),
    },
    "ScopeDefiner.in_scope",
)

OUT_OF_SCOPE: dict[str, tuple[ScopeRule, ...]] = check_intent_map(
    {
        "code-generation": (
            ScopeRule("Deployment and CI/CD configuration"),
            ScopeRule("Production infrastructure setup"),
            ScopeRule("Comprehensive test suite (basic tests only)", unless=("test", "tests")),
            ScopeRule(
                "Extensive documentation", unless=("doc", "docs", "documentation", "readme")
            ),
        ),
        "planning": (
            ScopeRule("Implementation code"),
            ScopeRule("Detailed technical specifications"),
            ScopeRule("Resource allocation and team assignments"),
        ),
        "migration": (
            ScopeRule("New feature development"),
            ScopeRule("Performance optimization beyond parity"),
            ScopeRule("Refactoring unrelated code"),
        ),
        "documentation": (
            ScopeRule("Code implementation changes"),
            ScopeRule("Architectural modifications"),
        ),
        "prd-generation": (
            ScopeRule("Technical implementation details"),
            ScopeRule("Code or pseudocode"),
            ScopeRule("Database schema design"),
        ),
        "refinement": (),
        "debugging": (),
        "testing": (),
        "security-review": (),
        "summarization": (),
    },
    "ScopeDefiner.out_of_scope",
)

SHARED_OUT_OF_SCOPE = (
    ScopeRule("Backend/API implementation", when=_FRONTEND, unless=_BACKEND),
    ScopeRule("Frontend/UI implementation", when=_BACKEND, unless=("frontend", "ui")),
)

BOUNDARIES = (
    ScopeRule("Limited to the named component or module", ("component", "module", "service")),
    ScopeRule(
        "External integrations assumed available and configured",
        ("integration", "third-party", "external"),
    ),
    ScopeRule(
        "Database schema assumed to exist or specified separately",
        ("database", "data", "storage"),
    ),
    ScopeRule("Authentication system assumed to be in place", ("auth", "user", "login")),
)

INTENT_BOUNDARIES: dict[str, tuple[ScopeRule, ...]] = check_intent_map(
    {
        "code-generation": (ScopeRule("Following existing project conventions"),),
        "migration": (ScopeRule("Backward compatibility kept where specified"),),
        "testing": (ScopeRule("Testing within unit and integration scope"),),
        "planning": (),
        "refinement": (),
        "debugging": (),
        "documentation": (),
        "security-review": (),
        "summarization": (),
        "prd-generation": (),
    },
    "ScopeDefiner.boundaries",
)

MAX_BOUNDARIES = 4


class ScopeSettings(PatternSettings):
    max_in_scope_items: int = Field(default=5, ge=1, le=10)
    max_out_of_scope_items: int = Field(default=5, ge=1, le=10)


class ScopeDefiner(BasePattern):
    """Appends ``### Scope Definition`` with in-scope, out-of-scope and boundary lists.

    Impact is always medium when applied.
    """

    id = "scope-definer"
    name = "Scope Definer"
    description = "Add explicit scope boundaries to prevent scope creep"
    applicable_intents = frozenset(
        {"code-generation", "planning", "prd-generation", "migration", "documentation"}
    )
    mode = "deep"
    priority = 5
    dimension = "completeness"
    settings_model = ScopeSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        lower = prompt.lower()
        if any(indicator in lower for indicator in SCOPE_INDICATORS):
            return self.unchanged(prompt, "Scope already defined")

        settings = self.settings(context)
        intent = context.intent.primary_intent
        in_scope = dedupe(
            [*extract_requirements(lower), *fired(IN_SCOPE[intent], prompt)]
        )[: settings.max_in_scope_items]
        out_of_scope = dedupe(
            [*fired(OUT_OF_SCOPE[intent], prompt), *fired(SHARED_OUT_OF_SCOPE, prompt)]
        )[: settings.max_out_of_scope_items]
        boundaries = dedupe(
            [*fired(BOUNDARIES, prompt), *fired(INTENT_BOUNDARIES[intent], prompt)]
        )[:MAX_BOUNDARIES]

        if not (in_scope or out_of_scope or boundaries):
            return self.unchanged(prompt, "No scope boundaries identified")

        lines = ["### Scope Definition", ""]
        for title, items in (
            ("In Scope", in_scope),
            ("Out of Scope", out_of_scope),
            ("Boundaries & Assumptions", boundaries),
        ):
            if items:
                lines += [f"**{title}:**", *(f"- {item}" for item in items), ""]

        return self.changed(
            prompt,
            append_section(prompt, "\n".join(lines)),
            "Added explicit scope boundaries",
            "medium",
        )


def fired(rules: tuple[ScopeRule, ...], prompt: str) -> list[str]:
    return [rule.item for rule in rules if rule.fires(prompt)]


def extract_requirements(text: str) -> list[str]:
    """Pull the objects of need/want/build clauses out of the prompt."""
    found = []
    for pattern in _REQUIREMENT_CLAUSES:
        for match in pattern.finditer(text):
            requirement = match.group(1).strip()
            if 3 < len(requirement) < 100:
                found.append(requirement)
    return found

"""Offers alternative ways to frame the same request."""

from typing import NamedTuple

from pydantic import Field

from prompt_optimizer.patterns.base import (
    BasePattern,
    PatternSettings,
    append_section,
    check_intent_map,
)
from prompt_optimizer.types import PatternContext, PatternResult

SECTION_HEADER = "### Alternative Approaches"


class Approach(NamedTuple):
    title: str
    description: str
    best_for: str


APPROACHES: dict[str, tuple[Approach, ...]] = check_intent_map(
    {
        "code-generation": (
            Approach(
                "Functional Decomposition",
                "Break down into discrete functions with clear interfaces",
                "Step-by-step implementation with a clear sequence",
            ),
            Approach(
                "Test-Driven Approach",
                "Define expected behavior through tests first",
                "Requirements that are clear and testable",
            ),
            Approach(
                "Example-Driven",
                "Provide concrete input/output examples",
                "Cases with a reference implementation",
            ),
        ),
        "planning": (
            Approach(
                "Top-Down Design",
                "Start with high-level architecture, then decompose",
                "Complex systems with clear boundaries",
            ),
            Approach(
                "User Story Mapping",
                "Organize around user journeys and value delivery",
                "User-facing features and workflows",
            ),
            Approach(
                "Domain-Driven Approach",
                "Model based on business domain concepts",
                "Applications heavy on business logic",
            ),
        ),
        "debugging": (
            Approach(
                "Binary Search",
                "Isolate the problem by eliminating half the code at a time",
                "Bugs whose location is unknown",
            ),
            Approach(
                "Trace Analysis",
                "Follow data flow through the system step by step",
                "Data transformation or state issues",
            ),
            Approach(
                "Hypothesis Testing",
                "Form specific hypotheses and test each one",
                "Intermittent or hard-to-reproduce bugs",
            ),
        ),
        "testing": (
            Approach(
                "Behavior-Driven",
                "Write tests as specifications of expected behavior",
                "Feature validation and acceptance testing",
            ),
            Approach(
                "Property-Based",
                "Define properties that hold for any input",
                "Edge cases and data validation",
            ),
            Approach(
                "Snapshot Testing",
                "Capture and compare output snapshots",
                "UI components and serializable outputs",
            ),
        ),
        "migration": (
            Approach(
                "Big Bang Migration",
                "Complete the migration in one release",
                "Small systems where downtime is acceptable",
            ),
            Approach(
                "Strangler Fig Pattern",
                "Replace the old system piece by piece",
                "Large systems requiring zero downtime",
            ),
            Approach(
                "Parallel Running",
                "Run both systems simultaneously and compare",
                "Critical systems requiring validation",
            ),
        ),
        "security-review": (
            Approach(
                "Threat Modeling",
                "Identify attack surfaces and threat actors first",
                "Comprehensive security assessment",
            ),
            Approach(
                "OWASP Checklist",
                "Systematic check against common vulnerabilities",
                "Web application security review",
            ),
            Approach(
                "Attack Simulation",
                "Think like an attacker and test exploitability",
                "Penetration testing mindset",
            ),
        ),
        "documentation": (
            Approach(
                "Tutorial Style",
                "Step-by-step guide with examples",
                "Onboarding and learning",
            ),
            Approach(
                "Reference Format",
                "Complete API and function reference",
                "Quick lookup by experienced users",
            ),
            Approach(
                "Conceptual Overview",
                'Explain the "why" and the mental models',
                "Understanding architecture and design decisions",
            ),
        ),
        "refinement": (),
        "summarization": (),
        "prd-generation": (),
    },
    "AlternativePhrasingGenerator",
)


class AlternativePhrasingSettings(PatternSettings):
    max_alternatives: int = Field(default=3, ge=1, le=5)


class AlternativePhrasingGenerator(BasePattern):
    """Appends ``### Alternative Approaches``.

    Impact is always medium when applied.
    """

    id = "alternative-phrasing-generator"
    name = "Alternative Phrasing Generator"
    description = "Generate alternative prompt structures for different approaches"
    applicable_intents = frozenset(
        {
            "code-generation",
            "planning",
            "debugging",
            "testing",
            "migration",
            "security-review",
            "documentation",
        }
    )
    mode = "deep"
    priority = 3
    dimension = "structure"
    settings_model = AlternativePhrasingSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if SECTION_HEADER in prompt:
            return self.unchanged(prompt, "Alternative approaches already listed")

        approaches = APPROACHES[context.intent.primary_intent]
        approaches = approaches[: self.settings(context).max_alternatives]
        if not approaches:
            return self.unchanged(prompt, "No alternative phrasings needed")

        lines = [SECTION_HEADER, ""]
        for i, approach in enumerate(approaches, start=1):
            lines += [
                f"**{i}. {approach.title}**",
                f"   {approach.description}",
                f"   Best for: {approach.best_for}",
                "",
            ]
        return self.changed(
            prompt,
            append_section(prompt, "\n".join(lines)),
            f"Generated {len(approaches)} alternative approaches",
            "medium",
        )

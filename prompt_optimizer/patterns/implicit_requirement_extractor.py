"""Surfaces requirements that a prompt implies without stating."""

import re
from typing import NamedTuple

from pydantic import Field

from prompt_optimizer.intelligence.text_utils import dedupe, has_any
from prompt_optimizer.patterns.base import BasePattern, PatternSettings, append_section
from prompt_optimizer.types import PatternContext, PatternResult

SECTION_HEADER = "### Implicit Requirements (Inferred)"

CATEGORY_LABELS = {
    "feature": "Feature",
    "infrastructure": "Infrastructure",
    "security": "Security",
    "performance": "Performance",
    "ux": "User Experience",
    "integration": "Integration",
    "business": "Business Rules",
}

_REFERENCE = re.compile(
    r"(?<!would )\b(?:like|similar to|same as)\s+([A-Za-z0-9][A-Za-z0-9 ]*)", re.I
)
_BUSINESS_RULE = re.compile(r"\b(?:must always|must never|always|never)\s+([^.!?\n]+)", re.I)


class Requirement(NamedTuple):
    text: str
    category: str


class ImpliedBy(NamedTuple):
    requirement: Requirement
    triggers: tuple[str, ...]
    unless: tuple[str, ...] = ()


IMPLIED = (
    ImpliedBy(Requirement("Mobile-responsive design required", "infrastructure"), ("mobile",)),
    ImpliedBy(
        Requirement("Real-time updates infrastructure needed", "infrastructure"),
        ("real-time", "realtime"),
    ),
    ImpliedBy(
        Requirement("Scalability architecture required", "infrastructure"),
        ("scale", "thousands", "millions"),
    ),
    ImpliedBy(
        Requirement("Offline-capable architecture needed", "infrastructure"),
        ("offline", "without internet"),
    ),
    ImpliedBy(
        Requirement("Multi-tenancy support required", "infrastructure"),
        ("multi-tenant", "multiple organizations"),
    ),
    ImpliedBy(
        Requirement("Security audit and compliance requirements", "security"),
        ("secure", "security"),
    ),
    ImpliedBy(
        Requirement("Data privacy and compliance infrastructure", "security"),
        ("gdpr", "privacy", "compliant"),
    ),
    ImpliedBy(Requirement("Data encryption requirements", "security"), ("encrypt", "sensitive")),
    ImpliedBy(
        Requirement("Performance optimization requirements", "performance"), ("fast", "quick")
    ),
    ImpliedBy(
        Requirement("Low-latency response requirements", "performance"), ("responsive", "instant")
    ),
    ImpliedBy(
        Requirement("User experience priority (simplicity mentioned)", "ux"),
        ("easy", "simple", "intuitive"),
    ),
    ImpliedBy(
        Requirement("Accessibility (WCAG) compliance required", "ux"), ("accessible", "a11y")
    ),
    ImpliedBy(
        Requirement("Notification system infrastructure", "integration"),
        ("notify", "alert", "email", "notification"),
    ),
    ImpliedBy(Requirement("Search functionality and indexing", "integration"), ("search", "find")),
    ImpliedBy(
        Requirement("Analytics and reporting infrastructure", "integration"),
        ("report", "analytics", "dashboard"),
    ),
    ImpliedBy(
        Requirement("Integration APIs and webhooks", "integration"),
        ("integrate", "connect", "sync"),
    ),
    ImpliedBy(
        Requirement("Data import/export functionality", "integration"),
        ("import", "export", "csv"),
    ),
    ImpliedBy(
        Requirement("User authentication system (implied by user roles)", "security"),
        ("user", "admin"),
        unless=("authentication",),
    ),
    ImpliedBy(
        Requirement("Data persistence/storage (implied by data operations)", "infrastructure"),
        ("save", "store", "data"),
        unless=("database",),
    ),
)

# Categories are shown as headings once more than this many appear
GROUPING_THRESHOLD = 2


class ImplicitRequirementSettings(PatternSettings):
    max_implicit_requirements: int = Field(default=10, ge=1, le=15)
    group_by_category: bool = True


class ImplicitRequirementExtractor(BasePattern):
    """Appends ``### Implicit Requirements (Inferred)``.

    Impact is always medium when applied.
    """

    id = "implicit-requirement-extractor"
    name = "Implicit Requirement Extractor"
    description = "Surfaces requirements mentioned indirectly"
    applicable_intents = frozenset({"summarization", "planning", "prd-generation"})
    mode = "deep"
    priority = 5
    dimension = "completeness"
    settings_model = ImplicitRequirementSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if SECTION_HEADER in prompt:
            return self.unchanged(prompt, "Implicit requirements already surfaced")

        settings = self.settings(context)
        requirements = extract_implicit(prompt)[: settings.max_implicit_requirements]
        if not requirements:
            return self.unchanged(prompt, "No implicit requirements detected")

        lines = [SECTION_HEADER, "The following requirements are implied by the request:", ""]
        categories = dedupe(req.category for req in requirements)
        if settings.group_by_category and len(categories) > GROUPING_THRESHOLD:
            for category in categories:
                lines.append(f"**{CATEGORY_LABELS[category]}:**")
                lines += [f"- {req.text}" for req in requirements if req.category == category]
                lines.append("")
        else:
            lines += [f"- {req.text}" for req in requirements]
            lines.append("")
        lines.append("> **Note:** Verify these inferred requirements before implementation.")

        return self.changed(
            prompt,
            append_section(prompt, "\n".join(lines)),
            f"Surfaced {len(requirements)} implicit requirements",
            "medium",
        )


def extract_implicit(prompt: str) -> list[Requirement]:
    """Collect implied requirements in a stable order, first occurrence wins.

    Args:
        prompt: Prompt text

    Returns:
        Deduplicated requirements: references, keyword implications, then business rules
    """
    found = [
        Requirement(f'Feature parity with "{m.group(1).strip()}" (implied)', "feature")
        for m in _REFERENCE.finditer(prompt)
    ]
    for rule in IMPLIED:
        if has_any(prompt, rule.triggers) and not (rule.unless and has_any(prompt, rule.unless)):
            found.append(rule.requirement)
    found += [
        Requirement(f'Business rule: "{m.group(1).strip()}" (implied constraint)', "business")
        for m in _BUSINESS_RULE.finditer(prompt)
    ]
    return dedupe(found, key=lambda req: req.text)

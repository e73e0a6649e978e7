"""Checks PRD prompts against the standard PRD section list."""

from typing import NamedTuple

from prompt_optimizer.intelligence.text_utils import matching_terms
from prompt_optimizer.patterns.base import BasePattern, PatternSettings, append_section
from prompt_optimizer.types import PatternContext, PatternResult

SECTION_HEADER = "### PRD Completeness Check"


class PRDSection(NamedTuple):
    name: str
    keywords: tuple[str, ...]
    question: str


PRD_SECTIONS = (
    PRDSection(
        "Problem Statement",
        ("problem", "issue", "pain point", "challenge", "need"),
        "What problem does this solve? What pain points are being addressed?",
    ),
    PRDSection(
        "Target Users",
        ("user", "audience", "persona", "customer", "stakeholder", "who"),
        "Who are the target users? What are their characteristics and needs?",
    ),
    PRDSection(
        "Goals & Success Metrics",
        ("goal", "objective", "success", "metric", "kpi", "measure", "outcome"),
        "What are the measurable goals? How will success be measured?",
    ),
    PRDSection(
        "Functional Requirements",
        ("feature", "requirement", "must", "should", "functionality", "capability"),
        "What specific functionality is required? List the features.",
    ),
    PRDSection(
        "Scope & Boundaries",
        ("scope", "boundary", "included", "excluded", "out of scope", "limitation"),
        "What is in scope and out of scope? What are the boundaries?",
    ),
    PRDSection(
        "Constraints & Dependencies",
        ("constraint", "dependency", "limitation", "assumption", "prerequisite"),
        "What technical or business constraints exist? What dependencies are there?",
    ),
    PRDSection(
        "Timeline & Milestones",
        ("timeline", "deadline", "milestone", "phase", "sprint", "release"),
        "What is the timeline? What are the key milestones?",
    ),
    PRDSection(
        "Risks & Mitigations",
        ("risk", "mitigation", "concern", "blocker", "issue"),
        "What are the potential risks? How will they be mitigated?",
    ),
)

BEST_PRACTICES = (
    "Be specific about user personas and their needs",
    "Include measurable success criteria",
    "Define what is NOT in scope",
    "Prioritize requirements (must-have vs nice-to-have)",
    "Consider edge cases and error scenarios",
)


class PRDStructureSettings(PatternSettings):
    show_completeness_score: bool = True
    include_best_practices: bool = True


class PRDStructureEnforcer(BasePattern):
    """Lists missing and thin PRD sections.

    A section is present with two or more keyword hits and thin with one.
    Impact is always high when applied.
    """

    id = "prd-structure-enforcer"
    name = "PRD Structure Enforcer"
    description = "Ensure PRD prompts include all necessary sections"
    applicable_intents = frozenset({"prd-generation"})
    mode = "deep"
    priority = 9
    dimension = "completeness"
    settings_model = PRDStructureSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if SECTION_HEADER in prompt:
            return self.unchanged(prompt, "PRD completeness already checked")

        present, weak, missing = classify_sections(prompt)
        if not missing:
            return self.unchanged(prompt, "PRD prompt already includes key sections")

        settings = self.settings(context)
        lines = [SECTION_HEADER, ""]
        if settings.show_completeness_score:
            coverage = round((len(present) + len(weak) * 0.5) / len(PRD_SECTIONS) * 100)
            lines += [f"**Current coverage:** {coverage}%", ""]
        lines += ["**Missing sections to consider:**", ""]
        for section in missing:
            lines += [f"#### {section.name}", f"_{section.question}_", ""]
        if weak:
            lines += ["**Sections to expand:**", ""]
            lines += [f"- **{section.name}**: {section.question}" for section in weak]
            lines.append("")
        if settings.include_best_practices:
            lines += ["---", "", "**PRD Best Practices:**"]
            lines += [f"- {practice}" for practice in BEST_PRACTICES]

        return self.changed(
            prompt,
            append_section(prompt, "\n".join(lines)),
            f"Added {len(missing)} PRD sections for consideration",
            "high",
        )


def classify_sections(
    prompt: str,
) -> tuple[list[PRDSection], list[PRDSection], list[PRDSection]]:
    """Split PRD sections into (present, weak, missing) by keyword hits."""
    present, weak, missing = [], [], []
    for section in PRD_SECTIONS:
        hits = len(matching_terms(prompt, section.keywords))
        if hits >= 2:
            present.append(section)
        elif hits == 1:
            weak.append(section)
        else:
            missing.append(section)
    return present, weak, missing

"""Lists what has to be in place before the task can start."""

import re

from pydantic import Field

from prompt_optimizer.intelligence.text_utils import dedupe
from prompt_optimizer.patterns.base import (
    BasePattern,
    PatternSettings,
    append_section,
    check_intent_map,
)
from prompt_optimizer.types import PatternContext, PatternResult

PREREQUISITE_INDICATORS = (
    "prerequisite",
    "requirements:",
    "depends on",
    "dependency",
    "requires",
    "before starting",
    "first ensure",
    "make sure",
    "assuming",
    "given that",
    "setup:",
    "installation:",
    "configuration:",
)

TECHNOLOGIES: dict[str, re.Pattern[str]] = {
    "react": re.compile(r"\b(?:react|jsx|tsx|component|hook|usestate|useeffect)\b", re.I),
    "node": re.compile(r"\b(?:node|node\.js|express|koa|fastify|npm|yarn|pnpm)\b", re.I),
    "python": re.compile(r"\b(?:python|django|flask|fastapi|pip|pytest)\b", re.I),
    "typescript": re.compile(r"\b(?:typescript|tsx|tsconfig)\b", re.I),
    "database": re.compile(
        r"\b(?:database|db|sql|postgres|mysql|mongo|redis|prisma|sequelize)\b", re.I
    ),
    "api": re.compile(r"\b(?:api|rest|graphql|endpoint|fetch|axios|http)\b", re.I),
    "testing": re.compile(r"\b(?:test|tests|jest|vitest|mocha|cypress|playwright)\b", re.I),
    "docker": re.compile(r"\b(?:docker|container|kubernetes|k8s|compose)\b", re.I),
    "aws": re.compile(r"\b(?:aws|s3|lambda|ec2|dynamodb|cloudformation)\b", re.I),
    "git": re.compile(r"\b(?:git|commit|branch|merge|pull request)\b", re.I),
}

TECH_PREREQUISITES: dict[str, tuple[str, ...]] = {
    "react": ("Node.js >= 18 installed", "React project initialized (Vite or Next.js)"),
    "node": ("Node.js >= 18 installed", "package.json initialized"),
    "python": ("Python 3 interpreter installed", "Virtual environment created"),
    "typescript": ("TypeScript installed", "tsconfig.json configured"),
    "database": ("Database server running", "Database connection credentials"),
    "api": ("API endpoint accessible", "Authentication tokens or keys available"),
    "testing": ("Test framework installed", "Test configuration files present"),
    "docker": ("Docker installed and running", "Container registry access"),
    "aws": ("AWS CLI installed and configured", "IAM credentials scoped to the task"),
    "git": ("Repository cloned", "Working branch checked out"),
}

# Technologies contribute this many prerequisites each
PER_TECHNOLOGY = 2

INTENT_PREREQUISITES: dict[str, tuple[str, ...]] = check_intent_map(
    {
        "code-generation": (
            "Development environment set up",
            "Required dependencies installed",
            "Coding standards or style guide available",
        ),
        "migration": (
            "Backup of existing data and code",
            "Migration plan documented",
            "Rollback strategy defined",
            "Downtime window scheduled (if applicable)",
        ),
        "testing": (
            "Code under test is implemented",
            "Test data and fixtures available",
            "CI pipeline configured for automated runs",
        ),
        "debugging": (
            "Bug is reproducible",
            "Relevant logs available",
            "Debug tools configured",
            "Access to the failing environment",
        ),
        "planning": (
            "Requirements documented",
            "Stakeholder input collected",
            "Timeline and constraints known",
        ),
        "refinement": (),
        "documentation": (),
        "security-review": (),
        "summarization": (),
        "prd-generation": (),
    },
    "PrerequisiteIdentifier",
)


class PrerequisiteSettings(PatternSettings):
    max_prerequisites: int = Field(default=8, ge=1, le=15)
    max_technologies: int = Field(default=3, ge=1, le=5)


class PrerequisiteIdentifier(BasePattern):
    """Appends ``## Prerequisites`` as a checklist.

    Impact is always medium when applied.
    """

    id = "prerequisite-identifier"
    name = "Prerequisite Identifier"
    description = "Identifies and documents prerequisites and dependencies for task execution"
    applicable_intents = frozenset(
        {"code-generation", "planning", "migration", "testing", "debugging"}
    )
    mode = "deep"
    priority = 6
    dimension = "completeness"
    settings_model = PrerequisiteSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        lower = prompt.lower()
        if any(indicator in lower for indicator in PREREQUISITE_INDICATORS):
            return self.unchanged(prompt, "Prerequisites already specified")

        settings = self.settings(context)
        intent = context.intent.primary_intent
        technologies = detect_technologies(prompt)[: settings.max_technologies]
        prerequisites = list(INTENT_PREREQUISITES[intent])
        for tech in technologies:
            prerequisites += TECH_PREREQUISITES[tech][:PER_TECHNOLOGY]
        prerequisites = dedupe(prerequisites)[: settings.max_prerequisites]
        if not prerequisites:
            return self.unchanged(prompt, "No specific prerequisites detected")

        section = "\n".join(
            [
                "## Prerequisites",
                "Before starting this task, ensure:",
                *(f"- [ ] {item}" for item in prerequisites),
            ]
        )
        subject = ", ".join(technologies) or intent
        return self.changed(
            prompt,
            append_section(prompt, section),
            f"Added {len(prerequisites)} prerequisites for {subject}",
            "medium",
        )


def detect_technologies(prompt: str) -> list[str]:
    return [tech for tech, detector in TECHNOLOGIES.items() if detector.search(prompt)]

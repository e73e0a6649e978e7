"""Surfaces technical and external dependencies in planning prompts."""

from typing import NamedTuple

from prompt_optimizer.intelligence.text_utils import has_any
from prompt_optimizer.patterns.base import BasePattern, PatternSettings, append_section
from prompt_optimizer.types import PatternContext, PatternResult

DOCUMENTED_MARKERS = (
    "dependencies",
    "depends on",
    "prerequisite",
    "requires",
    "blocked by",
    "blocker",
    "external service",
    "third-party",
    "integration with",
)


class Dependency(NamedTuple):
    label: str
    triggers: tuple[str, ...]
    technical: bool


DEPENDENCIES = (
    Dependency("API availability and documentation", ("api",), True),
    Dependency("Database schema and migrations", ("database", "db"), True),
    Dependency("Authentication system integration", ("authentication", "auth"), True),
    Dependency("Payment provider integration", ("payment", "stripe", "billing"), True),
    Dependency("Email/notification service", ("email", "notification"), True),
    Dependency("File storage service", ("storage", "s3", "file"), True),
    Dependency("Search infrastructure", ("search", "elasticsearch"), True),
    Dependency("Analytics platform", ("analytics", "tracking"), False),
    Dependency("CI/CD pipeline", ("ci/cd", "deploy", "deployment"), True),
    Dependency("Caching infrastructure", ("cache", "redis"), True),
    Dependency("Third-party service availability", ("external", "vendor"), False),
    Dependency("Cross-team coordination", ("team", "collaboration"), False),
    Dependency("Stakeholder approvals", ("approval", "sign-off"), False),
    Dependency("Legal/compliance review", ("legal", "compliance"), False),
    Dependency("Design specifications", ("design", "ui", "ux"), False),
)


class DependencySettings(PatternSettings):
    categorize_dependencies: bool = True


class DependencyIdentifier(BasePattern):
    """Appends a ``### Dependencies`` section.

    Impact is always medium when applied.
    """

    id = "dependency-identifier"
    name = "Dependency Identifier"
    description = "Identifies technical and external dependencies"
    applicable_intents = frozenset({"prd-generation", "planning", "migration"})
    mode = "deep"
    priority = 5
    dimension = "completeness"
    settings_model = DependencySettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        lower = prompt.lower()
        if any(marker in lower for marker in DOCUMENTED_MARKERS):
            return self.unchanged(prompt, "Dependencies already documented")

        found = [dep for dep in DEPENDENCIES if has_any(prompt, dep.triggers)]
        if not found:
            return self.unchanged(prompt, "No clear dependencies identified")

        lines = ["### Dependencies", ""]
        if self.settings(context).categorize_dependencies:
            for title, technical in (("Technical", True), ("External", False)):
                group = [dep.label for dep in found if dep.technical is technical]
                if group:
                    lines += [f"**{title} Dependencies:**", *(f"- {label}" for label in group), ""]
        else:
            lines += [*(f"- {dep.label}" for dep in found), ""]
        lines.append("**Dependency Status:** [track the status of each dependency]")

        return self.changed(
            prompt,
            append_section(prompt, "\n".join(lines)),
            f"Identified {len(found)} dependencies (technical/external)",
            "medium",
        )

"""Separates must-have requirements from nice-to-have ones."""

import re

from prompt_optimizer.intelligence.text_utils import has_any
from prompt_optimizer.patterns.base import BasePattern, PatternSettings, append_section
from prompt_optimizer.types import PatternContext, PatternResult

FEATURE_KEYWORDS = (
    "feature",
    "requirement",
    "functionality",
    "capability",
    "should",
    "must",
    "need",
    "want",
    "implement",
)

PRIORITY_KEYWORDS = (
    "must-have",
    "must have",
    "nice-to-have",
    "nice to have",
    "p0",
    "p1",
    "p2",
    "priority:",
    "mvp",
    "phase 1",
    "phase 2",
    "critical",
    "optional",
)

_FEATURE_LIST = re.compile(
    r"^[#*\s]*(?:features?|requirements?|what we(?:'re| are) building)\**:?\**[ \t]*\n",
    re.I | re.M,
)

PLACEHOLDER = """### Requirement Priorities
**Must-Have (MVP):**
- [Core features required for launch]

**Nice-to-Have (Post-MVP):**
- [Features to add after initial release]"""


class RequirementPrioritizerSettings(PatternSettings):
    use_priority_labels: bool = True


class RequirementPrioritizer(BasePattern):
    """Adds a priority framework, or an empty priority skeleton when no feature list exists.

    Impact is always high when applied.
    """

    id = "requirement-prioritizer"
    name = "Requirement Prioritizer"
    description = "Separates must-have from nice-to-have requirements"
    applicable_intents = frozenset({"prd-generation", "planning"})
    mode = "deep"
    priority = 7
    dimension = "structure"
    settings_model = RequirementPrioritizerSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if not has_any(prompt, FEATURE_KEYWORDS):
            return self.unchanged(prompt, "No feature content to prioritize")
        if any(keyword in prompt.lower() for keyword in PRIORITY_KEYWORDS):
            return self.unchanged(prompt, "Requirements already prioritized")

        if _FEATURE_LIST.search(prompt):
            section = self.framework(self.settings(context).use_priority_labels)
        else:
            section = PLACEHOLDER
        return self.changed(
            prompt,
            append_section(prompt, section),
            "Added requirement prioritization (must-have vs nice-to-have)",
            "high",
        )

    def framework(self, labels: bool) -> str:
        tiers = (
            ("Must-Have", "P0", "Required for MVP, blocking issues"),
            ("Should-Have", "P1", "Important but not blocking"),
            ("Nice-to-Have", "P2", "Enhancements for future iterations"),
        )
        lines = ["> **Priority Framework:** Categorize the features above as:"]
        for name, label, meaning in tiers:
            title = f"{name} ({label})" if labels else name
            lines.append(f"> - **{title}:** {meaning}")
        return "\n".join(lines)

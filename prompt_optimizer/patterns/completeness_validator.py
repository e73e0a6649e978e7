"""Checks for the five elements a complete prompt carries and lists what is missing."""

from prompt_optimizer.intelligence.text_utils import has_any
from prompt_optimizer.patterns.base import (
    BasePattern,
    PatternSettings,
    append_section,
    impact_for,
)
from prompt_optimizer.types import PatternContext, PatternResult

CHECK_MARKER = "**Completeness Check**"

# element -> (keywords that show it is present, line asking for it)
ELEMENTS: dict[str, tuple[tuple[str, ...], str]] = {
    "objective": (
        ("objective", "goal", "purpose", "need to", "want to", "trying to", "aim", "intend"),
        "- **Objective**: What is the primary goal? What problem are you solving?",
    ),
    "tech-stack": (
        (
            "javascript", "typescript", "python", "java", "rust", "go", "php", "ruby", "swift",
            "kotlin", "c++", "c#", "react", "vue", "angular", "svelte", "next.js", "nuxt",
            "express", "fastapi", "django", "flask", "spring", "rails", "postgres", "mysql",
            "mongodb", "redis", "sqlite", "docker", "kubernetes", "aws", "azure", "gcp",
            "tech stack", "technology", "framework", "library", "using", "built with",
        ),
        "- **Tech Stack**: Which technologies or frameworks? (e.g., React, Node.js, PostgreSQL)",
    ),
    "success-criteria": (
        (
            "success", "criteria", "measure", "metric", "kpi", "should work", "expected to",
            "result in", "achieve",
        ),
        "- **Success Criteria**: How will you know it works? What metrics matter?",
    ),
    "constraints": (
        (
            "constraint", "limit", "limitation", "must not", "cannot", "should not", "avoid",
            "within", "budget", "deadline",
        ),
        "- **Constraints**: Any limitations on time, budget, performance or compatibility?",
    ),
    "output-format": (
        (
            "output", "format", "return", "result", "deliverable", "component", "function",
            "class", "api", "endpoint", "file", "document", "report",
        ),
        "- **Expected Output**: What should the result look like (component, API, file)?",
    ),
}


class CompletenessSettings(PatternSettings):
    show_score: bool = True


class CompletenessValidator(BasePattern):
    """Appends a completeness check listing missing elements.

    Impact uses its own cutoffs over the missing count: 3+ high, 2 medium.
    """

    id = "completeness-validator"
    name = "Completeness Validator"
    description = "Ensures all necessary requirements are present"
    applicable_intents = frozenset({"code-generation", "planning", "refinement"})
    mode = "both"
    priority = 6
    dimension = "completeness"
    settings_model = CompletenessSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if CHECK_MARKER in prompt:
            return self.unchanged(prompt, "Completeness already checked")

        missing = self.find_missing(prompt)
        if not missing:
            return self.unchanged(prompt, "All required elements present")

        total = len(ELEMENTS)
        present = total - len(missing)
        score = round(present / total * 100)

        lines = ["---", ""]
        if self.settings(context).show_score:
            lines += [f"{CHECK_MARKER}: {score}% ({present}/{total} elements present)", ""]
        else:
            lines += [CHECK_MARKER, ""]
        lines += ["**Missing Information**:", ""]
        lines += [ELEMENTS[element][1] for element in missing]

        enhanced = append_section(prompt, "\n".join(lines))
        return self.changed(
            prompt,
            enhanced,
            f"Added {len(missing)} missing element prompts ({score}% complete)",
            "high" if len(missing) >= 3 else impact_for(len(missing)),
        )

    def find_missing(self, prompt: str) -> list[str]:
        """Return the element names with no supporting keyword in the prompt."""
        return [name for name, (keywords, _) in ELEMENTS.items() if not has_any(prompt, keywords)]

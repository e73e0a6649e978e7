"""Asks for an explicit output format when none is given."""

from pydantic import Field

from prompt_optimizer.patterns.base import (
    BasePattern,
    PatternSettings,
    append_section,
    check_intent_map,
)
from prompt_optimizer.types import PatternContext, PatternResult

FORMAT_INDICATORS = (
    "output format",
    "expected output",
    "return format",
    "response format",
    "should return",
    "must return",
    "will output",
    "produces",
    "generates",
    "in the format",
    "formatted as",
    "as json",
    "as markdown",
    "as yaml",
    "as xml",
    "as csv",
    "as html",
    "code block",
    "typescript",
    "javascript",
    "python",
    "react component",
    "vue component",
)

INTENT_FORMATS: dict[str, tuple[str, ...]] = check_intent_map(
    {
        "code-generation": (
            "Function with type annotations",
            "Component with a props interface",
            "Module with exports",
            "Class with methods",
            "API endpoint implementation",
        ),
        "planning": (
            "Markdown task list with checkboxes",
            "Phased implementation plan",
            "Architecture decision record (ADR)",
            "Technical specification document",
        ),
        "refinement": ("Refactored code", "Optimized implementation", "Before/after comparison"),
        "debugging": (
            "Root cause analysis",
            "Fix with explanation",
            "Code diff/patch",
            "Step-by-step debugging guide",
        ),
        "documentation": (
            "Docstrings or doc comments",
            "README.md section",
            "API documentation (OpenAPI/Swagger)",
            "Code comments",
            "Tutorial/guide format",
        ),
        "testing": (
            "Test suite for the project's test runner",
            "Test file grouped by behavior",
            "Test cases with assertions",
            "Mock implementations",
        ),
        "migration": ("Migration script", "Step-by-step migration guide", "Compatibility layer"),
        "security-review": (
            "Security audit report",
            "Vulnerability list with severity",
            "Remediation recommendations",
        ),
        "summarization": (
            "Bullet-point summary",
            "One-paragraph abstract",
            "Key decisions and open questions",
        ),
        "prd-generation": (
            "Full PRD document with sections",
            "Quick PRD (2-3 paragraphs)",
            "User story format",
            "Requirements matrix",
        ),
    },
    "OutputFormatEnforcer",
)


class OutputFormatSettings(PatternSettings):
    max_suggestions: int = Field(default=5, ge=1, le=8)


class OutputFormatEnforcer(BasePattern):
    """Appends ``## Expected Output Format`` with intent-specific options.

    Impact is always medium when applied.
    """

    id = "output-format-enforcer"
    name = "Output Format Enforcer"
    description = "Adds explicit output format specifications for agent clarity"
    applicable_intents = frozenset(
        {"code-generation", "planning", "documentation", "prd-generation", "testing"}
    )
    mode = "both"
    priority = 7
    dimension = "actionability"
    settings_model = OutputFormatSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        lower = prompt.lower()
        if any(indicator in lower for indicator in FORMAT_INDICATORS):
            return self.unchanged(prompt, "Output format already specified")

        intent = context.intent.primary_intent
        suggestions = INTENT_FORMATS[intent][: self.settings(context).max_suggestions]
        section = "\n".join(
            [
                "## Expected Output Format",
                "",
                "Choose the output format:",
                *(f"- {suggestion}" for suggestion in suggestions),
            ]
        )
        return self.changed(
            prompt,
            append_section(prompt, section),
            f"Added output format guidance for {intent} intent",
            "medium",
        )

"""Adds measurable completion criteria per intent."""

from prompt_optimizer.patterns.base import (
    BasePattern,
    PatternSettings,
    append_section,
    check_intent_map,
    impact_for,
)
from prompt_optimizer.types import PatternContext, PatternResult

SUCCESS_INDICATORS = (
    "success criteria",
    "acceptance criteria",
    "done when",
    "complete when",
    "must pass",
    "should pass",
    "test coverage",
    "meets requirements",
    "criteria:",
    "requirements:",
    "must have",
    "must include",
    "validation:",
    "verify that",
    "ensure that",
    "should be able to",
)

INTENT_CRITERIA: dict[str, tuple[str, ...]] = check_intent_map(
    {
        "code-generation": (
            "Code compiles/transpiles without errors",
            "All tests pass (if tests are written)",
            "Follows project coding standards",
            "No type or linting errors",
            "Functionality matches requirements",
            "Edge cases are handled",
        ),
        "planning": (
            "All requirements are addressed",
            "Tasks are atomic and actionable",
            "Dependencies are identified",
            "Timeline and phases are realistic",
            "Risks are documented",
        ),
        "refinement": (
            "Improved metrics (state which: performance, readability)",
            "No regression in functionality",
            "Tests still pass",
            "Code review approved",
        ),
        "debugging": (
            "Bug is reproducible and root cause identified",
            "Fix addresses root cause, not symptom",
            "No new bugs introduced",
            "Regression test added",
        ),
        "documentation": (
            "All public APIs are documented",
            "Examples are provided",
            "Instructions are testable",
            "No broken links",
        ),
        "testing": (
            "Test coverage meets threshold (e.g., >80%)",
            "All critical paths tested",
            "Edge cases covered",
            "Tests are deterministic (no flaky tests)",
            "Test execution time is reasonable",
        ),
        "migration": (
            "All features work as before",
            "No data loss",
            "Performance is not degraded",
            "Rollback plan exists",
            "Documentation is updated",
        ),
        "security-review": (
            "All OWASP Top 10 categories checked",
            "Vulnerabilities are prioritized",
            "Remediation steps are provided",
            "No false positives",
        ),
        "summarization": (
            "Key points are captured",
            "Decisions and open questions are listed",
            "Summary is shorter than the source",
        ),
        "prd-generation": (
            "All sections are complete",
            "Requirements are unambiguous",
            "Technical constraints are specified",
            "Success metrics are measurable",
            "Scope is clearly defined",
        ),
    },
    "SuccessCriteriaEnforcer",
)


class SuccessCriteriaSettings(PatternSettings):
    show_checkboxes: bool = True


class SuccessCriteriaEnforcer(BasePattern):
    id = "success-criteria-enforcer"
    name = "Success Criteria Enforcer"
    description = "Adds measurable success criteria for task completion validation"
    applicable_intents = frozenset(
        {
            "code-generation",
            "planning",
            "refinement",
            "debugging",
            "testing",
            "migration",
            "prd-generation",
        }
    )
    mode = "both"
    priority = 7
    dimension = "completeness"
    settings_model = SuccessCriteriaSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        lower = prompt.lower()
        if any(indicator in lower for indicator in SUCCESS_INDICATORS):
            return self.unchanged(prompt, "Success criteria already specified")

        intent = context.intent.primary_intent
        criteria = INTENT_CRITERIA[intent]
        marker = "- [ ]" if self.settings(context).show_checkboxes else "-"
        section = "\n".join(
            [
                "## Success Criteria",
                "",
                "This task is complete when:",
                *(f"{marker} {criterion}" for criterion in criteria),
            ]
        )
        return self.changed(
            prompt,
            append_section(prompt, section),
            f"Added {len(criteria)} measurable success criteria for {intent}",
            impact_for(len(criteria)),
        )

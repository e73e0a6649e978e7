"""Builds a verification checklist for finished work."""

from typing import NamedTuple

from pydantic import Field

from prompt_optimizer.intelligence.text_utils import dedupe, has_any
from prompt_optimizer.patterns.base import (
    BasePattern,
    PatternSettings,
    append_section,
    check_intent_map,
    impact_for,
)
from prompt_optimizer.types import PatternContext, PatternResult

SECTION_HEADER = "### Validation Checklist"

# Items are grouped under category headings once more than this many categories appear
GROUPING_THRESHOLD = 3

_API = ("api", "endpoint", "route")
_UI = ("ui", "component", "form", "page")
_TESTS = ("test", "coverage")
_PAYMENTS = ("payment", "transaction", "checkout")
_MESSAGING = ("email", "notification", "message")
_FILES = ("upload", "file", "image")
_DATABASE = ("database", "db", "query", "schema")


class ChecklistItem(NamedTuple):
    description: str
    category: str
    triggers: tuple[str, ...] = ()


INTENT_ITEMS: dict[str, tuple[ChecklistItem, ...]] = check_intent_map(
    {
        "code-generation": (
            ChecklistItem("Code compiles and runs without errors", "functionality"),
            ChecklistItem("All requirements from the prompt are implemented", "functionality"),
            ChecklistItem("Edge cases are handled gracefully", "robustness"),
            ChecklistItem("API returns the documented status codes", "functionality", _API),
            ChecklistItem("API rejects invalid requests with clear errors", "robustness", _API),
            ChecklistItem("UI renders on mobile and desktop screen sizes", "ux", _UI),
            ChecklistItem("Keyboard navigation reaches every control", "accessibility", _UI),
            ChecklistItem("Unit tests pass", "testing", _TESTS),
            ChecklistItem("Test coverage meets requirements", "testing", _TESTS),
        ),
        "testing": (
            ChecklistItem("All test cases pass consistently", "functionality"),
            ChecklistItem("Tests are independent (no shared state)", "quality"),
            ChecklistItem("Edge cases have dedicated tests", "coverage"),
            ChecklistItem("Error scenarios are tested", "coverage"),
            ChecklistItem("Test suite runs in under 5 minutes", "performance"),
            ChecklistItem("Test names describe the behavior under test", "maintainability"),
            ChecklistItem("Mocks and stubs are scoped to single tests", "quality"),
        ),
        "migration": (
            ChecklistItem("Data migrated intact (spot check sample records)", "data"),
            ChecklistItem("All functionality works in the new system", "functionality"),
            ChecklistItem("Performance is equal or better", "performance"),
            ChecklistItem("Rollback procedure tested and documented", "safety"),
            ChecklistItem("No data loss during migration", "data"),
            ChecklistItem("Integrations with other systems still work", "integration"),
            ChecklistItem("Users can perform all previous workflows", "functionality"),
        ),
        "security-review": (
            ChecklistItem("Authentication required for protected resources", "auth"),
            ChecklistItem("Authorization checks prevent privilege escalation", "auth"),
            ChecklistItem("User input is sanitized (no injection vulnerabilities)", "input"),
            ChecklistItem("Sensitive data is encrypted in transit (HTTPS)", "data"),
            ChecklistItem("Sensitive data is encrypted at rest", "data"),
            ChecklistItem("Error messages do not leak sensitive information", "info-disclosure"),
            ChecklistItem("Rate limiting prevents abuse", "protection"),
            ChecklistItem("Security headers are set on every response", "headers"),
        ),
        "debugging": (
            ChecklistItem("Root cause identified and documented", "analysis"),
            ChecklistItem("Bug is reproducible before the fix", "verification"),
            ChecklistItem("Fix resolves the original issue", "functionality"),
            ChecklistItem("Fix does not introduce regressions", "regression"),
            ChecklistItem("Related areas tested for side effects", "regression"),
            ChecklistItem("Test added to prevent recurrence", "prevention"),
        ),
        "planning": (),
        "refinement": (),
        "documentation": (),
        "summarization": (),
        "prd-generation": (),
    },
    "ValidationChecklistCreator",
)

DOMAIN_ITEMS = (
    ChecklistItem("Payment processing succeeds end to end", "functionality", _PAYMENTS),
    ChecklistItem("Duplicate transactions prevented", "safety", _PAYMENTS),
    ChecklistItem("Notifications reach the intended recipients", "functionality", _MESSAGING),
    ChecklistItem("Notification content matches the template", "content", _MESSAGING),
    ChecklistItem("File uploads work for valid files", "functionality", _FILES),
    ChecklistItem("Oversized or invalid files are rejected", "validation", _FILES),
    ChecklistItem("Database queries stay within latency targets", "performance", _DATABASE),
    ChecklistItem("Database constraints are enforced", "data", _DATABASE),
)

GENERAL_ITEMS = (
    ChecklistItem("Code follows project conventions and style guide", "quality"),
    ChecklistItem("No console errors or warnings", "quality"),
    ChecklistItem("Documentation updated for changed behavior", "documentation"),
)


class ValidationChecklistSettings(PatternSettings):
    max_checklist_items: int = Field(default=12, ge=5, le=20)
    group_by_category: bool = True


class ValidationChecklistCreator(BasePattern):
    id = "validation-checklist-creator"
    name = "Validation Checklist Creator"
    description = "Create implementation validation checklist for verification"
    applicable_intents = frozenset(
        {"code-generation", "testing", "migration", "security-review", "debugging"}
    )
    mode = "deep"
    priority = 3
    run_after = ("success-criteria-enforcer",)
    dimension = "actionability"
    settings_model = ValidationChecklistSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if SECTION_HEADER in prompt:
            return self.unchanged(prompt, "Validation checklist already present")

        settings = self.settings(context)
        candidates = (*INTENT_ITEMS[context.intent.primary_intent], *DOMAIN_ITEMS, *GENERAL_ITEMS)
        # Triggers read the original request, not sections added earlier in the run
        source = context.original_prompt
        items = dedupe(
            item for item in candidates if not item.triggers or has_any(source, item.triggers)
        )[: settings.max_checklist_items]
        if not items:
            return self.unchanged(prompt, "No validation checklist needed")

        section = render_checklist(items, settings.group_by_category)
        return self.changed(
            prompt,
            append_section(prompt, section),
            f"Created validation checklist with {len(items)} items",
            impact_for(len(items)),
        )


def render_checklist(items: list[ChecklistItem], group_by_category: bool = True) -> str:
    lines = [SECTION_HEADER, "", "Before considering this task complete, verify:"]
    categories = dedupe(item.category for item in items)
    if group_by_category and len(categories) > GROUPING_THRESHOLD:
        for category in categories:
            lines += ["", f"**{category.replace('-', ' ').capitalize()}:**"]
            lines += [f"- [ ] {item.description}" for item in items if item.category == category]
    else:
        lines.append("")
        lines += [f"- [ ] {item.description}" for item in items]
    return "\n".join(lines)

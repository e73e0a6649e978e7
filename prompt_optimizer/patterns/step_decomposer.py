"""Breaks multi-part prompts into numbered implementation steps."""

import re
from collections.abc import Callable

from pydantic import Field

from prompt_optimizer.intelligence.text_utils import count_words, has_any
from prompt_optimizer.patterns.base import (
    BasePattern,
    PatternSettings,
    append_section,
    check_intent_map,
)
from prompt_optimizer.types import PatternContext, PatternResult

_MULTIPLE_ACTIONS = re.compile(r"\b(?:and|then|also|after|next|finally|additionally)\b", re.I)
_LIST_ITEM = re.compile(r"[-•*]\s+")
_EXISTING_STEPS = (
    re.compile(r"step\s*[1-9]", re.I),
    re.compile(r"^\s*[1-9]\.\s+", re.M),
    re.compile(r"first[\s,].*second[\s,]", re.I | re.S),
    re.compile(r"phase\s*[1-9]", re.I),
)

GENERIC_STEPS = (
    "Understand and clarify requirements",
    "Plan approach and identify dependencies",
    "Execute main task",
    "Validate results",
    "Document and finalize",
)


def _code_generation(lower: str) -> tuple[str, ...]:
    if has_any(lower, ("component", "ui", "interface")):
        return (
            "Define component interface and props",
            "Implement core component logic",
            "Add styling and responsive design",
            "Add error handling and edge cases",
            "Write unit tests",
        )
    if has_any(lower, ("api", "endpoint", "route")):
        return (
            "Define API contract (request/response)",
            "Implement endpoint handler",
            "Add input validation",
            "Implement error handling",
            "Add authentication/authorization where required",
            "Write tests",
        )
    if has_any(lower, ("function", "utility", "helper")):
        return (
            "Define function signature and types",
            "Implement core logic",
            "Handle edge cases",
            "Add documentation",
            "Write tests",
        )
    return (
        "Understand requirements and define interface",
        "Implement core functionality",
        "Add error handling",
        "Test and validate",
    )


def _fixed(steps: tuple[str, ...]) -> Callable[[str], tuple[str, ...]]:
    return lambda lower: steps


INTENT_STEPS: dict[str, Callable[[str], tuple[str, ...]]] = check_intent_map(
    {
        "code-generation": _code_generation,
        "planning": _fixed(
            (
                "Clarify goals and success criteria",
                "Identify key components and dependencies",
                "Define architecture and data flow",
                "Break down into implementable tasks",
                "Identify risks and mitigation strategies",
                "Create timeline and milestones",
            )
        ),
        "migration": _fixed(
            (
                "Assess current state and document existing behavior",
                "Define target state and requirements",
                "Create migration plan with rollback strategy",
                "Set up parallel environment for testing",
                "Migrate data in stages",
                "Validate functionality and performance",
                "Switch traffic and monitor",
                "Decommission old system after stabilization",
            )
        ),
        "testing": _fixed(
            (
                "Identify test cases from requirements",
                "Set up test environment and fixtures",
                "Write happy path tests",
                "Write edge case tests",
                "Write error scenario tests",
                "Verify coverage meets requirements",
                "Review and refactor tests for maintainability",
            )
        ),
        "debugging": _fixed(
            (
                "Reproduce the bug consistently",
                "Gather error logs and stack traces",
                "Isolate the problem area",
                "Form hypothesis about root cause",
                "Test hypothesis with targeted changes",
                "Implement fix",
                "Verify fix resolves issue without regression",
                "Add test to prevent recurrence",
            )
        ),
        "documentation": _fixed(
            (
                "Identify target audience and their needs",
                "Outline document structure",
                "Write introduction and overview",
                "Document main content with examples",
                "Add troubleshooting/FAQ section",
                "Review for accuracy and clarity",
            )
        ),
        "refinement": _fixed(GENERIC_STEPS),
        "security-review": _fixed(GENERIC_STEPS),
        "summarization": _fixed(GENERIC_STEPS),
        "prd-generation": _fixed(GENERIC_STEPS),
    },
    "StepDecomposer",
)


class StepDecomposerSettings(PatternSettings):
    min_words_for_decomposition: int = Field(default=100, ge=50, le=500)


class StepDecomposer(BasePattern):
    """Appends ``### Implementation Steps`` to multi-part prompts.

    Complexity is judged on the original prompt so sections added earlier in
    the pipeline do not count as extra actions. Impact is always high when applied.
    """

    id = "step-decomposer"
    name = "Step-by-Step Decomposer"
    description = "Break complex prompts into clear sequential steps"
    applicable_intents = frozenset(
        {"code-generation", "planning", "migration", "testing", "debugging", "documentation"}
    )
    mode = "both"
    priority = 5
    dimension = "structure"
    settings_model = StepDecomposerSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        settings = self.settings(context)
        if not self.needs_decomposition(
            context.original_prompt, settings.min_words_for_decomposition
        ):
            return self.unchanged(prompt, "Prompt is simple enough, no decomposition needed")
        if any(pattern.search(prompt) for pattern in _EXISTING_STEPS):
            return self.unchanged(prompt, "Prompt already has step structure")

        steps = INTENT_STEPS[context.intent.primary_intent](prompt.lower())
        if len(steps) < 2:
            return self.unchanged(prompt, "Could not identify multiple steps")

        section = "\n".join(
            ["### Implementation Steps", ""]
            + [f"{i}. {step}" for i, step in enumerate(steps, start=1)]
        )
        return self.changed(
            prompt,
            append_section(prompt, section),
            f"Decomposed into {len(steps)} sequential steps",
            "high",
        )

    def needs_decomposition(self, prompt: str, min_words: int) -> bool:
        return (
            count_words(prompt) > min_words
            or _MULTIPLE_ACTIONS.search(prompt) is not None
            or len(_LIST_ITEM.findall(prompt)) >= 2
        )

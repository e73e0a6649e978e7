"""Asks for the concrete context a prompt leaves out (files, versions, environments)."""

import re
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

SECTION_HEADER = "### Context Needed"

_FILE_REFERENCE = re.compile(
    r"\w\.(?:ts|js|py|java|go|rb|rs)\b|/src\b|/lib\b|\bfiles?\b|\bpaths?\b", re.I
)
_VERSION = re.compile(
    r"\bv?\d+\.\d+(?:\.\d+)?|\b(?:react|vue|angular|node|python|java)\s*\d+", re.I
)
_ERROR_DETAILS = re.compile(
    r"\b(?:error|exception):|\bstack\b|\btrace(?:back)?\b|\bat line\b|\w+Error\b", re.I
)
_COVERAGE = re.compile(r"\bcoverage\b|\bpercent\b|\d+\s*%|\ball cases\b|\bedge cases?\b", re.I)


class ContextGap(NamedTuple):
    """Gap reported when any ``when`` term is present and no ``unless`` term is."""

    kind: str
    question: str
    suggestion: str
    when: tuple[str, ...] = ()
    unless: tuple[str, ...] = ()

    def holds(self, prompt: str) -> bool:
        if self.when and not has_any(prompt, self.when):
            return False
        return not (self.unless and has_any(prompt, self.unless))


ENVIRONMENT_GAP = ContextGap(
    "environment",
    "Which environment is this for?",
    "Specify environment (development, staging, production)",
    when=("deploy", "config", "env", "environment"),
    unless=("production", "development", "staging", "local", "test", "ci"),
)

_REVIEW_GAPS = (
    ContextGap(
        "review-focus",
        "What aspects should the review focus on?",
        "Specify: security, performance, readability, best practices, or all",
        unless=("performance", "security", "maintainability", "readability", "bug",
                "best practice"),
    ),
    ContextGap(
        "change-context",
        "What is the purpose of these changes?",
        "Explain what the code is meant to accomplish",
        unless=("pr", "pull request", "change", "diff", "commit", "modification"),
    ),
    ContextGap(
        "refactoring-goal",
        "What is the goal of this refactoring?",
        "Specify: improve readability, reduce duplication, improve testability",
        unless=("goal", "improve", "simplify", "extract", "consolidate", "split"),
    ),
    ContextGap(
        "constraints",
        "Are there any constraints or backward compatibility requirements?",
        "Specify if public APIs must remain unchanged",
        unless=("constraint", "backward", "compatible", "api", "interface", "break"),
    ),
)

INTENT_GAPS: dict[str, tuple[ContextGap, ...]] = check_intent_map(
    {
        "code-generation": (
            ContextGap(
                "interface",
                "What are the expected inputs and outputs?",
                "Define function signature: inputs, return type, and data structures",
                unless=("input", "output", "return", "param", "argument", "take", "accept"),
            ),
            ContextGap(
                "existing-code",
                "Is there existing code this should integrate with?",
                "Reference existing patterns, imports, or dependencies in the project",
                unless=("existing", "current", "already", "codebase", "project"),
            ),
            ContextGap(
                "error-handling",
                "How should errors be handled?",
                "Specify error handling strategy (raise, return null, default value)",
                unless=("error", "exception", "fail", "invalid", "null", "undefined", "none"),
            ),
        ),
        "debugging": (
            ContextGap(
                "reproduction",
                "What are the steps to reproduce this issue?",
                "List the exact steps that trigger the bug",
                unless=("steps", "reproduce", "when i", "after", "before", "sequence"),
            ),
            ContextGap(
                "expected-behavior",
                "What is the expected behavior vs what actually happens?",
                "Describe what should happen and what actually happens",
                unless=("expected", "should", "instead", "actual", "but"),
            ),
        ),
        "refinement": _REVIEW_GAPS,
        "documentation": (),
        "testing": (
            ContextGap(
                "test-framework",
                "Which test framework should be used?",
                "Specify: pytest, Jest, Vitest, JUnit, etc.",
                unless=("jest", "vitest", "mocha", "pytest", "junit", "rspec", "framework"),
            ),
            ContextGap(
                "test-type",
                "What type of tests are needed?",
                "Specify: unit tests, integration tests, e2e tests",
                unless=("unit", "integration", "e2e", "end-to-end", "component", "smoke"),
            ),
        ),
        "migration": (
            ContextGap(
                "migration-endpoints",
                "What is the source and target of this migration?",
                "Specify: from [current system/version] to [target system/version]",
                unless=("from", "to", "source", "target", "current", "new"),
            ),
            ContextGap(
                "data-handling",
                "How should existing data be handled?",
                "Specify data migration strategy and what must be preserved",
                unless=("data", "records", "users", "content", "preserve"),
            ),
            ContextGap(
                "downtime",
                "What are the downtime requirements?",
                "Specify: zero-downtime required, or acceptable maintenance window",
                unless=("downtime", "zero-downtime", "maintenance", "window"),
            ),
        ),
        "security-review": (
            ContextGap(
                "threat-model",
                "What are the main security concerns or threats?",
                "Specify threat model or specific vulnerabilities to check",
                unless=("threat", "attack", "vulnerability", "owasp", "risk"),
            ),
            ContextGap(
                "compliance",
                "Are there specific compliance requirements?",
                "Specify: GDPR, HIPAA, PCI-DSS, SOC2, or internal policies",
                unless=("compliance", "gdpr", "hipaa", "pci", "soc2", "regulation"),
            ),
            ContextGap(
                "security-scope",
                "What aspects of security should be reviewed?",
                "Specify: auth, input validation, encryption, or comprehensive review",
                unless=("authentication", "authorization", "input", "encryption", "all"),
            ),
        ),
        "planning": (),
        "summarization": (),
        "prd-generation": (),
    },
    "ContextPrecision",
)


class ContextPrecisionSettings(PatternSettings):
    max_context_gaps: int = Field(default=6, ge=1, le=10)
    check_version_info: bool = True


class ContextPrecision(BasePattern):
    """Appends a ``### Context Needed`` list of questions for missing specifics.

    Gaps are judged on the original prompt so sections added earlier in the
    run do not hide or invent them.
    """

    id = "context-precision"
    name = "Context Precision Booster"
    description = "Add precise context when missing"
    applicable_intents = frozenset(
        {
            "code-generation",
            "debugging",
            "refinement",
            "documentation",
            "testing",
            "migration",
            "security-review",
        }
    )
    mode = "both"
    priority = 6
    dimension = "completeness"
    settings_model = ContextPrecisionSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if SECTION_HEADER in prompt:
            return self.unchanged(prompt, "Context questions already listed")

        settings = self.settings(context)
        gaps = self.identify(
            context.original_prompt, context.intent.primary_intent, settings.check_version_info
        )[: settings.max_context_gaps]
        if not gaps:
            return self.unchanged(prompt, "Context appears sufficient")

        lines = [SECTION_HEADER, "", "Provide these details for more accurate results:", ""]
        for i, gap in enumerate(gaps, start=1):
            lines += [f"**{i}. {gap.question}**", f"   _Suggestion: {gap.suggestion}_", ""]

        return self.changed(
            prompt,
            append_section(prompt, "\n".join(lines)),
            f"Identified {len(gaps)} areas needing context clarification",
            impact_for(len(gaps)),
        )

    def identify(self, prompt: str, intent: str, check_versions: bool = True) -> list[ContextGap]:
        """General gaps first, then the intent's own, one per kind."""
        gaps = []
        if not _FILE_REFERENCE.search(prompt) and has_any(
            prompt, ("code", "function", "class", "module", "component")
        ):
            gaps.append(
                ContextGap(
                    "file-location",
                    "Which file(s) should this be implemented in?",
                    "Specify the file path (e.g., src/utils/helpers.py)",
                )
            )
        if (
            check_versions
            and has_any(prompt, ("version", "upgrade", "update", "latest"))
            and not _VERSION.search(prompt)
        ):
            gaps.append(
                ContextGap(
                    "version",
                    "Which version are you targeting?",
                    "Specify exact versions (e.g., React 18, Node 20, Python 3.12)",
                )
            )
        if ENVIRONMENT_GAP.holds(prompt):
            gaps.append(ENVIRONMENT_GAP)

        if intent == "debugging" and not _ERROR_DETAILS.search(prompt):
            gaps.append(
                ContextGap(
                    "error-details",
                    "What is the exact error message or stack trace?",
                    "Include the full error message and stack trace",
                )
            )
        gaps += [gap for gap in INTENT_GAPS[intent] if gap.holds(prompt)]
        if intent == "testing" and not _COVERAGE.search(prompt):
            gaps.append(
                ContextGap(
                    "coverage",
                    "What test coverage is required?",
                    "Specify coverage target or specific scenarios to cover",
                )
            )
        return dedupe(gaps, key=lambda gap: gap.kind)

"""Flags ambiguous terms, vague phrases and unclear pronoun references."""

import re

from pydantic import Field

from prompt_optimizer.patterns.base import (
    BasePattern,
    PatternSettings,
    append_section,
    impact_for,
)
from prompt_optimizer.types import PatternContext, PatternResult

SECTION_HEADER = "## Clarifications Needed"

AMBIGUOUS_TERMS: dict[str, tuple[str, ...]] = {
    # Generic nouns
    "app": ("web app", "mobile app", "desktop app", "CLI tool"),
    "system": ("backend system", "frontend system", "full-stack system", "microservice"),
    "feature": ("user-facing feature", "backend feature", "API endpoint", "UI component"),
    "component": ("React component", "Vue component", "service component", "module"),
    "service": ("REST API", "GraphQL API", "background worker", "microservice"),
    "database": ("PostgreSQL", "MongoDB", "MySQL", "SQLite", "Redis"),
    "authentication": ("OAuth", "JWT", "session-based", "API keys", "social login"),
    "cache": ("in-memory cache", "Redis cache", "CDN cache", "browser cache"),
    "storage": ("local storage", "cloud storage", "file system", "object storage"),
    "user": ("end user", "admin user", "API consumer", "authenticated user"),
    # Action verbs
    "create": ("generate", "implement", "design", "scaffold"),
    "update": ("modify", "patch", "replace", "extend"),
    "fix": ("debug", "patch", "refactor", "rewrite"),
    "improve": ("optimize", "refactor", "enhance", "extend"),
    "handle": ("process", "validate", "transform", "route"),
    # Scope
    "some": ("specific subset", "all matching", "first N", "random sample"),
    "many": ("more than 10", "more than 100", "more than 1000", "unlimited"),
    "few": ("2-3", "5-10", "less than 10"),
    "large": (">1MB", ">100MB", ">1GB", "unbounded"),
    "small": ("<1KB", "<100KB", "<1MB"),
    "fast": ("<100ms", "<1s", "<5s", "real-time"),
    "slow": (">1s", ">5s", ">30s"),
    # Quality
    "good": (">80% coverage", ">90% accuracy", "production-ready", "MVP-quality"),
    "better": ("improved by X%", "faster than current", "more readable"),
    "best": ("optimal", "industry standard", "team consensus"),
    "simple": ("single function", "minimal dependencies", "no external calls"),
    "complex": ("multi-step", "with dependencies", "requiring state"),
}

VAGUE_PHRASES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bshould work\b", re.I), "Define specific success criteria and test cases"),
    (re.compile(r"\bproperly\b", re.I), "Specify exact behavior or standards to follow"),
    (re.compile(r"\bcorrectly\b", re.I), 'Define what "correct" means with specific criteria'),
    (re.compile(r"\bappropriate(?:ly)?\b", re.I), "Specify the expected behavior"),
    (re.compile(r"\bas needed\b", re.I), "Define when and what is needed specifically"),
    (re.compile(r"\bif necessary\b", re.I), "Define the conditions that trigger this action"),
    (re.compile(r"\betc\b\.?", re.I), "List all items explicitly or define a complete category"),
    (re.compile(r"\band so on\b", re.I), "Enumerate all items or define the pattern explicitly"),
    (re.compile(r"\bwhatever\b", re.I), "Specify the exact options or constraints"),
    (re.compile(r"\bsomething like\b", re.I), "Provide the exact specification or reference"),
    (re.compile(r"\bmaybe\b", re.I), "Decide if this is a requirement or not"),
    (re.compile(r"\bprobably\b", re.I), "Confirm if this is a requirement or not"),
)

# Pronouns opening a sentence with no noun to anchor them
UNCLEAR_PRONOUNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (pronoun, re.compile(r"(?:^|[.!?]\s+)" + pattern, re.I | re.M))
    for pronoun, pattern in (
        ("it", r"it\b"),
        ("they", r"they\b"),
        ("this", r"this\b(?!\s+\w)"),
        ("that", r"that\b(?!\s+\w)"),
        ("those", r"those\b(?!\s+\w)"),
    )
)


def _qualified(term: str, options: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(option) for option in options)
    return re.compile(
        rf"(?:{alternatives})\s+{term}\b|\b{term}\s+(?:{alternatives})", re.IGNORECASE
    )


_TERM_PATTERNS = {
    term: (re.compile(rf"\b{term}\b", re.IGNORECASE), _qualified(term, options))
    for term, options in AMBIGUOUS_TERMS.items()
}


class AmbiguitySettings(PatternSettings):
    check_vague_patterns: bool = True
    check_undefined_pronouns: bool = True
    max_clarifications: int = Field(default=10, ge=1, le=20)


class AmbiguityDetector(BasePattern):
    """Appends a ``## Clarifications Needed`` section listing every finding.

    Impact follows the count-based convention over the rendered findings.
    """

    id = "ambiguity-detector"
    name = "Ambiguity Detector"
    description = "Identifies and clarifies ambiguous terms and vague references"
    applicable_intents = frozenset(
        {
            "code-generation",
            "planning",
            "refinement",
            "debugging",
            "documentation",
            "prd-generation",
            "testing",
            "migration",
        }
    )
    mode = "both"
    priority = 9
    dimension = "clarity"
    settings_model = AmbiguitySettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if SECTION_HEADER.lower() in prompt.lower():
            return self.unchanged(prompt, "Clarifications already listed")

        settings = self.settings(context)
        clarifications = self.find_ambiguous_terms(prompt)
        if settings.check_vague_patterns:
            clarifications += [
                f"[CLARIFY: {suggestion}]"
                for pattern, suggestion in VAGUE_PHRASES
                if pattern.search(prompt)
            ]
        if settings.check_undefined_pronouns:
            clarifications += [
                f'[CLARIFY: "{pronoun}" - unclear reference; name what it refers to]'
                for pronoun, pattern in UNCLEAR_PRONOUNS
                if pattern.search(prompt)
            ]

        clarifications = clarifications[: settings.max_clarifications]
        if not clarifications:
            return self.unchanged(prompt, "No significant ambiguities detected")

        enhanced = append_section(prompt, SECTION_HEADER + "\n" + "\n".join(clarifications))
        return self.changed(
            prompt,
            enhanced,
            f"Identified {len(clarifications)} ambiguous terms/phrases requiring clarification",
            impact_for(len(clarifications)),
        )

    def find_ambiguous_terms(self, prompt: str) -> list[str]:
        """Clarification lines for generic terms that are not already qualified."""
        found = []
        for term, (present, qualified) in _TERM_PATTERNS.items():
            if present.search(prompt) and not qualified.search(prompt):
                options = ", ".join(AMBIGUOUS_TERMS[term][:3])
                found.append(f'[CLARIFY: "{term}" - specify: {options}?]')
        return found

"""Adds missing language and framework context."""

import re

from prompt_optimizer.intelligence.text_utils import contains_term, has_any
from prompt_optimizer.patterns.base import (
    BasePattern,
    PatternSettings,
    append_section,
    impact_for,
)
from prompt_optimizer.types import PatternContext, PatternResult

_CONTEXT_MARKERS = (
    re.compile(r"version|v\d+\.\d+", re.I),
    re.compile(r"technical (?:context|constraints|requirements)", re.I),
    re.compile(r"language:.*framework:", re.I | re.S),
    re.compile(r"using (?:python|javascript|typescript|java|rust|go) \d", re.I),
)
_VERSION = re.compile(r"\d+\.\d+|\bv\d+")

LANGUAGES: dict[str, str] = {
    "python": "Python",
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "java": "Java",
    "rust": "Rust",
    "go": "Go",
    "golang": "Go",
    "php": "PHP",
    "ruby": "Ruby",
    "swift": "Swift",
    "kotlin": "Kotlin",
    "c++": "C++",
    "csharp": "C#",
    "c#": "C#",
}

# Frameworks that imply a language when none is named
IMPLIED_LANGUAGES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("react", "vue", "angular", "svelte"), "JavaScript/TypeScript"),
    (("django", "flask", "fastapi"), "Python"),
    (("spring", "hibernate"), "Java"),
    (("rails",), "Ruby"),
    (("laravel",), "PHP"),
)

FRAMEWORKS: dict[str, str] = {
    "react": "React",
    "vue": "Vue.js",
    "angular": "Angular",
    "svelte": "Svelte",
    "next.js": "Next.js",
    "nextjs": "Next.js",
    "nuxt": "Nuxt.js",
    "django": "Django",
    "flask": "Flask",
    "fastapi": "FastAPI",
    "express": "Express.js",
    "nestjs": "NestJS",
    "spring": "Spring Boot",
    "rails": "Ruby on Rails",
    "laravel": "Laravel",
}


class TechnicalContextSettings(PatternSettings):
    detect_frameworks: bool = True
    suggest_versions: bool = True


class TechnicalContextEnricher(BasePattern):
    """Appends a ``# Technical Constraints`` section naming the detected stack."""

    id = "technical-context-enricher"
    name = "Technical Context Enricher"
    description = "Adds missing technical context (language, framework, versions)"
    applicable_intents = frozenset({"code-generation", "refinement", "debugging"})
    mode = "both"
    priority = 5
    run_after = ("objective-clarifier",)
    dimension = "completeness"
    settings_model = TechnicalContextSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if any(marker.search(prompt) for marker in _CONTEXT_MARKERS):
            return self.unchanged(prompt, "Technical context already specified")

        settings = self.settings(context)
        entries = []
        language = detect_language(prompt)
        if language and not _VERSION.search(prompt):
            suffix = " (specify version if critical)" if settings.suggest_versions else ""
            entries.append(f"Language: {language}{suffix}")

        if settings.detect_frameworks and context.intent.primary_intent == "code-generation":
            framework = detect_framework(prompt)
            if framework:
                entries.append(f"Framework: {framework}")

        if not entries:
            return self.unchanged(prompt, "No additional technical context needed")

        section = "# Technical Constraints\n" + "\n".join(f"- {entry}" for entry in entries)
        return self.changed(
            prompt,
            append_section(prompt, section),
            f"Added {len(entries)} technical context specifications",
            impact_for(len(entries)),
        )


def detect_language(prompt: str) -> str | None:
    for key, name in LANGUAGES.items():
        if contains_term(prompt, key):
            return name
    for frameworks, language in IMPLIED_LANGUAGES:
        if has_any(prompt, frameworks):
            return language
    return None


def detect_framework(prompt: str) -> str | None:
    for key, name in FRAMEWORKS.items():
        if contains_term(prompt, key):
            return name
    return None

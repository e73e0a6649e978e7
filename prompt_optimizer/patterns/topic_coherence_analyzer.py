"""Groups a multi-topic discussion by theme."""

import re

from pydantic import Field

from prompt_optimizer.intelligence.text_utils import extract_sentences, has_any
from prompt_optimizer.patterns.base import BasePattern, PatternSettings
from prompt_optimizer.types import PatternContext, PatternResult

SECTION_HEADER = "### Topics Covered"
MAX_SENTENCES_PER_TOPIC = 3

TOPICS: dict[str, tuple[str, ...]] = {
    "User Interface": (
        "ui", "interface", "design", "layout", "button", "form", "page", "screen",
        "component", "modal", "dialog", "navigation", "menu", "sidebar", "header", "footer",
    ),
    "Backend/API": (
        "api", "backend", "server", "endpoint", "route", "controller", "service",
        "middleware", "rest", "graphql", "websocket",
    ),
    "Database": (
        "database", "db", "schema", "table", "query", "migration", "model", "orm", "sql",
        "nosql", "index", "relationship",
    ),
    "Authentication": (
        "auth", "login", "password", "session", "token", "permission", "role", "oauth", "jwt",
        "sso", "mfa", "2fa",
    ),
    "Performance": (
        "performance", "speed", "cache", "optimize", "latency", "load time", "bundle", "lazy",
        "memory", "cpu",
    ),
    "Testing": (
        "test", "spec", "coverage", "qa", "validation", "unit test", "integration", "e2e",
        "mock", "fixture",
    ),
    "Deployment": (
        "deploy", "ci/cd", "pipeline", "release", "environment", "production", "staging",
        "docker", "kubernetes",
    ),
    "User Experience": (
        "ux", "usability", "accessibility", "user flow", "journey", "experience", "onboarding",
        "feedback",
    ),
    "Business Logic": (
        "business", "workflow", "process", "rule", "logic", "requirement", "feature",
        "use case",
    ),
    "Integration": (
        "integration", "third-party", "external", "webhook", "sync", "connect", "import",
        "export",
    ),
    "Security": (
        "security", "encryption", "vulnerability", "xss", "csrf", "injection", "sanitize",
        "audit",
    ),
    "Analytics": (
        "analytics", "tracking", "metrics", "dashboard", "report", "insight", "data",
        "statistics",
    ),
    "Error Handling": (
        "error", "exception", "fallback", "retry", "timeout", "failure", "recovery", "logging",
    ),
    "Documentation": (
        "documentation", "docs", "readme", "guide", "tutorial", "api docs", "comment", "jsdoc",
    ),
    "State Management": (
        "state", "store", "redux", "context", "global state", "local state", "persist",
        "hydrate",
    ),
}

_TOPIC_HEADERS = re.compile(
    r"##\s*(?:user interface|backend|database|auth|performance|testing|deploy)", re.I
)


class TopicCoherenceSettings(PatternSettings):
    min_topics_for_organization: int = Field(default=2, ge=2, le=5)


class TopicCoherenceAnalyzer(BasePattern):
    """Prepends a topic index and per-topic excerpts, keeping the prompt below.

    Topics are detected on the original prompt so sections added earlier in
    the run do not register as discussion topics.
    """

    id = "topic-coherence-analyzer"
    name = "Topic Coherence Analyzer"
    description = "Detects topic shifts and multi-topic conversations"
    applicable_intents = frozenset({"summarization", "planning"})
    mode = "deep"
    priority = 6
    dimension = "structure"
    settings_model = TopicCoherenceSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if SECTION_HEADER in prompt or _TOPIC_HEADERS.search(prompt):
            return self.unchanged(prompt, "Topics already organized")

        source = context.original_prompt
        topics = detect_topics(source)
        if len(topics) < self.settings(context).min_topics_for_organization:
            return self.unchanged(prompt, "Single coherent topic detected")

        lines = [
            SECTION_HEADER,
            "This discussion touches on multiple areas:",
            *(f"{i}. **{topic}**" for i, topic in enumerate(topics, start=1)),
            "",
            "---",
            "",
            "### Discussion by Topic",
            "",
        ]
        for topic in topics:
            lines += [f"#### {topic}", *topic_excerpts(source, topic), ""]
        lines += ["---", "", "**Full Context:**", prompt]

        return self.changed(
            prompt,
            "\n".join(lines),
            f"Organized {len(topics)} distinct topics for clarity",
            "medium",
        )


def detect_topics(prompt: str) -> list[str]:
    return [topic for topic, keywords in TOPICS.items() if has_any(prompt, keywords)]


def topic_excerpts(prompt: str, topic: str) -> list[str]:
    """Up to three sentences mentioning the topic, as bullets."""
    keywords = TOPICS[topic]
    sentences = [s for s in extract_sentences(prompt) if has_any(s, keywords)]
    if not sentences:
        return [f"- Discussion related to {topic}"]
    return [f"- {s}" for s in sentences[:MAX_SENTENCES_PER_TOPIC]]

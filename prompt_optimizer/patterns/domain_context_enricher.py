"""Adds best practices for the technical domains a prompt touches."""

import re
from typing import NamedTuple

from pydantic import Field

from prompt_optimizer.patterns.base import BasePattern, PatternSettings, append_section
from prompt_optimizer.types import PatternContext, PatternResult

SECTION_HEADER = "## Domain Best Practices"


class Domain(NamedTuple):
    name: str
    detector: re.Pattern[str]
    practices: tuple[str, ...]


# Detection order decides which domains win when more than max_domains match
DOMAINS = (
    Domain(
        "authentication",
        re.compile(
            r"\b(?:auth|login|logout|session|token|jwt|oauth|password|credential"
            r"|sign.?in|sign.?up|register)\b",
            re.I,
        ),
        (
            "Never store plain-text passwords; hash with bcrypt or argon2",
            "Rate limit authentication endpoints",
            "Keep session tokens in secure, httpOnly cookies",
            "Restrict CORS to known origins",
            "Add CSRF protection for state-changing operations",
            "Log authentication events for security auditing",
        ),
    ),
    Domain(
        "api",
        re.compile(r"\b(?:api|rest|graphql|endpoint|route|controller|middleware)\b", re.I),
        (
            "Use one response envelope for every endpoint",
            "Return status codes that match the HTTP semantics",
            "Version the API (URL path or header)",
            "Validate and sanitize request payloads",
            "Document the API with OpenAPI",
            "Return error responses with machine-readable codes",
        ),
    ),
    Domain(
        "database",
        re.compile(
            r"\b(?:database|db|query|schema|model|orm|prisma|sequelize|migration|table|index)\b",
            re.I,
        ),
        (
            "Use parameterized queries to prevent SQL injection",
            "Create indexes for frequently queried columns",
            "Pool database connections",
            "Use transactions for multi-step operations",
            "Enforce data integrity with constraints",
            "Version schema changes through migrations",
        ),
    ),
    Domain(
        "frontend",
        re.compile(
            r"\b(?:component|ui|ux|form|button|input|modal|layout|style|css"
            r"|react|vue|angular|svelte)\b",
            re.I,
        ),
        (
            "Follow WCAG accessibility guidelines",
            "Implement responsive design",
            "Use semantic HTML elements",
            "Handle loading and error states",
            "Lazy load heavy resources and split bundles",
            "Support keyboard navigation",
        ),
    ),
    Domain(
        "testing",
        re.compile(
            r"\b(?:test|spec|mock|stub|fixture|assertion|coverage|e2e|unit|integration)\b", re.I
        ),
        (
            "Follow the Arrange, Act, Assert structure",
            "Keep tests isolated and independent",
            "Name tests after the behavior they check",
            "Mock external dependencies at the boundary",
            "Cover the critical paths first",
            "Write both unit and integration tests",
        ),
    ),
    Domain(
        "performance",
        re.compile(
            r"\b(?:performance|optimize|fast|slow|latency|cache|memory|cpu|benchmark|profile)\b",
            re.I,
        ),
        (
            "Measure before optimizing (profile first)",
            "Cache at the layer closest to the consumer",
            "Paginate large datasets",
            "Optimize database queries (EXPLAIN, indexes)",
            "Lazy load heavy resources",
            "Set timeouts and circuit breakers on remote calls",
        ),
    ),
    Domain(
        "security",
        re.compile(
            r"\b(?:security|secure|vulnerability|xss|csrf|injection|sanitize|encrypt|decrypt"
            r"|audit)\b",
            re.I,
        ),
        (
            "Validate and sanitize all user input",
            "Use prepared statements for database queries",
            "Set a Content Security Policy (CSP)",
            "Keep dependencies patched and audited",
            "Use HTTPS for all communications",
            "Follow the principle of least privilege",
        ),
    ),
    Domain(
        "async",
        re.compile(
            r"\b(?:async|await|promise|callback|event|queue|worker|background|concurrent)\b",
            re.I,
        ),
        (
            "Handle every rejected promise or failed task",
            "Prefer async/await over raw callbacks",
            "Propagate errors to a single handler",
            "Guard shared state against race conditions",
            "Clean up long-running operations on shutdown",
        ),
    ),
    Domain(
        "deployment",
        re.compile(
            r"\b(?:deploy|ci|cd|pipeline|docker|kubernetes|container|cloud|aws|azure|gcp)\b",
            re.I,
        ),
        (
            "Read configuration from environment variables",
            "Expose health checks and readiness probes",
            "Ship structured logs and monitoring",
            "Use immutable deployments",
            "Plan for rollback scenarios",
            "Store secrets in a secrets manager",
        ),
    ),
)


class DomainContextSettings(PatternSettings):
    max_domains: int = Field(default=2, ge=1, le=4)
    practices_per_domain: int = Field(default=3, ge=1, le=6)


class DomainContextEnricher(BasePattern):
    """Appends ``## Domain Best Practices (...)`` for the first detected domains.

    Impact is always medium when applied.
    """

    id = "domain-context-enricher"
    name = "Domain Context Enricher"
    description = "Adds domain-specific best practices and context"
    applicable_intents = frozenset(
        {
            "code-generation",
            "planning",
            "refinement",
            "debugging",
            "testing",
            "security-review",
            "migration",
        }
    )
    mode = "both"
    priority = 5
    dimension = "completeness"
    settings_model = DomainContextSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if SECTION_HEADER in prompt:
            return self.unchanged(prompt, "Domain best practices already present")

        settings = self.settings(context)
        domains = [domain for domain in DOMAINS if domain.detector.search(prompt)]
        domains = domains[: settings.max_domains]
        if not domains:
            return self.unchanged(prompt, "No specific domain detected")

        practices = [
            practice
            for domain in domains
            for practice in domain.practices[: settings.practices_per_domain]
        ]
        names = ", ".join(domain.name for domain in domains)
        section = "\n".join(
            [
                f"{SECTION_HEADER} ({names})",
                "Consider these best practices:",
                *(f"- {practice}" for practice in practices),
            ]
        )
        return self.changed(
            prompt,
            append_section(prompt, section),
            f"Added {len(practices)} best practices for {names}",
            "medium",
        )

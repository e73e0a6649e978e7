"""Adds KPIs and a measurement approach to product prompts."""

from pydantic import Field

from prompt_optimizer.intelligence.text_utils import has_any
from prompt_optimizer.patterns.base import BasePattern, PatternSettings, append_section
from prompt_optimizer.types import PatternContext, PatternResult

METRIC_INDICATORS = (
    "success metric",
    "success criteria",
    "kpi",
    "measure success",
    "acceptance criteria",
    "% increase",
    "% decrease",
    "conversion rate",
    "completion rate",
    "response time",
    "latency",
    "uptime",
    "sla",
    "benchmark",
)

PRODUCT_WORDS = (
    "feature",
    "build",
    "implement",
    "goal",
    "objective",
    "product",
    "launch",
    "release",
)

KPI_RULES: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (
        ("performance", "fast", "speed"),
        ("Response time < [X]ms (p95)", "Page load time improvement by [X]%"),
    ),
    (
        ("user", "engagement", "retention"),
        ("User engagement increase by [X]%", "Task completion rate > [X]%"),
    ),
    (
        ("conversion", "sales", "revenue"),
        ("Conversion rate improvement by [X]%", "Revenue impact of $[X]"),
    ),
    (("quality", "bug", "error"), ("Error rate < [X]%", "Test coverage > [X]%")),
    (("api", "integration"), ("API availability > [X]%", "Integration success rate > [X]%")),
)

PLACEHOLDER_KPIS = (
    "[Define primary success metric]",
    "[Define secondary success metric]",
    "[Define timeline for measurement]",
)


class SuccessMetricsSettings(PatternSettings):
    max_kpis: int = Field(default=4, ge=1, le=8)
    include_measurement_guidance: bool = True


class SuccessMetricsEnforcer(BasePattern):
    """Appends ``### Success Metrics`` to feature and product prompts.

    Impact is always high when applied.
    """

    id = "success-metrics-enforcer"
    name = "Success Metrics Enforcer"
    description = "Ensures measurable success criteria exist"
    applicable_intents = frozenset({"prd-generation", "planning"})
    mode = "deep"
    priority = 7
    dimension = "completeness"
    settings_model = SuccessMetricsSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        lower = prompt.lower()
        if any(indicator in lower for indicator in METRIC_INDICATORS):
            return self.unchanged(prompt, "Success metrics already present")
        if not has_any(prompt, PRODUCT_WORDS):
            return self.unchanged(prompt, "Content does not require success metrics")

        settings = self.settings(context)
        kpis = infer_kpis(prompt)[: settings.max_kpis]
        lines = ["### Success Metrics", "**Primary KPIs:**", *(f"- {kpi}" for kpi in kpis)]
        if settings.include_measurement_guidance:
            lines += [
                "",
                "**Measurement Approach:**",
                "- Baseline: [Current state before implementation]",
                "- Target: [Specific, measurable goals]",
                "- Timeline: [When to measure success]",
            ]
        return self.changed(
            prompt,
            append_section(prompt, "\n".join(lines)),
            "Added measurable success criteria and KPIs",
            "high",
        )


def infer_kpis(prompt: str) -> list[str]:
    kpis = [kpi for triggers, rows in KPI_RULES if has_any(prompt, triggers) for kpi in rows]
    return kpis or list(PLACEHOLDER_KPIS)

"""Report synthesis: strengths, gaps, ambiguities and suggestions for one run."""

import re

from prompt_optimizer.intelligence.text_utils import (
    dedupe,
    has_context,
    has_examples,
    has_output_format,
    has_success_criteria,
    has_tech_stack,
    has_user_needs,
)
from prompt_optimizer.types import (
    ImprovedPrompt,
    IntentAnalysis,
    Mode,
    PatternResult,
    PromptAnalysis,
    QualityScore,
)

STRONG_DIMENSION = 85
DETAILED_LENGTH = 200
SHORT_LENGTH = 50
SHORT_REFERENCE_LENGTH = 100

VAGUE_TERMS = ("some", "maybe", "probably", "should", "could", "nice to have")
_VAGUE = {term: re.compile(rf"\b{term}\b", re.I) for term in VAGUE_TERMS}
_REFERENCE = re.compile(r"\b(?:this|that|these|those|it)\s+", re.I)
_QUANTITY = re.compile(r"\b(?:many|several|few|some)\b", re.I)
_PERFORMANCE = re.compile(r"\b(?:integrate|performance|scale|security)\b", re.I)

# Improvement dimensions surfaced as gaps when a pattern had to fill them in
_GAP_DIMENSIONS = ("completeness", "structure")

DEEP_MODE_HINT = (
    "This prompt would benefit from deep analysis. "
    "Run with --mode deep for alternative approaches and a validation checklist."
)


def find_strengths(prompt: str, scores: QualityScore) -> list[str]:
    """List what the original prompt already does well.

    Args:
        prompt: Original prompt
        scores: Quality scores of the original prompt

    Returns:
        Human-readable strengths, strongest dimensions first
    """
    strengths = [
        f"Strong {name} ({value}/100)"
        for name, value in scores.dimensions().items()
        if value >= STRONG_DIMENSION
    ]
    if has_context(prompt):
        strengths.append("Clear context provided")
    if has_technical_details(prompt):
        strengths.append("Technical constraints specified")
    if has_success_criteria(prompt):
        strengths.append("Success criteria defined")
    if len(prompt) > DETAILED_LENGTH:
        strengths.append("Comprehensive detail provided")
    if has_examples(prompt):
        strengths.append("Includes examples for clarity")
    return strengths


def find_gaps(prompt: str, results: list[PatternResult]) -> list[str]:
    """List missing information, from prompt checks and from patterns that filled it in."""
    gaps = []
    if not has_context(prompt):
        gaps.append("Missing context: What is the background or current situation?")
    if not has_success_criteria(prompt):
        gaps.append("No success criteria: How will you know when this is complete?")
    if not has_technical_details(prompt):
        gaps.append("Missing technical details: What technologies or constraints apply?")
    if not has_user_needs(prompt):
        gaps.append("No user perspective: Who will use this and what do they need?")
    if not has_output_format(prompt):
        gaps.append("Unclear expected output: What should the final deliverable look like?")

    gaps.extend(
        result.improvement.description
        for result in results
        if result.applied and result.improvement.dimension in _GAP_DIMENSIONS
    )
    return dedupe(gaps)


def find_ambiguities(prompt: str, results: list[PatternResult]) -> list[str]:
    """List vague wording in the prompt plus anything clarity patterns flagged."""
    ambiguities = [
        f'Vague term: "{term}" - be more specific'
        for term, pattern in _VAGUE.items()
        if pattern.search(prompt)
    ]
    if _REFERENCE.search(prompt) and len(prompt) < SHORT_REFERENCE_LENGTH:
        ambiguities.append('Undefined references: What does "this" or "it" refer to?')
    if _QUANTITY.search(prompt):
        ambiguities.append("Unspecified quantities: How many exactly?")

    ambiguities.extend(
        result.improvement.description
        for result in results
        if result.applied and result.improvement.dimension == "clarity"
    )
    return dedupe(ambiguities)


def generate_suggestions(prompt: str, results: list[PatternResult]) -> list[str]:
    """Concrete next steps for the author, ordered from prompt checks to pattern output."""
    suggestions = []
    if not has_context(prompt):
        suggestions.append("Add background: Explain the current situation or problem")
    if not has_success_criteria(prompt):
        suggestions.append("Define success: Specify measurable criteria for completion")
    if not has_technical_details(prompt):
        suggestions.append(
            "Add constraints: Specify technologies, integrations, or performance needs"
        )
    if len(prompt) < SHORT_LENGTH:
        suggestions.append("Expand detail: Add more specific requirements and context")
    if not has_user_needs(prompt):
        suggestions.append("Consider users: Who will use this and what do they need?")

    high_impact = [
        result.improvement.description
        for result in results
        if result.applied and result.improvement.impact == "high"
    ]
    suggestions.extend(f"Review: {description}" for description in high_impact)
    return dedupe(suggestions)


def build_analysis(
    prompt: str, scores: QualityScore, results: list[PatternResult]
) -> PromptAnalysis:
    """Assemble the four report buckets for one run."""
    return PromptAnalysis(
        strengths=find_strengths(prompt, scores),
        gaps=find_gaps(prompt, results),
        ambiguities=find_ambiguities(prompt, results),
        suggestions=generate_suggestions(prompt, results),
    )


def has_technical_details(prompt: str) -> bool:
    return has_tech_stack(prompt) or _PERFORMANCE.search(prompt) is not None


def should_recommend_deep(
    prompt: str, intent: IntentAnalysis, scores: QualityScore, needs_deep: bool
) -> bool:
    """Whether a fast-mode result should point the user at deep analysis."""
    if needs_deep or intent.primary_intent == "planning":
        return True
    if scores.overall < 65:
        return True
    traits = intent.characteristics
    if traits.is_open_ended and traits.needs_structure:
        return True
    return len(prompt) < SHORT_LENGTH and scores.explicitness < 70


def recommendation(
    result: ImprovedPrompt, scores: QualityScore, mode: Mode
) -> str | None:
    """One-line verdict shown under the report, or None when there is nothing to add.

    Args:
        result: Improvement result without a recommendation yet
        scores: Quality scores of the original prompt
        mode: Mode the run used

    Returns:
        Recommendation message or None
    """
    if mode == "fast" and should_recommend_deep(
        result.original, result.intent, scores, result.triage_result.needs_deep_analysis
    ):
        return DEEP_MODE_HINT
    if scores.overall >= 90:
        return "Excellent! Your prompt is AI-ready."
    if scores.overall >= 80:
        return "Good quality. Ready to use!"
    if scores.overall >= 70:
        return "Decent quality. Consider the improvements listed above."
    return None

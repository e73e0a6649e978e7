"""Results reporting for prompt improvement.

This module renders an ImprovedPrompt to the console or to JSON.
"""

from prompt_optimizer.intelligence.confidence import category
from prompt_optimizer.types import ImprovedPrompt


def _print_section(title: str, items: list[str]) -> None:
    if not items:
        return
    print(f"\n{title}:")
    for item in items:
        print(f"  - {item}")


def display_result(result: ImprovedPrompt) -> None:
    """
    Display an improvement result to console.

    Args:
        result: Result of PromptOptimizer.improve
    """
    print("\n" + "=" * 70)
    print("PROMPT ANALYSIS")
    print("=" * 70)
    intent = result.intent
    print(
        f"\nIntent: {intent.primary_intent} "
        f"({intent.confidence}% confidence, {category(intent.confidence)})"
    )
    print(f"Mode: {result.mode}")

    if result.clear_scores is not None:
        scores = result.clear_scores
        print(f"\nCLEAR Scores (overall {scores.overall}/100, {scores.rating}):")
        for name, value in scores.dimensions().items():
            print(f"  {name.capitalize():<16} {value:>3}/100")

    if result.triage_result.needs_deep_analysis:
        _print_section("Triage", result.triage_result.reasons)

    _print_section("Strengths", result.analysis.strengths)
    _print_section("Gaps", result.analysis.gaps)
    _print_section("Ambiguities", result.analysis.ambiguities)
    _print_section("Suggestions", result.analysis.suggestions)

    if result.applied_patterns:
        print("\nApplied Patterns:")
        for applied in result.applied_patterns:
            print(f"  [{applied.impact}] {applied.name}: {applied.description}")
    if result.failed_patterns:
        print(f"\nFailed Patterns: {', '.join(result.failed_patterns)}")

    print("\n" + "=" * 70)
    print("IMPROVED PROMPT:")
    print("=" * 70)
    print(result.improved)
    print("=" * 70)

    if result.recommendation:
        print(f"\n{result.recommendation}")


def to_json(result: ImprovedPrompt, indent: int = 2) -> str:
    """Serialize a result to JSON."""
    return result.model_dump_json(indent=indent)

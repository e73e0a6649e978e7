"""Shared confidence arithmetic for the intelligence layer.

Confidence is a bounded percentage (0-100) grouped into four bands:
low (0-49), medium (50-69), high (70-84) and very-high (85-100).
"""

from typing import Literal

ConfidenceCategory = Literal["low", "medium", "high", "very-high"]

LOW_MAX = 49
MEDIUM_MAX = 69
HIGH_MAX = 84


def clamp(value: float) -> int:
    """Round and clamp a value to the 0-100 range."""
    return min(100, max(0, round(value)))


def category(percentage: int) -> ConfidenceCategory:
    """Map a percentage to its display band."""
    if percentage <= LOW_MAX:
        return "low"
    if percentage <= MEDIUM_MAX:
        return "medium"
    if percentage <= HIGH_MAX:
        return "high"
    return "very-high"


def ratio(primary: float, total: float, minimum: int = 0, fallback: int = 50) -> int:
    """Primary score as a percentage of the total score."""
    if total == 0:
        return fallback
    return clamp(max(minimum, round(primary / total * 100)))


def competition_penalty(
    confidence: int,
    primary: float,
    runner_up: float,
    threshold: float = 0.15,
    penalty: int = 15,
    minimum: int = 60,
) -> int:
    """Lower confidence when the runner-up is within ``threshold`` of the winner.

    The penalised value never drops below ``minimum``.
    """
    if primary > 0 and primary - runner_up < primary * threshold:
        return clamp(max(minimum, confidence - penalty))
    return clamp(confidence)

"""CLEAR quality scoring: Conciseness, Logic, Explicitness, Adaptiveness, Reflectiveness.

Fast mode scores the first three dimensions. Deep mode adds adaptiveness and
reflectiveness along with their supporting details. Every score is an integer
in 0-100 and the same input always yields the same scores.
"""

import logging

from prompt_optimizer.intelligence.text_utils import (
    ACTION_VERBS,
    content_words,
    count_bullets,
    count_term,
    count_words,
    dedupe,
    extract_sentences,
    first_sentence,
    has_any,
    has_context,
    has_examples,
    has_headers,
    has_numbered_steps,
    has_output_format,
    has_persona,
    has_success_criteria,
    has_tech_stack,
    has_tone_style,
    matching_terms,
    signal_to_noise,
)
from prompt_optimizer.types import (
    AdaptivenessDetails,
    ConcisenessDetails,
    ExplicitnessDetails,
    LogicDetails,
    Mode,
    QualityScore,
    Rating,
    ReflectivenessDetails,
)

logger = logging.getLogger(__name__)

PLEASANTRIES = ("please", "thank you", "thanks", "could you", "would you", "kindly")
FLUFF_WORDS = ("very", "really", "just", "basically", "simply", "actually", "literally")
HEDGES = ("maybe", "perhaps", "if possible", "kind of", "sort of", "i think", "i guess", "somehow")
REDUNDANT_PHRASES = (
    "in order to",
    "at this point in time",
    "due to the fact that",
    "for the purpose of",
    "in the event that",
)

SEQUENCE_MARKERS = (
    "first", "then", "next", "after", "afterwards", "finally", "before", "once", "step",
    "lastly", "followed by",
)
LEADING_VERBS = frozenset(v for v in ACTION_VERBS if " " not in v) | {"use", "add", "set", "put"}
BREVITY_WORDS = ("brief", "short", "concise", "one sentence", "minimal")
DEPTH_WORDS = ("detailed", "comprehensive", "in-depth", "exhaustive", "thorough")

ALTERNATIVE_MARKERS = (
    "alternative", "alternatively", "option", "approach", "trade-off", "tradeoff", "instead",
    "compare", "either", "variation", "different ways", "other ways",
)
REFLECTION_MARKERS = (
    "verify", "validate", "check", "review", "test", "edge case", "ensure", "confirm",
    "double-check", "sanity", "assumption",
)

SUGGESTED_ORDER = (
    "Objective",
    "Context",
    "Requirements",
    "Constraints",
    "Output format",
    "Success criteria",
)

EXPLICITNESS_WEIGHTS = {
    "persona": 20,
    "output format": 25,
    "tone/style": 15,
    "success criteria": 25,
    "examples": 15,
}

FAST_WEIGHTS = {"conciseness": 0.3, "logic": 0.3, "explicitness": 0.4}
DEEP_WEIGHTS = {
    "conciseness": 0.2,
    "logic": 0.2,
    "explicitness": 0.3,
    "adaptiveness": 0.15,
    "reflectiveness": 0.15,
}

RATING_BANDS: tuple[tuple[int, Rating], ...] = (
    (80, "excellent"),
    (65, "good"),
    (45, "needs-improvement"),
)


def rating_for(overall: int) -> Rating:
    """Map an overall score to its rating band."""
    for floor, rating in RATING_BANDS:
        if overall >= floor:
            return rating
    return "poor"


def _bounded(value: float) -> int:
    return min(100, max(0, round(value)))


class QualityScorer:
    """Scores prompts on the CLEAR dimensions."""

    def score(self, prompt: str, mode: Mode = "fast") -> QualityScore:
        """Score a prompt.

        Args:
            prompt: Prompt text; empty or non-string input scores 0 everywhere
            mode: "fast" for C/L/E, "deep" to add adaptiveness and reflectiveness

        Returns:
            QualityScore with per-dimension scores, overall, rating and details
        """
        if mode not in ("fast", "deep"):
            raise ValueError(f"Unknown mode '{mode}'. Available: fast, deep")

        if not isinstance(prompt, str) or not prompt.strip():
            return self._empty(mode)

        conciseness, conciseness_details = self.score_conciseness(prompt)
        logic, logic_details = self.score_logic(prompt)
        explicitness, explicitness_details = self.score_explicitness(prompt)

        values = {"conciseness": conciseness, "logic": logic, "explicitness": explicitness}
        adaptiveness = reflectiveness = None
        adaptiveness_details = reflectiveness_details = None
        if mode == "deep":
            adaptiveness, adaptiveness_details = self.score_adaptiveness(prompt)
            reflectiveness, reflectiveness_details = self.score_reflectiveness(
                prompt, explicitness_details
            )
            values["adaptiveness"] = adaptiveness
            values["reflectiveness"] = reflectiveness

        weights = DEEP_WEIGHTS if mode == "deep" else FAST_WEIGHTS
        overall = _bounded(sum(values[name] * weight for name, weight in weights.items()))

        logger.debug(f"Scored prompt ({mode}): {values}, overall={overall}")
        return QualityScore(
            mode=mode,
            conciseness=conciseness,
            logic=logic,
            explicitness=explicitness,
            adaptiveness=adaptiveness,
            reflectiveness=reflectiveness,
            overall=overall,
            rating=rating_for(overall),
            conciseness_details=conciseness_details,
            logic_details=logic_details,
            explicitness_details=explicitness_details,
            adaptiveness_details=adaptiveness_details,
            reflectiveness_details=reflectiveness_details,
        )

    def score_conciseness(self, prompt: str) -> tuple[int, ConcisenessDetails]:
        """Penalise pleasantries, fluff, hedges, redundant phrasing and low signal."""
        pleasantries = sum(count_term(prompt, p) for p in PLEASANTRIES)
        fluff = sum(count_term(prompt, w) for w in FLUFF_WORDS)
        hedges = sum(count_term(prompt, h) for h in HEDGES)
        redundant = sum(count_term(prompt, r) for r in REDUNDANT_PHRASES)
        ratio = signal_to_noise(prompt)

        issues: list[str] = []
        suggestions: list[str] = []
        score = 100 - 5 * pleasantries - 3 * fluff - 4 * hedges - 4 * redundant

        if pleasantries:
            issues.append(f"{pleasantries} pleasantries add length without meaning")
            suggestions.append("Drop pleasantries and state the request directly")
        if fluff:
            issues.append(f"{fluff} filler words")
            suggestions.append("Remove filler words such as 'very' and 'basically'")
        if hedges:
            issues.append(f"{hedges} hedging phrases weaken the request")
            suggestions.append("Replace hedges with definite requirements")
        if redundant:
            issues.append(f"{redundant} wordy phrases")
            suggestions.append("Use short forms, e.g. 'to' instead of 'in order to'")

        if ratio < 0.6:
            score -= 30
            issues.append(f"Low signal-to-noise ratio ({ratio:.2f})")
            suggestions.append("Cut words that do not carry requirements or context")
        elif ratio < 0.75:
            score -= 15
            issues.append(f"Moderate signal-to-noise ratio ({ratio:.2f})")

        if count_words(prompt) > 300:
            score -= 10
            issues.append("Very long prompt")
            suggestions.append("Move background material into a separate context section")

        details = ConcisenessDetails(
            pleasantries_count=pleasantries,
            verbosity_count=fluff + hedges + redundant,
            signal_to_noise=ratio,
            issues=issues,
            suggestions=suggestions,
        )
        return _bounded(score), details

    def score_logic(self, prompt: str) -> tuple[int, LogicDetails]:
        """Penalise disconnected fragments, unsequenced instructions and conflicts."""
        sentences = extract_sentences(prompt)
        structured = has_headers(prompt) or count_bullets(prompt) >= 2
        sequenced = has_any(prompt, SEQUENCE_MARKERS) or has_numbered_steps(prompt)

        issues: list[str] = []
        score = 100

        fragments = [s for s in sentences if count_words(s) <= 4]
        if len(sentences) >= 3 and len(fragments) / len(sentences) >= 0.6:
            score -= 35
            issues.append("Instructions are disconnected fragments")

        leading = dedupe(
            words[0]
            for words in (content_words(s) for s in sentences)
            if words and words[0] in LEADING_VERBS
        )
        if len(leading) >= 3 and not sequenced:
            score -= 20
            issues.append(f"{len(leading)} separate instructions with no stated order")

        if count_words(prompt) > 40 and not sequenced and not structured:
            score -= 15
            issues.append("Long request without sequencing or structure")

        if has_any(prompt, BREVITY_WORDS) and has_any(prompt, DEPTH_WORDS):
            score -= 15
            issues.append("Conflicting instructions about length and depth")

        details = LogicDetails(
            has_coherent_flow=not issues,
            suggested_order=list(SUGGESTED_ORDER),
            issues=issues,
        )
        return _bounded(score), details

    def score_explicitness(self, prompt: str) -> tuple[int, ExplicitnessDetails]:
        """Weighted presence of persona, output format, tone, success criteria and examples."""
        checks = {
            "persona": has_persona(prompt),
            "output format": has_output_format(prompt),
            "tone/style": has_tone_style(prompt),
            "success criteria": has_success_criteria(prompt),
            "examples": has_examples(prompt),
        }
        score = sum(EXPLICITNESS_WEIGHTS[name] for name, present in checks.items() if present)
        details = ExplicitnessDetails(
            has_persona=checks["persona"],
            has_output_format=checks["output format"],
            has_tone_style=checks["tone/style"],
            has_success_criteria=checks["success criteria"],
            has_examples=checks["examples"],
            missing=[name for name, present in checks.items() if not present],
        )
        return _bounded(score), details

    def score_adaptiveness(self, prompt: str) -> tuple[int, AdaptivenessDetails]:
        """Score alternative-approach language and propose alternatives."""
        found = matching_terms(prompt, ALTERNATIVE_MARKERS)
        score = 20 + 20 * len(found)

        objective = first_sentence(prompt) or prompt.strip()[:80]
        target = objective.rstrip(".!?")
        phrasings = [
            f"Goal-first: state the outcome, then the steps. {target}.",
            f"Constraint-first: list limits and requirements before the task. {target}.",
            f"Example-driven: show one input and the expected output for: {target}.",
        ]
        structures = [
            "Step-by-step: numbered instructions with one action each",
            "Template: Objective / Requirements / Constraints / Output sections",
            "Question-led: the open questions to resolve before implementation",
        ]
        details = AdaptivenessDetails(
            alternative_phrasings=phrasings, alternative_structures=structures
        )
        return _bounded(score), details

    def score_reflectiveness(
        self, prompt: str, explicitness: ExplicitnessDetails | None = None
    ) -> tuple[int, ReflectivenessDetails]:
        """Score self-review language and build a checklist, edge cases and risks."""
        found = matching_terms(prompt, REFLECTION_MARKERS)
        score = 20 + 20 * len(found)
        if explicitness is None:
            _, explicitness = self.score_explicitness(prompt)

        checklist = [
            "Response addresses the stated objective",
            "Every explicit requirement is covered",
            "Stated constraints are respected",
        ]
        if has_tech_stack(prompt):
            checklist.append("Code runs on the stated stack without errors")
        if explicitness.has_output_format:
            checklist.append("Output matches the requested format")

        edge_cases = ["Empty or missing input"]
        if has_any(prompt, ("input", "form", "field", "user")):
            edge_cases.append("Invalid or malicious user input")
        if has_any(prompt, ("api", "endpoint", "request", "network", "fetch")):
            edge_cases.append("Network failure or timeout")
        if has_any(prompt, ("file", "upload", "data")):
            edge_cases.append("Very large or malformed data")
        if has_any(prompt, ("concurrent", "parallel", "async", "multiple users")):
            edge_cases.append("Concurrent access to shared state")

        issues = []
        if not explicitness.has_output_format:
            issues.append("No output format given, so response shape may vary")
        if not explicitness.has_success_criteria:
            issues.append("No success criteria, so completion is hard to judge")
        if not has_context(prompt):
            issues.append("Missing background context may lead to wrong assumptions")

        details = ReflectivenessDetails(
            validation_checklist=checklist, edge_cases=edge_cases, potential_issues=issues
        )
        return _bounded(score), details

    def _empty(self, mode: Mode) -> QualityScore:
        deep = mode == "deep"
        return QualityScore(
            mode=mode,
            conciseness=0,
            logic=0,
            explicitness=0,
            adaptiveness=0 if deep else None,
            reflectiveness=0 if deep else None,
            overall=0,
            rating="poor",
            logic_details=LogicDetails(suggested_order=list(SUGGESTED_ORDER)),
            explicitness_details=ExplicitnessDetails(missing=list(EXPLICITNESS_WEIGHTS)),
            adaptiveness_details=AdaptivenessDetails() if deep else None,
            reflectiveness_details=ReflectivenessDetails() if deep else None,
        )

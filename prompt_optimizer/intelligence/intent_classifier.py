"""Keyword-vote intent classification with precedence rules."""

import logging
import re
from typing import NamedTuple

from prompt_optimizer.intelligence import confidence
from prompt_optimizer.intelligence.text_utils import (
    contains_term,
    find_term,
    has_any,
    has_constraints,
    has_requirements,
)
from prompt_optimizer.types import (
    ALL_INTENTS,
    Intent,
    IntentAnalysis,
    IntentCharacteristics,
    Mode,
)

logger = logging.getLogger(__name__)

STRONG_POINTS = 20
MEDIUM_POINTS = 10
WEAK_POINTS = 5
NEGATION_WINDOW = 20


class KeywordSet(NamedTuple):
    """Keywords voting for one intent, by strength."""

    strong: tuple[str, ...] = ()
    medium: tuple[str, ...] = ()
    weak: tuple[str, ...] = ()


INTENT_KEYWORDS: dict[str, KeywordSet] = {
    "code-generation": KeywordSet(
        strong=(
            "create function", "build component", "implement feature", "add endpoint",
            "write class", "develop api", "generate code", "write a function",
            "create a component",
        ),
        medium=(
            "function", "class", "component", "api", "endpoint", "database", "implement",
            "build", "create", "write", "code", "develop",
        ),
        weak=(
            "react", "vue", "angular", "python", "javascript", "typescript", "java", "rust",
            "go", "php", "ruby", "swift", "kotlin", "system", "feature", "page", "app",
        ),
    ),
    "planning": KeywordSet(
        strong=(
            "how should i", "what's the best way", "what is the best way", "pros and cons",
            "architecture for", "design pattern", "system design", "should i use",
            "help me choose", "design the database", "plan the", "roadmap for",
        ),
        medium=(
            "plan", "design", "architect", "strategy", "approach", "structure", "organize",
            "layout", "workflow", "trade-off", "tradeoff",
        ),
    ),
    "refinement": KeywordSet(
        strong=(
            "make it faster", "speed up", "reduce time", "optimize performance",
            "clean up code", "refactor this", "improve efficiency", "make this component",
            "make it more", "enhance the", "update the styling", "more reusable", "more modern",
        ),
        medium=(
            "improve", "optimize", "refactor", "enhance", "better", "faster", "cleaner",
            "simplify", "reduce", "increase",
        ),
    ),
    "debugging": KeywordSet(
        strong=(
            "fix error", "debug issue", "doesn't work", "throws error", "not working",
            "returns null", "undefined error", "stack trace", "error message",
            "causing this bug", "how do i fix", "fix this error", "resolve the",
            "memory leak", "not rendering", "why is my",
        ),
        medium=(
            "fix", "debug", "error", "bug", "issue", "problem", "failing", "broken", "crash",
            "exception", "incorrect", "wrong",
        ),
    ),
    "documentation": KeywordSet(
        strong=(
            "explain how", "walk me through", "how does this work", "show me how",
            "document this", "describe how", "what does this do", "write documentation",
            "create documentation", "add documentation", "api documentation", "add comments",
        ),
        medium=(
            "explain", "document", "describe", "understand", "clarify", "comment",
            "documentation", "guide", "tutorial", "readme",
        ),
    ),
    "testing": KeywordSet(
        strong=(
            "write tests", "write a test", "unit test", "integration test", "test coverage",
            "test cases", "test suite", "add tests", "e2e test", "end-to-end test",
        ),
        medium=("test", "coverage", "mock", "assert", "fixture", "pytest", "jest", "qa"),
    ),
    "migration": KeywordSet(
        strong=(
            "migrate from", "migrate to", "migration from", "upgrade from", "upgrade to",
            "port to", "move from", "convert from", "switch from", "move to",
        ),
        medium=(
            "migrate", "migration", "upgrade", "port", "legacy", "convert", "transition",
            "deprecated",
        ),
    ),
    "security-review": KeywordSet(
        strong=(
            "security review", "security audit", "vulnerability", "vulnerabilities",
            "penetration test", "owasp", "security issues", "sql injection",
            "check for xss", "threat model",
        ),
        medium=(
            "security", "secure", "vulnerable", "exploit", "injection", "xss", "csrf",
            "sanitize", "audit", "attack",
        ),
    ),
    "summarization": KeywordSet(
        strong=(
            "summarize", "summarise", "summary of", "tl;dr", "key points", "recap",
            "condense this",
        ),
        medium=("summary", "overview", "digest", "highlights", "condense", "shorten"),
    ),
    "prd-generation": KeywordSet(
        strong=(
            "product requirements document", "product requirements", "write a prd",
            "create a prd", "user stories for", "requirements document",
        ),
        medium=("prd", "user story", "user stories", "stakeholder", "mvp", "product spec"),
    ),
}

# Tie-break order when two intents score equally
PRECEDENCE: tuple[str, ...] = (
    "debugging",
    "security-review",
    "testing",
    "migration",
    "documentation",
    "planning",
    "prd-generation",
    "summarization",
    "refinement",
    "code-generation",
)

NEGATION_WORDS = ("don't", "dont", "not", "avoid", "without", "never", "no")

TECHNICAL_TERMS = (
    "api", "database", "sql", "rest", "graphql", "jwt", "authentication", "middleware",
    "framework", "library", "npm", "docker", "aws", "frontend", "backend", "microservice",
)

PERFORMANCE_TERMS = (
    "performance", "speed", "fast", "slow", "optimize", "latency", "throughput", "memory",
    "cpu", "load time", "response time",
)

_CODE_PATTERNS = (
    re.compile(r"`"),
    re.compile(r"function\s+\w+\s*\("),
    re.compile(r"class\s+\w+"),
    re.compile(r"(?:const|let|var)\s+\w+\s*="),
    re.compile(r"def\s+\w+\s*\("),
    re.compile(r"^\s*(?:import|from)\s+\w+", re.MULTILINE),
    re.compile(r"<\w+>"),
    re.compile(r"\w+\.\w+\("),
)

_OBJECTIVE = re.compile(r"objective|goal|purpose|need to|want to", re.IGNORECASE)

_QUESTION_OPENERS = ("how", "what", "why", "when", "where", "which", "should")
_VAGUE_ASKS = ("help me", "i need", "not sure", "maybe", "somehow")

if set(INTENT_KEYWORDS) != set(ALL_INTENTS) or set(PRECEDENCE) != set(ALL_INTENTS):
    raise ValueError("Intent keyword tables must cover every intent exactly once")


class IntentClassifier:
    """Assigns one intent label to a prompt from weighted keyword votes."""

    def classify(self, prompt: str) -> IntentAnalysis:
        """Classify a prompt.

        Args:
            prompt: Raw prompt text; non-string input is treated as empty

        Returns:
            IntentAnalysis with the winning intent, confidence and characteristics
        """
        if not isinstance(prompt, str):
            prompt = ""
        lower = prompt.lower()

        scores = {intent: self._score_intent(lower, intent) for intent in ALL_INTENTS}
        primary = self._select_primary(scores, lower)
        conf = self._confidence(scores, primary)
        characteristics = self.characteristics(prompt, primary)
        suggested_mode = self._suggest_mode(primary, characteristics, len(prompt), conf)

        logger.debug(f"Classified prompt as {primary} ({conf}% confidence)")
        return IntentAnalysis(
            primary_intent=primary,
            confidence=conf,
            characteristics=characteristics,
            suggested_mode=suggested_mode,
            scores=scores,
        )

    def characteristics(self, prompt: str, intent: Intent) -> IntentCharacteristics:
        """Compute structural traits of a prompt for a given intent."""
        return IntentCharacteristics(
            has_code_context=has_code_context(prompt),
            has_technical_terms=has_any(prompt, TECHNICAL_TERMS),
            is_open_ended=is_open_ended(prompt),
            needs_structure=needs_structure(prompt, intent),
        )

    def _score_intent(self, lower: str, intent: str) -> int:
        keywords = INTENT_KEYWORDS[intent]
        score = 0
        for phrase in keywords.strong:
            if contains_term(lower, phrase):
                score += self._apply_negation(phrase, lower, STRONG_POINTS)
        for keyword in keywords.medium:
            if contains_term(lower, keyword):
                score += self._apply_negation(keyword, lower, MEDIUM_POINTS)
        for keyword in keywords.weak:
            if contains_term(lower, keyword):
                score += WEAK_POINTS
        return score + self._context_bonus(lower, intent)

    def _apply_negation(self, keyword: str, lower: str, points: int) -> int:
        index = find_term(lower, keyword)
        if index == -1:
            return points
        before = lower[max(0, index - NEGATION_WINDOW) : index]
        if has_any(before, NEGATION_WORDS):
            return round(points * 0.5)
        return points

    def _context_bonus(self, lower: str, intent: str) -> int:
        bonus = 0
        if intent in ("debugging", "refinement") and has_code_context(lower):
            bonus += 15
        if intent in ("planning", "documentation") and "?" in lower:
            bonus += 10
        if intent == "code-generation" and has_any(lower, TECHNICAL_TERMS):
            bonus += 5
        if intent == "refinement" and has_any(lower, PERFORMANCE_TERMS):
            bonus += 10
        return bonus

    def _select_primary(self, scores: dict[str, int], lower: str) -> Intent:
        if scores["debugging"] >= 20 and any(
            marker in lower for marker in ("error", "bug", "fix", "debug", "issue", "resolve")
        ):
            return "debugging"
        if scores["security-review"] >= 20:
            return "security-review"
        if scores["testing"] >= 20:
            return "testing"
        if scores["migration"] >= 20:
            return "migration"
        if scores["documentation"] >= 20 and (
            "explain" in lower
            or "how does" in lower
            or "documentation" in lower
            or ("write" in lower and "document" in lower)
        ):
            return "documentation"
        if scores["planning"] >= 20 and any(
            marker in lower for marker in ("how should", "architecture", "what is the best")
        ):
            return "planning"
        if scores["refinement"] >= 15 and any(
            marker in lower for marker in ("improve", "optimize", "enhance", "make", "refactor")
        ):
            return "refinement"

        best = max(scores.values())
        if best == 0:
            return "code-generation"
        for intent in PRECEDENCE:
            if scores[intent] == best:
                return intent
        return "code-generation"

    def _confidence(self, scores: dict[str, int], primary: str) -> int:
        total = sum(scores.values())
        if total == 0:
            return 50
        primary_score = scores[primary]
        conf = confidence.ratio(primary_score, total)
        runner_up = max(score for intent, score in scores.items() if intent != primary)
        return confidence.competition_penalty(conf, primary_score, runner_up)

    def _suggest_mode(
        self,
        intent: Intent,
        characteristics: IntentCharacteristics,
        prompt_length: int,
        conf: int,
    ) -> Mode:
        if conf < 60:
            return "deep"
        if intent in ("planning", "prd-generation"):
            return "deep"
        if characteristics.is_open_ended and not characteristics.has_code_context:
            return "deep"
        if prompt_length < 50 and characteristics.needs_structure:
            return "deep"
        return "fast"


def has_code_context(prompt: str) -> bool:
    """Check for code blocks, inline code or code-like syntax."""
    return any(pattern.search(prompt) for pattern in _CODE_PATTERNS)


def is_open_ended(prompt: str) -> bool:
    """Questions and vague asks are open-ended."""
    lower = prompt.lower().lstrip()
    return (
        lower.startswith(_QUESTION_OPENERS)
        or "?" in prompt
        or any(phrase in lower for phrase in _VAGUE_ASKS)
    )


def needs_structure(prompt: str, intent: Intent) -> bool:
    """Planning always needs structure; otherwise fewer than two core sections."""
    if intent == "planning":
        return True
    present = [
        bool(_OBJECTIVE.search(prompt)),
        has_requirements(prompt),
        has_constraints(prompt),
    ]
    return sum(present) < 2

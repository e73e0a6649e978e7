"""Stateless text helpers shared by the scorer, triage, analysis and patterns.

Keyword matching is word-boundary aware. A term matches as a whole word or
with a plain inflection ("test" matches "tests" and "testing"), so "go" does
not match "good" and "just" does not match "justify".
"""

import re
from collections.abc import Callable, Hashable, Iterable
from functools import lru_cache
from typing import TypeVar

T = TypeVar("T")

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_HEADER = re.compile(r"^\s{0,3}#{1,6}\s+\S", re.MULTILINE)
_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+", re.MULTILINE)
_NUMBERED = re.compile(r"^\s*\d+[.)]\s+", re.MULTILINE)
_WORD = re.compile(r"[a-z][a-z0-9'+#-]*")

WORD_SUFFIXES = r"(?:s|es|d|ed|ing|ging|ged)?"
SHORT_SUFFIXES = r"(?:s|es)?"

STOP_WORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "but", "by", "can", "could", "do", "does",
        "for", "from", "had", "has", "have", "he", "her", "his", "i", "if", "in", "into", "is",
        "it", "its", "me", "my", "of", "on", "or", "our", "she", "so", "that", "the", "their",
        "them", "then", "there", "these", "they", "this", "those", "to", "was", "we", "were",
        "what", "when", "which", "who", "will", "with", "would", "you", "your",
    }
)

TECH_TERMS = (
    "python", "javascript", "typescript", "java", "c#", "c++", "go", "golang", "rust", "ruby",
    "php", "swift", "kotlin", "react", "vue", "angular", "svelte", "next.js", "nextjs", "node",
    "express", "django", "flask", "fastapi", "spring", "rails", "laravel", "api", "rest",
    "graphql", "grpc", "database", "sql", "postgres", "postgresql", "mysql", "sqlite", "mongodb",
    "redis", "docker", "kubernetes", "aws", "gcp", "azure", "html", "css", "tailwind",
)

ACTION_VERBS = (
    "create", "build", "implement", "write", "add", "fix", "design", "plan", "explain",
    "refactor", "optimize", "migrate", "test", "review", "summarize", "summarise", "make",
    "develop", "generate", "document", "debug", "update", "convert", "analyze", "audit",
    "improve", "help me",
)

_OBJECTIVE_MARKERS = re.compile(
    r"\b(?:objective|goal|purpose|aim)\b|\b(?:i|we) (?:need|want) to\b|\btrying to\b",
    re.IGNORECASE,
)
_LEADING_ACTION = re.compile(
    r"^\W*(?:" + "|".join(re.escape(v) for v in ACTION_VERBS) + r")\b", re.IGNORECASE
)
_OUTPUT_FORMAT = re.compile(
    r"\b(?:output|return|returns|format(?:ted)?|json|yaml|markdown|table|csv|"
    r"deliverables?|response should|respond with|list of|bullet points?|code block)\b",
    re.IGNORECASE,
)
_SUCCESS_CRITERIA = re.compile(
    r"\b(?:success criteria|acceptance criteria|done when|definition of done|"
    r"success(?:ful)?|metrics?|measured? by|should pass|must pass|tests? pass)\b",
    re.IGNORECASE,
)
_EXAMPLES = re.compile(
    r"\b(?:for example|for instance|such as|examples?)\b|\be\.g\.|```", re.IGNORECASE
)
_CONSTRAINTS = re.compile(
    r"\b(?:must|must not|should not|cannot|can't|limit(?:ed)?|within|at most|no more than|"
    r"constraints?|only use|avoid|without)\b",
    re.IGNORECASE,
)
_CONTEXT = re.compile(
    r"\b(?:context|background|currently|existing|we have|i have|our (?:app|system|team|codebase|"
    r"project|service)|situation|legacy)\b",
    re.IGNORECASE,
)
_PERSONA = re.compile(
    r"\b(?:you are|act as|acting as|as an? (?:senior|expert|experienced|professional|"
    r"\w+ (?:engineer|developer|writer|architect|analyst))|your role|role:|persona)\b",
    re.IGNORECASE,
)
_TONE_STYLE = re.compile(
    r"\b(?:tone|style|formal|informal|friendly|professional|concise|brief|detailed|"
    r"idiomatic|conventions?|readable|voice)\b",
    re.IGNORECASE,
)
_USER_NEEDS = re.compile(
    r"\b(?:users?|customers?|audience|stakeholders?|personas?|end[- ]users?)\b", re.IGNORECASE
)
_REQUIREMENTS = re.compile(
    r"\b(?:requirements?|must|should|needs? to|has to|features?)\b", re.IGNORECASE
)


@lru_cache(maxsize=1024)
def term_pattern(term: str) -> re.Pattern[str]:
    """Compile a case-insensitive, boundary-aware pattern for a keyword or phrase."""
    suffixes = SHORT_SUFFIXES if len(term) < 4 else WORD_SUFFIXES
    return re.compile(r"(?<!\w)" + re.escape(term) + suffixes + r"(?!\w)", re.IGNORECASE)


def contains_term(text: str, term: str) -> bool:
    """Check whether ``term`` occurs in ``text`` as a word or phrase."""
    return term_pattern(term).search(text) is not None


def find_term(text: str, term: str) -> int:
    """Return the index of the first occurrence of ``term``, or -1."""
    match = term_pattern(term).search(text)
    return match.start() if match else -1


def count_term(text: str, term: str) -> int:
    """Count occurrences of ``term`` in ``text``."""
    return len(term_pattern(term).findall(text))


def has_any(text: str, terms: Iterable[str]) -> bool:
    """Check whether any of ``terms`` occurs in ``text``."""
    return any(contains_term(text, term) for term in terms)


def matching_terms(text: str, terms: Iterable[str]) -> list[str]:
    """Return the terms found in ``text``, in the order given."""
    return [term for term in terms if contains_term(text, term)]


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def content_words(text: str) -> list[str]:
    """Return lowercase alphabetic tokens, ignoring markdown and punctuation."""
    return _WORD.findall(text.lower())


def signal_to_noise(text: str) -> float:
    """Share of words that carry meaning (not stop words, longer than two characters)."""
    words = content_words(text)
    if not words:
        return 0.0
    signal = [w for w in words if w not in STOP_WORDS and len(w) > 2]
    return round(len(signal) / len(words), 2)


def extract_sentences(text: str) -> list[str]:
    """Split text into non-empty sentences on terminal punctuation."""
    return [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def first_sentence(text: str) -> str:
    """Return the first sentence (or line) of ``text``, stripped of markdown markers."""
    for line in text.splitlines():
        line = line.strip().lstrip("#-*> ").strip()
        if line:
            sentences = extract_sentences(line)
            return sentences[0] if sentences else line
    return ""


def tidy_whitespace(text: str) -> str:
    """Collapse runs of spaces and blank lines while keeping line structure."""
    text = re.sub(r"(?<=\S)[ \t]+", " ", text)
    text = re.sub(r"(?<=\S) +([,.;:!?])", r"\1", text)
    text = re.sub(r"([,;:])(?=[.!?])", "", text)
    text = "\n".join(line.rstrip() for line in text.split("\n"))
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def capitalize_first(text: str) -> str:
    """Upper-case the first alphabetic character of ``text``."""
    for i, char in enumerate(text):
        if char.isalpha():
            return text[:i] + char.upper() + text[i + 1 :]
    return text


def has_headers(text: str) -> bool:
    return _HEADER.search(text) is not None


def count_bullets(text: str) -> int:
    return len(_BULLET.findall(text))


def has_numbered_steps(text: str) -> bool:
    return len(_NUMBERED.findall(text)) >= 2


def has_code_block(text: str) -> bool:
    return "```" in text


def has_objective(text: str) -> bool:
    """An objective is an explicit goal marker or a prompt that opens with an action."""
    return bool(_OBJECTIVE_MARKERS.search(text) or _LEADING_ACTION.search(text))


def has_tech_stack(text: str) -> bool:
    return has_any(text, TECH_TERMS)


def detected_technologies(text: str) -> list[str]:
    return matching_terms(text, TECH_TERMS)


def has_output_format(text: str) -> bool:
    return _OUTPUT_FORMAT.search(text) is not None


def has_success_criteria(text: str) -> bool:
    return _SUCCESS_CRITERIA.search(text) is not None


def has_examples(text: str) -> bool:
    return _EXAMPLES.search(text) is not None


def has_constraints(text: str) -> bool:
    return _CONSTRAINTS.search(text) is not None


def has_context(text: str) -> bool:
    return _CONTEXT.search(text) is not None


def has_persona(text: str) -> bool:
    return _PERSONA.search(text) is not None


def has_tone_style(text: str) -> bool:
    return _TONE_STYLE.search(text) is not None


def has_user_needs(text: str) -> bool:
    return _USER_NEEDS.search(text) is not None


def has_requirements(text: str) -> bool:
    return _REQUIREMENTS.search(text) is not None


def dedupe(items: Iterable[T], key: Callable[[T], Hashable] | None = None) -> list[T]:
    """Drop repeated items while keeping first-seen order.

    Args:
        items: Items to deduplicate
        key: Optional function computing the identity of an item

    Returns:
        List of unique items in original order
    """
    seen: set[Hashable] = set()
    unique: list[T] = []
    for item in items:
        marker = key(item) if key else item
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(item)
    return unique


def bullet_list(items: Iterable[str], marker: str = "-") -> str:
    """Render items as a markdown list."""
    return "\n".join(f"{marker} {item}" for item in items)

"""Turns a conversational, free-form request into structured requirements."""

import re

from pydantic import Field

from prompt_optimizer.intelligence import confidence
from prompt_optimizer.intelligence.text_utils import dedupe, extract_sentences, matching_terms
from prompt_optimizer.patterns.base import BasePattern, PatternSettings
from prompt_optimizer.types import PatternContext, PatternResult

SECTION_HEADER = "### Extracted Requirements"
MAX_CONSTRAINTS = 5
MAX_ITEM_LENGTH = 200
VERIFY_NOTE = "> **Note:** Verify these extracted requirements are complete and accurate."

CONVERSATIONAL_MARKERS = (
    "i want", "i need", "we need", "we want", "i would like", "we would like",
    "would like to", "should be able to", "needs to", "thinking about", "maybe we could",
    "what if", "how about", "perhaps we", "considering", "wondering if", "let's", "let me",
    "also", "and then", "plus", "another thing", "oh and", "by the way", "basically",
    "essentially", "kind of like", "sort of", "something like", "can we", "could we",
    "shall we",
)

STRUCTURE_INDICATORS = (
    "##", "###", "**Requirements:**", "**Features:**", "- [ ]", "1.", "2.", "3.",
)

REQUIREMENT_PATTERNS = tuple(
    re.compile(pattern, re.I)
    for pattern in (
        r"\b(?:i |we )?(?:need|want|should|must|require)\s+(?:to\s+)?(.+)",
        r"\b(?:should be able to|needs to|has to|have to)\s+(.+)",
        r"\b(?:feature|functionality|capability):\s*(.+)",
        r"\b(?:it should|it must|it needs to)\s+(.+)",
        r"\busers? (?:can|should|will|must)\s+(.+)",
        r"\bthe system (?:should|must|will)\s+(.+)",
        r"\bsupport(?:s|ing)?\s+(.+)",
        r"\b(?:provides?|enables?|allows?)\s+(.+)",
    )
)

CONSTRAINT_PATTERNS = tuple(
    re.compile(pattern, re.I)
    for pattern in (
        r"\b(?:can't|cannot|shouldn't|must not)\s+(.+)",
        r"\b(?:limited to|restricted to|only)\s+(.+)",
        r"\b(?:within|budget|deadline|timeline):\s*(.+)",
        r"\b(?:no more than|at most|maximum)\s+(.+)",
    )
)

GOAL_PATTERNS = tuple(
    re.compile(pattern, re.I)
    for pattern in (
        r"\b(?:goal is to|aim(?:ing)? to|objective is to)\s+(.+)",
        r"\b(?:trying to|looking to|hoping to|want(?:ing)? to)\s+(.+)",
        r"\b(?:so that|in order to|to achieve)\s+(.+)",
        r"\b(?:the purpose is|main purpose|key purpose)\s+(.+)",
        r"\b(?:ultimately|end goal|final goal|main goal)\s+(.+)",
        r"\b(?:we're building this to|this will help)\s+(.+)",
    )
)

_TRAILING_PUNCTUATION = re.compile(r"[.!?,;:]+$")


class ConversationSummarizerSettings(PatternSettings):
    max_requirements: int = Field(default=10, ge=1, le=20)
    max_goals: int = Field(default=3, ge=1, le=5)
    show_confidence: bool = True


class ConversationSummarizer(BasePattern):
    """Prepends goals, requirements and constraints pulled from a conversational prompt.

    The prompt is kept verbatim under an ``Original Context`` rule. Extraction
    confidence starts at 50 and gains 20 for requirements, 15 for goals and 15
    for constraints; below 80 a verification note is added.
    """

    id = "conversation-summarizer"
    name = "Conversation Summarizer"
    description = "Extracts structured requirements from messages"
    applicable_intents = frozenset({"summarization", "planning", "prd-generation"})
    mode = "deep"
    priority = 8
    dimension = "structure"
    settings_model = ConversationSummarizerSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        if SECTION_HEADER in prompt:
            return self.unchanged(prompt, "Requirements already extracted")
        if sum(indicator in prompt for indicator in STRUCTURE_INDICATORS) >= 3:
            return self.unchanged(prompt, "Content already well-structured")
        if not is_conversational(prompt):
            return self.unchanged(prompt, "Not conversational content")

        settings = self.settings(context)
        goals = extract_items(prompt, GOAL_PATTERNS)[: settings.max_goals]
        requirements = extract_items(prompt, REQUIREMENT_PATTERNS)[: settings.max_requirements]
        constraints = extract_constraints(prompt)
        score = confidence.clamp(
            50 + 20 * bool(requirements) + 15 * bool(goals) + 15 * bool(constraints)
        )

        lines = [SECTION_HEADER, ""]
        if settings.show_confidence:
            lines += [f"*Extraction confidence: {score}%*", ""]
        for title, items in (
            ("Goals", goals),
            ("Requirements", requirements),
            ("Constraints", constraints),
        ):
            if items:
                lines += [f"**{title}:**", *(f"- {item}" for item in items), ""]
        if score < 80:
            lines += [VERIFY_NOTE, ""]
        lines += ["---", "", "**Original Context:**", prompt]

        return self.changed(
            prompt,
            "\n".join(lines),
            "Extracted structured requirements from conversation",
            "high",
        )


def is_conversational(prompt: str) -> bool:
    """Two or more conversational markers, or more than three sentences without bullets."""
    if len(matching_terms(prompt, CONVERSATIONAL_MARKERS)) >= 2:
        return True
    has_bullets = "- " in prompt or "* " in prompt
    return len(extract_sentences(prompt)) > 3 and not has_bullets


def extract_items(prompt: str, patterns: tuple[re.Pattern[str], ...]) -> list[str]:
    """Text after each pattern match, per sentence, cleaned and deduplicated."""
    items = [
        clean_item(match.group(1))
        for sentence in extract_sentences(prompt)
        for pattern in patterns
        for match in pattern.finditer(sentence)
    ]
    return dedupe(item for item in items if item)


def extract_constraints(prompt: str) -> list[str]:
    constraints = extract_items(prompt, CONSTRAINT_PATTERNS)
    lower = prompt.lower()
    if "performance" in lower:
        constraints.append("Performance requirements to be defined")
    if "security" in lower:
        constraints.append("Security requirements to be defined")
    if "mobile" in lower and "desktop" in lower:
        constraints.append("Must work on both mobile and desktop")
    return dedupe(constraints)[:MAX_CONSTRAINTS]


def clean_item(text: str) -> str:
    text = " ".join(text.split())
    return _TRAILING_PUNCTUATION.sub("", text)[:MAX_ITEM_LENGTH]

"""Removes pleasantries, hedges, fluff words and wordy phrases."""

import re

from prompt_optimizer.intelligence.text_utils import capitalize_first, tidy_whitespace
from prompt_optimizer.patterns.base import BasePattern, PatternSettings, impact_for
from prompt_optimizer.types import ALL_INTENTS, PatternContext, PatternResult

_LEADING_PLEASANTRY = re.compile(
    r"(?:^|(?<=[.!?] ))[ \t]*(?:please|kindly|would you(?: please)? mind|would you(?: please)?|"
    r"could you(?: please)?|can you(?: please)?|"
    r"i would (?:really )?appreciate (?:it )?if you could)\b[,:]?\s*",
    re.IGNORECASE | re.MULTILINE,
)

_PLEASANTRIES = (
    re.compile(r",?\s*\bplease\b,?", re.IGNORECASE),
    re.compile(
        r"\s*\b(?:thank you|thanks)(?: (?:so much|in advance))?(?: for (?:your|the) help)?[.!]?",
        re.IGNORECASE,
    ),
    re.compile(r"\s*\bI (?:really )?appreciate (?:your|the) help[.!]?", re.IGNORECASE),
)

_HEDGES = (
    re.compile(r",?\s*\bif (?:at all )?possible\b", re.IGNORECASE),
    re.compile(r"\b(?:maybe|perhaps|kind of|sort of)\b\s*", re.IGNORECASE),
)

_FLUFF = re.compile(
    r"\b(?:very|really|just|basically|simply|actually|literally)\b\s*", re.IGNORECASE
)

_REDUNDANT = (
    (re.compile(r"\bin order to\b", re.IGNORECASE), "to"),
    (re.compile(r"\bat this point in time\b", re.IGNORECASE), "now"),
    (re.compile(r"\bdue to the fact that\b", re.IGNORECASE), "because"),
    (re.compile(r"\bfor the purpose of\b", re.IGNORECASE), "for"),
    (re.compile(r"\bin the event that\b", re.IGNORECASE), "if"),
)


class ConcisenessSettings(PatternSettings):
    remove_pleasantries: bool = True
    remove_hedges: bool = True
    remove_fluff: bool = True
    shorten_phrases: bool = True


class ConcisenessFilter(BasePattern):
    """Strips words that add length without meaning.

    Leading pleasantries are removed repeatedly so stacked openers such as
    "Please could you" disappear entirely. Impact follows the count of
    removal kinds that fired.
    """

    id = "conciseness-filter"
    name = "Conciseness Filter"
    description = "Removes unnecessary pleasantries, fluff words, and redundancy"
    applicable_intents = frozenset(ALL_INTENTS)
    mode = "both"
    priority = 10
    dimension = "efficiency"
    settings_model = ConcisenessSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        settings = self.settings(context)
        cleaned = prompt
        changes = 0

        if settings.remove_pleasantries:
            stripped = self._strip_leading(cleaned)
            if stripped != cleaned:
                changes += 1
            cleaned = stripped
            for pattern in _PLEASANTRIES:
                cleaned, count = pattern.subn("", cleaned)
                changes += bool(count)

        if settings.remove_hedges:
            for pattern in _HEDGES:
                cleaned, count = pattern.subn("", cleaned)
                changes += bool(count)

        if settings.remove_fluff:
            cleaned, count = _FLUFF.subn("", cleaned)
            changes += bool(count)

        if settings.shorten_phrases:
            for pattern, replacement in _REDUNDANT:
                cleaned, count = pattern.subn(replacement, cleaned)
                changes += bool(count)

        if not changes:
            return self.unchanged(prompt, "No unnecessary phrasing found")

        cleaned = capitalize_first(tidy_whitespace(cleaned))
        if not cleaned:
            return self.unchanged(prompt, "Nothing left after removing filler; kept original")

        return self.changed(
            prompt,
            cleaned,
            f"Removed {changes} kinds of unnecessary phrasing for conciseness",
            impact_for(changes),
        )

    def _strip_leading(self, text: str) -> str:
        while True:
            stripped = _LEADING_PLEASANTRY.sub("", text)
            if stripped == text:
                return text
            text = stripped

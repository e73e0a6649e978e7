"""Reorders prompt content into Objective -> Requirements -> ... -> Success Criteria."""

import re

from prompt_optimizer.patterns.base import BasePattern, PatternSettings, impact_for
from prompt_optimizer.types import PatternContext, PatternResult

_SECTION_MARKERS = (
    re.compile(r"^#+\s+.+$", re.MULTILINE),
    re.compile(r"^[A-Z][A-Za-z /-]{2,40}:", re.MULTILINE),
)
_IDEAL_ORDER = ("objective", "requirement", "technical", "constraint", "output", "success")
_HAS_HEADER = re.compile(r"^#+\s+", re.MULTILINE)
_HEADER_LINE = re.compile(r"#{1,6}\s*.+\n")


def _section(labels: str, end: str = r"\n\n|##|$") -> re.Pattern[str]:
    return re.compile(rf"\b(?:{labels}):[ \t]*(.+?)(?={end})", re.IGNORECASE | re.DOTALL)


# (title, extraction pattern) in output order
SECTION_EXTRACTORS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Objective", _section("objective|goal|purpose|need to|want to", end=r"\n\n|$")),
    ("Requirements", _section("requirements?|must have|need|should")),
    ("Technical Constraints", _section("technical|tech stack|technology|using|built? with")),
    ("Constraints", _section("constraints?|limitations?|must not|cannot")),
    ("Expected Output", _section("expected output|output|result|deliverable")),
    ("Success Criteria", _section("success criteria|success|criteria|measure")),
)


class StructureSettings(PatternSettings):
    add_headers_if_missing: bool = True
    reorder_sections: bool = True


class StructureOrganizer(BasePattern):
    """Rebuilds out-of-order prompts as markdown sections.

    Prompts with no sections, or whose sections are already in order, only
    gain an ``## Objective`` header when they have no headers at all.
    """

    id = "structure-organizer"
    name = "Structure Organizer"
    description = "Reorders information into logical sections"
    applicable_intents = frozenset(
        {"code-generation", "planning", "refinement", "debugging", "documentation"}
    )
    mode = "both"
    priority = 8
    dimension = "structure"
    settings_model = StructureSettings

    def apply(self, prompt: str, context: PatternContext) -> PatternResult:
        settings = self.settings(context)
        sections = self.detect_sections(prompt)

        if not sections or self.is_well_ordered(sections) or not settings.reorder_sections:
            if settings.add_headers_if_missing and not _HAS_HEADER.search(prompt):
                return self.changed(
                    prompt, "## Objective\n\n" + prompt, "Added section headers for clarity", "low"
                )
            return self.unchanged(prompt, "Structure already in logical order")

        extracted: list[tuple[str, str]] = []
        remaining = prompt
        for title, pattern in SECTION_EXTRACTORS:
            content, matched = self._extract(title, pattern, remaining)
            if content:
                extracted.append((title, content))
                remaining = remaining.replace(matched, "", 1)
        other = self._tidy_remaining(remaining)

        parts = [f"## {title}\n\n{content}" for title, content in extracted]
        if other:
            parts.append(other)
        enhanced = "\n\n".join(parts).strip()
        count = len(extracted)

        return self.changed(
            prompt,
            enhanced,
            f"Reorganized content into {count} logical sections",
            impact_for(count),
        )

    def detect_sections(self, prompt: str) -> list[str]:
        sections: list[tuple[int, str]] = []
        for marker in _SECTION_MARKERS:
            sections.extend((m.start(), m.group(0)) for m in marker.finditer(prompt))
        return [text for _, text in sorted(sections)]

    def is_well_ordered(self, sections: list[str]) -> bool:
        """Check that recognised section keywords appear in the ideal order."""
        last = -1
        for section in sections:
            lower = section.lower()
            index = next((i for i, key in enumerate(_IDEAL_ORDER) if key in lower), -1)
            if index == -1:
                continue
            if index < last:
                return False
            last = index
        return True

    def _extract(self, title: str, pattern: re.Pattern[str], text: str) -> tuple[str, str]:
        """Return (section content, matched text to remove) or empty strings."""
        match = pattern.search(text)
        if match:
            return match.group(1).strip(), match.group(0)
        if title == "Objective":
            # First free-standing line that is not itself a labelled section
            for line in text.splitlines():
                stripped = line.strip()
                if 20 <= len(stripped) <= 100 and not any(
                    marker.match(stripped) for marker in _SECTION_MARKERS
                ):
                    return stripped, stripped
        return "", ""

    def _tidy_remaining(self, remaining: str) -> str:
        remaining = _HEADER_LINE.sub("", remaining)
        remaining = re.sub(r"\n{3,}", "\n\n", remaining)
        return remaining.strip()

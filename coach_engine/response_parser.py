"""Turns loosely formatted coach replies into structured feedback.

Replies are expected to use the labelled sections requested by
``PromptBuilder`` (``GOED:``, ``VERBETERING:``, ``VOORBEELD:``,
``TEGENARGUMENT:`` / ``REFLECTIE:``), but models routinely reorder them, put
content on the label line or the lines below it, add bullets and markdown,
or drop the labels altogether. Parsing therefore runs in two passes:

1. A line-oriented structured pass that tracks which section is open.
2. A sentence-level keyword fallback, used only when the structured pass
   found neither good points nor improvements.

An empty result is valid and means "show an empty feedback panel".
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from .models import FeedbackRecord
from .prompt_builder import (
    COUNTER_ARGUMENT_LABEL,
    EXAMPLE_LABEL,
    GOOD_LABEL,
    IMPROVEMENT_LABEL,
    PROPOSITION_MARKER,
    REFLECTION_LABEL,
)
from .types import PromptPhase

logger = logging.getLogger(__name__)

DEFAULT_REFLECTION_QUESTION = (
    "Welk argument vond je het moeilijkst om te weerleggen, en waarom?"
)


class Section(Enum):
    """Which part of the reply the cursor is currently filling."""

    NONE = "none"
    GOOD_POINTS = "good_points"
    IMPROVEMENTS = "improvements"
    EXAMPLE = "example"
    DIRECTIVE = "directive"


def _label(token: str) -> re.Pattern[str]:
    return re.compile(re.escape(token), re.IGNORECASE)


_SECTION_LABELS: tuple[tuple[re.Pattern[str], Section], ...] = (
    (_label("goed:"), Section.GOOD_POINTS),
    (_label("positief:"), Section.GOOD_POINTS),
    (_label("verbetering:"), Section.IMPROVEMENTS),
    (_label("beter:"), Section.IMPROVEMENTS),
    (_label("voorbeeld:"), Section.EXAMPLE),
    (_label("tegenargument:"), Section.DIRECTIVE),
    (_label("nieuw argument:"), Section.DIRECTIVE),
)
_FINAL_SECTION_LABELS = _SECTION_LABELS + ((_label("reflectie:"), Section.DIRECTIVE),)

_GOOD_KEYWORDS = ("goed", "sterk")
_IMPROVEMENT_KEYWORDS = ("beter", "verbeteren")

_REFLECTION_RE = re.compile(r"reflectie:\s*(.+)", re.IGNORECASE)
_PROPOSITION_RE = re.compile(
    rf"^[\s*_\"']*{re.escape(PROPOSITION_MARKER.rstrip(':'))}\s*:[\s*_]*", re.IGNORECASE
)
_SENTENCE_END_RE = re.compile(r"[.!?]")
_LIST_MARKER_RE = re.compile(r"^(?:[-*•]|\d+[.)])\s+")


@dataclass
class ParseResult:
    """Feedback plus the extracted next counter-argument or reflection question."""

    feedback: FeedbackRecord
    directive: str
    used_fallback: bool = False


@dataclass
class _Sections:
    good_points: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    example: str = ""
    directive: str = ""

    def add(self, section: Section, text: str) -> None:
        if not text:
            return
        if section == Section.GOOD_POINTS:
            self.good_points.append(text)
        elif section == Section.IMPROVEMENTS:
            self.improvements.append(text)
        elif section == Section.EXAMPLE:
            self.example = f"{self.example} {text}" if self.example else text
        elif section == Section.DIRECTIVE:
            self.directive = f"{self.directive} {text}" if self.directive else text


def _clean_fragment(text: str) -> str:
    """Drop surrounding whitespace, markdown emphasis and one bullet marker."""
    cleaned = text.strip().strip("*_").strip()
    cleaned = _LIST_MARKER_RE.sub("", cleaned, count=1)
    return cleaned.strip().strip("*_").strip()


def _find_label(
    line: str, labels: tuple[tuple[re.Pattern[str], Section], ...]
) -> tuple[re.Match[str], Section] | None:
    """Return the label occurring earliest in line, if any."""
    found: tuple[re.Match[str], Section] | None = None
    for pattern, section in labels:
        match = pattern.search(line)
        if match and (found is None or match.start() < found[0].start()):
            found = (match, section)
    return found


def _structured_pass(text: str, final: bool) -> _Sections:
    labels = _FINAL_SECTION_LABELS if final else _SECTION_LABELS
    sections = _Sections()
    current = Section.NONE

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        found = _find_label(line, labels)
        if found:
            match, current = found
            sections.add(current, _clean_fragment(line[match.end():]))
        elif current != Section.NONE:
            sections.add(current, _clean_fragment(line))

    return sections


def _fallback_pass(text: str, sections: _Sections) -> None:
    for raw_sentence in _SENTENCE_END_RE.split(text):
        sentence = _clean_fragment(" ".join(raw_sentence.split()))
        if not sentence:
            continue
        lowered = sentence.lower()
        # First match wins: a sentence with both "goed" and "beter" counts as good.
        if any(keyword in lowered for keyword in _GOOD_KEYWORDS):
            sections.good_points.append(sentence)
        elif any(keyword in lowered for keyword in _IMPROVEMENT_KEYWORDS):
            sections.improvements.append(sentence)


def extract_reflection_question(text: str) -> str:
    """Find the REFLECTIE: question anywhere in text, or return the default one."""
    match = _REFLECTION_RE.search(text)
    if match:
        question = _clean_fragment(match.group(1))
        if question:
            return question
    return DEFAULT_REFLECTION_QUESTION


def parse_response(
    text: str, round_number: int, phase: PromptPhase = PromptPhase.ROUND
) -> ParseResult:
    """Parse a round, opening or final reply from the generation service."""
    final = phase == PromptPhase.FINAL
    sections = _structured_pass(text, final)

    used_fallback = False
    if not sections.good_points and not sections.improvements:
        _fallback_pass(text, sections)
        used_fallback = True
        logger.debug(
            f"No labelled feedback in round {round_number} reply, keyword fallback found "
            f"{len(sections.good_points)} good / {len(sections.improvements)} improvement sentences"
        )

    directive = extract_reflection_question(text) if final else sections.directive
    if not directive:
        logger.warning(f"Could not extract a counter-argument from round {round_number} reply")

    return ParseResult(
        feedback=FeedbackRecord(
            round_number=round_number,
            good_points=sections.good_points,
            improvements=sections.improvements,
            example=sections.example,
        ),
        directive=directive,
        used_fallback=used_fallback,
    )


def extract_proposition(text: str) -> str:
    """Strip the 'Stelling:' marker and quotes from a proposition reply."""
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    if not lines:
        return ""
    proposition = _PROPOSITION_RE.sub("", lines[0]).strip()
    return proposition.strip("*_").strip().strip('"').strip("'").strip()


def format_structured_response(
    result: ParseResult, phase: PromptPhase = PromptPhase.ROUND
) -> str:
    """Render a parse result back into the labelled layout the parser reads."""
    lines: list[str] = []
    if result.feedback.good_points:
        lines.append(GOOD_LABEL)
        lines.extend(f"- {point}" for point in result.feedback.good_points)
    if result.feedback.improvements:
        lines.append(IMPROVEMENT_LABEL)
        lines.extend(f"- {point}" for point in result.feedback.improvements)
    if result.feedback.example:
        lines.append(f"{EXAMPLE_LABEL} {result.feedback.example}")
    if result.directive:
        label = REFLECTION_LABEL if phase == PromptPhase.FINAL else COUNTER_ARGUMENT_LABEL
        lines.append(f"{label} {result.directive}")
    return "\n".join(lines)

"""Debate training session flow and feedback extraction."""

from .core import DebateCoach
from .types import GenerationMode, PromptPhase, SessionState, TurnRole, TurnTag
from .models import FeedbackRecord, Session
from .perspectives import PERSPECTIVES, Perspective, perspective_for_round
from .prompt_builder import PromptBuilder
from .response_parser import (
    DEFAULT_REFLECTION_QUESTION,
    ParseResult,
    extract_proposition,
    format_structured_response,
    parse_response,
)
from .transcript import Transcript, Turn
from .generation import GenerationService, TextGenerator
from .exceptions import GenerationFailure

__all__ = [
    "DebateCoach",
    "GenerationMode",
    "PromptPhase",
    "SessionState",
    "TurnRole",
    "TurnTag",
    "FeedbackRecord",
    "Session",
    "PERSPECTIVES",
    "Perspective",
    "perspective_for_round",
    "PromptBuilder",
    "DEFAULT_REFLECTION_QUESTION",
    "ParseResult",
    "extract_proposition",
    "format_structured_response",
    "parse_response",
    "Transcript",
    "Turn",
    "GenerationService",
    "TextGenerator",
    "GenerationFailure",
]

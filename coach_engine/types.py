"""Shared types and enums for the coach engine."""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, TypeAlias, TypedDict

if TYPE_CHECKING:
    from .transcript import Turn


class TurnEventData(TypedDict):
    """Data structure for new_turn event payloads."""

    id: str
    role: str
    text: str
    created_at: str
    tags: list[str]


class FeedbackEventData(TypedDict):
    """Data structure for feedback event payloads."""

    good_points: list[str]
    improvements: list[str]
    example: str
    round_number: int


# Callback type aliases for coach engine events
TurnCallback: TypeAlias = Callable[["Turn"], Awaitable[None]]
ResetCallback: TypeAlias = Callable[[], Awaitable[None]]
TranscriptCallback: TypeAlias = Callable[[str], None]


class SessionState(Enum):
    """Lifecycle states of a training session."""

    IDLE = "idle"
    CONFIGURING = "configuring"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class PromptPhase(Enum):
    """Kinds of instructions sent to the generation service."""

    PROPOSITION = "proposition"
    OPENING = "opening"
    ROUND = "round"
    FINAL = "final"


class TurnRole(Enum):
    """Who wrote a transcript entry."""

    COACH = "coach"
    STUDENT = "student"


class TurnTag(Enum):
    """Role of a turn within the debate, used for display."""

    PROPOSITION = "proposition"
    COUNTER_ARGUMENT = "counter_argument"
    FEEDBACK = "feedback"
    REFLECTION = "reflection"


class GenerationMode(Enum):
    """Generation service variants."""

    GROUNDED = "internet"
    REASONING = "smart"

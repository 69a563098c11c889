"""Data models for the coach engine."""

from dataclasses import dataclass, field
from datetime import datetime

from .types import FeedbackEventData


@dataclass(frozen=True)
class FeedbackRecord:
    """Structured feedback on one learner reply."""

    round_number: int
    good_points: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    example: str = ""

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to show in the feedback panel."""
        return not (self.good_points or self.improvements or self.example)

    def to_dict(self) -> FeedbackEventData:
        return {
            "good_points": list(self.good_points),
            "improvements": list(self.improvements),
            "example": self.example,
            "round_number": self.round_number,
        }


@dataclass
class Session:
    """State of the live training run."""

    proposition: str
    level: str
    topic: str
    max_rounds: int
    current_counter_argument: str = ""
    round_number: int = 1
    completed: bool = False
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def is_final_round(self) -> bool:
        return self.round_number >= self.max_rounds

    @property
    def progress_percentage(self) -> int:
        return round(self.round_number / self.max_rounds * 100)

from pydantic import BaseModel, Field

from web.feedback_response import FeedbackResponse
from web.turn_response import TurnResponse


class SessionResponse(BaseModel):
    """Response model for the training session."""

    state: str
    is_loading: bool
    level: str
    topic: str
    max_rounds: int
    proposition: str | None = None
    round_number: int | None = None
    current_counter_argument: str | None = None
    completed: bool = False
    progress_percentage: int = 0
    feedback: FeedbackResponse | None = None
    input_buffer: str = ""
    input_locked: bool = False
    speech_enabled: bool = False
    is_listening: bool = False
    transcript: list[TurnResponse] = Field(default_factory=list)
    # Whether the requested transition was applied; None for plain reads
    accepted: bool | None = None

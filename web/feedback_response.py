from pydantic import BaseModel


class FeedbackResponse(BaseModel):
    """Response model for the feedback panel."""

    round_number: int
    good_points: list[str]
    improvements: list[str]
    example: str

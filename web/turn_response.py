from pydantic import BaseModel


class TurnResponse(BaseModel):
    """Response model for transcript turns."""

    id: str
    role: str
    text: str
    created_at: str
    tags: list[str]

from pydantic import BaseModel, field_validator


class SessionSetupRequest(BaseModel):
    """Request model for configuring the next training session."""

    level: str
    topic: str
    max_rounds: int | None = None

    @field_validator("level", "topic")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Trim surrounding whitespace; emptiness is checked by the coach."""
        return v.strip()

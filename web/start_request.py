from pydantic import BaseModel


class StartRequest(BaseModel):
    """Optional overrides when starting a session."""

    level: str | None = None
    topic: str | None = None

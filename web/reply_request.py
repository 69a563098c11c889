from pydantic import BaseModel


class ReplyRequest(BaseModel):
    """Learner reply; without text the pending input buffer is submitted."""

    text: str | None = None

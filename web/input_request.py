from pydantic import BaseModel


class InputRequest(BaseModel):
    """Manual edit of the pending input buffer, or a recognized transcript."""

    text: str

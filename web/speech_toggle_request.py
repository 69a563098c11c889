from pydantic import BaseModel


class SpeechToggleRequest(BaseModel):
    """Turn reading coach messages aloud on or off."""

    enabled: bool

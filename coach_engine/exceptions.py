"""Errors raised by the coach engine."""

from .types import GenerationMode


class GenerationFailure(RuntimeError):
    """The generation service rejected a call or returned nothing usable."""

    def __init__(self, mode: GenerationMode, reason: str):
        super().__init__(f"{mode.value} generation failed: {reason}")
        self.mode = mode
        self.reason = reason

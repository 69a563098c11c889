from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from config.settings import SpeechConfig
    from coach_engine.types import TranscriptCallback


class SpeechSynthesizer(ABC):
    """Abstract base class for text-to-speech output."""

    def __init__(self, speech_config: "SpeechConfig"):
        self.speech_config = speech_config

    @abstractmethod
    async def speak(self, text: str) -> None:
        """Start speaking already-cleaned text."""
        pass

    @abstractmethod
    async def stop_speaking(self) -> None:
        """Stop the current utterance, if any."""
        pass


class SpeechRecognizer(ABC):
    """Abstract base class for speech-to-text input."""

    def __init__(self, speech_config: "SpeechConfig"):
        self.speech_config = speech_config

    @abstractmethod
    async def start_listening(self, on_transcript: "TranscriptCallback") -> None:
        """Begin a listening session; on_transcript receives the recognized text."""
        pass

    @abstractmethod
    async def stop_listening(self) -> None:
        """End the listening session without producing a transcript."""
        pass

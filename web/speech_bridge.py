"""Speech collaborators that delegate the actual audio work to the browser."""

from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias
import logging

from config.settings import SpeechConfig
from coach_engine.types import TranscriptCallback
from speech.base import SpeechRecognizer, SpeechSynthesizer

logger = logging.getLogger(__name__)

Broadcast: TypeAlias = Callable[[dict[str, Any]], Awaitable[None]]


class WebSocketSpeechSynthesizer(SpeechSynthesizer):
    """Sends speak / stop_speaking events to connected browsers."""

    def __init__(self, speech_config: SpeechConfig, broadcast: Broadcast):
        super().__init__(speech_config)
        self._broadcast = broadcast

    async def speak(self, text: str) -> None:
        await self._broadcast(
            {
                "type": "speak",
                "text": text,
                "locale": self.speech_config.locale,
                "rate": self.speech_config.rate,
                "pitch": self.speech_config.pitch,
                "volume": self.speech_config.volume,
            }
        )

    async def stop_speaking(self) -> None:
        await self._broadcast({"type": "stop_speaking"})


class BrowserSpeechRecognizer(SpeechRecognizer):
    """Waits for the browser to post what it recognized."""

    def __init__(self, speech_config: SpeechConfig):
        super().__init__(speech_config)
        self._on_transcript: TranscriptCallback | None = None

    @property
    def is_active(self) -> bool:
        return self._on_transcript is not None

    async def start_listening(self, on_transcript: TranscriptCallback) -> None:
        logger.debug(f"Listening for {self.speech_config.locale} speech")
        self._on_transcript = on_transcript

    async def stop_listening(self) -> None:
        self._on_transcript = None

    def deliver(self, text: str) -> bool:
        """Hand a browser transcript to the active listening session."""
        callback, self._on_transcript = self._on_transcript, None
        if callback is None:
            logger.debug("Transcript arrived while not listening, ignoring")
            return False
        callback(text)
        return True

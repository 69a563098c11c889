"""Speech playback and listening controllers attached to a DebateCoach."""

from typing import TYPE_CHECKING
import asyncio
import logging

from config.settings import SpeechConfig

from .base import SpeechRecognizer, SpeechSynthesizer
from .text_cleaning import clean_text_for_speech

if TYPE_CHECKING:
    from coach_engine.core import DebateCoach
    from coach_engine.transcript import Turn

logger = logging.getLogger(__name__)


class SpeechPlayback:
    """Reads new coach turns aloud after a short delay.

    Only the most recent request is ever spoken: a new request cancels the
    pending one and stops the current utterance first.
    """

    def __init__(self, synthesizer: SpeechSynthesizer, speech_config: SpeechConfig):
        self.synthesizer = synthesizer
        self.speech_config = speech_config
        self.enabled = speech_config.enabled
        self._pending: asyncio.Task[None] | None = None
        self._request = 0

    def attach(self, coach: "DebateCoach") -> None:
        coach.add_coach_turn_listener(self.on_coach_turn)
        coach.add_reset_listener(self.cancel)

    @property
    def has_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def on_coach_turn(self, turn: "Turn") -> None:
        if self.enabled:
            await self.play(turn.text)

    async def play(self, text: str) -> None:
        """Schedule text for playback, replacing anything pending or playing."""
        self._cancel_pending()
        request = self._request
        await self.synthesizer.stop_speaking()
        if request != self._request:
            logger.debug("Playback superseded while stopping the current utterance")
            return

        cleaned = clean_text_for_speech(text)
        if not cleaned:
            return
        self._pending = asyncio.create_task(self._speak_later(cleaned))

    async def _speak_later(self, text: str) -> None:
        await asyncio.sleep(self.speech_config.playback_delay)
        try:
            await self.synthesizer.speak(text)
        except Exception as e:
            logger.error(f"Speech synthesis failed: {e}")

    def _cancel_pending(self) -> None:
        self._request += 1
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def cancel(self) -> None:
        """Drop pending playback and silence the synthesizer."""
        self._cancel_pending()
        await self.synthesizer.stop_speaking()

    async def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        logger.info(f"Speech output {'enabled' if enabled else 'disabled'}")
        if not enabled:
            await self.cancel()


class SpeechInput:
    """Feeds one recognized transcript per listening session into the coach.

    While listening, manual edits of the coach's input buffer are refused.
    """

    def __init__(self, recognizer: SpeechRecognizer, coach: "DebateCoach"):
        self.recognizer = recognizer
        self.coach = coach
        self.is_listening = False
        self._listen_session = 0

    def attach(self) -> None:
        self.coach.add_reset_listener(self._on_reset)

    async def start_listening(self) -> bool:
        if self.is_listening:
            logger.debug("Already listening")
            return False

        self._listen_session += 1
        self.is_listening = True
        self.coach.input_locked = True

        listen_session = self._listen_session

        def on_transcript(text: str) -> None:
            if listen_session != self._listen_session:
                logger.debug("Ignoring transcript from a finished listening session")
                return
            self.coach.append_input(text)
            logger.info(f"Received transcript ({len(text)} chars)")
            self._finish()

        try:
            await self.recognizer.start_listening(on_transcript)
        except Exception:
            self._finish()
            raise
        return True

    async def stop_listening(self) -> bool:
        if not self.is_listening:
            return False
        self._finish()
        await self.recognizer.stop_listening()
        return True

    def _finish(self) -> None:
        self._listen_session += 1
        self.is_listening = False
        self.coach.input_locked = False

    async def _on_reset(self) -> None:
        await self.stop_listening()

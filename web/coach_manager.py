"""Single training session shared by the REST and WebSocket endpoints."""

from typing import Any
import logging

from fastapi import WebSocket

from config.settings import AppConfig
from coach_engine import DebateCoach, GenerationService, TextGenerator, Turn, TurnRole, TurnTag
from models.manager import ModelManager
from speech import SpeechInput, SpeechPlayback
from web.speech_bridge import BrowserSpeechRecognizer, WebSocketSpeechSynthesizer

logger = logging.getLogger(__name__)


class CoachManager:
    """Owns the debate coach, its speech controllers and WebSocket connections."""

    def __init__(self, config: AppConfig, generator: TextGenerator | None = None):
        self.config = config
        self.model_manager = ModelManager(config.system)
        self.generator = generator or GenerationService(config, self.model_manager)
        self.coach = DebateCoach(config, self.generator)
        self.connections: list[WebSocket] = []

        self.synthesizer = WebSocketSpeechSynthesizer(config.speech, self._broadcast)
        self.recognizer = BrowserSpeechRecognizer(config.speech)
        self.playback = SpeechPlayback(self.synthesizer, config.speech)
        self.speech_input = SpeechInput(self.recognizer, self.coach)

        self.coach.add_turn_listener(self._on_turn)
        self.playback.attach(self.coach)
        self.speech_input.attach()
        self.coach.add_reset_listener(self.broadcast_state)

    def snapshot(self, accepted: bool | None = None) -> dict[str, Any]:
        """Session state plus speech flags, as returned by the REST API."""
        data = self.coach.to_dict()
        data["speech_enabled"] = self.playback.enabled
        data["is_listening"] = self.speech_input.is_listening
        data["accepted"] = accepted
        return data

    async def _on_turn(self, turn: Turn) -> None:
        await self._broadcast({"type": "new_turn", "turn": turn.to_dict()})

        answers_reply = (
            turn.role == TurnRole.COACH
            and TurnTag.PROPOSITION not in turn.tags
            and turn.tags & {TurnTag.COUNTER_ARGUMENT, TurnTag.REFLECTION}
        )
        if answers_reply and self.coach.feedback is not None:
            await self._broadcast(
                {"type": "feedback", "feedback": self.coach.feedback.to_dict()}
            )

        if turn.role == TurnRole.COACH:
            await self.broadcast_state()

    async def broadcast_state(self) -> None:
        state = self.snapshot()
        state.pop("transcript")
        state.pop("accepted")
        await self._broadcast({"type": "state", "session": state})

    async def _broadcast(self, message: dict[str, Any]) -> None:
        """Broadcast message to all connected clients."""
        dead_connections = []
        for websocket in self.connections:
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.debug(f"WebSocket send failed: {e}")
                dead_connections.append(websocket)

        for conn in dead_connections:
            self.connections.remove(conn)

    def add_connection(self, websocket: WebSocket) -> None:
        self.connections.append(websocket)

    def remove_connection(self, websocket: WebSocket) -> None:
        if websocket in self.connections:
            self.connections.remove(websocket)

"""Session controller that sequences a debate training run."""

from collections.abc import Iterable
from dataclasses import replace
from typing import Any
import asyncio
import logging

from config.settings import AppConfig

from .exceptions import GenerationFailure
from .generation import TextGenerator
from .models import FeedbackRecord, Session
from .perspectives import perspective_for_round
from .prompt_builder import PromptBuilder
from .response_parser import extract_proposition, parse_response
from .transcript import Transcript, Turn
from .types import (
    GenerationMode,
    PromptPhase,
    ResetCallback,
    SessionState,
    TurnCallback,
    TurnRole,
    TurnTag,
)

logger = logging.getLogger(__name__)

WELCOME_TEMPLATE = (
    "Welkom bij je debattraining! 🎯\n\n"
    "**Stelling:** {proposition}\n\n"
    "Ik ga je uitdagen met tegenargumenten. Jouw taak is om sterke reacties te geven "
    "die je standpunt verdedigen.\n\n"
    "**Eerste tegenargument:** {counter_argument}"
)
DEFAULT_OPENING_COUNTER_ARGUMENT = (
    "Laten we beginnen met een praktisch punt - deze maatregel zou veel te duur zijn "
    "om uit te voeren. Hoe reageer je daarop?"
)
START_FAILURE_TEXT = (
    "Sorry, er ging iets mis bij het starten van het debat. Probeer het opnieuw. 😔"
)
APOLOGY_TEXT = "Sorry, er ging iets mis. Probeer het opnieuw. 😔"


class DebateCoach:
    """Single-session state machine for argumentation training.

    The coach owns the live ``Session``, its ``Transcript`` and the latest
    ``FeedbackRecord``. At most one generation call is outstanding at any
    time; ``start`` and ``submit`` calls made while one is running are
    ignored and return ``False``.
    """

    def __init__(
        self,
        config: AppConfig,
        generator: TextGenerator,
        prompt_builder: PromptBuilder | None = None,
    ):
        self.config = config
        self.generator = generator
        self.prompt_builder = prompt_builder or PromptBuilder()

        self.level = config.coach.level
        self.topic = config.coach.topic
        self.max_rounds = config.coach.max_rounds

        self.state = SessionState.IDLE
        self.session: Session | None = None
        self.transcript = Transcript()
        self.feedback: FeedbackRecord | None = None
        self.is_loading = False
        self.input_buffer = ""
        self.input_locked = False

        self._turn_listeners: list[TurnCallback] = []
        self._coach_turn_listeners: list[TurnCallback] = []
        self._reset_listeners: list[ResetCallback] = []
        self._inflight: asyncio.Future[str] | None = None
        self._epoch = 0

    # ------------------------------------------------------------------
    # Listener registration
    # ------------------------------------------------------------------

    def add_coach_turn_listener(self, callback: TurnCallback) -> None:
        """Await callback after every coach turn, apologies included."""
        self._coach_turn_listeners.append(callback)

    def add_turn_listener(self, callback: TurnCallback) -> None:
        """Await callback after every appended turn, student or coach."""
        self._turn_listeners.append(callback)

    def add_reset_listener(self, callback: ResetCallback) -> None:
        self._reset_listeners.append(callback)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @property
    def can_start(self) -> bool:
        return not self.is_loading and self.state in (
            SessionState.IDLE,
            SessionState.CONFIGURING,
        )

    @property
    def can_submit(self) -> bool:
        return (
            not self.is_loading
            and self.state == SessionState.IN_PROGRESS
            and self.session is not None
        )

    def configure(
        self, level: str, topic: str, max_rounds: int | None = None
    ) -> bool:
        """Capture settings for the next session.

        Raises ValueError for blank level/topic or max_rounds below 1.
        """
        if not self.can_start:
            logger.debug(f"Ignoring configure in state {self.state.value}")
            return False
        if not level.strip() or not topic.strip():
            raise ValueError("Level and topic cannot be empty")
        if max_rounds is not None and max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")

        self.level = level.strip()
        self.topic = topic.strip()
        if max_rounds is not None:
            self.max_rounds = max_rounds
        self.state = SessionState.CONFIGURING
        logger.info(
            f"Configured session: level={self.level}, topic={self.topic}, rounds={self.max_rounds}"
        )
        return True

    async def start(self, level: str | None = None, topic: str | None = None) -> bool:
        """Generate a proposition and open round 1."""
        if not self.can_start:
            logger.debug(
                f"Ignoring start in state {self.state.value} (loading={self.is_loading})"
            )
            return False

        level = level or self.level
        topic = topic or self.topic
        self.transcript.clear()
        self.feedback = None
        self.session = None
        self.is_loading = True
        epoch = self._epoch

        try:
            draft = Session(
                proposition="",
                level=level,
                topic=topic,
                max_rounds=self.max_rounds,
            )
            try:
                raw = await self._call(
                    self.prompt_builder.build(draft, PromptPhase.PROPOSITION),
                    GenerationMode.GROUNDED,
                    grounding_enabled=True,
                )
                if raw is None:
                    return False
                proposition = extract_proposition(raw)
                if not proposition:
                    raise GenerationFailure(
                        GenerationMode.GROUNDED, "reply did not contain a proposition"
                    )
            except GenerationFailure as e:
                logger.error(f"Could not generate a proposition: {e}")
                self.is_loading = False
                await self._append_coach_turn(START_FAILURE_TEXT)
                return False

            session = replace(draft, proposition=proposition)
            counter_argument = await self._opening_counter_argument(session)
            if counter_argument is None:
                return False

            session.current_counter_argument = counter_argument
            self.level, self.topic = level, topic
            self.session = session
            self.state = SessionState.IN_PROGRESS
            self.is_loading = False
            logger.info(
                f"Started session ({session.max_rounds} rounds): '{session.proposition}'"
            )
            await self._append_coach_turn(
                WELCOME_TEMPLATE.format(
                    proposition=proposition, counter_argument=counter_argument
                ),
                (TurnTag.PROPOSITION, TurnTag.COUNTER_ARGUMENT),
            )
            return epoch == self._epoch
        finally:
            if epoch == self._epoch:
                self.is_loading = False

    async def submit(self, reply: str) -> bool:
        """Evaluate the learner's reply and advance the session.

        Typed replies are refused while speech input is active; use
        submit_pending() to send the recognized text.
        """
        if self.input_locked:
            logger.debug("Ignoring typed reply while listening")
            return False
        return await self._submit(reply)

    async def _submit(self, reply: str) -> bool:
        if not self.can_submit or self.session is None:
            logger.debug(
                f"Ignoring submit in state {self.state.value} (loading={self.is_loading})"
            )
            return False

        text = reply.strip()
        if not text:
            logger.debug("Ignoring blank reply")
            return False

        session = self.session
        phase = self.prompt_builder.phase_for(session)
        prompt = self.prompt_builder.build(session, phase, text)
        self.is_loading = True
        epoch = self._epoch

        try:
            await self._append_turn(TurnRole.STUDENT, text)
            if epoch != self._epoch:
                return False
            try:
                raw = await self._call(prompt, GenerationMode.REASONING)
            except GenerationFailure as e:
                logger.error(f"Round {session.round_number} generation failed: {e}")
                self.is_loading = False
                await self._append_coach_turn(APOLOGY_TEXT)
                return False
            if raw is None:
                return False

            result = parse_response(raw, session.round_number, phase)

            if phase == PromptPhase.FINAL:
                self.feedback = result.feedback
                session.completed = True
                self.state = SessionState.COMPLETED
                self.is_loading = False
                logger.info(f"Session completed after {session.round_number} rounds")
                await self._append_coach_turn(result.directive, (TurnTag.REFLECTION,))
            else:
                counter_argument = result.directive or self._fallback_counter_argument(
                    session.round_number
                )
                self.feedback = result.feedback
                session.current_counter_argument = counter_argument
                session.round_number += 1
                self.is_loading = False
                logger.info(
                    f"Advanced to round {session.round_number}/{session.max_rounds}"
                )
                await self._append_coach_turn(
                    counter_argument, (TurnTag.COUNTER_ARGUMENT,)
                )
            return epoch == self._epoch
        finally:
            if epoch == self._epoch:
                self.is_loading = False

    async def submit_pending(self) -> bool:
        """Submit the pending input buffer (typed text or speech transcript)."""
        if not self.can_submit or not self.input_buffer.strip():
            return False
        text, self.input_buffer = self.input_buffer, ""
        return await self._submit(text)

    def set_input(self, text: str) -> bool:
        """Replace the pending input buffer; refused while speech input is active."""
        if self.input_locked:
            logger.debug("Ignoring manual input while listening")
            return False
        self.input_buffer = text
        return True

    def append_input(self, text: str) -> None:
        """Append recognized speech to the pending input buffer."""
        text = text.strip()
        if not text:
            return
        self.input_buffer = f"{self.input_buffer} {text}" if self.input_buffer.strip() else text

    async def reset(self) -> None:
        """Discard the session and return to IDLE."""
        self._epoch += 1
        if self._inflight is not None and not self._inflight.done():
            logger.info("Cancelling outstanding generation call")
            self._inflight.cancel()
        self._inflight = None

        self.state = SessionState.IDLE
        self.session = None
        self.transcript.clear()
        self.feedback = None
        self.is_loading = False
        self.input_buffer = ""
        logger.info("Session reset")

        for callback in self._reset_listeners:
            try:
                await callback()
            except Exception as e:
                logger.error(f"Reset listener failed: {e}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _call(
        self, prompt: str, mode: GenerationMode, grounding_enabled: bool = False
    ) -> str | None:
        """Run one generation call; None means the session was reset meanwhile."""
        epoch = self._epoch
        task = asyncio.ensure_future(
            self.generator.generate(prompt, mode, grounding_enabled)
        )
        self._inflight = task
        try:
            result = await task
        except (asyncio.CancelledError, GenerationFailure):
            if epoch != self._epoch:
                logger.debug(f"Dropped failed {mode.value} call for a discarded session")
                return None
            raise
        finally:
            if self._inflight is task:
                self._inflight = None

        if epoch != self._epoch:
            logger.debug(f"Dropped {mode.value} result for a discarded session")
            return None
        return result

    async def _opening_counter_argument(self, session: Session) -> str | None:
        if not self.config.coach.generate_opening_counter_argument:
            return DEFAULT_OPENING_COUNTER_ARGUMENT
        try:
            raw = await self._call(
                self.prompt_builder.build(session, PromptPhase.OPENING),
                GenerationMode.REASONING,
            )
        except GenerationFailure as e:
            logger.warning(f"Opening counter-argument failed, using the default: {e}")
            return DEFAULT_OPENING_COUNTER_ARGUMENT
        if raw is None:
            return None
        directive = parse_response(raw, 1, PromptPhase.OPENING).directive
        return directive or DEFAULT_OPENING_COUNTER_ARGUMENT

    def _fallback_counter_argument(self, round_number: int) -> str:
        perspective = perspective_for_round(round_number)
        return (
            f"Bekijk de stelling nu eens vanuit {perspective.description} perspectief. "
            "Welk bezwaar zou iemand dan hebben, en hoe weerleg je dat?"
        )

    async def _append_coach_turn(
        self, text: str, tags: Iterable[TurnTag] = ()
    ) -> Turn:
        epoch = self._epoch
        turn = await self._append_turn(TurnRole.COACH, text, tags)
        for callback in list(self._coach_turn_listeners):
            if epoch != self._epoch:
                logger.debug("Session reset during turn hooks, skipping the rest")
                break
            try:
                await callback(turn)
            except Exception as e:
                logger.error(f"Coach turn listener failed: {e}")
        return turn

    async def _append_turn(
        self, role: TurnRole, text: str, tags: Iterable[TurnTag] = ()
    ) -> Turn:
        epoch = self._epoch
        turn = self.transcript.append(role, text, tags)
        for callback in list(self._turn_listeners):
            if epoch != self._epoch:
                break
            try:
                await callback(turn)
            except Exception as e:
                logger.error(f"Turn listener failed: {e}")
        return turn

    def to_dict(self) -> dict[str, Any]:
        """Snapshot of the controller for API responses."""
        session = self.session
        return {
            "state": self.state.value,
            "is_loading": self.is_loading,
            "level": self.level,
            "topic": self.topic,
            "max_rounds": self.max_rounds,
            "proposition": session.proposition if session else None,
            "round_number": session.round_number if session else None,
            "current_counter_argument": (
                session.current_counter_argument if session else None
            ),
            "completed": session.completed if session else False,
            "progress_percentage": session.progress_percentage if session else 0,
            "feedback": self.feedback.to_dict() if self.feedback else None,
            "input_buffer": self.input_buffer,
            "input_locked": self.input_locked,
            "transcript": self.transcript.to_list(),
        }

"""Interactive terminal client for a debate training session."""

from collections.abc import Callable
import asyncio
import logging

from config.settings import AppConfig
from coach_engine import DebateCoach, FeedbackRecord, GenerationService, SessionState, TextGenerator, Turn
from models.manager import ModelManager

logger = logging.getLogger(__name__)

QUIT_COMMANDS = {"/stop", "/quit", "/exit"}


class TerminalCoach:
    """Plays one session on stdin/stdout."""

    def __init__(
        self,
        coach: DebateCoach,
        read_line: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ):
        self.coach = coach
        self.read_line = read_line
        self.write = write
        coach.add_coach_turn_listener(self._show_turn)

    async def _show_turn(self, turn: Turn) -> None:
        self.write(f"\n🎓 {turn.header}\n{turn.text}\n")

    def _show_feedback(self, feedback: FeedbackRecord) -> None:
        if feedback.is_empty:
            return
        lines = [f"--- Feedback ronde {feedback.round_number} ---"]
        lines.extend(f"✓ {point}" for point in feedback.good_points)
        lines.extend(f"→ {point}" for point in feedback.improvements)
        if feedback.example:
            lines.append(f"💡 Voorbeeld: {feedback.example}")
        self.write("\n".join(lines))

    async def _read(self) -> str | None:
        session = self.coach.session
        prompt = f"[{session.round_number}/{session.max_rounds}] > " if session else "> "
        try:
            return await asyncio.to_thread(self.read_line, prompt)
        except EOFError:
            return None

    async def run(self) -> SessionState:
        """Run until the session completes or the learner quits."""
        self.write(f"Debattraining ({self.coach.level}, {self.coach.topic})")
        self.write("Typ je reactie en druk op Enter. Stoppen met /stop.\n")
        self.write("⏳ Stelling wordt gegenereerd...")

        if not await self.coach.start():
            return self.coach.state

        while self.coach.state == SessionState.IN_PROGRESS:
            line = await self._read()
            if line is None or line.strip().lower() in QUIT_COMMANDS:
                self.write("Debat gestopt.")
                break

            previous_feedback = self.coach.feedback
            if await self.coach.submit(line) and self.coach.feedback is not previous_feedback:
                self._show_feedback(self.coach.feedback)

        if self.coach.state == SessionState.COMPLETED:
            self.write("\n🏁 Debat afgerond. Goed gedaan!")
        return self.coach.state


async def run_cli(config: AppConfig, generator: TextGenerator | None = None) -> SessionState:
    """Build a coach from config and play a session in the terminal."""
    generator = generator or GenerationService(config, ModelManager(config.system))
    coach = DebateCoach(config, generator)
    return await TerminalCoach(coach).run()

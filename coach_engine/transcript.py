"""Append-only log of the turns exchanged in a training session."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
import logging
import uuid

from .types import TurnEventData, TurnRole, TurnTag

logger = logging.getLogger(__name__)

_TAG_HEADERS: list[tuple[frozenset[TurnTag], str]] = [
    (frozenset({TurnTag.PROPOSITION}), "Stelling & Eerste Tegenargument"),
    (frozenset({TurnTag.REFLECTION}), "Samenvatting & Reflectie"),
    (frozenset({TurnTag.COUNTER_ARGUMENT}), "Tegenargument"),
    (frozenset({TurnTag.FEEDBACK}), "Feedback"),
]


def _new_turn_id() -> str:
    return f"msg_{uuid.uuid4().hex[:16]}"


@dataclass(frozen=True)
class Turn:
    """A single transcript entry."""

    role: TurnRole
    text: str
    tags: frozenset[TurnTag] = frozenset()
    id: str = field(default_factory=_new_turn_id)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def header(self) -> str:
        """Display header, e.g. 'Tegenargument' or 'Jouw reactie'."""
        if self.role == TurnRole.STUDENT:
            return "Jouw reactie"
        for required, header in _TAG_HEADERS:
            if required <= self.tags:
                return header
        return "Debatcoach"

    def to_dict(self) -> TurnEventData:
        return {
            "id": self.id,
            "role": self.role.value,
            "text": self.text,
            "created_at": self.created_at.isoformat(),
            "tags": sorted(tag.value for tag in self.tags),
        }


class Transcript:
    """Ordered, append-only list of turns."""

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self._turns)

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def last(self) -> Turn | None:
        return self._turns[-1] if self._turns else None

    def append(
        self, role: TurnRole, text: str, tags: Iterable[TurnTag] = ()
    ) -> Turn:
        """Create a turn and add it to the end of the log."""
        turn = Turn(role=role, text=text, tags=frozenset(tags))
        self._turns.append(turn)
        logger.debug(
            f"Transcript += {turn.role.value} turn {turn.id} "
            f"[{', '.join(sorted(tag.value for tag in turn.tags))}] ({len(text)} chars)"
        )
        return turn

    def clear(self) -> None:
        self._turns.clear()

    def to_list(self) -> list[TurnEventData]:
        return [turn.to_dict() for turn in self._turns]

    def format_for_display(self, proposition: str | None = None) -> str:
        """Format the transcript as plain text."""
        lines = ["DEBATTRAINING"]
        if proposition:
            lines.append(f"Stelling: {proposition}")
        lines.extend(["", "=" * 60, ""])

        for turn in self._turns:
            lines.extend(
                [
                    f"[{turn.header.upper()}] {turn.created_at.strftime('%H:%M')}",
                    turn.text.strip(),
                    "",
                ]
            )

        lines.extend(["=" * 60, f"EINDE - {len(self._turns)} berichten"])
        return "\n".join(lines)

"""Argumentative perspectives used to vary successive counter-arguments."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Perspective:
    """One angle from which a counter-argument can be raised."""

    key: str
    label: str
    focus: str

    @property
    def description(self) -> str:
        """Prompt-ready description, e.g. 'economisch (kosten, banen, groei)'."""
        return f"{self.label} ({self.focus})"


PERSPECTIVES: tuple[Perspective, ...] = (
    Perspective("economic", "economisch", "kosten, banen, groei"),
    Perspective("ethical", "ethisch", "goed/fout, rechtvaardigheid"),
    Perspective("practical", "praktisch", "uitvoerbaarheid, logistiek"),
    Perspective("emotional", "emotioneel", "gevoelens, angsten"),
    Perspective("legal", "juridisch", "wetten, rechten"),
    Perspective("scientific", "wetenschappelijk", "onderzoek, feiten"),
    Perspective("social", "sociaal", "gemeenschap, samenleving"),
    Perspective("technological", "technologisch", "innovatie, digitalisering"),
)


def perspective_for_round(round_number: int) -> Perspective:
    """Perspective of the counter-argument issued after the reply in round_number."""
    return PERSPECTIVES[round_number % len(PERSPECTIVES)]

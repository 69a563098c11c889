"""Instruction texts sent to the generation service for each phase."""

from .models import Session
from .perspectives import PERSPECTIVES, perspective_for_round
from .types import PromptPhase

PROPOSITION_MARKER = "Stelling:"

GOOD_LABEL = "GOED:"
IMPROVEMENT_LABEL = "VERBETERING:"
EXAMPLE_LABEL = "VOORBEELD:"
COUNTER_ARGUMENT_LABEL = "TEGENARGUMENT:"
REFLECTION_LABEL = "REFLECTIE:"

EXAMPLE_PROPOSITIONS = (
    "TikTok zou verboden moeten worden voor jongeren onder de 16",
    "Scholen moeten AI-tools zoals ChatGPT volledig verbieden",
    "Nederland moet een vierdaagse werkweek invoeren",
)


class PromptBuilder:
    """Builds the outbound instruction text for every phase of a session.

    All methods are pure: they only read the session they are given and never
    look at what the service answers. Interpreting replies is the job of
    ``response_parser``.
    """

    def build(
        self, session: Session, phase: PromptPhase, learner_reply: str | None = None
    ) -> str:
        """Compose the instruction text for phase."""
        if phase == PromptPhase.PROPOSITION:
            return self.proposition_prompt(session)
        if phase == PromptPhase.OPENING:
            return self.opening_prompt(session)
        if learner_reply is None:
            raise ValueError(f"{phase.value} prompt needs the learner's reply")
        if phase == PromptPhase.ROUND:
            return self.round_prompt(session, learner_reply)
        return self.final_prompt(session, learner_reply)

    def phase_for(self, session: Session) -> PromptPhase:
        """Phase of the next learner submission."""
        return PromptPhase.FINAL if session.is_final_round else PromptPhase.ROUND

    def proposition_prompt(self, session: Session) -> str:
        year = session.started_at.year
        examples = "\n".join(f"- {example}" for example in EXAMPLE_PROPOSITIONS)
        return f"""Genereer een actuele, maatschappelijk relevante debat-stelling voor {session.level} leerlingen over het onderwerp "{session.topic}". De stelling moet:
- Actueel zijn ({year}/{year + 1})
- Controversieel genoeg voor een goed debat
- Begrijpelijk en passend bij de leeftijd van de leerlingen
- Relevant voor hun leefwereld

Geef alleen de stelling terug, geen uitleg. Begin met "{PROPOSITION_MARKER}" en geef dan één heldere zin.

Voorbeelden van goede stellingen:
{examples}

Genereer nu een nieuwe, actuele stelling:"""

    def opening_prompt(self, session: Session) -> str:
        perspective = PERSPECTIVES[0]
        return f"""Je bent een debatcoach voor {session.level} leerlingen. De stelling van dit debat is: "{session.proposition}"

Bedenk een eerste tegenargument tegen deze stelling vanuit {perspective.description} perspectief. Maximaal 2 zinnen, eindig met een vraag aan de leerling.

Antwoord precies in dit formaat:
{COUNTER_ARGUMENT_LABEL} <het tegenargument>"""

    def round_prompt(self, session: Session, learner_reply: str) -> str:
        perspective = perspective_for_round(session.round_number)
        return f"""Je bent een debatcoach voor {session.level} leerlingen. De leerling reageert op tegenargument {session.round_number} over de stelling: "{session.proposition}"

Tegenargument: "{session.current_counter_argument}"
Leerling reactie: "{learner_reply}"

Beoordeel hoe goed de reactie het tegenargument weerlegt. Geef daarna een nieuw tegenargument vanuit {perspective.description} perspectief.

Antwoord precies in dit formaat:
{GOOD_LABEL} <1 zin over wat goed is>
{IMPROVEMENT_LABEL} <1 zin over wat beter kan>
{EXAMPLE_LABEL} <een korte voorbeeldzin die laat zien hoe de reactie sterker wordt>
{COUNTER_ARGUMENT_LABEL} <nieuw tegenargument, maximaal 2 zinnen>

Houd het kort, vriendelijk en uitdagend. Gebruik geen andere kopjes."""

    def final_prompt(self, session: Session, learner_reply: str) -> str:
        return f"""Je bent een debatcoach voor {session.level} leerlingen. De leerling heeft zojuist gereageerd op tegenargument {session.round_number} over de stelling: "{session.proposition}"

Tegenargument: "{session.current_counter_argument}"
Leerling reactie: "{learner_reply}"

Dit was de laatste ronde. Geef korte feedback op deze laatste reactie en vat de sterke punten en verbeterpunten van het hele debat samen. Sluit af met één open reflectievraag, zoals "Hoe zou je dit debat anders aanpakken in een klas?" of "Welk argument vond je het moeilijkst om te weerleggen?"

Antwoord precies in dit formaat:
{GOOD_LABEL} <sterke punten, 1-2 zinnen>
{IMPROVEMENT_LABEL} <verbeterpunten, 1-2 zinnen>
{EXAMPLE_LABEL} <een korte voorbeeldzin die laat zien hoe het sterker kan>
{REFLECTION_LABEL} <één open reflectievraag>

Houd het vriendelijk, constructief en motiverend. Maximaal 6 zinnen totaal."""

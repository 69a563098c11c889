"""Tests for the DebateCoach session state machine."""

import asyncio

import pytest

from config.settings import AppConfig
from coach_engine.core import (
    APOLOGY_TEXT,
    DEFAULT_OPENING_COUNTER_ARGUMENT,
    START_FAILURE_TEXT,
    DebateCoach,
)
from coach_engine.exceptions import GenerationFailure
from coach_engine.perspectives import perspective_for_round
from coach_engine.transcript import Turn
from coach_engine.types import GenerationMode, SessionState, TurnRole, TurnTag
from fakes import BlockedReply, FakeGenerator


def test_start_opens_round_one(app_config: AppConfig, proposition_reply: str) -> None:
    generator = FakeGenerator(proposition_reply)
    coach = DebateCoach(app_config, generator)

    accepted = asyncio.run(coach.start())

    assert accepted is True
    assert coach.state == SessionState.IN_PROGRESS
    assert coach.is_loading is False
    assert coach.session is not None
    assert coach.session.proposition == "Scholen moeten huiswerk afschaffen"
    assert coach.session.round_number == 1
    assert coach.session.max_rounds == 4
    assert coach.session.current_counter_argument == DEFAULT_OPENING_COUNTER_ARGUMENT

    [welcome] = coach.transcript.turns
    assert welcome.role == TurnRole.COACH
    assert welcome.tags == {TurnTag.PROPOSITION, TurnTag.COUNTER_ARGUMENT}
    assert "Scholen moeten huiswerk afschaffen" in welcome.text
    assert DEFAULT_OPENING_COUNTER_ARGUMENT in welcome.text

    [(prompt, mode, grounding)] = generator.requests
    assert mode == GenerationMode.GROUNDED
    assert grounding is True
    assert app_config.coach.level in prompt


def test_start_uses_level_and_topic_overrides(app_config: AppConfig, proposition_reply: str) -> None:
    generator = FakeGenerator(proposition_reply)
    coach = DebateCoach(app_config, generator)

    asyncio.run(coach.start(level="vmbo", topic="sport"))

    assert coach.session is not None
    assert (coach.session.level, coach.session.topic) == ("vmbo", "sport")
    assert '"sport"' in generator.requests[0][0]


def test_start_can_generate_the_opening_counter_argument(
    app_config: AppConfig, proposition_reply: str
) -> None:
    app_config.coach.generate_opening_counter_argument = True
    generator = FakeGenerator(proposition_reply, "TEGENARGUMENT: Wie gaat dat betalen?")
    coach = DebateCoach(app_config, generator)

    assert asyncio.run(coach.start()) is True

    assert coach.session is not None
    assert coach.session.current_counter_argument == "Wie gaat dat betalen?"
    assert generator.requests[1][1] == GenerationMode.REASONING
    assert generator.requests[1][2] is False


def test_failed_opening_counter_argument_uses_the_default(
    app_config: AppConfig, proposition_reply: str
) -> None:
    app_config.coach.generate_opening_counter_argument = True
    generator = FakeGenerator(
        proposition_reply, GenerationFailure(GenerationMode.REASONING, "timeout")
    )
    coach = DebateCoach(app_config, generator)

    assert asyncio.run(coach.start()) is True

    assert coach.state == SessionState.IN_PROGRESS
    assert coach.session is not None
    assert coach.session.current_counter_argument == DEFAULT_OPENING_COUNTER_ARGUMENT


def test_failed_start_appends_one_apology(app_config: AppConfig) -> None:
    generator = FakeGenerator(GenerationFailure(GenerationMode.GROUNDED, "offline"))
    coach = DebateCoach(app_config, generator)

    assert asyncio.run(coach.start()) is False

    assert coach.state == SessionState.IDLE
    assert coach.session is None
    assert coach.is_loading is False
    assert [turn.text for turn in coach.transcript] == [START_FAILURE_TEXT]


def test_failed_start_keeps_the_configuration(app_config: AppConfig) -> None:
    coach = DebateCoach(app_config, FakeGenerator(GenerationFailure(GenerationMode.GROUNDED, "offline")))
    before = (coach.level, coach.topic)

    assert asyncio.run(coach.start(level="vmbo", topic="sport")) is False

    assert (coach.level, coach.topic) == before


def test_overrides_are_kept_after_a_successful_start(
    app_config: AppConfig, proposition_reply: str
) -> None:
    coach = DebateCoach(app_config, FakeGenerator(proposition_reply))

    asyncio.run(coach.start(level="vmbo", topic="sport"))

    assert (coach.level, coach.topic) == ("vmbo", "sport")


def test_reply_without_proposition_counts_as_failure(app_config: AppConfig) -> None:
    coach = DebateCoach(app_config, FakeGenerator("Stelling:"))

    assert asyncio.run(coach.start()) is False

    assert coach.session is None
    assert len(coach.transcript) == 1


def test_submit_advances_the_round(
    app_config: AppConfig, proposition_reply: str, round_reply: str
) -> None:
    generator = FakeGenerator(proposition_reply, round_reply)
    coach = DebateCoach(app_config, generator)

    async def scenario() -> bool:
        await coach.start()
        return await coach.submit("  Huiswerk kost te veel vrije tijd.  ")

    assert asyncio.run(scenario()) is True

    assert coach.session is not None
    assert coach.session.round_number == 2
    assert coach.session.current_counter_argument == "Wat als de kosten te hoog zijn?"
    assert coach.feedback is not None
    assert coach.feedback.round_number == 1
    assert coach.feedback.good_points == ["gebruikt een bron"]

    student, counter = coach.transcript.turns[1:]
    assert student.role == TurnRole.STUDENT
    assert student.text == "Huiswerk kost te veel vrije tijd."
    assert counter.tags == {TurnTag.COUNTER_ARGUMENT}
    assert counter.text == "Wat als de kosten te hoog zijn?"

    prompt, mode, grounding = generator.requests[1]
    assert mode == GenerationMode.REASONING
    assert grounding is False
    assert DEFAULT_OPENING_COUNTER_ARGUMENT in prompt
    assert perspective_for_round(1).description in prompt


def test_missing_counter_argument_falls_back_to_perspective(
    app_config: AppConfig, proposition_reply: str
) -> None:
    coach = DebateCoach(app_config, FakeGenerator(proposition_reply, "GOED: prima"))

    async def scenario() -> None:
        await coach.start()
        await coach.submit("reactie")

    asyncio.run(scenario())

    assert coach.session is not None
    assert coach.session.round_number == 2
    assert perspective_for_round(1).description in coach.session.current_counter_argument


def test_final_round_completes_the_session(
    short_config: AppConfig, proposition_reply: str, round_reply: str, final_reply: str
) -> None:
    coach = DebateCoach(short_config, FakeGenerator(proposition_reply, round_reply, final_reply))

    async def scenario() -> tuple[bool, bool, bool]:
        await coach.start()
        first = await coach.submit("eerste reactie")
        second = await coach.submit("tweede reactie")
        third = await coach.submit("nog een reactie")
        return first, second, third

    assert asyncio.run(scenario()) == (True, True, False)

    assert coach.state == SessionState.COMPLETED
    assert coach.session is not None
    assert coach.session.completed is True
    assert coach.session.round_number == 2
    assert coach.feedback is not None
    assert coach.feedback.round_number == 2

    last = coach.transcript.turns[-1]
    assert last.tags == {TurnTag.REFLECTION}
    assert last.text == "Welk tegenargument verraste je het meest?"
    assert len(coach.transcript) == 5


def test_single_round_session(app_config: AppConfig, proposition_reply: str) -> None:
    app_config.coach.max_rounds = 1
    coach = DebateCoach(app_config, FakeGenerator(proposition_reply, "GOED: top"))

    async def scenario() -> None:
        await coach.start()
        await coach.submit("mijn enige reactie")

    asyncio.run(scenario())

    assert coach.state == SessionState.COMPLETED
    assert coach.transcript.turns[-1].text == (
        "Welk argument vond je het moeilijkst om te weerleggen, en waarom?"
    )


def test_failed_round_keeps_round_and_feedback(
    app_config: AppConfig, proposition_reply: str, round_reply: str
) -> None:
    generator = FakeGenerator(
        proposition_reply,
        round_reply,
        GenerationFailure(GenerationMode.REASONING, "rate limited"),
    )
    coach = DebateCoach(app_config, generator)

    async def scenario() -> bool:
        await coach.start()
        await coach.submit("eerste reactie")
        return await coach.submit("tweede reactie")

    assert asyncio.run(scenario()) is False

    assert coach.state == SessionState.IN_PROGRESS
    assert coach.is_loading is False
    assert coach.session is not None
    assert coach.session.round_number == 2
    assert coach.feedback is not None
    assert coach.feedback.round_number == 1
    texts = [turn.text for turn in coach.transcript]
    assert texts.count(APOLOGY_TEXT) == 1
    assert texts[-2:] == ["tweede reactie", APOLOGY_TEXT]


def test_session_can_continue_after_a_failed_round(
    app_config: AppConfig, proposition_reply: str, round_reply: str
) -> None:
    generator = FakeGenerator(
        proposition_reply,
        GenerationFailure(GenerationMode.REASONING, "boom"),
        round_reply,
    )
    coach = DebateCoach(app_config, generator)

    async def scenario() -> tuple[bool, bool]:
        await coach.start()
        return await coach.submit("poging"), await coach.submit("nieuwe poging")

    assert asyncio.run(scenario()) == (False, True)
    assert coach.session is not None
    assert coach.session.round_number == 2


def test_calls_while_loading_are_ignored(
    app_config: AppConfig, proposition_reply: str, round_reply: str
) -> None:
    blocked = BlockedReply(round_reply)
    generator = FakeGenerator(proposition_reply, blocked)
    coach = DebateCoach(app_config, generator)

    async def scenario() -> None:
        await coach.start()
        pending = asyncio.create_task(coach.submit("eerste reactie"))
        await asyncio.sleep(0)

        assert coach.is_loading is True
        turns_before = len(coach.transcript)
        assert await coach.submit("tweede reactie") is False
        assert await coach.start() is False
        assert coach.configure("havo", "sport") is False
        assert len(coach.transcript) == turns_before
        assert coach.session is not None
        assert coach.session.round_number == 1

        blocked.release()
        assert await pending is True

    asyncio.run(scenario())

    assert coach.session is not None
    assert coach.session.round_number == 2
    assert len(generator.requests) == 2


def test_blank_reply_is_ignored(app_config: AppConfig, proposition_reply: str) -> None:
    generator = FakeGenerator(proposition_reply)
    coach = DebateCoach(app_config, generator)

    async def scenario() -> bool:
        await coach.start()
        return await coach.submit("   \n")

    assert asyncio.run(scenario()) is False
    assert len(coach.transcript) == 1
    assert len(generator.requests) == 1


def test_submit_before_start_is_ignored(app_config: AppConfig) -> None:
    generator = FakeGenerator()
    coach = DebateCoach(app_config, generator)

    assert asyncio.run(coach.submit("reactie")) is False
    assert len(coach.transcript) == 0
    assert generator.requests == []


def test_reset_discards_an_in_flight_call(
    app_config: AppConfig, proposition_reply: str, round_reply: str
) -> None:
    blocked = BlockedReply(round_reply)
    coach = DebateCoach(app_config, FakeGenerator(proposition_reply, blocked))

    async def scenario() -> bool:
        await coach.start()
        pending = asyncio.create_task(coach.submit("reactie"))
        await asyncio.sleep(0)
        await coach.reset()
        blocked.release()
        return await pending

    assert asyncio.run(scenario()) is False

    assert coach.state == SessionState.IDLE
    assert coach.session is None
    assert coach.feedback is None
    assert coach.is_loading is False
    assert len(coach.transcript) == 0


def test_reset_then_start_again(
    short_config: AppConfig, proposition_reply: str, round_reply: str, final_reply: str
) -> None:
    generator = FakeGenerator(
        proposition_reply, round_reply, final_reply, "Stelling: Vlees moet duurder worden"
    )
    coach = DebateCoach(short_config, generator)

    async def scenario() -> bool:
        await coach.start()
        await coach.submit("een")
        await coach.submit("twee")
        assert await coach.start() is False
        await coach.reset()
        return await coach.start()

    assert asyncio.run(scenario()) is True
    assert coach.session is not None
    assert coach.session.proposition == "Vlees moet duurder worden"
    assert coach.session.round_number == 1
    assert coach.feedback is None
    assert len(coach.transcript) == 1


def test_configure_applies_to_the_next_session(app_config: AppConfig, proposition_reply: str) -> None:
    coach = DebateCoach(app_config, FakeGenerator(proposition_reply))

    assert coach.configure(" vmbo ", "klimaat", max_rounds=2) is True
    assert coach.state == SessionState.CONFIGURING

    asyncio.run(coach.start())

    assert coach.session is not None
    assert (coach.session.level, coach.session.topic, coach.session.max_rounds) == (
        "vmbo",
        "klimaat",
        2,
    )
    assert coach.configure("havo", "sport") is False


@pytest.mark.parametrize(
    ("level", "topic", "max_rounds"),
    [("", "klimaat", None), ("havo", "   ", None), ("havo", "klimaat", 0)],
)
def test_configure_rejects_invalid_settings(
    app_config: AppConfig, level: str, topic: str, max_rounds: int | None
) -> None:
    coach = DebateCoach(app_config, FakeGenerator())

    with pytest.raises(ValueError):
        coach.configure(level, topic, max_rounds)
    assert coach.state == SessionState.IDLE


def test_submit_pending_uses_and_clears_the_buffer(
    app_config: AppConfig, proposition_reply: str, round_reply: str
) -> None:
    coach = DebateCoach(app_config, FakeGenerator(proposition_reply, round_reply))

    async def scenario() -> bool:
        await coach.start()
        assert await coach.submit_pending() is False
        coach.set_input("Vrije tijd is ook belangrijk.")
        return await coach.submit_pending()

    assert asyncio.run(scenario()) is True
    assert coach.input_buffer == ""
    assert coach.transcript.turns[1].text == "Vrije tijd is ook belangrijk."


def test_manual_input_is_refused_while_locked(app_config: AppConfig) -> None:
    coach = DebateCoach(app_config, FakeGenerator())
    coach.set_input("getypt")
    coach.input_locked = True

    assert coach.set_input("iets anders") is False
    coach.append_input("gesproken")

    assert coach.input_buffer == "getypt gesproken"


def test_coach_turn_listeners_run_after_the_transition(
    app_config: AppConfig, proposition_reply: str, round_reply: str
) -> None:
    coach = DebateCoach(
        app_config,
        FakeGenerator(
            proposition_reply, round_reply, GenerationFailure(GenerationMode.REASONING, "x")
        ),
    )
    seen: list[tuple[str, int | None, bool]] = []

    async def on_coach_turn(turn: Turn) -> None:
        round_number = coach.session.round_number if coach.session else None
        seen.append((turn.text, round_number, coach.is_loading))

    coach.add_coach_turn_listener(on_coach_turn)

    async def scenario() -> None:
        await coach.start()
        await coach.submit("een")
        await coach.submit("twee")

    asyncio.run(scenario())

    assert [entry[1:] for entry in seen] == [(1, False), (2, False), (2, False)]
    assert seen[1][0] == "Wat als de kosten te hoog zijn?"
    assert seen[2][0] == APOLOGY_TEXT


def test_listener_errors_do_not_break_the_session(
    app_config: AppConfig, proposition_reply: str
) -> None:
    coach = DebateCoach(app_config, FakeGenerator(proposition_reply))

    async def broken(turn: Turn) -> None:
        raise RuntimeError("speaker unplugged")

    coach.add_coach_turn_listener(broken)

    assert asyncio.run(coach.start()) is True
    assert coach.state == SessionState.IN_PROGRESS


def test_round_number_never_exceeds_max_rounds(
    app_config: AppConfig, proposition_reply: str, round_reply: str, final_reply: str
) -> None:
    coach = DebateCoach(
        app_config,
        FakeGenerator(proposition_reply, round_reply, round_reply, round_reply, final_reply),
    )
    history: list[tuple[int, bool]] = []

    async def scenario() -> None:
        await coach.start()
        for attempt in range(6):
            await coach.submit(f"reactie {attempt}")
            assert coach.session is not None
            history.append((coach.session.round_number, coach.session.completed))

    asyncio.run(scenario())

    rounds = [round_number for round_number, _ in history]
    assert rounds == sorted(rounds)
    assert max(rounds) == 4
    assert [completed for _, completed in history] == [False, False, False, True, True, True]

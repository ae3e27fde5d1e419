"""
Tests for the session/timer controller.

Covers stage construction, the countdown, turn submission with the opponent
hand-off, manual advancement and serialization of session snapshots.
"""

import json

import pytest

from debate_core import (
    ConfigurationError,
    DebateFormat,
    InvalidTurnError,
    Role,
    Session,
    SessionState,
    Side,
    StageTemplate,
    advance_stage_manually,
    create_session,
    pause_timer,
    start_timer,
    submit_user_turn,
    tick,
)
from debate_core.config import DEFAULT_FORMATS
from debate_core.controller import begin_user_turn, build_stages, stage_duration
from debate_core.fallback import FALLBACK_REPLIES
from llm_client import APIKeyError, ModelLoadingError

from fakes import BlockingOpponent, BrokenOpponent, FailingOpponent, FakeOpponent


class TestCreateSession:
    def test_two_stage_format_starts_at_user_opening(self, two_stage_format):
        session = create_session("School uniforms", two_stage_format)

        assert session.current_stage_index == 0
        assert session.remaining_seconds == 360
        assert session.is_user_turn is True
        assert session.transcript == ()
        assert session.timer_running is False
        assert session.state is SessionState.AWAITING_USER_INPUT

    def test_durations_follow_stage_names(self):
        stages = build_stages(DEFAULT_FORMATS["lincoln-douglas"])
        durations = [stage.allocated_duration_seconds for stage in stages]

        assert durations == [360, 180, 360, 180, 240, 240, 240]

    def test_crossfire_counts_as_cross_examination(self):
        assert stage_duration("Grand Crossfire") == 180
        assert stage_duration("Team B Final Focus") == 360

    def test_roles_alternate_starting_with_user(self):
        stages = build_stages(DEFAULT_FORMATS["oxford"])
        roles = [stage.speaker_role for stage in stages]

        assert roles[:4] == [Role.USER, Role.OPPONENT, Role.USER, Role.OPPONENT]

    def test_explicit_roles_are_not_forced_to_alternate(self, user_only_format):
        stages = build_stages(user_only_format)

        assert [stage.speaker_role for stage in stages] == [Role.USER, Role.USER, Role.USER]

    def test_stage_prompts_depend_on_role(self):
        stages = build_stages(DEFAULT_FORMATS["lincoln-douglas"])

        assert "main arguments" in stages[0].prompt_text
        assert stages[1].prompt_text.startswith("AI will respond")

    def test_empty_format_is_rejected(self):
        with pytest.raises(ConfigurationError):
            create_session("Topic", DebateFormat(id="empty", name="Empty", structure=()))

    def test_blank_stage_name_is_rejected(self):
        fmt = DebateFormat(id="bad", name="Bad", structure=("Opening", "   "))
        with pytest.raises(ConfigurationError):
            create_session("Topic", fmt)

    def test_non_positive_duration_is_rejected(self):
        fmt = DebateFormat(id="bad", name="Bad", structure=(StageTemplate("Opening", Role.USER, 0),))
        with pytest.raises(ConfigurationError):
            create_session("Topic", fmt)

    def test_opponent_first_stage(self):
        fmt = DebateFormat(id="opp", name="Opp", structure=(StageTemplate("Opening", Role.OPPONENT),))
        session = create_session("Topic", fmt)

        assert session.is_user_turn is False
        assert session.remaining_seconds == 360


class TestTimer:
    def test_tick_on_paused_session_is_noop(self, two_stage_format):
        session = create_session("Topic", two_stage_format)

        assert tick(session) is session

    def test_tick_on_running_session_decrements(self, two_stage_format):
        session = start_timer(create_session("Topic", two_stage_format))

        assert tick(session).remaining_seconds == 359

    def test_tick_at_zero_is_noop(self):
        fmt = DebateFormat(id="short", name="Short", structure=(StageTemplate("Opening", Role.USER, 2),))
        session = start_timer(create_session("Topic", fmt))
        session = tick(tick(session))

        assert session.remaining_seconds == 0
        assert tick(session).remaining_seconds == 0
        assert tick(pause_timer(session)).remaining_seconds == 0

    def test_pause_twice_equals_pause_once(self, two_stage_format):
        running = start_timer(create_session("Topic", two_stage_format))
        once = pause_timer(running)
        twice = pause_timer(once)

        assert twice == once
        assert twice.timer_running is False

    def test_double_start_still_ticks_once_per_call(self, two_stage_format):
        session = create_session("Topic", two_stage_format)
        session = start_timer(session)
        session = tick(session)
        session = start_timer(session)
        session = tick(session)

        assert session.remaining_seconds == 358

    def test_timer_ops_leave_stage_and_turn_alone(self, two_stage_format):
        session = create_session("Topic", two_stage_format)
        toggled = pause_timer(start_timer(session))

        assert toggled.current_stage_index == session.current_stage_index
        assert toggled.is_user_turn == session.is_user_turn

    def test_start_on_complete_session_is_noop(self, two_stage_format):
        session = create_session("Topic", two_stage_format)
        session = advance_stage_manually(advance_stage_manually(session))

        assert start_timer(session) is session


class TestSubmitUserTurn:
    @pytest.mark.asyncio
    async def test_scenario_two_stage_format(self, two_stage_format, selector):
        opponent = FakeOpponent("Uniforms limit self-expression.")
        session = create_session("School uniforms", two_stage_format)

        session = await submit_user_turn(session, "my argument", opponent, selector)

        assert len(session.transcript) == 2
        assert session.transcript[0].speaker_role is Role.USER
        assert session.transcript[1].speaker_role is Role.OPPONENT
        assert session.transcript[1].content == "Uniforms limit self-expression."
        assert session.current_stage_index == 1
        assert session.remaining_seconds == 240
        assert session.is_user_turn is False
        assert session.timer_running is False

        with pytest.raises(InvalidTurnError):
            await submit_user_turn(session, "another argument", opponent, selector)

        session = advance_stage_manually(session)
        assert session.state is SessionState.COMPLETE

    @pytest.mark.asyncio
    async def test_records_elapsed_time(self, two_stage_format, selector):
        session = start_timer(create_session("Topic", two_stage_format))
        for _ in range(5):
            session = tick(session)

        session = await submit_user_turn(session, "Point", FakeOpponent(), selector)

        assert session.transcript[0].elapsed_seconds == 5
        assert session.transcript[0].stage_name == "Opening"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    @pytest.mark.asyncio
    async def test_blank_submission_is_rejected(self, two_stage_format, selector, text):
        session = create_session("Topic", two_stage_format)
        opponent = FakeOpponent()

        with pytest.raises(InvalidTurnError):
            await submit_user_turn(session, text, opponent, selector)

        assert session.transcript == ()
        assert session.current_stage_index == 0
        assert opponent.calls == []

    @pytest.mark.asyncio
    async def test_submission_after_time_runs_out_is_rejected(self, selector):
        fmt = DebateFormat(id="short", name="Short", structure=(StageTemplate("Opening", Role.USER, 1),))
        session = tick(start_timer(create_session("Topic", fmt)))

        with pytest.raises(InvalidTurnError):
            await submit_user_turn(session, "Too late", FakeOpponent(), selector)

    @pytest.mark.asyncio
    async def test_opponent_argues_the_other_side(self, two_stage_format, selector):
        opponent = FakeOpponent()
        session = create_session("Topic", two_stage_format, user_side=Side.AGAINST)

        await submit_user_turn(session, "  Trimmed point  ", opponent, selector)

        assert opponent.calls == [("Topic", "Trimmed point", Side.FOR, "Opening")]

    @pytest.mark.asyncio
    async def test_input_session_is_not_mutated(self, two_stage_format, selector):
        session = create_session("Topic", two_stage_format)

        await submit_user_turn(session, "Point", FakeOpponent(), selector)

        assert session.transcript == ()
        assert session.current_stage_index == 0

    @pytest.mark.parametrize("error", [ModelLoadingError(), APIKeyError()])
    @pytest.mark.asyncio
    async def test_inference_failure_uses_fallback(self, two_stage_format, selector, error):
        session = create_session("Topic", two_stage_format)

        session = await submit_user_turn(session, "Point", FailingOpponent(error), selector)

        assert session.transcript[1].content == FALLBACK_REPLIES[Side.AGAINST][0]
        assert session.current_stage_index == 1

    @pytest.mark.asyncio
    async def test_inference_timeout_uses_fallback(self, two_stage_format, selector):
        session = create_session("Topic", two_stage_format)

        session = await submit_user_turn(session, "Point", BlockingOpponent(), selector, timeout=0.05)

        assert session.transcript[1].content == FALLBACK_REPLIES[Side.AGAINST][0]
        assert session.state is SessionState.AWAITING_USER_INPUT

    @pytest.mark.parametrize("error", [RuntimeError("boom"), IndexError("list index out of range")])
    @pytest.mark.asyncio
    async def test_unexpected_source_error_uses_fallback(self, two_stage_format, selector, error):
        session = create_session("Topic", two_stage_format)

        session = await submit_user_turn(session, "Point", BrokenOpponent(error), selector)

        assert session.transcript[1].content == FALLBACK_REPLIES[Side.AGAINST][0]
        assert session.current_stage_index == 1

    @pytest.mark.asyncio
    async def test_missing_client_uses_fallback(self, two_stage_format, selector):
        session = create_session("Topic", two_stage_format)

        session = await submit_user_turn(session, "Point", None, selector)

        assert session.transcript[1].content
        assert session.transcript[1].coaching

    @pytest.mark.asyncio
    async def test_failing_client_still_reaches_completion(self, selector):
        fmt = DEFAULT_FORMATS["oxford"]
        session = create_session("Topic", fmt)
        visited = []

        while session.state is not SessionState.COMPLETE:
            visited.append(session.current_stage_index)
            if session.is_user_turn:
                session = await submit_user_turn(session, "Point", FailingOpponent(), selector)
            else:
                session = advance_stage_manually(session)

        assert visited == list(range(len(fmt.structure)))
        user_turns = sum(1 for stage in session.stages if stage.speaker_role is Role.USER)
        assert len(session.transcript) == 2 * user_turns
        assert all(message.content for message in session.transcript)

    @pytest.mark.asyncio
    async def test_consecutive_user_stages(self, user_only_format, selector):
        session = create_session("Topic", user_only_format)

        session = await submit_user_turn(session, "First", FakeOpponent(), selector)

        assert session.current_stage_index == 1
        assert session.is_user_turn is True
        assert session.remaining_seconds == 60

    @pytest.mark.asyncio
    async def test_last_stage_submission_completes(self, selector):
        fmt = DebateFormat(id="one", name="One", structure=(StageTemplate("Opening", Role.USER, 30),))
        session = await submit_user_turn(create_session("Topic", fmt), "Point", FakeOpponent(), selector)

        assert session.completed is True
        assert session.state is SessionState.COMPLETE
        assert session.current_stage_index == 0
        assert session.remaining_seconds == 0
        assert session.is_user_turn is False


class TestAdvanceStageManually:
    def test_resets_timer_for_new_stage(self):
        session = start_timer(create_session("Topic", DEFAULT_FORMATS["lincoln-douglas"]))
        session = tick(session)

        session = advance_stage_manually(session)

        assert session.current_stage_index == 1
        assert session.remaining_seconds == 180
        assert session.is_user_turn is False
        assert session.timer_running is False

    def test_n_stages_take_n_advances(self):
        fmt = DEFAULT_FORMATS["public-forum"]
        session = create_session("Topic", fmt)

        for expected_index in range(len(fmt.structure)):
            assert session.current_stage_index == expected_index
            session = advance_stage_manually(session)

        assert session.completed is True

    def test_complete_session_rejects_advance(self, two_stage_format):
        session = advance_stage_manually(advance_stage_manually(create_session("Topic", two_stage_format)))

        with pytest.raises(InvalidTurnError):
            advance_stage_manually(session)

    def test_pending_reply_blocks_advance(self, two_stage_format):
        pending = begin_user_turn(create_session("Topic", two_stage_format), "Point")

        assert pending.state is SessionState.AWAITING_OPPONENT_REPLY
        with pytest.raises(InvalidTurnError):
            advance_stage_manually(pending)


class TestSerialization:
    @pytest.mark.asyncio
    async def test_round_trip_after_operations(self, two_stage_format, selector):
        session = start_timer(create_session("Topic", two_stage_format))
        session = tick(tick(session))
        session = await submit_user_turn(session, "Point", FakeOpponent(), selector)
        session = tick(start_timer(session))

        restored = Session.from_dict(json.loads(json.dumps(session.to_dict())))

        assert restored.current_stage_index == session.current_stage_index
        assert restored.remaining_seconds == session.remaining_seconds
        assert restored.is_user_turn == session.is_user_turn
        assert len(restored.transcript) == len(session.transcript)
        assert restored == session

"""
Tests for the live-session manager.

The manager runs the per-second ticker, serialises replies per session and
drops replies that resolve after the session was abandoned or replaced.
"""

import asyncio

import pytest

from debate_core import (
    InvalidTurnError,
    SessionAbandonedError,
    SessionManager,
    SessionNotFoundError,
    SessionState,
    Side,
)
from debate_core.fallback import FALLBACK_REPLIES

from fakes import BlockingOpponent, BrokenOpponent, FakeOpponent


class TestSessionLifecycle:
    def test_create_and_get(self, two_stage_format):
        manager = SessionManager()
        session = manager.create_session("Topic", two_stage_format)

        assert manager.get_session(session.session_id) is session
        assert manager.active_session_count == 1

    def test_unknown_session(self):
        manager = SessionManager()

        assert manager.get_session("missing") is None
        with pytest.raises(SessionNotFoundError):
            manager.advance_stage("missing")

    def test_abandon(self, two_stage_format):
        manager = SessionManager()
        session = manager.create_session("Topic", two_stage_format)

        assert manager.abandon_session(session.session_id) is True
        assert manager.abandon_session(session.session_id) is False
        assert manager.get_session(session.session_id) is None

    def test_new_session_replaces_owners_previous_one(self, two_stage_format):
        manager = SessionManager()
        first = manager.create_session("Topic", two_stage_format, owner_id="alex")
        second = manager.create_session("Topic", two_stage_format, owner_id="alex")

        assert manager.get_session(first.session_id) is None
        assert manager.get_session(second.session_id) is second

    def test_expired_sessions_are_dropped(self, two_stage_format):
        manager = SessionManager(session_timeout_minutes=0)
        session = manager.create_session("Topic", two_stage_format)

        assert manager.get_session(session.session_id) is None


class TestTicker:
    @pytest.mark.asyncio
    async def test_running_timer_counts_down(self, two_stage_format):
        manager = SessionManager(tick_interval=0.01)
        session = manager.create_session("Topic", two_stage_format)

        manager.start_timer(session.session_id)
        await asyncio.sleep(0.1)
        paused = manager.pause_timer(session.session_id)

        assert paused.remaining_seconds < 360
        await asyncio.sleep(0.05)
        assert manager.get_session(session.session_id).remaining_seconds == paused.remaining_seconds

    @pytest.mark.asyncio
    async def test_starting_twice_keeps_one_ticker(self, two_stage_format):
        manager = SessionManager(tick_interval=10)
        session = manager.create_session("Topic", two_stage_format)

        manager.start_timer(session.session_id)
        live = manager._sessions[session.session_id]
        first_ticker = live.ticker
        manager.start_timer(session.session_id)

        assert live.ticker is first_ticker
        await manager.shutdown()

    @pytest.mark.asyncio
    async def test_manual_tick(self, two_stage_format):
        manager = SessionManager()
        session = manager.create_session("Topic", two_stage_format)

        assert manager.tick(session.session_id).remaining_seconds == 360


class TestSubmitTurn:
    @pytest.mark.asyncio
    async def test_submit_commits_reply(self, two_stage_format, selector):
        manager = SessionManager(opponent=FakeOpponent("Counter."), selector=selector)
        session = manager.create_session("Topic", two_stage_format)

        updated = await manager.submit_turn(session.session_id, "Point")

        assert [m.content for m in updated.transcript] == ["Point", "Counter."]
        assert manager.get_session(session.session_id) is updated

    @pytest.mark.asyncio
    async def test_source_crash_settles_turn_with_fallback(self, two_stage_format, selector):
        manager = SessionManager(opponent=BrokenOpponent(), selector=selector)
        session = manager.create_session("Topic", two_stage_format)

        updated = await manager.submit_turn(session.session_id, "Point")

        assert len(updated.transcript) == 2
        assert updated.transcript[1].content == FALLBACK_REPLIES[Side.AGAINST][0]
        assert updated.current_stage_index == 1
        live = manager.get_session(session.session_id)
        assert live is updated
        assert live.state is not SessionState.AWAITING_OPPONENT_REPLY

    @pytest.mark.asyncio
    async def test_second_submit_while_pending_is_rejected(self, two_stage_format, selector):
        opponent = BlockingOpponent()
        manager = SessionManager(opponent=opponent, selector=selector)
        session = manager.create_session("Topic", two_stage_format)

        first = asyncio.create_task(manager.submit_turn(session.session_id, "Point"))
        await opponent.started.wait()

        assert manager.get_session(session.session_id).state is SessionState.AWAITING_OPPONENT_REPLY
        with pytest.raises(InvalidTurnError):
            await manager.submit_turn(session.session_id, "Again")

        opponent.release.set()
        updated = await first
        assert len(updated.transcript) == 2
        assert len(opponent.calls) == 1

    @pytest.mark.asyncio
    async def test_abandoned_session_discards_reply(self, two_stage_format, selector):
        opponent = BlockingOpponent()
        manager = SessionManager(opponent=opponent, selector=selector)
        session = manager.create_session("Topic", two_stage_format)

        pending = asyncio.create_task(manager.submit_turn(session.session_id, "Point"))
        await opponent.started.wait()
        manager.abandon_session(session.session_id)

        with pytest.raises(SessionAbandonedError):
            await pending
        assert manager.get_session(session.session_id) is None

    @pytest.mark.asyncio
    async def test_replaced_session_discards_reply(self, two_stage_format, selector):
        opponent = BlockingOpponent()
        manager = SessionManager(opponent=opponent, selector=selector)
        old = manager.create_session("Topic", two_stage_format, owner_id="sam")

        pending = asyncio.create_task(manager.submit_turn(old.session_id, "Point"))
        await opponent.started.wait()
        new = manager.create_session("Other topic", two_stage_format, owner_id="sam")

        with pytest.raises(SessionAbandonedError):
            await pending
        assert manager.get_session(new.session_id).transcript == ()

    @pytest.mark.asyncio
    async def test_submit_stops_the_ticker(self, two_stage_format, selector):
        manager = SessionManager(opponent=FakeOpponent(), selector=selector, tick_interval=0.01)
        session = manager.create_session("Topic", two_stage_format)

        manager.start_timer(session.session_id)
        await asyncio.sleep(0.03)
        updated = await manager.submit_turn(session.session_id, "Point")
        await asyncio.sleep(0.05)

        assert updated.remaining_seconds == 240
        assert manager.get_session(session.session_id).remaining_seconds == 240


class TestCompletionHook:
    @pytest.mark.asyncio
    async def test_hook_receives_terminal_snapshot(self, two_stage_format, selector):
        completed = []
        manager = SessionManager(
            opponent=FakeOpponent(),
            selector=selector,
            on_complete=lambda owner, session: completed.append((owner, session)),
        )
        session = manager.create_session("Topic", two_stage_format, owner_id="kim")

        await manager.submit_turn(session.session_id, "Point")
        final = manager.advance_stage(session.session_id)

        assert completed == [("kim", final)]
        assert final.state is SessionState.COMPLETE

    @pytest.mark.asyncio
    async def test_failing_hook_does_not_break_session(self, two_stage_format, selector):
        def explode(owner, session):
            raise OSError("disk full")

        manager = SessionManager(opponent=FakeOpponent(), selector=selector, on_complete=explode)
        session = manager.create_session("Topic", two_stage_format)

        manager.advance_stage(session.session_id)
        final = manager.advance_stage(session.session_id)

        assert final.completed is True
        assert manager.get_session(session.session_id) is final

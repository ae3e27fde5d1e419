"""Management of live practice sessions"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional

from . import controller
from .config import LLM_TIMEOUT_SECONDS, TICK_INTERVAL_SECONDS
from .exceptions import SessionAbandonedError, SessionNotFoundError
from .fallback import Selector, fallback_reply
from .opponent import CounterArgumentSource
from .types import DebateFormat, Session, Side, utcnow

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[Optional[str], Session], None]


@dataclass
class LiveSession:
    """Mutable holder for the current value of one session"""
    session: Session
    owner_id: Optional[str] = None
    last_activity: datetime = field(default_factory=utcnow)
    ticker: Optional[asyncio.Task] = None
    reply_task: Optional[asyncio.Task] = None

    def touch(self) -> None:
        self.last_activity = utcnow()


class SessionManager:
    """Manages active practice sessions

    Owns the only reference to each live Session. Every change goes through
    the controller and is committed here; replies that resolve after their
    session was abandoned or replaced are dropped.
    """

    def __init__(
        self,
        opponent: Optional[CounterArgumentSource] = None,
        session_timeout_minutes: int = 30,
        tick_interval: float = TICK_INTERVAL_SECONDS,
        reply_timeout: float = LLM_TIMEOUT_SECONDS,
        selector: Optional[Selector] = None,
        on_complete: Optional[CompletionCallback] = None,
    ):
        self.opponent = opponent
        self.tick_interval = tick_interval
        self.reply_timeout = reply_timeout
        self.selector = selector or Selector()
        self.on_complete = on_complete
        self._sessions: dict[str, LiveSession] = {}
        self._owners: dict[str, str] = {}
        self._timeout = timedelta(minutes=session_timeout_minutes)

    def create_session(
        self,
        topic: str,
        fmt: DebateFormat,
        user_side: Side = Side.FOR,
        owner_id: Optional[str] = None,
    ) -> Session:
        """Create a new session

        An owner has at most one live session; starting another abandons
        the previous one.

        Raises:
            ConfigurationError: If the format cannot produce stages
        """
        session = controller.create_session(topic, fmt, user_side)

        if owner_id is not None and owner_id in self._owners:
            self.abandon_session(self._owners[owner_id])

        self._sessions[session.session_id] = LiveSession(session=session, owner_id=owner_id)
        if owner_id is not None:
            self._owners[owner_id] = session.session_id
        self._cleanup_expired()
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        """Get a session by ID

        Returns:
            Session if found and not expired, None otherwise
        """
        live = self._get_live(session_id)
        return live.session if live else None

    def abandon_session(self, session_id: str) -> bool:
        """Discard a session, cancelling its timer and any pending reply

        Returns:
            True if deleted, False if not found
        """
        live = self._sessions.pop(session_id, None)
        if live is None:
            return False
        if live.owner_id is not None and self._owners.get(live.owner_id) == session_id:
            del self._owners[live.owner_id]
        self._cancel_ticker(live)
        if live.reply_task is not None and not live.reply_task.done():
            live.reply_task.cancel()
        logger.info(str({"event": "session_abandoned", "session_id": session_id}))
        return True

    def start_timer(self, session_id: str) -> Session:
        live = self._require(session_id)
        session = self._commit(live, controller.start_timer(live.session))
        if session.timer_running and session.remaining_seconds > 0 and live.ticker is None:
            live.ticker = asyncio.create_task(self._run_ticker(session_id, live))
        return session

    def pause_timer(self, session_id: str) -> Session:
        live = self._require(session_id)
        self._cancel_ticker(live)
        return self._commit(live, controller.pause_timer(live.session))

    def tick(self, session_id: str) -> Session:
        live = self._require(session_id)
        return self._commit(live, controller.tick(live.session))

    def advance_stage(self, session_id: str) -> Session:
        """Host-controlled skip to the next stage

        Raises:
            InvalidTurnError: If the session is complete or awaiting a reply
        """
        live = self._require(session_id)
        session = controller.advance_stage_manually(live.session)
        self._cancel_ticker(live)
        return self._commit(live, session)

    async def submit_turn(self, session_id: str, text: str) -> Session:
        """Submit the user's turn and wait for the opponent reply

        Raises:
            SessionNotFoundError: If the session does not exist
            InvalidTurnError: If the submission is not valid right now
            SessionAbandonedError: If the session went away while waiting
        """
        live = self._require(session_id)
        pending = controller.begin_user_turn(live.session, text)
        self._cancel_ticker(live)
        self._commit(live, pending)

        live.reply_task = asyncio.create_task(
            controller.fetch_opponent_reply(pending, self.opponent, self.selector, self.reply_timeout)
        )
        try:
            content, fallacies, coaching = await live.reply_task
        except asyncio.CancelledError:
            if not self._is_current(session_id, live, pending):
                raise SessionAbandonedError(session_id) from None
            # The caller went away but the session is still live, so settle the turn.
            content = fallback_reply(pending.user_side.opposite, self.selector)
            self._commit(live, controller.resolve_opponent_reply(pending, content))
            raise
        finally:
            live.reply_task = None

        if not self._is_current(session_id, live, pending):
            logger.info(str({"event": "stale_reply_discarded", "session_id": session_id}))
            raise SessionAbandonedError(session_id)

        return self._commit(live, controller.resolve_opponent_reply(pending, content, fallacies, coaching))

    async def shutdown(self) -> None:
        """Abandon every session and wait for background tasks to finish"""
        tasks = []
        for session_id in list(self._sessions):
            live = self._sessions[session_id]
            tasks.extend(task for task in (live.ticker, live.reply_task) if task is not None)
            self.abandon_session(session_id)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    @property
    def active_session_count(self) -> int:
        """Get the number of active sessions"""
        self._cleanup_expired()
        return len(self._sessions)

    async def _run_ticker(self, session_id: str, live: LiveSession) -> None:
        try:
            while True:
                await asyncio.sleep(self.tick_interval)
                if self._sessions.get(session_id) is not live:
                    return
                session = self._commit(live, controller.tick(live.session), touch=False)
                if not session.timer_running or session.remaining_seconds <= 0:
                    return
        finally:
            if live.ticker is asyncio.current_task():
                live.ticker = None

    def _cancel_ticker(self, live: LiveSession) -> None:
        if live.ticker is not None:
            live.ticker.cancel()
            live.ticker = None

    def _is_current(self, session_id: str, live: LiveSession, snapshot: Session) -> bool:
        return self._sessions.get(session_id) is live and live.session is snapshot

    def _commit(self, live: LiveSession, session: Session, touch: bool = True) -> Session:
        was_complete = live.session.completed
        live.session = session
        if touch:
            live.touch()
        if session.completed and not was_complete:
            self._notify_complete(live)
        return session

    def _notify_complete(self, live: LiveSession) -> None:
        if self.on_complete is None:
            return
        try:
            self.on_complete(live.owner_id, live.session)
        except Exception:
            # Persistence is best effort; the session itself is already complete.
            logger.exception(str({"event": "completion_hook_failed", "session_id": live.session.session_id}))

    def _require(self, session_id: str) -> LiveSession:
        live = self._get_live(session_id)
        if live is None:
            raise SessionNotFoundError(session_id)
        return live

    def _get_live(self, session_id: str) -> Optional[LiveSession]:
        live = self._sessions.get(session_id)
        if live is None:
            return None

        # Check if expired
        if utcnow() - live.last_activity > self._timeout:
            self.abandon_session(session_id)
            return None

        return live

    def _cleanup_expired(self) -> None:
        """Remove expired sessions"""
        now = utcnow()
        expired = [
            sid for sid, live in self._sessions.items()
            if now - live.last_activity > self._timeout
        ]
        for sid in expired:
            self.abandon_session(sid)

"""Debate Core - Session logic for debate practice"""

from .types import (
    DebateFormat,
    DebateTopic,
    FallacyExample,
    Message,
    Role,
    Session,
    SessionState,
    Side,
    Stage,
    StageTemplate,
    UserProgress,
)
from .exceptions import (
    ConfigurationError,
    DebateError,
    InvalidTurnError,
    SessionAbandonedError,
    SessionNotFoundError,
)
from .config import DEFAULT_FORMATS, DEFAULT_FORMAT_ID
from .controller import (
    advance_stage_manually,
    create_session,
    pause_timer,
    start_timer,
    submit_user_turn,
    tick,
)
from .fallback import Selector
from .opponent import LLMOpponent
from .session import SessionManager

__all__ = [
    "DebateFormat",
    "DebateTopic",
    "FallacyExample",
    "Message",
    "Role",
    "Session",
    "SessionState",
    "Side",
    "Stage",
    "StageTemplate",
    "UserProgress",
    "ConfigurationError",
    "DebateError",
    "InvalidTurnError",
    "SessionAbandonedError",
    "SessionNotFoundError",
    "DEFAULT_FORMATS",
    "DEFAULT_FORMAT_ID",
    "advance_stage_manually",
    "create_session",
    "pause_timer",
    "start_timer",
    "submit_user_turn",
    "tick",
    "Selector",
    "LLMOpponent",
    "SessionManager",
]

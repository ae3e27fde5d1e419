"""Exceptions for debate sessions"""


class DebateError(Exception):
    """Base exception for debate session errors"""
    pass


class ConfigurationError(DebateError):
    """Raised when a debate format cannot produce a valid stage list"""
    pass


class InvalidTurnError(DebateError):
    """Raised when an operation is not valid in the session's current state

    The session is left untouched.
    """
    pass


class SessionNotFoundError(DebateError):
    """Raised when a session id is unknown or expired"""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found or expired: {session_id}")
        self.session_id = session_id


class SessionAbandonedError(DebateError):
    """Raised when a reply resolves after its session was abandoned or replaced"""

    def __init__(self, session_id: str):
        super().__init__(f"Session was abandoned before the reply arrived: {session_id}")
        self.session_id = session_id

"""Debate practice session endpoints"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field, field_validator

from debate_core import (
    DEFAULT_FORMAT_ID,
    ConfigurationError,
    DebateFormat,
    InvalidTurnError,
    Role,
    Session,
    SessionAbandonedError,
    SessionManager,
    SessionNotFoundError,
    Side,
    StageTemplate,
)
from debate_core.content import get_format, get_random_topic, get_topic
from api_server.dependencies import get_session_manager
from api_server.middleware.rate_limit import limiter, get_rate_limit_string

router = APIRouter(prefix="/sessions", tags=["sessions"])


# Request/Response models
class StageInput(BaseModel):
    """Custom stage definition"""
    name: str = Field(..., min_length=1, max_length=100)
    speaker_role: Optional[Role] = None
    duration_seconds: Optional[int] = Field(default=None, gt=0, le=3600)


class CreateSessionRequest(BaseModel):
    """Request to start a practice session

    Either a free-text topic or a built-in topic id. A custom stage list
    overrides the built-in format.
    """
    topic: Optional[str] = Field(default=None, min_length=1, max_length=200)
    topic_id: Optional[str] = None
    format_id: str = DEFAULT_FORMAT_ID
    stages: Optional[list[StageInput]] = None
    user_side: Side = Side.FOR
    user_id: Optional[str] = Field(default=None, max_length=64)

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("topic must not be blank")
        return v


class TurnRequest(BaseModel):
    """User submission for the current stage"""
    text: str = Field(..., max_length=5000)


class SessionResponse(BaseModel):
    """Snapshot of a session"""
    session_id: str
    topic: str
    format_name: str
    user_side: str
    state: str
    current_stage_index: int
    remaining_seconds: int
    is_user_turn: bool
    timer_running: bool
    awaiting_reply: bool
    completed: bool
    stages: list[dict]
    transcript: list[dict]
    created_at: str


def _to_response(session: Session) -> SessionResponse:
    return SessionResponse(**session.to_dict())


def _resolve_format(body: CreateSessionRequest) -> DebateFormat:
    if body.stages is not None:
        return DebateFormat(
            id="custom",
            name="Custom",
            structure=tuple(
                StageTemplate(
                    name=stage.name,
                    speaker_role=stage.speaker_role,
                    duration_seconds=stage.duration_seconds,
                )
                for stage in body.stages
            ),
        )
    return get_format(body.format_id)


def _resolve_topic(body: CreateSessionRequest) -> str:
    if body.topic:
        return body.topic
    if body.topic_id:
        topic = get_topic(body.topic_id)
        if topic is None:
            raise HTTPException(status_code=404, detail=f"Unknown topic: {body.topic_id}")
        return topic.title
    return get_random_topic().title


def _session_error(e: Exception) -> HTTPException:
    if isinstance(e, SessionNotFoundError):
        return HTTPException(status_code=404, detail="Session not found or expired")
    if isinstance(e, SessionAbandonedError):
        return HTTPException(status_code=410, detail="Session was abandoned")
    if isinstance(e, InvalidTurnError):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=422, detail=str(e))


@router.post("", response_model=SessionResponse, status_code=201)
@limiter.limit(get_rate_limit_string())
async def create_session(
    request: Request,
    body: CreateSessionRequest,
    manager: SessionManager = Depends(get_session_manager),
):
    """Start a new practice session

    The session begins at its first stage with the timer paused.
    """
    topic = _resolve_topic(body)
    try:
        fmt = _resolve_format(body)
        session = manager.create_session(
            topic=topic,
            fmt=fmt,
            user_side=body.user_side,
            owner_id=body.user_id,
        )
    except ConfigurationError as e:
        raise _session_error(e)
    return _to_response(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    """Current snapshot of a session"""
    session = manager.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found or expired")
    return _to_response(session)


@router.post("/{session_id}/timer/start", response_model=SessionResponse)
async def start_timer(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        return _to_response(manager.start_timer(session_id))
    except SessionNotFoundError as e:
        raise _session_error(e)


@router.post("/{session_id}/timer/pause", response_model=SessionResponse)
async def pause_timer(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        return _to_response(manager.pause_timer(session_id))
    except SessionNotFoundError as e:
        raise _session_error(e)


@router.post("/{session_id}/turn", response_model=SessionResponse)
@limiter.limit(get_rate_limit_string())
async def submit_turn(
    request: Request,
    session_id: str,
    body: TurnRequest,
    manager: SessionManager = Depends(get_session_manager),
):
    """Submit the user's argument and receive the opponent's reply

    The next stage's timer is left paused.
    """
    try:
        session = await manager.submit_turn(session_id, body.text)
    except (SessionNotFoundError, SessionAbandonedError, InvalidTurnError) as e:
        raise _session_error(e)
    return _to_response(session)


@router.post("/{session_id}/advance", response_model=SessionResponse)
async def advance_stage(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    """Skip to the next stage without a submission"""
    try:
        return _to_response(manager.advance_stage(session_id))
    except (SessionNotFoundError, InvalidTurnError) as e:
        raise _session_error(e)


@router.delete("/{session_id}", status_code=204)
async def abandon_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    """Abandon a session; a pending reply is discarded"""
    if not manager.abandon_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found or expired")

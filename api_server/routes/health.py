"""Health check endpoint"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from debate_core import SessionManager
from api_server.dependencies import get_session_manager

router = APIRouter()

VERSION = "1.0.0"


@router.get("/health")
async def health_check(manager: SessionManager = Depends(get_session_manager)):
    """Health check endpoint

    Returns:
        Health status with timestamp, version, live session count and
        whether opponent replies come from the model or fallback text
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
        "active_sessions": manager.active_session_count,
        "opponent": "llm" if manager.opponent is not None else "fallback",
    }

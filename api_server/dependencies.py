"""Shared service objects for the routes"""

import logging
from functools import lru_cache
from typing import Optional

from debate_core import LLMOpponent, Session, SessionManager
from debate_core.persistence import JsonFileStore, ProgressService
from llm_client import GroqClient

from .settings import Settings

logger = logging.getLogger("api_server")


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache
def get_opponent() -> Optional[LLMOpponent]:
    """LLM-backed opponent, or None to answer with canned replies only"""
    settings = get_settings()
    if not settings.groq_api_key:
        logger.warning(str({"event": "no_api_key", "detail": "opponent replies will use fallback text"}))
        return None
    client = GroqClient(
        api_key=settings.groq_api_key,
        model=settings.llm_model,
        timeout=settings.llm_timeout_seconds,
    )
    return LLMOpponent(client)


@lru_cache
def get_progress_service() -> ProgressService:
    return ProgressService(JsonFileStore(get_settings().store_path))


@lru_cache
def get_session_manager() -> SessionManager:
    settings = get_settings()
    progress = get_progress_service()

    def record_completion(owner_id: Optional[str], session: Session) -> None:
        if owner_id:
            progress.record_debate(owner_id, session)

    return SessionManager(
        opponent=get_opponent(),
        session_timeout_minutes=settings.session_timeout_minutes,
        reply_timeout=settings.llm_timeout_seconds,
        on_complete=record_completion,
    )

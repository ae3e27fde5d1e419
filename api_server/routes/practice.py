"""Fallacy drill and user progress endpoints"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from debate_core import LLMOpponent
from debate_core.content import get_fallacy, get_personalized_fallacy
from debate_core.persistence import ProgressService
from debate_core.practice import coaching_feedback, grade_attempt
from api_server.dependencies import get_opponent, get_progress_service
from api_server.middleware.rate_limit import limiter, get_rate_limit_string

router = APIRouter(tags=["practice"])


class AttemptRequest(BaseModel):
    """A user's answer to a fallacy example"""
    user_id: str = Field(..., min_length=1, max_length=64)
    selected_text: str = Field(default="", max_length=1000)
    identified_type: Optional[str] = Field(default=None, max_length=50)


class PreferencesRequest(BaseModel):
    preferred_topics: list[str] = Field(default_factory=list, max_length=10)


@router.get("/practice/fallacies/next")
async def next_fallacy(
    user_id: str = Query(..., min_length=1, max_length=64),
    progress_service: ProgressService = Depends(get_progress_service),
):
    """Next example tuned to the user's level and weak areas"""
    progress = progress_service.get_progress(user_id)
    example = get_personalized_fallacy(progress.skill_level, progress.weak_areas())
    return example.to_dict(reveal=False)


@router.post("/practice/fallacies/{fallacy_id}/attempt")
@limiter.limit(get_rate_limit_string())
async def submit_attempt(
    request: Request,
    fallacy_id: str,
    body: AttemptRequest,
    opponent: Optional[LLMOpponent] = Depends(get_opponent),
    progress_service: ProgressService = Depends(get_progress_service),
):
    """Grade an attempt and return coaching feedback"""
    example = get_fallacy(fallacy_id)
    if example is None:
        raise HTTPException(status_code=404, detail=f"Unknown fallacy example: {fallacy_id}")

    result = grade_attempt(example, body.selected_text, body.identified_type)
    progress_service.record_fallacy_attempt(body.user_id, example.type, result.correct)
    result.feedback = await coaching_feedback(
        opponent,
        body.identified_type or ("fallacy" if body.selected_text.strip() else "No Fallacy"),
        example.type,
    )
    return result.to_dict()


@router.get("/progress/{user_id}")
async def get_progress(
    user_id: str,
    progress_service: ProgressService = Depends(get_progress_service),
):
    return progress_service.get_progress(user_id).to_dict()


@router.put("/progress/{user_id}/preferences")
async def update_preferences(
    user_id: str,
    body: PreferencesRequest,
    progress_service: ProgressService = Depends(get_progress_service),
):
    progress = progress_service.get_progress(user_id)
    progress.preferred_topics = [topic.strip().lower() for topic in body.preferred_topics if topic.strip()]
    progress_service.save_progress(progress)
    return progress.to_dict()


@router.get("/progress/{user_id}/sessions")
async def session_history(
    user_id: str,
    progress_service: ProgressService = Depends(get_progress_service),
):
    """Logs of completed debate sessions"""
    return progress_service.session_history(user_id)

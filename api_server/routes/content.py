"""Topic, format and fallacy catalogue endpoints"""

from typing import Optional
from fastapi import APIRouter, Query

from debate_core.content import (
    get_random_fallacy,
    get_random_topic,
    list_formats,
    recommend_topics,
)

router = APIRouter(prefix="/content", tags=["content"])


@router.get("/formats")
async def formats():
    """Built-in debate formats"""
    return [fmt.to_dict() for fmt in list_formats()]


@router.get("/topics")
async def topics(
    max_difficulty: int = Query(5, ge=1, le=5),
    category: Optional[list[str]] = Query(None),
    limit: int = Query(3, ge=1, le=20),
):
    """Recommended topics, preferred categories first"""
    return [
        topic.to_dict()
        for topic in recommend_topics(max_difficulty, category or (), limit=limit)
    ]


@router.get("/topics/random")
async def random_topic(max_difficulty: int = Query(5, ge=1, le=5)):
    return get_random_topic(max_difficulty).to_dict()


@router.get("/fallacies/random")
async def random_fallacy(max_difficulty: int = Query(5, ge=1, le=5)):
    """A fallacy example with the answer hidden"""
    return get_random_fallacy(max_difficulty).to_dict(reveal=False)

"""Fallacy identification drill"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from llm_client import LLMError

from .config import LLM_TIMEOUT_SECONDS
from .fallback import fallback_feedback
from .opponent import LLMOpponent
from .types import FallacyExample

logger = logging.getLogger(__name__)


@dataclass
class AttemptResult:
    """Outcome of one identification attempt"""
    fallacy_id: str
    correct: bool
    fallacy_type: str
    explanation: str
    feedback: str = ""

    def to_dict(self) -> dict:
        return {
            "fallacy_id": self.fallacy_id,
            "correct": self.correct,
            "fallacy_type": self.fallacy_type,
            "explanation": self.explanation,
            "feedback": self.feedback,
        }


def grade_attempt(example: FallacyExample, selected_text: str, identified_type: Optional[str] = None) -> AttemptResult:
    """Grade a user's attempt at spotting the fallacy

    Selecting any text counts as flagging a fallacy. When the user also names
    the type it has to match.
    """
    flagged = bool(selected_text and selected_text.strip())
    if example.has_fallacy:
        correct = flagged
        if correct and identified_type:
            correct = identified_type.strip().lower() == example.type.lower()
    else:
        correct = not flagged

    return AttemptResult(
        fallacy_id=example.id,
        correct=correct,
        fallacy_type=example.type,
        explanation=example.explanation,
    )


async def coaching_feedback(
    opponent: Optional[LLMOpponent],
    user_answer: str,
    correct_answer: str,
    timeout: float = LLM_TIMEOUT_SECONDS,
) -> str:
    """Short coaching text for an attempt, canned when the model is unavailable"""
    if opponent is not None:
        try:
            text = await asyncio.wait_for(
                opponent.generate_feedback(user_answer, correct_answer),
                timeout=timeout,
            )
            if text:
                return text
        except (LLMError, asyncio.TimeoutError) as e:
            logger.warning(str({"event": "feedback_fallback", "error": str(e) or type(e).__name__}))
    return fallback_feedback(user_answer, correct_answer)

"""AI opponent backed by the inference client"""

from typing import Optional, Protocol

from llm_client import GroqClient

from .config import LLM_MAX_TOKENS_COUNTER, LLM_MAX_TOKENS_FEEDBACK, MAX_REPLY_WORDS
from .fallback import Persona
from .prompts import (
    FEEDBACK_SYSTEM_PROMPT,
    create_counter_argument_prompt,
    create_feedback_prompt,
    create_opponent_system_prompt,
    truncate_words,
)
from .types import Side


class CounterArgumentSource(Protocol):
    """Anything that can produce the opponent's reply text

    Implementations raise LLMError on failure.
    """

    async def generate_counter_argument(
        self,
        topic: str,
        prior_argument: str,
        side: Side,
        stage_name: str = "",
        persona: Optional[Persona] = None,
    ) -> str:
        ...


class LLMOpponent:
    """Builds debate prompts and sends them through a GroqClient"""

    def __init__(self, client: GroqClient):
        self.client = client

    async def generate_counter_argument(
        self,
        topic: str,
        prior_argument: str,
        side: Side,
        stage_name: str = "",
        persona: Optional[Persona] = None,
    ) -> str:
        system_prompt = create_opponent_system_prompt(
            side,
            topic,
            stage_name,
            persona_tone=persona.tone if persona else None,
        )
        text = await self.client.get_response(
            prompt=create_counter_argument_prompt(topic, prior_argument, side),
            system_prompt=system_prompt,
            max_tokens=LLM_MAX_TOKENS_COUNTER,
        )
        return truncate_words(text, MAX_REPLY_WORDS)

    async def generate_feedback(self, user_answer: str, correct_answer: str) -> str:
        return await self.client.get_response(
            prompt=create_feedback_prompt(user_answer, correct_answer),
            system_prompt=FEEDBACK_SYSTEM_PROMPT,
            max_tokens=LLM_MAX_TOKENS_FEEDBACK,
            temperature=0.5,
        )

"""Prompt generation for debate practice"""

from typing import Optional

from .types import Role, Side


def stage_prompt(stage_name: str, role: Role) -> str:
    """Instruction shown to the speaker of a stage"""
    if role is Role.OPPONENT:
        return "AI will respond based on the debate context and format rules."
    if "Constructive" in stage_name:
        return "Present your main arguments clearly and support them with evidence."
    if "Rebuttal" in stage_name:
        return "Address your opponent's arguments and strengthen your position."
    if "Cross" in stage_name:
        return "Ask strategic questions to expose weaknesses in your opponent's case."
    return "Make your best argument for this stage."


def create_opponent_system_prompt(
    side: Side,
    topic: str,
    stage_name: str,
    persona_tone: Optional[str] = None,
) -> str:
    """Create system prompt for the AI opponent

    Args:
        side: The side the opponent argues
        topic: The debate topic
        stage_name: Name of the stage being answered
        persona_tone: Optional speaking style of the chosen persona

    Returns:
        System prompt string
    """
    prompt = f"""You are a debate sparring partner arguing {side.value} the motion "{topic}".
The current stage is "{stage_name}".

Rules:
- Respond directly to your opponent's last argument
- Be persuasive but argumentative
- Answer in 15-20 words"""
    if persona_tone:
        prompt += f"\n- Speak in a {persona_tone} manner"
    return prompt


def create_counter_argument_prompt(topic: str, prior_argument: str, side: Side) -> str:
    """Create the user prompt asking for a counter-argument

    Args:
        topic: The debate topic
        prior_argument: The user's argument being answered
        side: The side the opponent argues
    """
    return f"""Debate topic: {topic}
You are arguing {side.value}. User said: "{prior_argument}"
Your counter-argument (15-20 words, be persuasive but argumentative):"""


def create_feedback_prompt(user_answer: str, correct_answer: str) -> str:
    """Create prompt for fallacy identification coaching"""
    return f"""Provide brief coaching feedback for this fallacy identification:
User identified: {user_answer}
Correct answer: {correct_answer}
Give constructive feedback in 15-20 words:"""


FEEDBACK_SYSTEM_PROMPT = """You are a friendly critical-thinking coach.
Keep feedback short, specific and encouraging."""


def truncate_words(text: str, max_words: int) -> str:
    """Trim text to at most max_words words, marking the cut with an ellipsis"""
    words = text.split()
    if len(words) > max_words:
        return " ".join(words[:max_words]) + "..."
    return " ".join(words)

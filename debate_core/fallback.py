"""Canned replies and randomized content selection

Every random pick goes through a Selector so tests can seed it.
"""

import random
from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar

from .config import FALLACY_INJECTION_RATE
from .types import Side

T = TypeVar("T")


class Selector:
    """Seedable random selection strategy"""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def choice(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("Cannot choose from an empty sequence")
        return self._random.choice(options)

    def chance(self, probability: float) -> bool:
        """True with the given probability"""
        return self._random.random() < probability

    def randint(self, low: int, high: int) -> int:
        return self._random.randint(low, high)


class FirstSelector(Selector):
    """Always picks the first option and never fires a chance"""

    def choice(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("Cannot choose from an empty sequence")
        return options[0]

    def chance(self, probability: float) -> bool:
        return False

    def randint(self, low: int, high: int) -> int:
        return low


@dataclass(frozen=True)
class Persona:
    """Debater persona used to flavour opponent replies"""
    name: str
    tone: str


PERSONAS = (
    Persona(name="The Professor", tone="measured, academic"),
    Persona(name="The Prosecutor", tone="sharp, cross-examining"),
    Persona(name="The Skeptic", tone="dry, questioning"),
    Persona(name="The Advocate", tone="passionate, rhetorical"),
)

# Keyed by the side the opponent argues
FALLBACK_REPLIES = {
    Side.AGAINST: (
        "That's interesting, but consider the broader economic implications of this approach.",
        "While I see your point, the evidence suggests a different conclusion entirely.",
        "Your argument overlooks key factors that significantly impact the outcome.",
        "That perspective ignores the fundamental principles underlying this issue completely.",
    ),
    Side.FOR: (
        "Actually, recent studies support the opposite view with compelling evidence.",
        "Your reasoning contains flaws that undermine the entire argument's validity.",
        "The benefits clearly outweigh any potential drawbacks you've mentioned here.",
        "Historical precedent shows that approach leads to unintended negative consequences.",
    ),
}

COACHING_TIPS = (
    "Strong argument! Try backing it up with specific examples or data.",
    "Good point, but consider addressing potential counterarguments to strengthen your position.",
    "Well reasoned! You might want to clarify the logical connection between your premises.",
    "Solid foundation, but avoid absolute statements unless you have definitive proof.",
    "Nice approach! Consider the broader implications of your argument's conclusion.",
)

INJECTABLE_FALLACIES = (
    "Ad Hominem",
    "Straw Man",
    "False Dilemma",
    "Slippery Slope",
    "Appeal to Authority",
    "Red Herring",
)


def fallback_reply(opponent_side: Side, selector: Selector) -> str:
    return selector.choice(FALLBACK_REPLIES[opponent_side])


def coaching_tip(selector: Selector) -> str:
    return selector.choice(COACHING_TIPS)


def maybe_inject_fallacy(selector: Selector) -> tuple[str, ...]:
    """Occasionally tag a reply with a fallacy for the user to spot"""
    if selector.chance(FALLACY_INJECTION_RATE):
        return (selector.choice(INJECTABLE_FALLACIES),)
    return ()


def pick_persona(selector: Selector) -> Persona:
    return selector.choice(PERSONAS)


def fallback_feedback(user_answer: str, correct_answer: str) -> str:
    if user_answer.strip().lower() == correct_answer.strip().lower():
        return "Excellent identification! Your reasoning shows strong critical thinking skills."
    return f"Good attempt! The correct answer was {correct_answer}. Review the argument structure."

"""Built-in debate topics, fallacy examples and formats"""

from typing import Iterable, Optional

from .config import DEFAULT_FORMATS
from .exceptions import ConfigurationError
from .fallback import Selector
from .types import DebateFormat, DebateTopic, FallacyExample

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5

DEBATE_TOPICS = (
    DebateTopic(
        id="social-media-1",
        title="Social Media and Privacy",
        description="Should social media companies be required to protect user privacy more strictly?",
        difficulty=1,
        for_position="Companies should implement stricter privacy protections",
        against_position="Current privacy measures are sufficient for user protection",
        category="technology",
    ),
    DebateTopic(
        id="remote-work-1",
        title="Remote Work Policies",
        description="Should companies allow employees to work from home permanently?",
        difficulty=1,
        for_position="Permanent remote work should be standard option",
        against_position="In-office work is essential for productivity and collaboration",
        category="economics",
    ),
    DebateTopic(
        id="social-media-regulation-2",
        title="Social media platforms should be regulated",
        description="Debate government oversight of social media companies.",
        difficulty=2,
        for_position="Regulation prevents misinformation and protects privacy",
        against_position="Regulation stifles free speech and innovation",
        category="politics",
    ),
    DebateTopic(
        id="ai-education-2",
        title="AI in Education",
        description="Should artificial intelligence tools be integrated into classroom learning?",
        difficulty=2,
        for_position="AI tools enhance learning and prepare students for the future",
        against_position="AI tools reduce critical thinking and create dependency",
        category="technology",
    ),
    DebateTopic(
        id="universal-income-2",
        title="Universal Basic Income",
        description="Should governments implement a universal basic income program?",
        difficulty=2,
        for_position="UBI reduces poverty and provides economic security",
        against_position="UBI creates dependency and is economically unsustainable",
        category="economics",
    ),
    DebateTopic(
        id="gene-editing-3",
        title="Genetic Engineering Ethics",
        description="Should genetic editing be allowed for human enhancement beyond medical treatment?",
        difficulty=3,
        for_position="Genetic enhancement can improve human capabilities and quality of life",
        against_position="Genetic enhancement raises ethical concerns and increases inequality",
        category="ethics",
    ),
    DebateTopic(
        id="space-exploration-3",
        title="Space Exploration Funding",
        description="Should governments prioritize space exploration over addressing earthly problems?",
        difficulty=3,
        for_position="Space exploration drives innovation and ensures human survival",
        against_position="Resources should focus on immediate terrestrial challenges",
        category="politics",
    ),
    DebateTopic(
        id="ai-doctors-4",
        title="AI should replace human doctors",
        description="Debate whether artificial intelligence can provide better medical care than human physicians.",
        difficulty=4,
        for_position="AI provides more accurate diagnoses and reduces human error",
        against_position="Human empathy and intuition are irreplaceable in healthcare",
        category="technology",
    ),
    DebateTopic(
        id="consciousness-ai-4",
        title="AI Consciousness and Rights",
        description="If AI systems develop consciousness, should they be granted legal rights?",
        difficulty=4,
        for_position="Conscious AI deserves protection and rights like any sentient being",
        against_position="AI consciousness is uncertain and rights would create legal complications",
        category="ethics",
    ),
    DebateTopic(
        id="democracy-tech-4",
        title="Democracy in the Digital Age",
        description="Should democratic participation be enhanced through digital technology and algorithms?",
        difficulty=4,
        for_position="Technology can make democracy more inclusive and informed",
        against_position="Digital democracy threatens traditional democratic values and privacy",
        category="politics",
    ),
    DebateTopic(
        id="posthuman-ethics-5",
        title="Posthuman Transformation",
        description="Should humanity actively pursue technological enhancement to become posthuman?",
        difficulty=5,
        for_position="Posthuman enhancement is the natural next step in human evolution",
        against_position="Posthuman transformation threatens human identity and natural values",
        category="ethics",
    ),
)

FALLACY_EXAMPLES = (
    FallacyExample(
        id="ad-hominem-1",
        type="Ad Hominem",
        argument="We shouldn't listen to John's argument about climate change because he's just a college dropout.",
        explanation="This attacks John's character rather than addressing his actual argument about climate change.",
        difficulty=1,
        fallacy_location=(40, 85),
    ),
    FallacyExample(
        id="strawman-1",
        type="Straw Man",
        argument="People who support renewable energy want to destroy all industry and send us back to the Stone Age.",
        explanation="This misrepresents the renewable energy position, which doesn't advocate for destroying all industry.",
        difficulty=1,
        fallacy_location=(40, 95),
    ),
    FallacyExample(
        id="false-dilemma-1",
        type="False Dilemma",
        argument="You're either with us completely or you're against us. There's no middle ground in this war.",
        explanation="This presents only two options when there are likely more nuanced positions available.",
        difficulty=1,
        fallacy_location=(0, 50),
    ),
    FallacyExample(
        id="appeal-authority-2",
        type="Appeal to Authority",
        argument="This investment strategy must be good because my wealthy neighbor recommended it to me.",
        explanation="Being wealthy doesn't necessarily make someone an expert on investment strategies.",
        difficulty=2,
        fallacy_location=(55, 90),
    ),
    FallacyExample(
        id="slippery-slope-2",
        type="Slippery Slope",
        argument=(
            "If we allow students to retake one exam, soon they'll expect to retake all exams, "
            "and eventually, grades will become meaningless."
        ),
        explanation="This assumes a chain of events without justification for why one change leads to extreme consequences.",
        difficulty=2,
        fallacy_location=(45, 130),
    ),
    FallacyExample(
        id="red-herring-3",
        type="Red Herring",
        argument=(
            "While we're discussing the budget deficit, we should remember that our veterans "
            "have sacrificed so much for our freedom."
        ),
        explanation="This shifts the discussion away from the budget deficit to an unrelated topic about veterans.",
        difficulty=3,
        fallacy_location=(50, 120),
    ),
    FallacyExample(
        id="bandwagon-3",
        type="Bandwagon",
        argument="Everyone's switching to this new social media platform, so it must be better than the alternatives.",
        explanation="Popularity doesn't necessarily indicate quality or superiority.",
        difficulty=3,
        fallacy_location=(0, 85),
    ),
    FallacyExample(
        id="equivocation-4",
        type="Equivocation",
        argument="The sign said 'fine for parking here,' so I thought it was a good place to park and got a ticket.",
        explanation="This uses 'fine' in two different meanings - 'good' and 'monetary penalty'.",
        difficulty=4,
        fallacy_location=(15, 45),
    ),
    FallacyExample(
        id="circular-reasoning-4",
        type="Circular Reasoning",
        argument="We know the Bible is true because it says so in the Bible, and the Bible never lies.",
        explanation="This uses the Bible's content to prove the Bible's truthfulness, which is circular logic.",
        difficulty=4,
        fallacy_location=(25, 80),
    ),
    FallacyExample(
        id="composition-5",
        type="Fallacy of Composition",
        argument="Each player on the team is excellent, so the team must be excellent at working together.",
        explanation="Individual excellence doesn't guarantee collective excellence or teamwork.",
        difficulty=5,
        fallacy_location=(40, 95),
    ),
    FallacyExample(
        id="no-fallacy-valid",
        type="No Fallacy",
        argument=(
            "Studies show that regular exercise improves cardiovascular health, reduces stress, "
            "and increases longevity in most adults."
        ),
        explanation="This is a valid argument based on empirical evidence without logical fallacies.",
        difficulty=3,
        has_fallacy=False,
    ),
)


def _clamp_difficulty(value: float) -> int:
    return int(min(MAX_DIFFICULTY, max(MIN_DIFFICULTY, value)))


def list_formats() -> list[DebateFormat]:
    return list(DEFAULT_FORMATS.values())


def get_format(format_id: str) -> DebateFormat:
    """Look up a built-in format

    Raises:
        ConfigurationError: If the id is unknown
    """
    try:
        return DEFAULT_FORMATS[format_id]
    except KeyError:
        raise ConfigurationError(f"Unknown debate format: {format_id}") from None


def get_topic(topic_id: str) -> Optional[DebateTopic]:
    return next((topic for topic in DEBATE_TOPICS if topic.id == topic_id), None)


def get_topics_by_difficulty(difficulty: int) -> list[DebateTopic]:
    return [topic for topic in DEBATE_TOPICS if topic.difficulty == difficulty]


def get_random_topic(max_difficulty: int = MAX_DIFFICULTY, selector: Optional[Selector] = None) -> DebateTopic:
    selector = selector or Selector()
    suitable = [topic for topic in DEBATE_TOPICS if topic.difficulty <= max_difficulty]
    return selector.choice(suitable or list(DEBATE_TOPICS))


def get_personalized_topic(skill_level: float, selector: Optional[Selector] = None) -> DebateTopic:
    """Pick a topic at or slightly above the user's skill level"""
    selector = selector or Selector()
    target = _clamp_difficulty(int(skill_level) + selector.randint(0, 1))
    candidates = get_topics_by_difficulty(target)
    if not candidates:
        return get_random_topic(target, selector)
    return selector.choice(candidates)


def recommend_topics(
    max_difficulty: int = MAX_DIFFICULTY,
    preferred_categories: Iterable[str] = (),
    limit: int = 3,
) -> list[DebateTopic]:
    """Topics within the difficulty cap, preferred categories first"""
    preferred = {category.lower() for category in preferred_categories}
    suitable = [topic for topic in DEBATE_TOPICS if topic.difficulty <= max_difficulty]
    if preferred:
        matching = [topic for topic in suitable if topic.category in preferred]
        others = [topic for topic in suitable if topic.category not in preferred]
        suitable = matching + others
    return suitable[:limit]


def get_fallacy(fallacy_id: str) -> Optional[FallacyExample]:
    return next((example for example in FALLACY_EXAMPLES if example.id == fallacy_id), None)


def get_random_fallacy(max_difficulty: int = MAX_DIFFICULTY, selector: Optional[Selector] = None) -> FallacyExample:
    selector = selector or Selector()
    suitable = [example for example in FALLACY_EXAMPLES if example.difficulty <= max_difficulty]
    return selector.choice(suitable or list(FALLACY_EXAMPLES))


def get_personalized_fallacy(
    skill_level: float,
    weak_areas: Iterable[str] = (),
    selector: Optional[Selector] = None,
) -> FallacyExample:
    """Pick an example near the user's level, favouring weak fallacy types"""
    selector = selector or Selector()
    target = _clamp_difficulty(int(skill_level) + selector.randint(0, 1) - 1)
    candidates = [example for example in FALLACY_EXAMPLES if example.difficulty == target]

    weak = set(weak_areas)
    if weak:
        weak_candidates = [example for example in candidates if example.type in weak]
        if weak_candidates:
            candidates = weak_candidates

    if not candidates:
        return get_random_fallacy(target, selector)
    return selector.choice(candidates)

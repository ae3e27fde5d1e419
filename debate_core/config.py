"""Default configuration for debate practice"""

from .types import DebateFormat

# Stage durations in seconds, picked by stage name
CROSS_EXAMINATION_SECONDS = 180
REBUTTAL_SECONDS = 240
DEFAULT_STAGE_SECONDS = 360

# Timer period of the live-session ticker
TICK_INTERVAL_SECONDS = 1.0

# Inference settings
LLM_MODEL = "llama-3.3-70b-versatile"
LLM_MAX_TOKENS_COUNTER = 80
LLM_MAX_TOKENS_FEEDBACK = 60
LLM_TIMEOUT_SECONDS = 20.0
MAX_REPLY_WORDS = 20

# Chance that an opponent reply is annotated with a deliberate fallacy
FALLACY_INJECTION_RATE = 0.3

DEFAULT_FORMAT_ID = "oxford"

DEFAULT_FORMATS = {
    "lincoln-douglas": DebateFormat(
        id="lincoln-douglas",
        name="Lincoln-Douglas",
        description="One-on-one value debate focusing on philosophical and ethical issues",
        difficulty="Advanced",
        participants="1v1",
        structure=(
            "Affirmative Constructive",
            "Negative Cross-Examination",
            "Negative Constructive",
            "Affirmative Cross-Examination",
            "Affirmative Rebuttal",
            "Negative Rebuttal",
            "Affirmative Rebuttal",
        ),
    ),
    "public-forum": DebateFormat(
        id="public-forum",
        name="Public Forum",
        description="Team debate on current events and policy issues for general audiences",
        difficulty="Intermediate",
        participants="2v2",
        structure=(
            "Team A Constructive",
            "Team B Constructive",
            "Crossfire",
            "Team A Rebuttal",
            "Team B Rebuttal",
            "Crossfire",
            "Team A Summary",
            "Team B Summary",
            "Grand Crossfire",
            "Team A Final Focus",
            "Team B Final Focus",
        ),
    ),
    "parliamentary": DebateFormat(
        id="parliamentary",
        name="Parliamentary",
        description="Quick preparation debate with impromptu topics and flexible structure",
        difficulty="Advanced",
        participants="2v2",
        structure=(
            "Prime Minister Constructive",
            "Leader of Opposition Constructive",
            "Member of Government",
            "Member of Opposition",
            "Leader of Opposition Rebuttal",
            "Prime Minister Rebuttal",
        ),
    ),
    "oxford": DebateFormat(
        id="oxford",
        name="Oxford Style",
        description="Traditional formal debate with opening statements and rebuttals",
        difficulty="Beginner",
        participants="1v1 or Teams",
        structure=(
            "Opening Statement - Pro",
            "Opening Statement - Con",
            "First Rebuttal - Pro",
            "First Rebuttal - Con",
            "Second Rebuttal - Pro",
            "Second Rebuttal - Con",
            "Closing Statement - Con",
            "Closing Statement - Pro",
        ),
    ),
}

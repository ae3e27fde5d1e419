"""Shared fixtures"""

import pytest

from debate_core import DebateFormat, Role, StageTemplate
from debate_core.fallback import FirstSelector


@pytest.fixture
def selector():
    return FirstSelector()


@pytest.fixture
def two_stage_format():
    return DebateFormat(
        id="two-stage",
        name="Two Stage",
        structure=(
            StageTemplate("Opening", Role.USER, 360),
            StageTemplate("Rebuttal", Role.OPPONENT, 240),
        ),
    )


@pytest.fixture
def user_only_format():
    return DebateFormat(
        id="user-only",
        name="User Only",
        structure=(
            StageTemplate("Opening", Role.USER, 60),
            StageTemplate("Second Opening", Role.USER, 60),
            StageTemplate("Closing", Role.USER, 30),
        ),
    )

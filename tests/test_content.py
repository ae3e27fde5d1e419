"""Tests for the built-in content catalogue and seeded selection."""

import pytest

from debate_core import ConfigurationError
from debate_core.content import (
    DEBATE_TOPICS,
    get_format,
    get_personalized_fallacy,
    get_personalized_topic,
    get_random_fallacy,
    get_random_topic,
    list_formats,
    recommend_topics,
)
from debate_core.fallback import FirstSelector, Selector


class TestFormats:
    def test_builtin_formats(self):
        names = {fmt.name for fmt in list_formats()}

        assert names == {"Lincoln-Douglas", "Public Forum", "Parliamentary", "Oxford Style"}

    def test_unknown_format(self):
        with pytest.raises(ConfigurationError):
            get_format("world-schools")


class TestTopics:
    def test_random_topic_respects_difficulty(self):
        selector = Selector(seed=7)
        for _ in range(20):
            assert get_random_topic(2, selector).difficulty <= 2

    def test_same_seed_same_topic(self):
        first = [get_random_topic(selector=Selector(seed=3)).id for _ in range(3)]
        second = [get_random_topic(selector=Selector(seed=3)).id for _ in range(3)]

        assert first == second

    def test_personalized_topic_targets_skill_level(self):
        topic = get_personalized_topic(3.4, FirstSelector())

        assert topic.difficulty == 3

    def test_recommendations_put_preferred_categories_first(self):
        topics = recommend_topics(max_difficulty=5, preferred_categories=["Ethics"], limit=3)

        assert [topic.category for topic in topics] == ["ethics", "ethics", "ethics"]

    def test_recommendations_without_preferences(self):
        topics = recommend_topics(max_difficulty=1)

        assert topics == [topic for topic in DEBATE_TOPICS if topic.difficulty == 1]


class TestFallacies:
    def test_random_fallacy_respects_difficulty(self):
        assert get_random_fallacy(1, FirstSelector()).difficulty == 1

    def test_personalized_fallacy_prefers_weak_areas(self):
        example = get_personalized_fallacy(2, weak_areas=["Straw Man"], selector=FirstSelector())

        assert example.type == "Straw Man"

    def test_hidden_answer(self):
        data = get_random_fallacy(selector=FirstSelector()).to_dict(reveal=False)

        assert "type" not in data
        assert "explanation" not in data

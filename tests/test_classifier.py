"""Tests for the baseline scorer and the classifier registry."""

import pytest

from nolisticle.classifier import (
    BASELINE_NAME,
    ClassifierEntry,
    ClassifierRegistry,
    TitleScorer,
    default_registry,
)
from nolisticle.config import Config, ScoringConfig
from nolisticle.errors import ConfigError, ErrorCode


def always(title):
    return True


def never(title):
    return False


class TestTitleScorer:
    """Tests for heuristic title scoring."""

    def test_listicle_scores_high(self):
        """Test that a numbered list title with list nouns scores high."""
        scorer = TitleScorer()
        assert scorer.score("5 Best Productivity Tips") == 95
        assert scorer.should_remove("5 Best Productivity Tips") is True

    def test_superlative_and_noun_reach_threshold(self):
        """Test that a title without a leading number can still be removed."""
        scorer = TitleScorer()
        assert scorer.score("Top 10 Tools for Python Developers") == 60
        assert scorer.should_remove("Top 10 Tools for Python Developers") is True

    def test_tutorial_scores_low(self):
        """Test that explanatory titles lower the score."""
        scorer = TitleScorer()
        assert scorer.score("How to Build a REST API with Flask") == 5
        assert scorer.should_remove("How to Build a REST API with Flask") is False

    def test_plain_title_keeps_base_score(self):
        scorer = TitleScorer()
        assert scorer.score("Released in 2023") == 20
        assert scorer.should_remove("Released in 2023") is False

    def test_clickbait_phrase(self):
        """Test that clickbait phrases add to the score once."""
        scorer = TitleScorer()
        assert scorer.score("Things you need to know, you should know") == 20 + 25 + 20

    def test_score_clamped(self):
        """Test that scores stay within 0-100."""
        high = TitleScorer(ScoringConfig(base_score=90, leading_number=50))
        assert high.score("10 tips") == 100

        low = TitleScorer(ScoringConfig(base_score=0))
        assert low.score("How does it work") == 0

    def test_custom_threshold(self):
        """Test that the removal threshold comes from config."""
        scorer = TitleScorer(ScoringConfig(remove_threshold=10))
        assert scorer.should_remove("Released in 2023") is True


class TestClassifierRegistry:
    """Tests for classifier registration."""

    def test_baseline_listed_first(self):
        """Test that the baseline leads regardless of registration order."""
        registry = ClassifierRegistry(
            [
                ClassifierEntry("a", always),
                ClassifierEntry("b", never, baseline=True),
                ClassifierEntry("c", always),
            ]
        )
        assert registry.names() == ["b", "a", "c"]
        assert [entry.name for entry in registry] == ["b", "a", "c"]
        assert registry.baseline.name == "b"
        assert len(registry) == 3

    def test_no_baseline_rejected(self):
        with pytest.raises(ConfigError) as exc_info:
            ClassifierRegistry([ClassifierEntry("a", always)])
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID

    def test_two_baselines_rejected(self):
        with pytest.raises(ConfigError):
            ClassifierRegistry(
                [
                    ClassifierEntry("a", always, baseline=True),
                    ClassifierEntry("b", never, baseline=True),
                ]
            )

    def test_duplicate_names_rejected(self):
        with pytest.raises(ConfigError) as exc_info:
            ClassifierRegistry(
                [
                    ClassifierEntry("a", always, baseline=True),
                    ClassifierEntry("a", never),
                ]
            )
        assert exc_info.value.details["duplicates"] == ["a"]

    def test_empty_registry_rejected(self):
        with pytest.raises(ConfigError):
            ClassifierRegistry([])

    def test_from_functions(self):
        """Test building a registry from a name -> function mapping."""
        registry = ClassifierRegistry.from_functions({"x": always, "y": never}, baseline="y")
        assert registry.names() == ["y", "x"]

    def test_from_functions_unknown_baseline(self):
        with pytest.raises(ConfigError):
            ClassifierRegistry.from_functions({"x": always}, baseline="missing")

    def test_default_registry(self):
        """Test that the default registry compares the pattern against the scorer."""
        registry = default_registry(Config())
        assert registry.names() == [BASELINE_NAME, "is_listicle_like"]

        fns = {entry.name: entry.fn for entry in registry}
        assert fns["is_listicle_like"]("My Top Ten Movies") is True
        assert fns[BASELINE_NAME]("5 Best Productivity Tips") is True

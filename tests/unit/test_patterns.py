"""Unit tests for structural pattern detection."""

from datetime import UTC, datetime, timedelta

import pytest

from tiermem.consolidation.patterns import PatternDetector
from tiermem.core.types import EmergentPattern, Episode, Feedback, ValidatedPattern

BASE_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def detector():
    return PatternDetector()


def make_episode(n, episode_type="interaction", tags=("seo",)):
    return Episode(
        id=f"ep-{1717243200000 + n}-abc{n % 10}e",
        type=episode_type,
        description=f"Episode {n}",
        tags=tuple(tags),
        timestamp=BASE_TIME + timedelta(minutes=n),
    )


def make_pattern(key, occurrences):
    return EmergentPattern(
        id="emrg-1717243200000-aaaaa",
        type=key,
        description=f"Pattern {key}",
        occurrences=occurrences,
        first_seen=BASE_TIME,
        last_seen=BASE_TIME,
    )


def make_feedback(sentiment, content):
    return Feedback(
        id="fb-1717243200000-bbbbb",
        source="client",
        sentiment=sentiment,
        content=content,
        timestamp=BASE_TIME,
    )


class TestPatternKey:
    """Test signature building."""

    def test_tags_sorted(self):
        assert PatternDetector.pattern_key("interaction", ["seo", "blog"]) == (
            "interaction:blog,seo"
        )

    def test_order_independent(self):
        """Test tag order and duplicates do not change the key."""
        assert PatternDetector.pattern_key("discovery", ["b", "a", "b"]) == (
            PatternDetector.pattern_key("discovery", ["a", "b"])
        )

    def test_type_matters(self):
        assert PatternDetector.pattern_key("interaction", ["a"]) != (
            PatternDetector.pattern_key("feedback", ["a"])
        )

    def test_describe(self):
        assert PatternDetector.describe("interaction", ("seo", "blog")) == (
            "Pattern: interaction with tags [seo, blog]"
        )


class TestObserve:
    """Test matching episodes against emergent patterns."""

    def test_creates_pattern(self, detector):
        patterns = []
        pattern, created = detector.observe(make_episode(1), patterns)

        assert created
        assert patterns == [pattern]
        assert pattern.id.startswith("emrg-")
        assert pattern.occurrences == 1
        assert pattern.first_seen == pattern.last_seen == BASE_TIME + timedelta(minutes=1)

    def test_strengthens_pattern(self, detector):
        patterns = []
        detector.observe(make_episode(1, tags=("a", "b")), patterns)
        pattern, created = detector.observe(make_episode(2, tags=("b", "a")), patterns)

        assert not created
        assert len(patterns) == 1
        assert pattern.occurrences == 2
        assert pattern.first_seen == BASE_TIME + timedelta(minutes=1)
        assert pattern.last_seen == BASE_TIME + timedelta(minutes=2)


class TestPromotable:
    """Test selection of patterns ready for promotion."""

    def test_threshold(self, detector):
        patterns = [make_pattern("interaction:a", 2), make_pattern("interaction:b", 3)]
        selected = detector.promotable(patterns, [], threshold=3)
        assert [p.type for p in selected] == ["interaction:b"]

    def test_skips_already_validated(self, detector):
        validated = ValidatedPattern(
            id="pat-1717243200000-ccccc",
            type="interaction:b",
            description="Known",
            trigger="t",
            outcome="o",
            recommendation="r",
            validated_at=BASE_TIME,
        )
        patterns = [make_pattern("interaction:b", 5), make_pattern("discovery:c", 4)]

        selected = detector.promotable(patterns, [validated], threshold=3)

        assert [p.type for p in selected] == ["discovery:c"]


class TestGroupFeedback:
    """Test grouping of feedback for preference promotion."""

    def test_groups_by_sentiment_and_prefix(self, detector):
        feedback = [
            make_feedback("negative", "Too long, please shorten"),
            make_feedback("negative", "Too long, please shorten"),
            make_feedback("positive", "Too long, please shorten"),
            make_feedback("positive", "Love the tone"),
        ]

        groups = detector.group_feedback(feedback, key_length=50)

        assert groups == [
            ("negative", "Too long, please shorten", 2),
            ("positive", "Too long, please shorten", 1),
            ("positive", "Love the tone", 1),
        ]

    def test_truncated_prefix(self, detector):
        """Test contents sharing the leading characters land in one group."""
        feedback = [
            make_feedback("neutral", "Headline: needs work"),
            make_feedback("neutral", "Headline: fine"),
        ]

        groups = detector.group_feedback(feedback, key_length=8)

        assert groups == [("neutral", "Headline", 2)]

    def test_colon_in_content(self, detector):
        """Test contents containing a colon keep their full prefix."""
        groups = detector.group_feedback(
            [make_feedback("negative", "Note: too formal")] * 3, key_length=50
        )
        assert groups == [("negative", "Note: too formal", 3)]

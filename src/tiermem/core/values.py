"""Value objects for tiermem.

Lightweight, immutable domain primitives. Each ``create`` factory trims and
validates its input and raises :class:`ValidationError` on bad values, so the
use-case layer can turn them into failed results.
"""

from dataclasses import dataclass
from enum import Enum

from tiermem.core.exceptions import ValidationError


class _OrderedLevel(str, Enum):
    """String enum whose members are totally ordered by declaration order."""

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    def is_higher_than(self, other: "_OrderedLevel") -> bool:
        return self.rank > other.rank

    def is_at_least(self, other: "_OrderedLevel") -> bool:
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value


class Importance(_OrderedLevel):
    """Importance of an episode, ordered ``low < medium < high``."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def create(cls, value: "str | Importance") -> "Importance":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f'Invalid Importance: "{value}". Must be "low", "medium", or "high".'
            ) from None


class ConfidenceLevel(_OrderedLevel):
    """Confidence attached to preferences and rules, ``low < medium < strong``."""

    LOW = "low"
    MEDIUM = "medium"
    STRONG = "strong"

    @classmethod
    def create(cls, value: "str | ConfidenceLevel") -> "ConfidenceLevel":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f'Invalid ConfidenceLevel: "{value}". Must be "low", "medium", or "strong".'
            ) from None


class EpisodeType(str, Enum):
    """Kind of episodic record."""

    INTERACTION = "interaction"
    TASK_RESULT = "task_result"
    FEEDBACK = "feedback"
    DISCOVERY = "discovery"

    @classmethod
    def create(cls, value: "str | EpisodeType") -> "EpisodeType":
        normalized = str(value.value if isinstance(value, Enum) else value).strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValidationError(
                f'Invalid episode type: "{value}". Valid types: {valid}'
            ) from None

    def __str__(self) -> str:
        return self.value


class FeedbackSentiment(str, Enum):
    """Sentiment of a piece of feedback."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"

    @classmethod
    def create(cls, value: "str | FeedbackSentiment") -> "FeedbackSentiment":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f'Invalid feedback sentiment: "{value}". '
                f'Must be "positive", "neutral", or "negative".'
            ) from None

    def __str__(self) -> str:
        return self.value


class TaskOutcome(str, Enum):
    """Outcome of a completed task."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"

    @classmethod
    def create(cls, value: "str | TaskOutcome") -> "TaskOutcome":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f'Invalid task outcome: "{value}". Must be "success", "partial", or "failure".'
            ) from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Tag:
    """A validated, trimmed, non-empty label used for categorization."""

    value: str

    @classmethod
    def create(cls, value: str) -> "Tag":
        trimmed = value.strip() if isinstance(value, str) else ""
        if not trimmed:
            raise ValidationError("Tag cannot be empty.")
        return cls(trimmed)

    def __str__(self) -> str:
        return self.value

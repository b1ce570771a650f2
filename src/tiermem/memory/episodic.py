"""Episodic memory implementation.

This module implements the episodic memory tier: an append-only log of
episodes, feedback and task results, subject to a retention window. Every
recorded episode is matched against the emergent patterns, which survive
pruning.
"""

import copy
import logging
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from tiermem.aggregates.episode import EpisodeAggregate
from tiermem.consolidation.patterns import PatternDetector
from tiermem.core.events import PATTERN_DETECTED, DomainEventBus
from tiermem.core.types import (
    DomainEvent,
    EmergentPattern,
    Episode,
    EpisodicContext,
    Feedback,
    PruneReport,
    TaskResult,
)
from tiermem.core.utils import Clock, generate_id, utc_now
from tiermem.core.values import FeedbackSentiment, Importance, TaskOutcome

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30


class EpisodicMemory:
    """Append-only episodic log with online pattern detection.

    Attributes:
        detector: Pattern detector run on every recorded episode.
        event_bus: Optional bus notified of recorded episodes and new patterns.
    """

    def __init__(
        self,
        clock: Clock = utc_now,
        detector: PatternDetector | None = None,
        event_bus: DomainEventBus | None = None,
    ):
        """Initialize episodic memory.

        Args:
            clock: Callable returning the current time.
            detector: Pattern detector (a default one if None).
            event_bus: Bus receiving episode and pattern events, if any.
        """
        self._clock = clock
        self.detector = detector or PatternDetector()
        self.event_bus = event_bus
        self._episodes: list[Episode] = []
        self._feedback: list[Feedback] = []
        self._task_results: list[TaskResult] = []
        self._patterns: list[EmergentPattern] = []

    # ========== Recording ==========

    def record_episode(
        self,
        episode_type: str,
        description: str,
        data: Mapping[str, Any] | None = None,
        tags: list[str] | None = None,
        importance: str | Importance | None = None,
    ) -> Episode:
        """Validate, append and pattern-match a new episode.

        Args:
            episode_type: interaction, task_result, feedback or discovery.
            description: What happened.
            data: Arbitrary payload, snapshotted.
            tags: At least one non-empty tag.
            importance: low, medium or high (defaults to low).

        Returns:
            The stored episode.

        Raises:
            ValidationError: If the episode violates an invariant.
        """
        aggregate = EpisodeAggregate.create(
            episode_type,
            description,
            data,
            tags,
            importance=importance,
            timestamp=self._clock(),
        )
        return self.add_episode(aggregate)

    def add_episode(self, aggregate: EpisodeAggregate) -> Episode:
        """Append an already validated episode and run pattern detection.

        When the store has an event bus, the aggregate's pending events are
        published first, then ``PATTERN_DETECTED`` if the episode started a
        new pattern.

        Args:
            aggregate: Episode built through :meth:`EpisodeAggregate.create`.

        Returns:
            A copy of the stored episode.
        """
        episode = aggregate.to_dto()
        self._episodes.append(episode)
        logger.info(
            f"Recorded episode {episode.id} ({episode.type}, {episode.importance}, "
            f"tags: {', '.join(episode.tags)})"
        )

        pattern, created = self.detector.observe(episode, self._patterns)
        if self.event_bus is not None:
            self.event_bus.publish_all(aggregate.pull_events())
            if created:
                self.event_bus.publish(
                    DomainEvent(
                        type=PATTERN_DETECTED,
                        occurred_at=episode.timestamp,
                        payload={"pattern_id": pattern.id, "type": pattern.type},
                    )
                )
        return episode.model_copy(deep=True)

    def record_feedback(
        self,
        source: str,
        sentiment: str | FeedbackSentiment,
        content: str,
        task_id: str | None = None,
    ) -> Feedback:
        """Append a feedback record.

        Raises:
            ValidationError: If ``sentiment`` is not a known sentiment.
        """
        now = self._clock()
        feedback = Feedback(
            id=generate_id("fb", now),
            source=source,
            sentiment=FeedbackSentiment.create(sentiment).value,
            content=content,
            task_id=task_id,
            timestamp=now,
        )
        self._feedback.append(feedback)
        logger.info(f"Recorded {feedback.sentiment} feedback {feedback.id} from {source}")
        return feedback

    def record_task_result(
        self,
        task_id: str,
        description: str,
        outcome: str | TaskOutcome,
        data: Mapping[str, Any] | None = None,
    ) -> TaskResult:
        """Append a task result.

        Raises:
            ValidationError: If ``outcome`` is not a known outcome.
        """
        now = self._clock()
        result = TaskResult(
            id=generate_id("tr", now),
            task_id=task_id,
            description=description,
            outcome=TaskOutcome.create(outcome).value,
            data=copy.deepcopy(dict(data or {})),
            timestamp=now,
        )
        self._task_results.append(result)
        logger.info(f"Recorded task result {result.id} for {task_id}: {result.outcome}")
        return result.model_copy(deep=True)

    # ========== Retrieval ==========

    def now(self) -> datetime:
        return self._clock()

    def _cutoff(self, retention_days: int) -> datetime:
        return self.now() - timedelta(days=retention_days)

    def get_episodic_context(
        self, retention_days: int = DEFAULT_RETENTION_DAYS
    ) -> EpisodicContext:
        """Get records within the retention window plus every emergent pattern.

        Args:
            retention_days: Records older than this many days are left out.

        Returns:
            EpisodicContext with copies of the kept records.
        """
        cutoff = self._cutoff(retention_days)
        return EpisodicContext(
            episodes=[e.model_copy(deep=True) for e in self._episodes if e.timestamp >= cutoff],
            recent_feedback=[f for f in self._feedback if f.timestamp >= cutoff],
            task_results=[
                t.model_copy(deep=True) for t in self._task_results if t.timestamp >= cutoff
            ],
            emergent_patterns=self.get_emergent_patterns(),
        )

    # Episodes and task results carry mutable payloads, so callers get deep copies.
    def get_episodes(self) -> list[Episode]:
        return [e.model_copy(deep=True) for e in self._episodes]

    def get_feedback(self) -> list[Feedback]:
        return list(self._feedback)

    def get_task_results(self) -> list[TaskResult]:
        return [t.model_copy(deep=True) for t in self._task_results]

    def get_emergent_patterns(self) -> list[EmergentPattern]:
        return [p.model_copy() for p in self._patterns]

    # ========== Maintenance ==========

    def prune(self, retention_days: int = DEFAULT_RETENTION_DAYS) -> PruneReport:
        """Drop episodes, feedback and task results older than the window.

        Emergent patterns are never pruned.

        Args:
            retention_days: Age in days beyond which records are dropped.

        Returns:
            PruneReport with the number of records removed per collection.
        """
        cutoff = self._cutoff(retention_days)

        kept_episodes = [e for e in self._episodes if e.timestamp >= cutoff]
        kept_feedback = [f for f in self._feedback if f.timestamp >= cutoff]
        kept_results = [t for t in self._task_results if t.timestamp >= cutoff]

        report = PruneReport(
            episodes_pruned=len(self._episodes) - len(kept_episodes),
            feedback_pruned=len(self._feedback) - len(kept_feedback),
            task_results_pruned=len(self._task_results) - len(kept_results),
            cutoff=cutoff,
        )

        self._episodes = kept_episodes
        self._feedback = kept_feedback
        self._task_results = kept_results

        logger.info(
            f"Pruned {report.episodes_pruned} episodes, {report.feedback_pruned} feedback, "
            f"{report.task_results_pruned} task results older than {cutoff.isoformat()}"
        )
        return report

    def reset(self) -> None:
        """Drop every record, patterns included."""
        self._episodes = []
        self._feedback = []
        self._task_results = []
        self._patterns = []

"""Consolidation pipeline moving knowledge between memory tiers.

This module implements the ConsolidationPipeline that drains working memory
into episodic memory, promotes recurring episodic patterns and feedback into
semantic memory, and prunes episodic records past the retention window.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from tiermem.core.events import PATTERN_PROMOTED, DomainEventBus
from tiermem.core.exceptions import ConsolidationError, DomainError
from tiermem.core.types import ConsolidationReport, DomainEvent, Episode, PruneReport
from tiermem.core.utils import Clock, millis_between, utc_now

if TYPE_CHECKING:
    from tiermem.memory.episodic import EpisodicMemory
    from tiermem.memory.semantic import SemanticMemory
    from tiermem.memory.working import WorkingMemory

logger = logging.getLogger(__name__)

EPISODIC_RETENTION_DAYS = 30
PATTERN_PROMOTION_THRESHOLD = 3
FEEDBACK_KEY_LENGTH = 50

SESSION_TAGS = ["session", "consolidated"]


@dataclass
class ConsolidationConfig:
    """Configuration for consolidation behavior.

    Attributes:
        retention_days: Episodic records older than this are pruned.
        pattern_promotion_threshold: Occurrences required to promote a pattern
            or a feedback group.
        feedback_key_length: Leading content characters that identify a
            feedback group and name the resulting preference.
    """

    retention_days: int = EPISODIC_RETENTION_DAYS
    pattern_promotion_threshold: int = PATTERN_PROMOTION_THRESHOLD
    feedback_key_length: int = FEEDBACK_KEY_LENGTH


class ConsolidationPipeline:
    """Runs the four consolidation phases in order.

    1. Working → episodic: the active session becomes a ``task_result`` episode
    2. Pattern promotion: recurring emergent patterns become validated patterns
    3. Feedback promotion: recurring feedback becomes preferences
    4. Pruning: aged episodic records are dropped

    Pruning runs last so that promotion sees the full pre-prune data. Phases
    2 and 3 skip anything already promoted, so running the pipeline again
    after a failure never duplicates semantic records.

    Attributes:
        working: Working memory instance.
        episodic: Episodic memory instance.
        semantic: Semantic memory instance.
        config: Consolidation configuration.
        event_bus: Bus receiving ``PATTERN_PROMOTED`` events, if any.
        last_run: When the pipeline last completed.
    """

    def __init__(
        self,
        working: "WorkingMemory",
        episodic: "EpisodicMemory",
        semantic: "SemanticMemory",
        config: ConsolidationConfig | None = None,
        clock: Clock = utc_now,
        event_bus: DomainEventBus | None = None,
    ):
        """Initialize the consolidation pipeline.

        Args:
            working: Working memory instance.
            episodic: Episodic memory instance.
            semantic: Semantic memory instance.
            config: Configuration for consolidation (uses defaults if None).
            clock: Callable returning the current time.
            event_bus: Bus receiving promotion events, if any.
        """
        self.working = working
        self.episodic = episodic
        self.semantic = semantic
        self.config = config or ConsolidationConfig()
        self.event_bus = event_bus
        self._clock = clock
        self.last_run: datetime | None = None

    def run_consolidation(self) -> ConsolidationReport:
        """Run a full consolidation.

        Returns:
            ConsolidationReport describing what each phase did.

        Raises:
            ConsolidationError: If a phase fails. Earlier phases are not
                rolled back.
        """
        start_time = self._clock()
        logger.info("Starting consolidation...")

        logger.info("Step 1/4: Consolidating working memory...")
        session_episode = self.consolidate_working_to_episodic()

        logger.info("Step 2/4: Promoting emergent patterns...")
        promoted = self.promote_patterns()

        logger.info("Step 3/4: Promoting recurring feedback...")
        preferences = self.promote_feedback()

        logger.info("Step 4/4: Pruning aged episodic records...")
        prune_report = self.prune()

        self.last_run = self._clock()
        duration = (self.last_run - start_time).total_seconds()

        report = ConsolidationReport(
            session_consolidated=session_episode is not None,
            session_episode_id=session_episode.id if session_episode else None,
            patterns_promoted=promoted,
            preferences_created=preferences,
            prune=prune_report,
            duration=duration,
        )

        logger.info(
            f"Consolidation complete in {duration:.2f}s: "
            f"session {'consolidated' if report.session_consolidated else 'skipped'}, "
            f"{len(promoted)} patterns promoted, "
            f"{len(preferences)} preferences created, "
            f"{prune_report.episodes_pruned} episodes pruned"
        )
        return report

    # ========== Phases ==========

    def consolidate_working_to_episodic(self) -> Episode | None:
        """Turn the active session into a ``task_result`` episode.

        The session is cleared either way. Sessions with neither
        intermediate results nor scratchpad entries leave no trace. If the
        episode cannot be recorded, the session is put back.

        Returns:
            The recorded episode, or None.

        Raises:
            ConsolidationError: If the episode cannot be recorded.
        """
        session = self.working.clear_session()
        if session is None:
            logger.debug("No active session to consolidate")
            return None

        if not session.intermediate_results and not session.scratchpad:
            logger.debug(f"Session {session.id} is empty, discarding")
            return None

        try:
            episode = self.episodic.record_episode(
                "task_result",
                f"Session: {session.task} - {session.objective}",
                {
                    "intermediate_results": session.intermediate_results,
                    "scratchpad": session.scratchpad,
                    "duration": millis_between(session.started_at, self._clock()),
                },
                list(SESSION_TAGS),
                importance="medium",
            )
        except DomainError as e:
            self.working.restore_session(session)
            raise ConsolidationError("working_to_episodic", e.message) from e

        logger.info(f"Session {session.id} consolidated into episode {episode.id}")
        return episode

    def promote_patterns(self) -> list[str]:
        """Promote emergent patterns seen often enough.

        A pattern is promoted once; later runs skip types that already have
        a validated pattern.

        Returns:
            Types of the patterns promoted by this call.

        Raises:
            ConsolidationError: If a validated pattern cannot be stored.
        """
        candidates = self.episodic.detector.promotable(
            self.episodic.get_emergent_patterns(),
            self.semantic.get_validated_patterns(),
            self.config.pattern_promotion_threshold,
        )

        promoted = []
        for pattern in candidates:
            try:
                validated = self.semantic.add_validated_pattern(
                    pattern.type,
                    pattern.description,
                    f"Observed {pattern.occurrences} times",
                    f"From {pattern.first_seen.isoformat()} to {pattern.last_seen.isoformat()}",
                    f"Pattern confirmed after {pattern.occurrences} occurrences",
                )
            except DomainError as e:
                raise ConsolidationError("pattern_promotion", e.message) from e

            promoted.append(pattern.type)
            logger.info(
                f"Promoted pattern {pattern.type} after {pattern.occurrences} occurrences"
            )

            if self.event_bus is not None:
                self.event_bus.publish(
                    DomainEvent(
                        type=PATTERN_PROMOTED,
                        occurred_at=validated.validated_at,
                        payload={
                            "pattern_id": validated.id,
                            "emergent_pattern_id": pattern.id,
                            "type": pattern.type,
                            "occurrences": pattern.occurrences,
                        },
                    )
                )

        return promoted

    def promote_feedback(self) -> list[str]:
        """Turn recurring feedback into ``feedback`` preferences.

        Feedback is grouped by sentiment and leading content. A group seen
        often enough becomes a strong preference keyed by that content,
        unless a preference with that key already exists in any category.

        Returns:
            Keys of the preferences created by this call.

        Raises:
            ConsolidationError: If a preference cannot be stored.
        """
        groups = self.episodic.detector.group_feedback(
            self.episodic.get_feedback(), self.config.feedback_key_length
        )

        created = []
        for sentiment, content, count in groups:
            if count < self.config.pattern_promotion_threshold:
                continue
            if any(p.key == content for p in self.semantic.get_preferences()):
                logger.debug(f"Feedback '{content}' already a preference, skipping")
                continue

            try:
                self.semantic.add_preference(
                    "feedback", content, f"{sentiment} ({count} occurrences)", "strong"
                )
            except DomainError as e:
                raise ConsolidationError("feedback_promotion", e.message) from e

            created.append(content)
            logger.info(f"Promoted {sentiment} feedback '{content}' ({count} occurrences)")

        return created

    def prune(self) -> PruneReport:
        """Drop episodic records older than the retention window.

        Raises:
            ConsolidationError: If pruning fails.
        """
        try:
            return self.episodic.prune(self.config.retention_days)
        except DomainError as e:
            raise ConsolidationError("pruning", e.message) from e

"""Use cases operating on the three memory tiers.

Every ``execute`` returns a :class:`~tiermem.core.result.Result`. Events are
published after the store has been mutated.
"""

import logging
from collections.abc import Mapping
from typing import Any

from tiermem.aggregates.episode import EpisodeAggregate
from tiermem.consolidation.engine import ConsolidationPipeline
from tiermem.core.events import (
    CLIENT_FACT_ADDED,
    FEEDBACK_RECORDED,
    PREFERENCE_UPDATED,
    DomainEventBus,
)
from tiermem.core.types import (
    ClientFact,
    ConsolidationReport,
    DomainEvent,
    Episode,
    Feedback,
    LearnedRule,
    MemoryQueryOptions,
    MemoryQueryResponse,
    MemoryStats,
    Preference,
    TaskContext,
    TaskResult,
    ValidatedPattern,
    WorkingContext,
    WorkingSession,
)
from tiermem.memory.episodic import EpisodicMemory
from tiermem.memory.query import MemoryQueryService
from tiermem.memory.semantic import SemanticMemory
from tiermem.memory.working import WorkingMemory
from tiermem.usecases.base import UseCase, returns_result

logger = logging.getLogger(__name__)


# ========== Working Memory ==========


class StartSessionUseCase(UseCase):
    def __init__(self, working: WorkingMemory, event_bus: DomainEventBus | None = None):
        super().__init__(event_bus)
        self.working = working

    @returns_result
    def execute(self, task: str, objective: str) -> WorkingSession:
        """Start a session, discarding the previous one if any."""
        return self.working.start_session(task, objective).model_copy(deep=True)


class UpdateSessionUseCase(UseCase):
    """Write intermediate results, scratchpad notes or focus to the session.

    Without an active session the writes are ignored and the returned
    context holds no session.
    """

    def __init__(self, working: WorkingMemory):
        super().__init__()
        self.working = working

    @returns_result
    def execute(
        self,
        intermediate_results: Mapping[str, Any] | None = None,
        scratchpad: Mapping[str, str] | None = None,
        attention_focus: str | None = None,
    ) -> WorkingContext:
        for key, data in (intermediate_results or {}).items():
            self.working.store_intermediate(key, data)
        for key, value in (scratchpad or {}).items():
            self.working.set_scratchpad(key, value)
        if attention_focus is not None:
            self.working.update_attention(attention_focus)
        return self.working.get_working_context()


# ========== Episodic Memory ==========


class RecordEpisodeUseCase(UseCase):
    """Validate an episode through its aggregate and record it."""

    def __init__(self, episodic: EpisodicMemory, event_bus: DomainEventBus | None = None):
        super().__init__(event_bus)
        self.episodic = episodic

    @returns_result
    def execute(
        self,
        episode_type: str,
        description: str,
        data: Mapping[str, Any] | None = None,
        tags: list[str] | None = None,
        importance: str | None = None,
    ) -> Episode:
        aggregate = EpisodeAggregate.create(
            episode_type,
            description,
            data,
            tags,
            importance=importance,
            timestamp=self.episodic.now(),
        )
        episode = self.episodic.add_episode(aggregate)
        self._publish(*aggregate.pull_events())
        return episode


class RecordFeedbackUseCase(UseCase):
    def __init__(self, episodic: EpisodicMemory, event_bus: DomainEventBus | None = None):
        super().__init__(event_bus)
        self.episodic = episodic

    @returns_result
    def execute(
        self, source: str, sentiment: str, content: str, task_id: str | None = None
    ) -> Feedback:
        feedback = self.episodic.record_feedback(source, sentiment, content, task_id)
        self._publish(
            DomainEvent(
                type=FEEDBACK_RECORDED,
                occurred_at=feedback.timestamp,
                payload={
                    "feedback_id": feedback.id,
                    "sentiment": feedback.sentiment,
                    "task_id": feedback.task_id,
                },
            )
        )
        return feedback


class RecordTaskResultUseCase(UseCase):
    def __init__(self, episodic: EpisodicMemory, event_bus: DomainEventBus | None = None):
        super().__init__(event_bus)
        self.episodic = episodic

    @returns_result
    def execute(
        self,
        task_id: str,
        description: str,
        outcome: str,
        data: Mapping[str, Any] | None = None,
    ) -> TaskResult:
        return self.episodic.record_task_result(task_id, description, outcome, data)


# ========== Semantic Memory ==========


class AddClientFactUseCase(UseCase):
    def __init__(self, semantic: SemanticMemory, event_bus: DomainEventBus | None = None):
        super().__init__(event_bus)
        self.semantic = semantic

    @returns_result
    def execute(self, category: str, fact: str, source: str) -> ClientFact:
        client_fact = self.semantic.add_client_fact(category, fact, source)
        self._publish(
            DomainEvent(
                type=CLIENT_FACT_ADDED,
                occurred_at=client_fact.added_at,
                payload={"fact_id": client_fact.id, "category": category},
            )
        )
        return client_fact


class AddPreferenceUseCase(UseCase):
    """Insert or update a preference.

    ``PREFERENCE_UPDATED`` is published on both paths.
    """

    def __init__(self, semantic: SemanticMemory, event_bus: DomainEventBus | None = None):
        super().__init__(event_bus)
        self.semantic = semantic

    @returns_result
    def execute(self, category: str, key: str, value: str, confidence: str) -> Preference:
        preference = self.semantic.add_preference(category, key, value, confidence)
        self._publish(
            DomainEvent(
                type=PREFERENCE_UPDATED,
                payload={"preference_id": preference.id, "category": category, "key": key},
            )
        )
        return preference


class AddValidatedPatternUseCase(UseCase):
    def __init__(self, semantic: SemanticMemory, event_bus: DomainEventBus | None = None):
        super().__init__(event_bus)
        self.semantic = semantic

    @returns_result
    def execute(
        self,
        pattern_type: str,
        description: str,
        trigger: str,
        outcome: str,
        recommendation: str,
    ) -> ValidatedPattern:
        return self.semantic.add_validated_pattern(
            pattern_type, description, trigger, outcome, recommendation
        )


class AddLearnedRuleUseCase(UseCase):
    def __init__(self, semantic: SemanticMemory, event_bus: DomainEventBus | None = None):
        super().__init__(event_bus)
        self.semantic = semantic

    @returns_result
    def execute(self, description: str, domain: str, action: str, confidence: str) -> LearnedRule:
        return self.semantic.add_learned_rule(description, domain, action, confidence)


# ========== Queries ==========


class QueryMemoryUseCase(UseCase):
    """Query memory and attach current statistics."""

    def __init__(self, query_service: MemoryQueryService):
        super().__init__()
        self.query_service = query_service

    @returns_result
    def execute(
        self,
        types: list[str] | None = None,
        tags: list[str] | None = None,
        category: str | None = None,
        limit: int | None = None,
    ) -> MemoryQueryResponse:
        options = MemoryQueryOptions(types=types, tags=tags, category=category, limit=limit)
        return MemoryQueryResponse(
            memory=self.query_service.query(options),
            stats=self.query_service.get_stats(),
        )


class GetTaskContextUseCase(UseCase):
    def __init__(self, query_service: MemoryQueryService):
        super().__init__()
        self.query_service = query_service

    @returns_result
    def execute(self, task_type: str) -> TaskContext:
        return self.query_service.get_context_for_task(task_type)


# ========== Consolidation ==========


class ConsolidateMemoryUseCase(UseCase):
    """Run the consolidation pipeline and report statistics afterwards.

    Attributes:
        last_report: Report of the latest successful run.
    """

    def __init__(
        self,
        pipeline: ConsolidationPipeline,
        query_service: MemoryQueryService,
    ):
        super().__init__()
        self.pipeline = pipeline
        self.query_service = query_service
        self.last_report: ConsolidationReport | None = None

    @returns_result
    def execute(self) -> MemoryStats:
        self.last_report = self.pipeline.run_consolidation()
        return self.query_service.get_stats()

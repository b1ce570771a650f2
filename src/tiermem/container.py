"""Composition root wiring stores, services and use cases.

Each call to :func:`build_memory_system` returns a fresh, independent system;
there are no module-level instances.
"""

import logging
from dataclasses import dataclass

from tiermem.consolidation.engine import ConsolidationConfig, ConsolidationPipeline
from tiermem.consolidation.patterns import PatternDetector
from tiermem.core.events import DomainEventBus
from tiermem.core.utils import Clock, utc_now
from tiermem.memory.episodic import EpisodicMemory
from tiermem.memory.query import MemoryQueryService
from tiermem.memory.semantic import SemanticMemory
from tiermem.memory.working import WorkingMemory
from tiermem.storage.profiles import InMemoryCompanyProfileRepository
from tiermem.usecases.actions import MemoryActionDispatcher
from tiermem.usecases.memory import (
    AddClientFactUseCase,
    AddLearnedRuleUseCase,
    AddPreferenceUseCase,
    AddValidatedPatternUseCase,
    ConsolidateMemoryUseCase,
    GetTaskContextUseCase,
    QueryMemoryUseCase,
    RecordEpisodeUseCase,
    RecordFeedbackUseCase,
    RecordTaskResultUseCase,
    StartSessionUseCase,
    UpdateSessionUseCase,
)
from tiermem.usecases.profile import (
    CreateProfileUseCase,
    GetProfileUseCase,
    LinkDiscoveryUseCase,
)

logger = logging.getLogger(__name__)


@dataclass
class MemorySystem:
    """A fully wired memory system.

    Attributes:
        event_bus: Bus every component publishes to.
        working: Working memory store.
        episodic: Episodic memory store.
        semantic: Semantic memory store.
        profiles: Company profile repository.
        query_service: Cross-tier query service.
        pipeline: Consolidation pipeline.
    """

    event_bus: DomainEventBus
    working: WorkingMemory
    episodic: EpisodicMemory
    semantic: SemanticMemory
    profiles: InMemoryCompanyProfileRepository
    query_service: MemoryQueryService
    pipeline: ConsolidationPipeline

    start_session: StartSessionUseCase
    update_session: UpdateSessionUseCase
    record_episode: RecordEpisodeUseCase
    record_feedback: RecordFeedbackUseCase
    record_task_result: RecordTaskResultUseCase
    add_client_fact: AddClientFactUseCase
    add_preference: AddPreferenceUseCase
    add_validated_pattern: AddValidatedPatternUseCase
    add_learned_rule: AddLearnedRuleUseCase
    query_memory: QueryMemoryUseCase
    get_task_context: GetTaskContextUseCase
    consolidate_memory: ConsolidateMemoryUseCase
    create_profile: CreateProfileUseCase
    get_profile: GetProfileUseCase
    link_discovery: LinkDiscoveryUseCase

    def dispatcher(self) -> MemoryActionDispatcher:
        return MemoryActionDispatcher(self)

    def reset(self) -> None:
        """Empty every store. Subscriptions on the event bus are kept."""
        self.working.reset()
        self.episodic.reset()
        self.semantic.reset()
        self.profiles.reset()


def build_memory_system(
    config: ConsolidationConfig | None = None,
    clock: Clock = utc_now,
    event_bus: DomainEventBus | None = None,
) -> MemorySystem:
    """Construct and wire a new memory system.

    Args:
        config: Consolidation configuration (defaults if None).
        clock: Callable returning the current time, shared by every store.
        event_bus: Bus to publish to (a new one if None).

    Returns:
        The wired MemorySystem.
    """
    config = config or ConsolidationConfig()
    bus = event_bus or DomainEventBus()

    working = WorkingMemory(clock=clock)
    episodic = EpisodicMemory(clock=clock, detector=PatternDetector(), event_bus=bus)
    semantic = SemanticMemory(clock=clock)
    profiles = InMemoryCompanyProfileRepository()
    query_service = MemoryQueryService(
        working, episodic, semantic, retention_days=config.retention_days
    )
    pipeline = ConsolidationPipeline(
        working, episodic, semantic, config=config, clock=clock, event_bus=bus
    )

    logger.debug("Built memory system")
    return MemorySystem(
        event_bus=bus,
        working=working,
        episodic=episodic,
        semantic=semantic,
        profiles=profiles,
        query_service=query_service,
        pipeline=pipeline,
        start_session=StartSessionUseCase(working, bus),
        update_session=UpdateSessionUseCase(working),
        record_episode=RecordEpisodeUseCase(episodic, bus),
        record_feedback=RecordFeedbackUseCase(episodic, bus),
        record_task_result=RecordTaskResultUseCase(episodic, bus),
        add_client_fact=AddClientFactUseCase(semantic, bus),
        add_preference=AddPreferenceUseCase(semantic, bus),
        add_validated_pattern=AddValidatedPatternUseCase(semantic, bus),
        add_learned_rule=AddLearnedRuleUseCase(semantic, bus),
        query_memory=QueryMemoryUseCase(query_service),
        get_task_context=GetTaskContextUseCase(query_service),
        consolidate_memory=ConsolidateMemoryUseCase(pipeline, query_service),
        create_profile=CreateProfileUseCase(profiles, semantic, bus, clock),
        get_profile=GetProfileUseCase(profiles),
        link_discovery=LinkDiscoveryUseCase(profiles, bus, clock),
    )

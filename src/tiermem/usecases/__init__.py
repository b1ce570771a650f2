"""Use cases: the boundary where domain failures become Result values."""

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

__all__ = [
    "AddClientFactUseCase",
    "AddLearnedRuleUseCase",
    "AddPreferenceUseCase",
    "AddValidatedPatternUseCase",
    "ConsolidateMemoryUseCase",
    "CreateProfileUseCase",
    "GetProfileUseCase",
    "GetTaskContextUseCase",
    "LinkDiscoveryUseCase",
    "QueryMemoryUseCase",
    "RecordEpisodeUseCase",
    "RecordFeedbackUseCase",
    "RecordTaskResultUseCase",
    "StartSessionUseCase",
    "UpdateSessionUseCase",
]

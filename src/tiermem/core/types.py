"""Core data types and Pydantic models for tiermem.

This module defines the records held by the three memory tiers, the company
profile record, domain events, and the read models returned by the query
service and the consolidation pipeline.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from tiermem.core.utils import MEMORY_ID_PATTERN, utc_now

# Identifiers follow prefix-timestamp-random
MemoryID = Annotated[str, StringConstraints(pattern=MEMORY_ID_PATTERN)]

EpisodeTypeName = Literal["interaction", "task_result", "feedback", "discovery"]
ImportanceName = Literal["low", "medium", "high"]
ConfidenceName = Literal["low", "medium", "strong"]
SentimentName = Literal["positive", "neutral", "negative"]
OutcomeName = Literal["success", "partial", "failure"]
MemoryTier = Literal["working", "episodic", "semantic"]

ALL_TIERS: tuple[MemoryTier, ...] = ("working", "episodic", "semantic")


# Working memory
class WorkingSession(BaseModel):
    """The single active task-scoped scratch context.

    Attributes:
        id: Session identifier.
        task: Task being worked on.
        objective: What the task should achieve.
        started_at: When the session was started.
        intermediate_results: Partial results keyed by name.
        scratchpad: Free-form notes keyed by name.
        attention_focus: What the assistant is currently focused on.
    """

    id: MemoryID
    task: str
    objective: str
    started_at: datetime = Field(default_factory=utc_now)
    intermediate_results: dict[str, Any] = Field(default_factory=dict)
    scratchpad: dict[str, str] = Field(default_factory=dict)
    attention_focus: str | None = None


class WorkingContext(BaseModel):
    """Read snapshot of working memory."""

    session: WorkingSession | None = None


# Episodic memory
class Episode(BaseModel):
    """One immutable record of something that happened."""

    model_config = ConfigDict(frozen=True)

    id: MemoryID
    type: EpisodeTypeName
    description: str
    data: dict[str, Any] = Field(default_factory=dict)
    tags: tuple[str, ...]
    importance: ImportanceName = "low"
    timestamp: datetime


class Feedback(BaseModel):
    """Feedback received about the assistant's work."""

    model_config = ConfigDict(frozen=True)

    id: MemoryID
    source: str
    sentiment: SentimentName
    content: str
    task_id: str | None = None
    timestamp: datetime


class TaskResult(BaseModel):
    """Outcome of a task the assistant carried out."""

    model_config = ConfigDict(frozen=True)

    id: MemoryID
    task_id: str
    description: str
    outcome: OutcomeName
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime


class EmergentPattern(BaseModel):
    """A structurally detected recurrence of (episode type, tag set).

    Attributes:
        id: Pattern identifier.
        type: Signature key ``"{episodeType}:{sortedTags}"``.
        description: Human-readable description.
        occurrences: Number of episodes that matched the signature.
        first_seen: Timestamp of the first matching episode.
        last_seen: Timestamp of the latest matching episode.
    """

    id: MemoryID
    type: str
    description: str
    occurrences: int = Field(default=1, ge=1)
    first_seen: datetime
    last_seen: datetime


class EpisodicContext(BaseModel):
    """Retention-filtered view of episodic memory."""

    episodes: list[Episode] = Field(default_factory=list)
    recent_feedback: list[Feedback] = Field(default_factory=list)
    task_results: list[TaskResult] = Field(default_factory=list)
    emergent_patterns: list[EmergentPattern] = Field(default_factory=list)


# Semantic memory
class ClientFact(BaseModel):
    """A durable fact about the client."""

    model_config = ConfigDict(frozen=True)

    id: MemoryID
    category: str
    fact: str
    source: str
    added_at: datetime


class Preference(BaseModel):
    """A client preference, unique per (category, key).

    Preferences are updated in place when re-added with the same key.
    """

    id: MemoryID
    category: str
    key: str
    value: str
    confidence: ConfidenceName
    added_at: datetime


class ValidatedPattern(BaseModel):
    """A pattern confirmed often enough to be kept permanently."""

    model_config = ConfigDict(frozen=True)

    id: MemoryID
    type: str
    description: str
    trigger: str
    outcome: str
    recommendation: str
    validated_at: datetime


class LearnedRule(BaseModel):
    """A rule the assistant should apply within a domain."""

    model_config = ConfigDict(frozen=True)

    id: MemoryID
    description: str
    domain: str
    action: str
    confidence: ConfidenceName
    added_at: datetime


class SemanticContext(BaseModel):
    """Copy of all semantic memory collections."""

    client_facts: list[ClientFact] = Field(default_factory=list)
    preferences: list[Preference] = Field(default_factory=list)
    validated_patterns: list[ValidatedPattern] = Field(default_factory=list)
    learned_rules: list[LearnedRule] = Field(default_factory=list)


# Client knowledge
class CompanyProfile(BaseModel):
    """Persisted shape of a client's company profile."""

    model_config = ConfigDict(frozen=True)

    id: MemoryID
    name: str
    sector: str
    description: str
    target: str
    brand_tone: str
    discovery_id: str | None = None
    created_at: datetime
    updated_at: datetime


# Domain events
class DomainEvent(BaseModel):
    """Notification that something happened in the domain."""

    model_config = ConfigDict(frozen=True)

    type: str
    occurred_at: datetime = Field(default_factory=utc_now)
    payload: dict[str, Any] = Field(default_factory=dict)


# Query / retrieval
class MemoryQueryOptions(BaseModel):
    """Options accepted by the memory query service.

    Attributes:
        types: Tiers to include; all three when omitted.
        tags: Keep episodes carrying any of these tags.
        category: Keep semantic records whose category/type/domain matches.
        limit: Keep only the last N matching episodes (0 or None keeps all).
    """

    types: list[MemoryTier] | None = None
    tags: list[str] | None = None
    category: str | None = None
    limit: int | None = Field(default=None, ge=0)


class SearchResult(BaseModel):
    """Result of a cross-tier query; unrequested tiers are None."""

    working: WorkingContext | None = None
    episodic: EpisodicContext | None = None
    semantic: SemanticContext | None = None


class TaskContext(BaseModel):
    """Memory relevant to a given task type."""

    relevant_facts: list[ClientFact] = Field(default_factory=list)
    relevant_preferences: list[Preference] = Field(default_factory=list)
    recent_episodes: list[Episode] = Field(default_factory=list)
    patterns: list[ValidatedPattern] = Field(default_factory=list)
    rules: list[LearnedRule] = Field(default_factory=list)


class WorkingStats(BaseModel):
    has_active_session: bool = False


class EpisodicStats(BaseModel):
    episodes: int = 0
    feedback: int = 0
    task_results: int = 0
    emergent_patterns: int = 0


class SemanticStats(BaseModel):
    facts: int = 0
    preferences: int = 0
    patterns: int = 0
    rules: int = 0


class MemoryStats(BaseModel):
    """Counts across the three tiers."""

    working: WorkingStats = Field(default_factory=WorkingStats)
    episodic: EpisodicStats = Field(default_factory=EpisodicStats)
    semantic: SemanticStats = Field(default_factory=SemanticStats)


class MemoryQueryResponse(BaseModel):
    """Query result bundled with current statistics."""

    memory: SearchResult
    stats: MemoryStats


# Consolidation
class PruneReport(BaseModel):
    """Result of dropping aged episodic records.

    Attributes:
        episodes_pruned: Number of episodes removed.
        feedback_pruned: Number of feedback records removed.
        task_results_pruned: Number of task results removed.
        cutoff: Records strictly older than this were removed.
    """

    episodes_pruned: int = 0
    feedback_pruned: int = 0
    task_results_pruned: int = 0
    cutoff: datetime | None = None


class ConsolidationReport(BaseModel):
    """Result of one consolidation run.

    Attributes:
        session_consolidated: Whether a working session became an episode.
        session_episode_id: ID of that episode, if any.
        patterns_promoted: Types of emergent patterns promoted this run.
        preferences_created: Keys of preferences created from feedback.
        prune: Pruning statistics.
        duration: Time taken in seconds.
    """

    session_consolidated: bool = False
    session_episode_id: MemoryID | None = None
    patterns_promoted: list[str] = Field(default_factory=list)
    preferences_created: list[str] = Field(default_factory=list)
    prune: PruneReport = Field(default_factory=PruneReport)
    duration: float = 0.0

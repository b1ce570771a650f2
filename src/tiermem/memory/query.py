"""Cross-tier memory queries.

This module implements the MemoryQueryService, the read side shared by the
use cases and the CLI: filtered queries across the three tiers, the context
relevant to a task type, a markdown digest of everything worth knowing and
per-tier statistics.
"""

import logging

from tiermem.core.types import (
    ALL_TIERS,
    EpisodicStats,
    MemoryQueryOptions,
    MemoryStats,
    SearchResult,
    SemanticContext,
    SemanticStats,
    TaskContext,
    WorkingStats,
)
from tiermem.memory.episodic import DEFAULT_RETENTION_DAYS, EpisodicMemory
from tiermem.memory.semantic import SemanticMemory
from tiermem.memory.working import WorkingMemory

logger = logging.getLogger(__name__)

TASK_CONTEXT_EPISODES = 10
FULL_CONTEXT_EPISODES = 5


class MemoryQueryService:
    """Read-only view over working, episodic and semantic memory.

    Attributes:
        working: Working memory instance.
        episodic: Episodic memory instance.
        semantic: Semantic memory instance.
        retention_days: Window applied to episodic reads.
    """

    def __init__(
        self,
        working: WorkingMemory,
        episodic: EpisodicMemory,
        semantic: SemanticMemory,
        retention_days: int = DEFAULT_RETENTION_DAYS,
    ):
        self.working = working
        self.episodic = episodic
        self.semantic = semantic
        self.retention_days = retention_days

    # ========== Query Operations ==========

    def query(self, options: MemoryQueryOptions | None = None) -> SearchResult:
        """Query the requested tiers.

        Episodic reads start from the retention window. With ``tags``, only
        episodes carrying at least one of them are kept; with ``limit``, only
        the last N of those, in insertion order. With ``category``, each
        semantic collection is filtered on its own field: facts and
        preferences on ``category``, validated patterns on ``type`` and
        learned rules on ``domain``.

        Args:
            options: Query options; all tiers unfiltered when None.

        Returns:
            SearchResult with unrequested tiers left as None.
        """
        options = options or MemoryQueryOptions()
        types = options.types or list(ALL_TIERS)
        result = SearchResult()

        if "working" in types:
            result.working = self.working.get_working_context()

        if "episodic" in types:
            context = self.episodic.get_episodic_context(self.retention_days)
            episodes = context.episodes
            if options.tags:
                wanted = set(options.tags)
                episodes = [e for e in episodes if wanted.intersection(e.tags)]
            if options.limit:
                episodes = episodes[-options.limit :]
            context.episodes = episodes
            result.episodic = context

        if "semantic" in types:
            context = self.semantic.get_semantic_context()
            if options.category:
                category = options.category
                context = SemanticContext(
                    client_facts=[f for f in context.client_facts if f.category == category],
                    preferences=[p for p in context.preferences if p.category == category],
                    validated_patterns=[
                        p for p in context.validated_patterns if p.type == category
                    ],
                    learned_rules=[r for r in context.learned_rules if r.domain == category],
                )
            result.semantic = context

        logger.debug(f"Queried tiers {', '.join(types)}")
        return result

    def get_context_for_task(self, task_type: str) -> TaskContext:
        """Gather memory relevant to a task type.

        Args:
            task_type: Matched against validated pattern types and rule domains.

        Returns:
            TaskContext with every fact and preference, the latest episodes
            and the patterns and rules for ``task_type``.
        """
        return TaskContext(
            relevant_facts=self.semantic.get_client_facts(),
            relevant_preferences=[p.model_copy() for p in self.semantic.get_preferences()],
            recent_episodes=self.episodic.get_episodes()[-TASK_CONTEXT_EPISODES:],
            patterns=[p for p in self.semantic.get_validated_patterns() if p.type == task_type],
            rules=[r for r in self.semantic.get_learned_rules() if r.domain == task_type],
        )

    def get_full_context(self) -> str:
        """Render a markdown digest of semantic memory and recent episodes.

        Empty sections are omitted; an empty memory renders as "".

        Returns:
            Formatted context string.
        """
        semantic = self.semantic.get_semantic_context()
        episodic = self.episodic.get_episodic_context(self.retention_days)
        sections = []

        if semantic.client_facts:
            lines = [f"- [{f.category}] {f.fact}" for f in semantic.client_facts]
            sections.append("## Faits client\n" + "\n".join(lines))

        if semantic.preferences:
            lines = [f"- {p.key}: {p.value} ({p.confidence})" for p in semantic.preferences]
            sections.append("## Preferences\n" + "\n".join(lines))

        if semantic.validated_patterns:
            lines = [
                f"- {p.description} → {p.recommendation}" for p in semantic.validated_patterns
            ]
            sections.append("## Patterns valides\n" + "\n".join(lines))

        if semantic.learned_rules:
            lines = [
                f"- [{r.domain}] {r.description}: {r.action}" for r in semantic.learned_rules
            ]
            sections.append("## Regles apprises\n" + "\n".join(lines))

        if episodic.episodes:
            recent = episodic.episodes[-FULL_CONTEXT_EPISODES:]
            lines = [f"- [{e.type}] {e.description}" for e in recent]
            sections.append("## Episodes recents\n" + "\n".join(lines))

        return "\n\n".join(sections)

    def get_stats(self) -> MemoryStats:
        """Count records per tier.

        Episodic counts cover the retention window, except emergent patterns
        which are never filtered.
        """
        episodic = self.episodic.get_episodic_context(self.retention_days)
        semantic = self.semantic.get_semantic_context()

        return MemoryStats(
            working=WorkingStats(has_active_session=self.working.has_active_session()),
            episodic=EpisodicStats(
                episodes=len(episodic.episodes),
                feedback=len(episodic.recent_feedback),
                task_results=len(episodic.task_results),
                emergent_patterns=len(episodic.emergent_patterns),
            ),
            semantic=SemanticStats(
                facts=len(semantic.client_facts),
                preferences=len(semantic.preferences),
                patterns=len(semantic.validated_patterns),
                rules=len(semantic.learned_rules),
            ),
        )

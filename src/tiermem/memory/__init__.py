"""Memory system components for tiermem.

This module provides the three-tier memory system:
- Working memory: the single active task session
- Episodic memory: retention-bound log of episodes, feedback and task results
- Semantic memory: durable facts, preferences, patterns and rules
- Query service: cross-tier reads, task context and statistics
"""

from tiermem.memory.episodic import EpisodicMemory
from tiermem.memory.query import MemoryQueryService
from tiermem.memory.semantic import SemanticMemory
from tiermem.memory.working import WorkingMemory

__all__ = [
    "EpisodicMemory",
    "MemoryQueryService",
    "SemanticMemory",
    "WorkingMemory",
]

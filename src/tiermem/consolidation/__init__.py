"""Consolidation module for pattern detection and tier promotion.

This module provides the processes that move knowledge between tiers:
- Pattern detection (recurring episode signatures)
- Pattern and feedback promotion into semantic memory
- Retention-based pruning of episodic records
"""

from tiermem.consolidation.engine import (
    EPISODIC_RETENTION_DAYS,
    FEEDBACK_KEY_LENGTH,
    PATTERN_PROMOTION_THRESHOLD,
    ConsolidationConfig,
    ConsolidationPipeline,
)
from tiermem.consolidation.patterns import PatternDetector

__all__ = [
    "EPISODIC_RETENTION_DAYS",
    "FEEDBACK_KEY_LENGTH",
    "PATTERN_PROMOTION_THRESHOLD",
    "ConsolidationConfig",
    "ConsolidationPipeline",
    "PatternDetector",
]

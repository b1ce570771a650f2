"""Structural pattern detection for episodic memory.

This module implements the PatternDetector that recognizes recurring
(episode type, tag set) signatures as episodes are recorded, and the
selection helpers the consolidation pipeline uses to decide which patterns
and feedback groups qualify for promotion into semantic memory.

Detection is purely structural: two episodes match when they share the same
type and the same set of tags, regardless of tag order or wording.
"""

import logging
from collections.abc import Iterable

from tiermem.core.types import EmergentPattern, Episode, Feedback, ValidatedPattern
from tiermem.core.utils import generate_id

logger = logging.getLogger(__name__)


class PatternDetector:
    """Detects and tracks recurring episode signatures.

    The detector holds no state of its own; the emergent pattern list it
    updates belongs to episodic memory.
    """

    @staticmethod
    def pattern_key(episode_type: str, tags: Iterable[str]) -> str:
        """Build the signature of an episode.

        Args:
            episode_type: Episode type name.
            tags: Episode tags, in any order.

        Returns:
            ``"{type}:{sorted unique tags joined by ','}"``.

        Example:
            >>> PatternDetector.pattern_key("interaction", ["seo", "blog"])
            'interaction:blog,seo'
        """
        return f"{episode_type}:{','.join(sorted(set(tags)))}"

    @staticmethod
    def describe(episode_type: str, tags: Iterable[str]) -> str:
        return f"Pattern: {episode_type} with tags [{', '.join(tags)}]"

    def observe(
        self, episode: Episode, patterns: list[EmergentPattern]
    ) -> tuple[EmergentPattern, bool]:
        """Match an episode against the emergent patterns, in place.

        A matching pattern has its occurrence count incremented and its
        ``last_seen`` moved to the episode's timestamp. Otherwise a new
        pattern is appended to ``patterns``.

        Args:
            episode: Newly recorded episode.
            patterns: Emergent pattern list to update.

        Returns:
            Tuple of (matching or created pattern, whether it was created).
        """
        key = self.pattern_key(episode.type, episode.tags)

        for pattern in patterns:
            if pattern.type == key:
                pattern.occurrences += 1
                pattern.last_seen = episode.timestamp
                logger.debug(
                    f"Pattern {key} strengthened to {pattern.occurrences} occurrences"
                )
                return pattern, False

        pattern = EmergentPattern(
            id=generate_id("emrg", episode.timestamp),
            type=key,
            description=self.describe(episode.type, episode.tags),
            occurrences=1,
            first_seen=episode.timestamp,
            last_seen=episode.timestamp,
        )
        patterns.append(pattern)
        logger.debug(f"New emergent pattern {key}")
        return pattern, True

    def promotable(
        self,
        patterns: Iterable[EmergentPattern],
        validated: Iterable[ValidatedPattern],
        threshold: int,
    ) -> list[EmergentPattern]:
        """Select emergent patterns ready for promotion.

        Args:
            patterns: Emergent patterns from episodic memory.
            validated: Patterns already held in semantic memory.
            threshold: Minimum number of occurrences.

        Returns:
            Patterns reaching ``threshold`` whose type has no validated
            counterpart yet, in their original order.
        """
        known_types = {p.type for p in validated}
        selected: list[EmergentPattern] = []
        for pattern in patterns:
            if pattern.occurrences >= threshold and pattern.type not in known_types:
                selected.append(pattern)
                known_types.add(pattern.type)
        return selected

    def group_feedback(
        self, feedback: Iterable[Feedback], key_length: int
    ) -> list[tuple[str, str, int]]:
        """Group feedback by sentiment and truncated content.

        Args:
            feedback: Feedback records to group.
            key_length: Number of content characters that identify a group.

        Returns:
            List of (sentiment, truncated content, count), in order of first
            appearance.
        """
        counts: dict[tuple[str, str], int] = {}
        for item in feedback:
            group = (item.sentiment, item.content[:key_length])
            counts[group] = counts.get(group, 0) + 1
        return [(sentiment, content, count) for (sentiment, content), count in counts.items()]

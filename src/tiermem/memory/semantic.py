"""Semantic memory implementation.

This module implements the semantic memory tier: durable knowledge about the
client held as facts, preferences, validated patterns and learned rules.
Nothing here expires; preferences are unique per (category, key) and are
updated in place when re-added.
"""

import logging

from tiermem.core.types import (
    ClientFact,
    LearnedRule,
    Preference,
    SemanticContext,
    ValidatedPattern,
)
from tiermem.core.utils import Clock, generate_id, utc_now
from tiermem.core.values import ConfidenceLevel

logger = logging.getLogger(__name__)


class SemanticMemory:
    """Durable client knowledge.

    Records are appended in insertion order; only preferences are mutable.
    """

    def __init__(self, clock: Clock = utc_now):
        """Initialize semantic memory.

        Args:
            clock: Callable returning the current time.
        """
        self._clock = clock
        self._facts: list[ClientFact] = []
        self._preferences: list[Preference] = []
        self._patterns: list[ValidatedPattern] = []
        self._rules: list[LearnedRule] = []

    # ========== Facts ==========

    def add_client_fact(self, category: str, fact: str, source: str) -> ClientFact:
        """Append a fact about the client.

        Args:
            category: Grouping such as ``company`` or ``audience``.
            fact: The fact itself.
            source: Where the fact came from.

        Returns:
            The stored fact.
        """
        now = self._clock()
        client_fact = ClientFact(
            id=generate_id("fact", now),
            category=category,
            fact=fact,
            source=source,
            added_at=now,
        )
        self._facts.append(client_fact)
        logger.info(f"Added client fact {client_fact.id} [{category}]")
        return client_fact

    # ========== Preferences ==========

    def find_preference(self, category: str, key: str) -> Preference | None:
        for preference in self._preferences:
            if preference.category == category and preference.key == key:
                return preference
        return None

    def add_preference(
        self,
        category: str,
        key: str,
        value: str,
        confidence: str | ConfidenceLevel,
    ) -> Preference:
        """Insert a preference or update the one with the same (category, key).

        Args:
            category: Preference grouping.
            key: Preference name, unique within ``category``.
            value: Preferred value.
            confidence: low, medium or strong.

        Returns:
            The stored preference; on update, the same object that was
            returned when it was first added.

        Raises:
            ValidationError: If ``confidence`` is not a known level.
        """
        level = ConfidenceLevel.create(confidence).value

        existing = self.find_preference(category, key)
        if existing is not None:
            existing.value = value
            existing.confidence = level
            logger.info(f"Updated preference {existing.id} [{category}] {key}")
            return existing

        now = self._clock()
        preference = Preference(
            id=generate_id("pref", now),
            category=category,
            key=key,
            value=value,
            confidence=level,
            added_at=now,
        )
        self._preferences.append(preference)
        logger.info(f"Added preference {preference.id} [{category}] {key}")
        return preference

    # ========== Patterns & Rules ==========

    def add_validated_pattern(
        self,
        pattern_type: str,
        description: str,
        trigger: str,
        outcome: str,
        recommendation: str,
    ) -> ValidatedPattern:
        """Append a validated pattern.

        Returns:
            The stored pattern.
        """
        now = self._clock()
        pattern = ValidatedPattern(
            id=generate_id("pat", now),
            type=pattern_type,
            description=description,
            trigger=trigger,
            outcome=outcome,
            recommendation=recommendation,
            validated_at=now,
        )
        self._patterns.append(pattern)
        logger.info(f"Added validated pattern {pattern.id} ({pattern_type})")
        return pattern

    def add_learned_rule(
        self,
        description: str,
        domain: str,
        action: str,
        confidence: str | ConfidenceLevel,
    ) -> LearnedRule:
        """Append a learned rule.

        Raises:
            ValidationError: If ``confidence`` is not a known level.
        """
        now = self._clock()
        rule = LearnedRule(
            id=generate_id("rule", now),
            description=description,
            domain=domain,
            action=action,
            confidence=ConfidenceLevel.create(confidence).value,
            added_at=now,
        )
        self._rules.append(rule)
        logger.info(f"Added learned rule {rule.id} [{domain}]")
        return rule

    # ========== Retrieval ==========

    def get_semantic_context(self) -> SemanticContext:
        """Get a copy of every semantic collection."""
        return SemanticContext(
            client_facts=self.get_client_facts(),
            preferences=[p.model_copy() for p in self._preferences],
            validated_patterns=self.get_validated_patterns(),
            learned_rules=self.get_learned_rules(),
        )

    def get_client_facts(self) -> list[ClientFact]:
        return list(self._facts)

    def get_preferences(self) -> list[Preference]:
        return list(self._preferences)

    def get_validated_patterns(self) -> list[ValidatedPattern]:
        return list(self._patterns)

    def get_learned_rules(self) -> list[LearnedRule]:
        return list(self._rules)

    def reset(self) -> None:
        """Drop every record."""
        self._facts = []
        self._preferences = []
        self._patterns = []
        self._rules = []

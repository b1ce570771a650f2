"""Episode aggregate.

Encapsulates the invariants of an episodic memory entry:

- the description is trimmed and must not be empty
- at least one tag is required, every tag is non-empty and tags are unique
- importance can only be upgraded, never downgraded or kept equal
- data and tags are snapshots taken at creation and exposed read-only
"""

import copy
from collections.abc import Iterable, Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Any

from tiermem.aggregates.base import AggregateRoot
from tiermem.core.events import EPISODE_RECORDED
from tiermem.core.exceptions import ValidationError
from tiermem.core.types import DomainEvent, Episode
from tiermem.core.utils import ensure_utc, generate_id, is_valid_id, utc_now
from tiermem.core.values import EpisodeType, Importance, Tag


class EpisodeAggregate(AggregateRoot):
    """Rich domain model for a single episode.

    Use :meth:`create` for new episodes and :meth:`from_persisted` to rebuild
    one from its stored DTO.
    """

    def __init__(
        self,
        episode_id: str,
        episode_type: EpisodeType,
        description: str,
        data: Mapping[str, Any],
        tags: Iterable[Tag],
        importance: Importance,
        timestamp: datetime,
    ):
        super().__init__()
        self._id = episode_id
        self._type = episode_type
        self._description = description
        self._data = MappingProxyType(copy.deepcopy(dict(data)))
        self._tags: tuple[Tag, ...] = tuple(tags)
        self._importance = importance
        self._timestamp = timestamp

    @classmethod
    def create(
        cls,
        episode_type: str | EpisodeType,
        description: str,
        data: Mapping[str, Any] | None,
        tags: Iterable[str] | None,
        importance: str | Importance | None = None,
        timestamp: datetime | None = None,
    ) -> "EpisodeAggregate":
        """Validate input and build a new episode.

        Args:
            episode_type: One of interaction, task_result, feedback, discovery.
            description: What happened; trimmed, must not be empty.
            data: Arbitrary payload, deep-copied.
            tags: At least one non-empty tag; duplicates are collapsed.
            importance: low, medium or high (defaults to low).
            timestamp: When it happened (defaults to now).

        Returns:
            The new aggregate, carrying an ``EPISODE_RECORDED`` event.

        Raises:
            ValidationError: If any invariant is violated.
        """
        kind = EpisodeType.create(episode_type)

        trimmed = description.strip() if isinstance(description, str) else ""
        if not trimmed:
            raise ValidationError("Episode description cannot be empty")

        tag_values = list(tags or [])
        if not tag_values:
            raise ValidationError("Episode must have at least one tag")

        unique_tags: list[Tag] = []
        for value in tag_values:
            tag = Tag.create(value)
            if tag not in unique_tags:
                unique_tags.append(tag)

        level = Importance.create(importance or Importance.LOW)
        moment = ensure_utc(timestamp) or utc_now()
        episode_id = generate_id("ep", moment)

        episode = cls(episode_id, kind, trimmed, data or {}, unique_tags, level, moment)
        episode._add_domain_event(
            DomainEvent(
                type=EPISODE_RECORDED,
                occurred_at=moment,
                payload={
                    "episode_id": episode_id,
                    "type": kind.value,
                    "tags": [t.value for t in unique_tags],
                    "importance": level.value,
                },
            )
        )
        return episode

    @classmethod
    def from_persisted(cls, dto: Episode) -> "EpisodeAggregate":
        """Rebuild an episode from its DTO without raising events.

        Raises:
            ValidationError: If the stored ID or fields are malformed.
        """
        if not is_valid_id(dto.id):
            raise ValidationError(
                f'Invalid MemoryId format: "{dto.id}". '
                f'Expected pattern: prefix-timestamp-random (e.g. "ep-1700000000000-a1b2c")'
            )
        return cls(
            dto.id,
            EpisodeType.create(dto.type),
            dto.description,
            dto.data,
            [Tag.create(t) for t in dto.tags],
            Importance.create(dto.importance),
            dto.timestamp,
        )

    # ========== Domain Methods ==========

    def add_tag(self, value: str) -> None:
        """Attach a new tag.

        Raises:
            ValidationError: If the tag is empty or already present.
        """
        tag = Tag.create(value)
        if tag in self._tags:
            raise ValidationError(f'Tag "{value}" already exists on this episode')
        self._tags = (*self._tags, tag)

    def upgrade_importance(self, level: str | Importance) -> None:
        """Raise the importance level.

        Raises:
            ValidationError: If ``level`` is invalid or not strictly higher.
        """
        requested = Importance.create(level)
        if not requested.is_higher_than(self._importance):
            raise ValidationError(
                f"Cannot downgrade or keep same importance level. "
                f"Current: {self._importance}, Requested: {requested}"
            )
        self._importance = requested

    def has_tag(self, value: str) -> bool:
        try:
            return Tag.create(value) in self._tags
        except ValidationError:
            return False

    def has_all_tags(self, values: Iterable[str]) -> bool:
        return all(self.has_tag(v) for v in values)

    def is_more_important_than(self, level: str | Importance) -> bool:
        return self._importance.is_higher_than(Importance.create(level))

    # ========== Read-only Access ==========

    @property
    def id(self) -> str:
        return self._id

    @property
    def type(self) -> EpisodeType:
        return self._type

    @property
    def description(self) -> str:
        return self._description

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(t.value for t in self._tags)

    @property
    def importance(self) -> Importance:
        return self._importance

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    def to_dto(self) -> Episode:
        return Episode(
            id=self._id,
            type=self._type.value,
            description=self._description,
            data=copy.deepcopy(dict(self._data)),
            tags=self.tags,
            importance=self._importance.value,
            timestamp=self._timestamp,
        )

"""CompanyProfile aggregate.

Encapsulates the invariants of a client's company profile:

- name has at least 2 characters, description at least 10
- sector, target audience and brand tone are not empty
- every string field is trimmed on creation and on update
- a discovery can be linked only once
- ``updated_at`` is bumped by every mutator, ``created_at`` never changes
"""

from collections.abc import Callable
from datetime import datetime

from tiermem.aggregates.base import AggregateRoot
from tiermem.core.events import DISCOVERY_LINKED, PROFILE_CREATED
from tiermem.core.exceptions import ValidationError
from tiermem.core.types import CompanyProfile, DomainEvent
from tiermem.core.utils import Clock, generate_id, is_valid_id, utc_now


def _validate_name(value: str) -> str:
    trimmed = value.strip()
    if len(trimmed) < 2:
        raise ValidationError("Company name must be at least 2 characters long")
    return trimmed


def _validate_sector(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError("Company sector cannot be empty")
    return trimmed


def _validate_description(value: str) -> str:
    trimmed = value.strip()
    if len(trimmed) < 10:
        raise ValidationError("Company description must be at least 10 characters long")
    return trimmed


def _validate_target(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError("Company target audience cannot be empty")
    return trimmed


def _validate_brand_tone(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError("Company brand tone cannot be empty")
    return trimmed


class CompanyProfileAggregate(AggregateRoot):
    """Rich domain model for a client's company profile."""

    def __init__(
        self,
        profile_id: str,
        name: str,
        sector: str,
        description: str,
        target: str,
        brand_tone: str,
        discovery_id: str | None,
        created_at: datetime,
        updated_at: datetime,
        clock: Clock = utc_now,
    ):
        super().__init__()
        self._id = profile_id
        self._name = name
        self._sector = sector
        self._description = description
        self._target = target
        self._brand_tone = brand_tone
        self._discovery_id = discovery_id
        self._created_at = created_at
        self._updated_at = updated_at
        self._clock = clock

    @classmethod
    def create(
        cls,
        name: str,
        sector: str,
        description: str,
        target: str,
        brand_tone: str,
        clock: Clock = utc_now,
    ) -> "CompanyProfileAggregate":
        """Validate input and build a new profile.

        Raises:
            ValidationError: If any field violates its invariant.
        """
        valid_name = _validate_name(name)
        valid_sector = _validate_sector(sector)
        valid_description = _validate_description(description)
        valid_target = _validate_target(target)
        valid_tone = _validate_brand_tone(brand_tone)

        now = clock()
        profile = cls(
            generate_id("company", now),
            valid_name,
            valid_sector,
            valid_description,
            valid_target,
            valid_tone,
            None,
            now,
            now,
            clock,
        )
        profile._add_domain_event(
            DomainEvent(
                type=PROFILE_CREATED,
                occurred_at=now,
                payload={"profile_id": profile.id, "name": valid_name},
            )
        )
        return profile

    @classmethod
    def from_persisted(
        cls, dto: CompanyProfile, clock: Clock = utc_now
    ) -> "CompanyProfileAggregate":
        """Rebuild a profile from its DTO without raising events.

        Raises:
            ValidationError: If the stored ID is malformed.
        """
        if not is_valid_id(dto.id):
            raise ValidationError(
                f'Invalid MemoryId format: "{dto.id}". '
                f'Expected pattern: prefix-timestamp-random (e.g. "company-1700000000000-a1b2c")'
            )
        return cls(
            dto.id,
            dto.name,
            dto.sector,
            dto.description,
            dto.target,
            dto.brand_tone,
            dto.discovery_id,
            dto.created_at,
            dto.updated_at,
            clock,
        )

    # ========== Domain Methods ==========

    def _touch(self) -> None:
        self._updated_at = self._clock()

    def _update(self, attribute: str, validator: Callable[[str], str], value: str) -> None:
        setattr(self, attribute, validator(value))
        self._touch()

    def update_name(self, name: str) -> None:
        self._update("_name", _validate_name, name)

    def update_sector(self, sector: str) -> None:
        self._update("_sector", _validate_sector, sector)

    def update_description(self, description: str) -> None:
        self._update("_description", _validate_description, description)

    def update_target(self, target: str) -> None:
        self._update("_target", _validate_target, target)

    def update_brand_tone(self, brand_tone: str) -> None:
        self._update("_brand_tone", _validate_brand_tone, brand_tone)

    def link_discovery(self, discovery_id: str) -> None:
        """Link a business discovery to this profile, once.

        Raises:
            ValidationError: If a discovery is already linked or the ID is empty.
        """
        if self._discovery_id is not None:
            raise ValidationError(
                f"Discovery already linked to this profile ({self._discovery_id}). "
                f"Cannot link again."
            )

        trimmed = discovery_id.strip()
        if not trimmed:
            raise ValidationError("Discovery ID cannot be empty")

        self._discovery_id = trimmed
        self._touch()
        self._add_domain_event(
            DomainEvent(
                type=DISCOVERY_LINKED,
                occurred_at=self._updated_at,
                payload={"profile_id": self._id, "discovery_id": trimmed},
            )
        )

    def has_discovery_linked(self) -> bool:
        return self._discovery_id is not None

    # ========== Read-only Access ==========

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def sector(self) -> str:
        return self._sector

    @property
    def description(self) -> str:
        return self._description

    @property
    def target(self) -> str:
        return self._target

    @property
    def brand_tone(self) -> str:
        return self._brand_tone

    @property
    def discovery_id(self) -> str | None:
        return self._discovery_id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def to_dto(self) -> CompanyProfile:
        return CompanyProfile(
            id=self._id,
            name=self._name,
            sector=self._sector,
            description=self._description,
            target=self._target,
            brand_tone=self._brand_tone,
            discovery_id=self._discovery_id,
            created_at=self._created_at,
            updated_at=self._updated_at,
        )

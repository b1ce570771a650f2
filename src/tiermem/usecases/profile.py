"""Use cases for the client's company profile."""

import logging

from tiermem.aggregates.company_profile import CompanyProfileAggregate
from tiermem.core.events import DomainEventBus
from tiermem.core.exceptions import NotFoundError
from tiermem.core.types import CompanyProfile
from tiermem.core.utils import Clock, utc_now
from tiermem.memory.semantic import SemanticMemory
from tiermem.storage.profiles import CompanyProfileRepository
from tiermem.usecases.base import UseCase, returns_result

logger = logging.getLogger(__name__)

PROFILE_FACT_SOURCE = "profile"


class CreateProfileUseCase(UseCase):
    """Create the company profile, or update the existing one.

    When semantic memory is supplied, the profile is also recorded there as
    client facts. That step is best effort: its failures are logged and
    never fail the profile write.

    Attributes:
        repository: Company profile storage.
        semantic: Semantic memory receiving profile facts, if any.
    """

    def __init__(
        self,
        repository: CompanyProfileRepository,
        semantic: SemanticMemory | None = None,
        event_bus: DomainEventBus | None = None,
        clock: Clock = utc_now,
    ):
        super().__init__(event_bus)
        self.repository = repository
        self.semantic = semantic
        self._clock = clock

    @returns_result
    def execute(
        self,
        name: str,
        sector: str,
        description: str,
        target: str,
        brand_tone: str,
    ) -> CompanyProfile:
        existing = self.repository.get()
        if existing is None:
            aggregate = CompanyProfileAggregate.create(
                name, sector, description, target, brand_tone, clock=self._clock
            )
        else:
            aggregate = CompanyProfileAggregate.from_persisted(existing, clock=self._clock)
            aggregate.update_name(name)
            aggregate.update_sector(sector)
            aggregate.update_description(description)
            aggregate.update_target(target)
            aggregate.update_brand_tone(brand_tone)

        profile = self.repository.save(aggregate.to_dto())
        self._publish(*aggregate.pull_events())
        self._record_profile_facts(profile)
        return profile

    def _record_profile_facts(self, profile: CompanyProfile) -> None:
        if self.semantic is None:
            return

        facts = [
            ("company", f"Nom: {profile.name}"),
            ("market", f"Secteur: {profile.sector}"),
            ("company", f"Description: {profile.description}"),
            ("audience", f"Cible: {profile.target}"),
            ("brand", f"Ton de marque: {profile.brand_tone}"),
        ]
        try:
            for category, fact in facts:
                self.semantic.add_client_fact(category, fact, PROFILE_FACT_SOURCE)
        except Exception as e:
            logger.warning(f"Failed to record profile facts for {profile.id}: {e}")


class GetProfileUseCase(UseCase):
    def __init__(self, repository: CompanyProfileRepository):
        super().__init__()
        self.repository = repository

    @returns_result
    def execute(self, required: bool = False) -> CompanyProfile | None:
        """Return the stored profile.

        Args:
            required: Fail with NOT_FOUND instead of returning None when no
                profile exists.
        """
        profile = self.repository.get()
        if profile is None and required:
            raise NotFoundError("CompanyProfile")
        return profile


class LinkDiscoveryUseCase(UseCase):
    """Attach a business discovery to the stored profile, once."""

    def __init__(
        self,
        repository: CompanyProfileRepository,
        event_bus: DomainEventBus | None = None,
        clock: Clock = utc_now,
    ):
        super().__init__(event_bus)
        self.repository = repository
        self._clock = clock

    @returns_result
    def execute(self, discovery_id: str) -> CompanyProfile:
        existing = self.repository.get()
        if existing is None:
            raise NotFoundError("CompanyProfile")

        aggregate = CompanyProfileAggregate.from_persisted(existing, clock=self._clock)
        aggregate.link_discovery(discovery_id)

        profile = self.repository.save(aggregate.to_dto())
        self._publish(*aggregate.pull_events())
        return profile

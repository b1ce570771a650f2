"""Unit tests for the company profile use cases."""

from unittest.mock import MagicMock

import pytest

from tiermem.core.events import DISCOVERY_LINKED, PROFILE_CREATED
from tiermem.storage.profiles import InMemoryCompanyProfileRepository
from tiermem.usecases import CreateProfileUseCase, GetProfileUseCase, LinkDiscoveryUseCase

PROFILE = {
    "name": "Acme Corp",
    "sector": "SaaS B2B",
    "description": "Cloud-based project management tool",
    "target": "Marketing directors",
    "brand_tone": "Professional yet approachable",
}


@pytest.fixture
def repository():
    return InMemoryCompanyProfileRepository()


@pytest.fixture
def create_profile(repository, semantic, event_bus, clock):
    return CreateProfileUseCase(repository, semantic, event_bus, clock)


class TestCreateProfileUseCase:
    """Test creating and updating the profile."""

    def test_create(self, create_profile, repository, event_bus):
        handler = MagicMock()
        event_bus.subscribe(PROFILE_CREATED, handler)

        result = create_profile.execute(**PROFILE)

        assert result.is_ok()
        assert result.value.name == "Acme Corp"
        assert repository.get() == result.value
        handler.assert_called_once()

    def test_records_profile_facts(self, create_profile, semantic):
        create_profile.execute(**PROFILE)

        facts = [(f.category, f.fact, f.source) for f in semantic.get_client_facts()]
        assert facts == [
            ("company", "Nom: Acme Corp", "profile"),
            ("market", "Secteur: SaaS B2B", "profile"),
            ("company", "Description: Cloud-based project management tool", "profile"),
            ("audience", "Cible: Marketing directors", "profile"),
            ("brand", "Ton de marque: Professional yet approachable", "profile"),
        ]

    def test_invalid_profile(self, create_profile, repository, semantic):
        result = create_profile.execute(**{**PROFILE, "name": "A"})

        assert result.is_err()
        assert result.error.message == "Company name must be at least 2 characters long"
        assert repository.get() is None
        assert semantic.get_client_facts() == []

    def test_update_keeps_identity(self, create_profile, clock):
        """Test a second create updates the profile in place."""
        first = create_profile.execute(**PROFILE).value
        clock.advance(hours=1)

        second = create_profile.execute(**{**PROFILE, "sector": "FinTech"}).value

        assert second.id == first.id
        assert second.created_at == first.created_at
        assert second.updated_at == clock.now
        assert second.sector == "FinTech"

    def test_update_keeps_linked_discovery(self, create_profile, repository, clock):
        create_profile.execute(**PROFILE)
        LinkDiscoveryUseCase(repository, clock=clock).execute("discovery-1")

        updated = create_profile.execute(**PROFILE).value

        assert updated.discovery_id == "discovery-1"

    def test_enrichment_failure_is_tolerated(self, repository, clock):
        """Test a failing semantic store does not fail the profile write."""
        semantic = MagicMock()
        semantic.add_client_fact.side_effect = RuntimeError("semantic store down")

        result = CreateProfileUseCase(repository, semantic, clock=clock).execute(**PROFILE)

        assert result.is_ok()
        assert repository.get() is not None

    def test_without_semantic_memory(self, repository, clock):
        result = CreateProfileUseCase(repository, clock=clock).execute(**PROFILE)
        assert result.is_ok()


class TestGetProfileUseCase:
    """Test reading the profile."""

    def test_missing_returns_none(self, repository):
        result = GetProfileUseCase(repository).execute()
        assert result.is_ok()
        assert result.value is None

    def test_missing_when_required(self, repository):
        result = GetProfileUseCase(repository).execute(required=True)
        assert result.is_err()
        assert result.error.code == "NOT_FOUND"
        assert result.error.message == "CompanyProfile not found"

    def test_existing(self, create_profile, repository):
        created = create_profile.execute(**PROFILE).value
        assert GetProfileUseCase(repository).execute(required=True).value == created


class TestLinkDiscoveryUseCase:
    """Test linking a discovery."""

    def test_link(self, create_profile, repository, event_bus, clock):
        handler = MagicMock()
        event_bus.subscribe(DISCOVERY_LINKED, handler)
        create_profile.execute(**PROFILE)

        result = LinkDiscoveryUseCase(repository, event_bus, clock).execute("discovery-1")

        assert result.value.discovery_id == "discovery-1"
        assert repository.get().discovery_id == "discovery-1"
        handler.assert_called_once()

    def test_link_twice(self, create_profile, repository, clock):
        create_profile.execute(**PROFILE)
        use_case = LinkDiscoveryUseCase(repository, clock=clock)
        use_case.execute("discovery-1")

        result = use_case.execute("discovery-2")

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert repository.get().discovery_id == "discovery-1"

    def test_no_profile(self, repository):
        result = LinkDiscoveryUseCase(repository).execute("discovery-1")
        assert result.error.code == "NOT_FOUND"

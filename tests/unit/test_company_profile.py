"""Unit tests for the CompanyProfile aggregate."""

import pytest

from tiermem.aggregates.company_profile import CompanyProfileAggregate
from tiermem.core.events import DISCOVERY_LINKED, PROFILE_CREATED
from tiermem.core.exceptions import ValidationError


def make_profile(clock, **overrides):
    fields = {
        "name": "Acme Corp",
        "sector": "SaaS B2B",
        "description": "Cloud-based project management tool",
        "target": "Marketing directors",
        "brand_tone": "Professional yet approachable",
    }
    fields.update(overrides)
    return CompanyProfileAggregate.create(**fields, clock=clock)


class TestProfileCreation:
    """Tests for CompanyProfileAggregate.create."""

    def test_name_too_short(self, clock):
        with pytest.raises(ValidationError) as exc_info:
            make_profile(clock, name="A")
        assert exc_info.value.message == "Company name must be at least 2 characters long"

    def test_name_is_trimmed(self, clock):
        profile = make_profile(clock, name="  Acme  ")
        assert profile.name == "Acme"

    @pytest.mark.parametrize(
        "field, message",
        [
            ("sector", "Company sector cannot be empty"),
            ("target", "Company target audience cannot be empty"),
            ("brand_tone", "Company brand tone cannot be empty"),
        ],
    )
    def test_empty_fields(self, clock, field, message):
        with pytest.raises(ValidationError) as exc_info:
            make_profile(clock, **{field: "   "})
        assert exc_info.value.message == message

    def test_description_too_short(self, clock):
        with pytest.raises(ValidationError) as exc_info:
            make_profile(clock, description="Too short")
        assert exc_info.value.message == "Company description must be at least 10 characters long"

    def test_timestamps_and_event(self, clock):
        profile = make_profile(clock)
        assert profile.id.startswith("company-")
        assert profile.created_at == clock.now
        assert profile.updated_at == clock.now
        assert profile.discovery_id is None

        events = profile.get_uncommitted_events()
        assert [e.type for e in events] == [PROFILE_CREATED]


class TestProfileUpdates:
    """Tests for the mutators."""

    def test_update_bumps_updated_at(self, clock):
        profile = make_profile(clock)
        created = profile.created_at

        clock.advance(minutes=5)
        profile.update_name("  Acme Labs ")

        assert profile.name == "Acme Labs"
        assert profile.updated_at == clock.now
        assert profile.created_at == created

    def test_update_revalidates(self, clock):
        profile = make_profile(clock)
        with pytest.raises(ValidationError):
            profile.update_description("short")
        assert profile.description == "Cloud-based project management tool"

    def test_every_mutator(self, clock):
        profile = make_profile(clock)
        profile.update_sector("FinTech")
        profile.update_description("Payments for small businesses")
        profile.update_target("Shop owners")
        profile.update_brand_tone("Friendly")

        dto = profile.to_dto()
        assert (dto.sector, dto.target, dto.brand_tone) == ("FinTech", "Shop owners", "Friendly")


class TestDiscoveryLink:
    """Tests for link_discovery."""

    def test_link_once(self, clock):
        profile = make_profile(clock)
        profile.pull_events()

        profile.link_discovery("discovery-first")

        assert profile.has_discovery_linked()
        assert profile.discovery_id == "discovery-first"
        assert [e.type for e in profile.pull_events()] == [DISCOVERY_LINKED]

    def test_second_link_fails(self, clock):
        profile = make_profile(clock)
        profile.link_discovery("discovery-first")

        with pytest.raises(ValidationError) as exc_info:
            profile.link_discovery("discovery-second")

        assert "discovery-first" in exc_info.value.message
        assert profile.discovery_id == "discovery-first"

    def test_empty_id_rejected(self, clock):
        profile = make_profile(clock)
        with pytest.raises(ValidationError, match="Discovery ID cannot be empty"):
            profile.link_discovery("  ")
        assert not profile.has_discovery_linked()

    def test_from_persisted_keeps_link(self, clock):
        profile = make_profile(clock)
        profile.link_discovery("discovery-first")

        rebuilt = CompanyProfileAggregate.from_persisted(profile.to_dto(), clock=clock)

        assert rebuilt.get_uncommitted_events() == []
        with pytest.raises(ValidationError):
            rebuilt.link_discovery("discovery-second")

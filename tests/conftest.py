"""Shared pytest fixtures for tiermem tests."""

from datetime import UTC, datetime, timedelta

import pytest

from tiermem.consolidation.engine import ConsolidationPipeline
from tiermem.container import build_memory_system
from tiermem.core.events import DomainEventBus
from tiermem.memory.episodic import EpisodicMemory
from tiermem.memory.query import MemoryQueryService
from tiermem.memory.semantic import SemanticMemory
from tiermem.memory.working import WorkingMemory


class FakeClock:
    """Controllable clock; call it to read the current time."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now

    def rewind(self, **kwargs) -> datetime:
        self.now -= timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    """A fake clock starting at 2024-06-01 12:00 UTC."""
    return FakeClock()


@pytest.fixture
def event_bus():
    return DomainEventBus()


@pytest.fixture
def working(clock):
    return WorkingMemory(clock=clock)


@pytest.fixture
def episodic(clock, event_bus):
    return EpisodicMemory(clock=clock, event_bus=event_bus)


@pytest.fixture
def semantic(clock):
    return SemanticMemory(clock=clock)


@pytest.fixture
def query_service(working, episodic, semantic):
    return MemoryQueryService(working, episodic, semantic)


@pytest.fixture
def pipeline(working, episodic, semantic, clock, event_bus):
    return ConsolidationPipeline(working, episodic, semantic, clock=clock, event_bus=event_bus)


@pytest.fixture
def system(clock):
    """A fully wired memory system sharing the fake clock."""
    return build_memory_system(clock=clock)

"""Pytest fixtures for integration tests.

These fixtures drive a real, fully wired memory system (no mocks) through
its use cases and action dispatcher.
"""

import pytest

from tiermem.core.events import (
    CLIENT_FACT_ADDED,
    DISCOVERY_LINKED,
    EPISODE_RECORDED,
    FEEDBACK_RECORDED,
    PATTERN_DETECTED,
    PATTERN_PROMOTED,
    PREFERENCE_UPDATED,
    PROFILE_CREATED,
)

ALL_EVENTS = [
    CLIENT_FACT_ADDED,
    DISCOVERY_LINKED,
    EPISODE_RECORDED,
    FEEDBACK_RECORDED,
    PATTERN_DETECTED,
    PATTERN_PROMOTED,
    PREFERENCE_UPDATED,
    PROFILE_CREATED,
]


@pytest.fixture
def dispatcher(system):
    return system.dispatcher()


@pytest.fixture
def event_log(system):
    """Record every domain event published by the system.

    Returns:
        List of event types, appended to as events are published.
    """
    log = []
    for event_type in ALL_EVENTS:
        system.event_bus.subscribe(event_type, lambda e: log.append(e.type))
    return log


@pytest.fixture
def acme_profile():
    return {
        "name": "Acme Corp",
        "sector": "SaaS B2B",
        "description": "Cloud-based project management tool",
        "target": "Marketing directors",
        "brandTone": "Professional yet approachable",
    }
